from dataclasses import dataclass
from typing import List, Protocol


@dataclass
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


class CompletionBackend(Protocol):
    def complete(self, messages: List[ChatMessage], temperature: float) -> str:
        ...


class CompletionClient:
    """
    Single entry point to the Completion Gateway. Backends return raw text
    (possibly empty) and raise on transport or API failure.
    """

    def __init__(self, backend: CompletionBackend, temperature: float):
        self.backend = backend
        self.temperature = temperature

    def complete(self, messages: List[ChatMessage]) -> str:
        return self.backend.complete(messages, temperature=self.temperature)
