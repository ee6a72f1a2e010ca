from typing import List, Optional

from openai import OpenAI

from tripplanner.llm.client import ChatMessage


class OpenAICompletionBackend:
    """Chat completions against the OpenAI API (single, non-streaming call)."""

    def __init__(self, api_key: str, model: str, timeout: Optional[float] = None):
        self.model = model
        kwargs = {"api_key": api_key}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = OpenAI(**kwargs)

    def complete(self, messages: List[ChatMessage], temperature: float) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=[m.to_dict() for m in messages],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
