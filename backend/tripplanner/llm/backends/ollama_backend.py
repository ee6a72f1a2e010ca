from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from tripplanner.llm.client import ChatMessage

logger = logging.getLogger(__name__)


@dataclass
class OllamaCompletionBackend:
    """
    Completion backend using Ollama's chat API with streaming disabled.
    """

    host: str
    model: str
    timeout: Optional[float] = None

    def complete(self, messages: List[ChatMessage], temperature: float) -> str:
        payload = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "stream": False,
            "options": {"temperature": temperature},
        }
        try:
            resp = requests.post(f"{self.host}/api/chat", json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except Exception as exc:  # noqa: BLE001
            logger.error("Ollama request failed: %s", exc)
            raise
        return resp.json().get("message", {}).get("content", "")
