import re
from typing import List

from tripplanner.llm.client import ChatMessage
from tripplanner.llm.prompts import ITINERARY_SECTIONS


class MockCompletionBackend:
    """
    Deterministic stand-in for a language model. Echoes the destination from
    the prompt into one short block per requested section.
    """

    def complete(self, messages: List[ChatMessage], temperature: float) -> str:
        prompt = next((m.content for m in messages if m.role == "user"), "")
        match = re.search(r"^Destination: (.+)$", prompt, re.MULTILINE)
        destination = match.group(1).strip() if match else "your destination"
        blocks = []
        for index, section in enumerate(ITINERARY_SECTIONS, start=1):
            heading = section.split(" (")[0]
            blocks.append(f"{index}) {heading}\n- Sample {heading.lower()} for {destination}.")
        return "\n\n".join(blocks)
