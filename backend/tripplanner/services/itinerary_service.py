import logging

from tripplanner.core.errors import EmptyCompletionError, GatewayError, ValidationError
from tripplanner.llm.client import ChatMessage, CompletionClient
from tripplanner.llm.prompts import ITINERARY_SYSTEM_PROMPT, build_itinerary_prompt
from tripplanner.models.domain import ItineraryRequest, TravelerType

logger = logging.getLogger(__name__)


class ItineraryService:
    def __init__(self, client: CompletionClient):
        self.client = client

    def generate(self, request: ItineraryRequest) -> str:
        missing = request.missing_fields()
        if missing:
            logger.info("Rejected itinerary request, missing %s", ", ".join(missing))
            raise ValidationError("Missing required fields.")
        if not TravelerType.is_valid(request.traveler_type):
            raise ValidationError("Invalid traveler type.")

        prompt = build_itinerary_prompt(
            destination=request.destination,
            budget=request.budget,
            start_date=request.start_date,
            end_date=request.end_date,
            traveler_type=request.traveler_type,
        )
        messages = [
            ChatMessage(role="system", content=ITINERARY_SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        try:
            text = self.client.complete(messages)
        except Exception as exc:  # noqa: BLE001
            logger.error("Completion gateway failed: %s", exc)
            raise GatewayError(str(exc) or None) from exc

        itinerary = (text or "").strip()
        if not itinerary:
            raise EmptyCompletionError()
        logger.info("Generated itinerary for %s (%d chars)", request.destination, len(itinerary))
        return itinerary
