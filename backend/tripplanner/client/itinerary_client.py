from dataclasses import replace

from tripplanner.client.api import ApiClient
from tripplanner.core.errors import EmptyCompletionError, GatewayError, ValidationError
from tripplanner.models.domain import ItineraryRequest, TravelerType


class ItineraryClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def generate(self, request: ItineraryRequest) -> str:
        request = replace(
            request, traveler_type=TravelerType.coerce(request.traveler_type).value
        )
        if request.missing_fields():
            raise ValidationError("Please complete destination, budget, and dates first.")
        body = self.api.request(
            "POST", "/api/generate", json=request.to_body(), unreachable=GatewayError
        ).json()
        itinerary = (body.get("itinerary") or "").strip()
        if not itinerary:
            raise EmptyCompletionError()
        return itinerary
