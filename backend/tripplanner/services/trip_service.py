from __future__ import annotations

from typing import List, Optional, Tuple

from tripplanner.core.errors import NotFound, ValidationError
from tripplanner.models.domain import Trip, TripPayload, TravelerType, default_title
from tripplanner.storage.trip_repository import TripRepository


class TripService:
    """Server-side trip operations scoped to one authenticated user."""

    def __init__(self, repository: TripRepository, user_id: str):
        self.repository = repository
        self.user_id = user_id

    def list_trips(self) -> Tuple[int, List[Trip]]:
        return self.repository.version(self.user_id), self.repository.list(self.user_id)

    def create_trip(
        self,
        *,
        destination: str,
        budget: str,
        start_date: str,
        end_date: str,
        traveler_type: str,
        itinerary: str,
        title: str = "",
        cost_breakdown: Optional[str] = None,
    ) -> str:
        if not (itinerary or "").strip():
            raise ValidationError("Generate an itinerary first.")
        if not TravelerType.is_valid(traveler_type):
            raise ValidationError("Invalid traveler type.")
        # Only a blank title is defaulted; every other field is stored as sent.
        payload = TripPayload(
            title=title if (title or "").strip() else default_title(destination),
            destination=destination,
            budget=budget,
            start_date=start_date,
            end_date=end_date,
            traveler_type=TravelerType(traveler_type),
            itinerary=itinerary,
            cost_breakdown=cost_breakdown,
        )
        return self.repository.add(self.user_id, payload)

    def get_trip(self, trip_id: str) -> Trip:
        trip = self.repository.get(self.user_id, trip_id)
        if trip is None:
            raise NotFound()
        return trip

    def update_trip(
        self,
        trip_id: str,
        title: Optional[str] = None,
        favorite: Optional[bool] = None,
        itinerary: Optional[str] = None,
    ) -> Trip:
        fields = {}
        if title is not None:
            fields["title"] = title
        if favorite is not None:
            fields["favorite"] = favorite
        if itinerary is not None:
            if not itinerary.strip():
                raise ValidationError("Itinerary cannot be empty.")
            fields["itinerary"] = itinerary
        if not fields:
            raise ValidationError("Nothing to update.")
        self.repository.update(self.user_id, trip_id, fields)
        return self.get_trip(trip_id)

    def delete_trip(self, trip_id: str) -> None:
        self.repository.delete(self.user_id, trip_id)
