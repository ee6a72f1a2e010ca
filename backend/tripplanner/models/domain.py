from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

FAVORITE_DEFAULT = False
COST_BREAKDOWN_DEFAULT: Optional[str] = None


class TravelerType(str, Enum):
    solo = "solo"
    couple = "couple"
    family = "family"
    group = "group"

    @classmethod
    def coerce(cls, value: Any) -> "TravelerType":
        """Map free-form input onto the closed set, falling back to solo."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.solo

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_


def default_title(destination: str) -> str:
    return f"{destination or 'Trip'} itinerary"


@dataclass
class TripPayload:
    """Client-supplied fields of a trip; never carries id, favorite or timestamps."""

    title: str
    destination: str
    budget: str
    start_date: str
    end_date: str
    traveler_type: TravelerType
    itinerary: str
    cost_breakdown: Optional[str] = None

    @classmethod
    def from_form(
        cls,
        *,
        destination: str,
        budget: str,
        start_date: str,
        end_date: str,
        traveler_type: Any,
        itinerary: str,
        title: str = "",
        cost_breakdown: Optional[str] = None,
    ) -> "TripPayload":
        return cls(
            title=title.strip() or default_title(destination),
            destination=destination,
            budget=budget,
            start_date=start_date,
            end_date=end_date,
            traveler_type=TravelerType.coerce(traveler_type),
            itinerary=itinerary,
            cost_breakdown=cost_breakdown or f"Estimated budget: {budget}",
        )

    def to_document(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "destination": self.destination,
            "budget": self.budget,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "travelerType": TravelerType.coerce(self.traveler_type).value,
            "itinerary": self.itinerary,
        }
        if self.cost_breakdown is not None:
            data["costBreakdown"] = self.cost_breakdown
        return data


@dataclass
class Trip:
    id: str
    title: str
    destination: str
    budget: str
    start_date: str
    end_date: str
    traveler_type: TravelerType
    itinerary: str
    cost_breakdown: Optional[str] = COST_BREAKDOWN_DEFAULT
    favorite: bool = FAVORITE_DEFAULT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Trip":
        favorite = data.get("favorite")
        return cls(
            id=doc_id,
            title=data.get("title") or "",
            destination=data.get("destination") or "",
            budget=data.get("budget") or "",
            start_date=data.get("startDate") or "",
            end_date=data.get("endDate") or "",
            traveler_type=TravelerType.coerce(data.get("travelerType")),
            itinerary=data.get("itinerary") or "",
            cost_breakdown=data.get("costBreakdown", COST_BREAKDOWN_DEFAULT),
            favorite=FAVORITE_DEFAULT if favorite is None else bool(favorite),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "destination": self.destination,
            "budget": self.budget,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "travelerType": self.traveler_type.value,
            "itinerary": self.itinerary,
            "costBreakdown": self.cost_breakdown,
            "favorite": self.favorite,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class TripFilter:
    query: str = ""
    favorites_only: bool = False

    def matches(self, trip: Trip) -> bool:
        needle = self.query.lower()
        matches_query = (
            not needle
            or needle in trip.title.lower()
            or needle in trip.destination.lower()
        )
        matches_favorite = not self.favorites_only or trip.favorite
        return matches_query and matches_favorite


@dataclass
class User:
    user_id: str
    email: str


@dataclass
class AuthSessionInfo:
    token: str
    user: User
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ItineraryRequest:
    destination: Optional[str] = None
    budget: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    traveler_type: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("destination", "budget", "start_date", "end_date", "traveler_type")
            if not (getattr(self, name) or "").strip()
        ]

    def to_body(self) -> Dict[str, Optional[str]]:
        return {
            "destination": self.destination,
            "budget": self.budget,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "travelerType": self.traveler_type,
        }
