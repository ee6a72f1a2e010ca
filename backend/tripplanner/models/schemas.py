from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tripplanner.models.domain import AuthSessionInfo, ItineraryRequest, Trip, TravelerType, User


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateRequest(CamelModel):
    destination: Optional[str] = None
    budget: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    traveler_type: Optional[str] = Field(None, alias="travelerType")

    def to_domain(self) -> ItineraryRequest:
        return ItineraryRequest(
            destination=self.destination,
            budget=self.budget,
            start_date=self.start_date,
            end_date=self.end_date,
            traveler_type=self.traveler_type,
        )


class GenerateResponse(BaseModel):
    itinerary: str


class ErrorResponse(BaseModel):
    error: str


class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    token: str
    user_id: str = Field(..., alias="userId")
    email: str

    @classmethod
    def from_domain(cls, obj: AuthSessionInfo) -> "AuthResponse":
        return cls(token=obj.token, user_id=obj.user.user_id, email=obj.user.email)


class MeResponse(CamelModel):
    user_id: str = Field(..., alias="userId")
    email: str

    @classmethod
    def from_domain(cls, obj: User) -> "MeResponse":
        return cls(user_id=obj.user_id, email=obj.email)


class TripPayloadSchema(CamelModel):
    """Body of a save request. Unknown keys such as favorite or timestamps are dropped."""

    title: str = ""
    destination: str
    budget: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    traveler_type: str = Field(..., alias="travelerType")
    itinerary: str
    cost_breakdown: Optional[str] = Field(None, alias="costBreakdown")


class TripUpdateRequest(CamelModel):
    title: Optional[str] = None
    favorite: Optional[bool] = None
    itinerary: Optional[str] = None


class TripSchema(CamelModel):
    id: str
    title: str
    destination: str
    budget: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    traveler_type: TravelerType = Field(..., alias="travelerType")
    itinerary: str
    cost_breakdown: Optional[str] = Field(None, alias="costBreakdown")
    favorite: bool = False
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @classmethod
    def from_domain(cls, obj: Trip) -> "TripSchema":
        return cls(
            id=obj.id,
            title=obj.title,
            destination=obj.destination,
            budget=obj.budget,
            start_date=obj.start_date,
            end_date=obj.end_date,
            traveler_type=obj.traveler_type,
            itinerary=obj.itinerary,
            cost_breakdown=obj.cost_breakdown,
            favorite=obj.favorite,
            created_at=obj.created_at,
            updated_at=obj.updated_at,
        )


class TripListResponse(BaseModel):
    version: int
    trips: List[TripSchema]


class TripCreatedResponse(BaseModel):
    id: str
