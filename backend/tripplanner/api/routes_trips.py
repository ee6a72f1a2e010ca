from fastapi import APIRouter, Depends, Response, status

from tripplanner.api import get_trip_service
from tripplanner.models.schemas import (
    ErrorResponse,
    TripCreatedResponse,
    TripListResponse,
    TripPayloadSchema,
    TripSchema,
    TripUpdateRequest,
)
from tripplanner.services.trip_service import TripService

router = APIRouter()


@router.get("", response_model=TripListResponse)
def list_trips(service: TripService = Depends(get_trip_service)) -> TripListResponse:
    version, trips = service.list_trips()
    return TripListResponse(
        version=version, trips=[TripSchema.from_domain(t) for t in trips]
    )


@router.post("", response_model=TripCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_trip(
    payload: TripPayloadSchema, service: TripService = Depends(get_trip_service)
) -> TripCreatedResponse:
    trip_id = service.create_trip(
        title=payload.title,
        destination=payload.destination,
        budget=payload.budget,
        start_date=payload.start_date,
        end_date=payload.end_date,
        traveler_type=payload.traveler_type,
        itinerary=payload.itinerary,
        cost_breakdown=payload.cost_breakdown,
    )
    return TripCreatedResponse(id=trip_id)


@router.get(
    "/{trip_id}", response_model=TripSchema, responses={404: {"model": ErrorResponse}}
)
def get_trip(trip_id: str, service: TripService = Depends(get_trip_service)) -> TripSchema:
    return TripSchema.from_domain(service.get_trip(trip_id))


@router.patch(
    "/{trip_id}", response_model=TripSchema, responses={404: {"model": ErrorResponse}}
)
def update_trip(
    trip_id: str,
    changes: TripUpdateRequest,
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    trip = service.update_trip(
        trip_id,
        title=changes.title,
        favorite=changes.favorite,
        itinerary=changes.itinerary,
    )
    return TripSchema.from_domain(trip)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(trip_id: str, service: TripService = Depends(get_trip_service)) -> Response:
    service.delete_trip(trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
