from fastapi import APIRouter, Depends

from tripplanner.api import get_itinerary_service
from tripplanner.models.schemas import ErrorResponse, GenerateRequest, GenerateResponse
from tripplanner.services.itinerary_service import ItineraryService

router = APIRouter()


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_itinerary(
    body: GenerateRequest,
    service: ItineraryService = Depends(get_itinerary_service),
) -> GenerateResponse:
    return GenerateResponse(itinerary=service.generate(body.to_domain()))
