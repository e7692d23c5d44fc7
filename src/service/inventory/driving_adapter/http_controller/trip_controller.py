from typing import List

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.query.get_trip_use_case import GetTripUseCase
from src.service.inventory.app.query.search_trips_use_case import SearchTripsUseCase
from src.service.inventory.driving_adapter.http_controller.schema.trip_schema import (
    SeatResponse,
    TripResponse,
    TripSearchByIdRequest,
    TripSearchRequest,
)


router = APIRouter()


@router.post('/search', response_model=List[TripResponse])
@Logger.io
async def search_trips(
    request: TripSearchRequest,
    use_case: SearchTripsUseCase = Depends(SearchTripsUseCase.depends),
) -> List[TripResponse]:
    results = await use_case.search(
        pickup=request.pickup.to_value_object(),
        dropoff=request.dropoff.to_value_object(),
        departure_date=request.departure_date,
    )
    return [TripResponse.from_dto(item) for item in results]


@router.post('/search-by-id', response_model=List[TripResponse])
@Logger.io
async def search_trips_by_id(
    request: TripSearchByIdRequest,
    use_case: SearchTripsUseCase = Depends(SearchTripsUseCase.depends),
) -> List[TripResponse]:
    results = await use_case.search_by_ids(trip_ids=request.trip_ids)
    return [TripResponse.from_dto(item) for item in results]


@router.get('/{trip_id}', response_model=TripResponse)
@Logger.io
async def get_trip(
    trip_id: int,
    use_case: GetTripUseCase = Depends(GetTripUseCase.depends),
) -> TripResponse:
    return TripResponse.from_entity(await use_case.get_trip(trip_id=trip_id))


@router.get('/{trip_id}/seats', response_model=List[SeatResponse])
@Logger.io
async def list_seats(
    trip_id: int,
    use_case: GetTripUseCase = Depends(GetTripUseCase.depends),
) -> List[SeatResponse]:
    seats = await use_case.list_seats(trip_id=trip_id)
    return [SeatResponse.from_entity(seat) for seat in seats]
