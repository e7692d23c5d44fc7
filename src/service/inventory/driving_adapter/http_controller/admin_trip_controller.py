from typing import List

from fastapi import APIRouter, Depends, Response, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.create_trip_use_case import CreateTripUseCase
from src.service.inventory.app.command.delete_trip_use_case import DeleteTripUseCase
from src.service.inventory.app.command.update_trip_use_case import UpdateTripUseCase
from src.service.inventory.app.query.search_trips_use_case import SearchTripsUseCase
from src.service.inventory.driving_adapter.http_controller.schema.trip_schema import (
    TripCreateRequest,
    TripResponse,
    TripUpdateRequest,
)
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.driving_adapter.http_controller.auth.role_auth import (
    require_admin,
    require_operator,
)


router = APIRouter()


@router.post('', response_model=TripResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_trip(
    request: TripCreateRequest,
    current_operator: Operator = Depends(require_admin),
    use_case: CreateTripUseCase = Depends(CreateTripUseCase.depends),
) -> TripResponse:
    trip = await use_case.create(
        name=request.name,
        pickup=request.pickup.to_value_object(),
        dropoff=request.dropoff.to_value_object(),
        departure_date=request.departure_date,
        departure_time=request.departure_time,
        arrival_time=request.arrival_time,
        unit_price=request.unit_price,
        seat_count=request.seat_count,
        vehicle_type=request.vehicle_type,
        bus=request.bus,
        is_hire_only=request.is_hire_only,
    )
    return TripResponse.from_entity(trip)


@router.get('', response_model=List[TripResponse])
@Logger.io
async def list_trips(
    current_operator: Operator = Depends(require_operator),
    use_case: SearchTripsUseCase = Depends(SearchTripsUseCase.depends),
) -> List[TripResponse]:
    return [TripResponse.from_dto(item) for item in await use_case.list_all()]


@router.patch('/{trip_id}', response_model=TripResponse)
@Logger.io
async def update_trip(
    trip_id: int,
    request: TripUpdateRequest,
    current_operator: Operator = Depends(require_admin),
    use_case: UpdateTripUseCase = Depends(UpdateTripUseCase.depends),
) -> TripResponse:
    trip = await use_case.update(trip_id=trip_id, **request.to_changes())
    return TripResponse.from_entity(trip)


@router.delete('/{trip_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_trip(
    trip_id: int,
    current_operator: Operator = Depends(require_admin),
    use_case: DeleteTripUseCase = Depends(DeleteTripUseCase.depends),
) -> Response:
    await use_case.delete(trip_id=trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
