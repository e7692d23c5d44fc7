from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.checkout.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.checkout.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.checkout.domain.enum.booking_status import BookingStatus
from src.service.checkout.driving_adapter.http_controller.schema.admin_schema import (
    BookingResponse,
    CancelBookingRequest,
)
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.driving_adapter.http_controller.auth.role_auth import (
    require_admin,
    require_operator,
)


router = APIRouter()


@router.get('', response_model=List[BookingResponse])
@Logger.io
async def list_bookings(
    trip_id: Optional[int] = None,
    booking_status: Optional[BookingStatus] = Query(default=None, alias='status'),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_operator: Operator = Depends(require_operator),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_bookings(
        trip_id=trip_id, status=booking_status, limit=limit, offset=offset
    )
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.post('/{booking_id}/cancel', response_model=BookingResponse)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    request: CancelBookingRequest,
    current_operator: Operator = Depends(require_admin),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel(
        booking_id=str(booking_id), cancelled_by=current_operator.email, reason=request.reason
    )
    return BookingResponse.from_entity(booking)
