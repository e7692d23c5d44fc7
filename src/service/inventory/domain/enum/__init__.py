"""Inventory Domain Enums"""

from src.service.inventory.domain.enum.hold_status import HoldStatus
from src.service.inventory.domain.enum.seat_state import ALLOWED_SEAT_TRANSITIONS, SeatState

__all__ = ['ALLOWED_SEAT_TRANSITIONS', 'HoldStatus', 'SeatState']
