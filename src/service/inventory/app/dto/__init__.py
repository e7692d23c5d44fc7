"""Inventory application DTOs"""

from src.service.inventory.app.dto.hold_acquisition import HoldAcquisition
from src.service.inventory.app.dto.seat_transition_result import SeatTransitionResult
from src.service.inventory.app.dto.trip_dto import SeatCounts, TripWithSeatCounts

__all__ = ['HoldAcquisition', 'SeatCounts', 'SeatTransitionResult', 'TripWithSeatCounts']
