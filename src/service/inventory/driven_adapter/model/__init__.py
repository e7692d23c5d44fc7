"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.inventory.driven_adapter.model.hold_model import HoldModel
from src.service.inventory.driven_adapter.model.seat_model import SeatAuditModel, SeatModel
from src.service.inventory.driven_adapter.model.trip_model import TripModel

__all__ = ['HoldModel', 'SeatAuditModel', 'SeatModel', 'TripModel']
