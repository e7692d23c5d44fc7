from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime, utc_now


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    trip_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    identity_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    seat_positions: Mapped[list] = mapped_column(JSON, nullable=False)
    amount_paid: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_reference: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='confirmed')
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    cancelled_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cancel_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
