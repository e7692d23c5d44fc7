from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime, utc_now


class SeatModel(Base):
    __tablename__ = 'seat'

    trip_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    state: Mapped[str] = mapped_column(String(10), nullable=False, default='free')
    holder_hold_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    booking_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (Index('ix_seat_trip_state', 'trip_id', 'state'),)


class SeatAuditModel(Base):
    __tablename__ = 'seat_audit'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    positions: Mapped[list] = mapped_column(JSON, nullable=False)
    from_state: Mapped[str] = mapped_column(String(10), nullable=False)
    to_state: Mapped[str] = mapped_column(String(10), nullable=False)
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
