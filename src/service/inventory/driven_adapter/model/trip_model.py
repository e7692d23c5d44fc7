from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import Boolean, Date, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime, utc_now


class TripModel(Base):
    __tablename__ = 'trip'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_code: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    pickup_city: Mapped[str] = mapped_column(String(100), nullable=False)
    pickup_terminal: Mapped[str] = mapped_column(String(255), nullable=False)
    dropoff_city: Mapped[str] = mapped_column(String(100), nullable=False)
    dropoff_terminal: Mapped[str] = mapped_column(String(255), nullable=False)
    departure_date: Mapped[date] = mapped_column(Date, nullable=False)
    departure_time: Mapped[time] = mapped_column(Time, nullable=False)
    arrival_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)  # minor units
    vehicle_type: Mapped[str] = mapped_column(String(50), nullable=False)
    bus: Mapped[str] = mapped_column(String(100), nullable=False, default='')
    seat_count: Mapped[int] = mapped_column(Integer, nullable=False)
    is_hire_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    first_hold_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        Index(
            'ix_trip_route_date',
            'pickup_city',
            'dropoff_city',
            'departure_date',
        ),
    )
