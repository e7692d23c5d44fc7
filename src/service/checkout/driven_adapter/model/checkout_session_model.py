from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime, utc_now


class CheckoutSessionModel(Base):
    __tablename__ = 'checkout_session'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    trip_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    mode: Mapped[str] = mapped_column(String(10), nullable=False)
    requested_positions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    hold_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    identity_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    authorization_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    abandon_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
