# carfeed/models.py
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Float, DateTime, Boolean, Text, Index, CheckConstraint
from datetime import datetime, timezone
from typing import Optional
from carfeed.db import Base

class Event(Base):
    """A listing row. The table started out holding events and now doubles as
    the generic listing table, hence ``ticket_price`` and ``target_date``."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    background_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    creator: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    category: Mapped[str] = mapped_column(String(50), default="other", index=True)

    ticket_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    mileage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    transmission: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    fuel_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    condition: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    source_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, unique=True)
    is_scraped: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("NOT is_scraped OR created_by IS NULL", name="ck_scraped_has_no_creator"),
        Index("idx_events_recent", "created_at"),
    )
