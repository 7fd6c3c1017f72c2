"""Stored pantry item. Append-only: every imported row becomes a new record."""

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from pantry.models.base import Base


class FoodItem(Base):
    __tablename__ = "food_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Calendar date only; no time-of-day semantics
    expiration_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    image_url: Mapped[str | None] = mapped_column(String, nullable=True)

    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    placement: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")

    hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
