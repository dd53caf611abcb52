from __future__ import annotations

from datetime import datetime
from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base


class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    body_part: Mapped[str] = mapped_column(String(40), nullable=False, index=True)

    # False for bodyweight movements (push-up, pull-up)
    is_weighted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    equipment: Mapped[str | None] = mapped_column(String(20), nullable=True)  # barbell/dumbbell/machine/kettlebell/cable/bodyweight
    loading_mode: Mapped[str | None] = mapped_column(String(10), nullable=True)  # bar/pair/single

    rounding_increment_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    rounding_increment_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    gif_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
