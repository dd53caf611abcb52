from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base


class ProgressionProfile(Base):
    __tablename__ = "progression_profiles"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise_id", name="uq_progression_profiles_user_exercise"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # Reserved for per-category increments; not read by the progression policy
    category_key: Mapped[str | None] = mapped_column(String(40), nullable=True)

    last_completed_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_rir: Mapped[float | None] = mapped_column(Float, nullable=True)
    next_planned_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)

    last_updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
