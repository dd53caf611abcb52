from __future__ import annotations

from datetime import datetime
from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base


class WorkoutTemplate(Base):
    __tablename__ = "workout_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    body_part: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    variation: Mapped[str | None] = mapped_column(String(40), nullable=True)
    default_unit: Mapped[str | None] = mapped_column(String(3), nullable=True)  # kg/lbs

    # List of TemplateItem dicts, see app.schemas.templates
    items: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
