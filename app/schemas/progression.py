from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from app.schemas.workouts import Unit

AssessmentType = Literal["1rm", "working"]

class ProgressionProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    exercise_id: int
    category_key: str | None = None
    last_completed_weight_kg: float | None = None
    last_rir: float | None = None
    next_planned_weight_kg: float | None = None
    last_updated_at: datetime

class AssessmentIn(BaseModel):
    user_id: int | None = None
    anon_key: str | None = None
    exercise_id: int
    type: AssessmentType
    value: float
    unit: Unit

class AssessmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None = None
    anon_key: str | None = None
    exercise_id: int
    type: AssessmentType
    value: float
    unit: Unit
    created_at: datetime
