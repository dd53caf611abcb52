from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

Equipment = Literal["barbell", "dumbbell", "machine", "kettlebell", "cable", "bodyweight"]
LoadingMode = Literal["bar", "pair", "single"]

class ExerciseIn(BaseModel):
    name: str
    body_part: str
    is_weighted: bool = True
    equipment: Equipment | None = None
    loading_mode: LoadingMode | None = None
    rounding_increment_kg: float | None = None
    rounding_increment_lbs: float | None = None
    description: str | None = None
    gif_url: str | None = None

class ExerciseUpdate(BaseModel):
    """Only the fields that were sent overwrite the stored exercise."""

    name: str | None = None
    body_part: str | None = None
    is_weighted: bool | None = None
    equipment: Equipment | None = None
    loading_mode: LoadingMode | None = None
    rounding_increment_kg: float | None = None
    rounding_increment_lbs: float | None = None
    description: str | None = None
    gif_url: str | None = None

class ExerciseOut(ExerciseIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
