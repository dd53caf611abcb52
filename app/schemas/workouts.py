from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.exercises import Equipment, LoadingMode

Unit = Literal["kg", "lbs"]
SessionStatus = Literal["active", "completed"]
LoadBasis = Literal["external", "bodyweight"]


# --- Templates ---

class SetSpec(BaseModel):
    # reps is checked by the template validator, not here, so that a bad
    # template reaches it and fails as one ValidationFailed
    reps: int
    weight_percentage: float | None = None
    rest_sec: int | None = None
    weight_kg: float | None = None

class TemplateItem(BaseModel):
    exercise_id: int
    order: int
    sets: list[SetSpec] = Field(default_factory=list)
    group_id: str | None = None
    group_order: int | None = None

class TemplateIn(BaseModel):
    name: str
    description: str | None = None
    body_part: str
    variation: str | None = None
    default_unit: Unit | None = None
    items: list[TemplateItem] = Field(default_factory=list)

class TemplateUpdate(BaseModel):
    """Only the fields that were sent overwrite the stored template."""

    name: str | None = None
    description: str | None = None
    body_part: str | None = None
    variation: str | None = None
    default_unit: Unit | None = None
    items: list[TemplateItem] | None = None

class TemplateOut(TemplateIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# --- Sessions ---

class SessionSet(BaseModel):
    reps: int
    weight_kg: float | None = None
    done: bool = False
    completed_reps: int | None = None
    completed_weight_kg: float | None = None
    completed_at: datetime | None = None

    def logged_weight(self) -> float | None:
        """Completed weight if logged, otherwise the planned weight."""
        if self.completed_weight_kg is not None:
            return self.completed_weight_kg
        return self.weight_kg

class SessionExercise(BaseModel):
    exercise_id: int
    exercise_name: str
    equipment: Equipment | None = None
    loading_mode: LoadingMode | None = None
    load_basis: LoadBasis = "external"
    order: int
    group_id: str | None = None
    group_order: int | None = None
    rest_sec: int | None = None
    rir: float | None = None
    sets: list[SessionSet] = Field(default_factory=list)

class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None = None
    anon_key: str | None = None
    template_id: int | None = None
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    exercises: list[SessionExercise]

class SessionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    template_id: int | None = None
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None

class StartSessionIn(BaseModel):
    template_id: int
    user_id: int | None = None
    anon_key: str | None = None
    # exercise_id -> planned weight in kg
    planned_weights: dict[int, float] = Field(default_factory=dict)

class MarkSetDoneIn(BaseModel):
    reps: int | None = None
    weight_kg: float | None = None

class UpdatePlannedWeightIn(BaseModel):
    weight_kg: float
    from_set_index: int = Field(default=0, ge=0)

class RecordEffortIn(BaseModel):
    rir: float
    user_id: int | None = None
