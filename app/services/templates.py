from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.workout_template import WorkoutTemplate
from app.schemas.workouts import TemplateIn, TemplateItem, TemplateUpdate
from app.services.exercises import existing_exercise_ids
from app.services.template_validator import validate_template


def _dump_items(items: list[TemplateItem]) -> list[dict]:
    return [item.model_dump(mode="json") for item in items]


async def _validate(db: AsyncSession, name: str | None, body_part: str | None, items: list[TemplateItem]) -> None:
    known = await existing_exercise_ids(db, (item.exercise_id for item in items))
    validate_template(name, body_part, items, known)


async def create_template(db: AsyncSession, payload: TemplateIn) -> WorkoutTemplate:
    await _validate(db, payload.name, payload.body_part, payload.items)

    t = WorkoutTemplate(
        name=payload.name,
        description=payload.description,
        body_part=payload.body_part,
        variation=payload.variation,
        default_unit=payload.default_unit,
        items=_dump_items(payload.items),
    )
    db.add(t)
    await db.commit()
    await db.refresh(t)
    logger.info(f"Template created: id={t.id} name={t.name!r} items={len(payload.items)}")
    return t


async def get_template(db: AsyncSession, template_id: int) -> WorkoutTemplate:
    t = await db.get(WorkoutTemplate, template_id)
    if t is None:
        raise NotFound("Template not found")
    return t


async def list_templates(db: AsyncSession, body_part: str | None = None) -> list[WorkoutTemplate]:
    stmt = select(WorkoutTemplate).order_by(WorkoutTemplate.created_at.desc(), WorkoutTemplate.id.desc())
    if body_part:
        stmt = stmt.where(WorkoutTemplate.body_part == body_part)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def update_template(db: AsyncSession, template_id: int, payload: TemplateUpdate) -> WorkoutTemplate:
    """Apply a partial update, validating the merged result first."""
    t = await get_template(db, template_id)
    changes = payload.model_dump(exclude_unset=True)

    name = changes.get("name", t.name)
    body_part = changes.get("body_part", t.body_part)
    if payload.items is not None:
        items = payload.items
    else:
        items = [TemplateItem.model_validate(i) for i in t.items]
    await _validate(db, name, body_part, items)

    for field in ("name", "description", "body_part", "variation", "default_unit"):
        if field in changes:
            setattr(t, field, changes[field])
    if payload.items is not None:
        t.items = _dump_items(items)

    await db.commit()
    await db.refresh(t)
    logger.info(f"Template updated: id={t.id} fields={sorted(changes)}")
    return t


async def delete_template(db: AsyncSession, template_id: int) -> bool:
    t = await db.get(WorkoutTemplate, template_id)
    if t is None:
        return False
    await db.delete(t)
    await db.commit()
    return True
