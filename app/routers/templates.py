from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.workouts import TemplateIn, TemplateOut, TemplateUpdate
from app.services import templates as template_service


router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
async def list_templates(
    body_part: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    templates = await template_service.list_templates(db, body_part)
    return {"items": [TemplateOut.model_validate(t) for t in templates]}


@router.post("", status_code=201)
async def create_template(
    payload: TemplateIn,
    db: AsyncSession = Depends(get_db),
):
    t = await template_service.create_template(db, payload)
    return {"created": True, "template": TemplateOut.model_validate(t)}


@router.get("/{template_id}", response_model=TemplateOut)
async def get_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await template_service.get_template(db, template_id)


@router.patch("/{template_id}")
async def update_template(
    template_id: int,
    payload: TemplateUpdate,
    db: AsyncSession = Depends(get_db),
):
    t = await template_service.update_template(db, template_id, payload)
    return {"updated": True, "template": TemplateOut.model_validate(t)}


@router.delete("/{template_id}")
async def delete_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
):
    deleted = await template_service.delete_template(db, template_id)
    if not deleted:
        return {"deleted": False, "detail": "Template not found"}
    return {"deleted": True, "template_id": template_id}
