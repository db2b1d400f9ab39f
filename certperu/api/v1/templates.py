# certperu/api/v1/templates.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.core.errors import NotFound
from certperu.core.rbac import require_admin, require_editor
from certperu.crud.template import template_crud
from certperu.models.course import CourseType
from certperu.schemas.common import Message
from certperu.schemas.template import Template, TemplateCreate, TemplateUpdate

router = APIRouter()

@router.get("/", response_model=List[Template])
def list_templates(
    type: Optional[CourseType] = Query(None),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    return template_crud.list_templates(db, type)

@router.post("/", response_model=Template, status_code=status.HTTP_201_CREATED)
def create_template(body: TemplateCreate, db: Session = Depends(get_db), admin=Depends(require_editor)):
    return template_crud.create_template(db, body, creator_id=admin.id)

@router.get("/{template_id}", response_model=Template)
def get_template(template_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    tpl = template_crud.get(db, template_id)
    if not tpl:
        raise NotFound("Plantilla no encontrada")
    return tpl

@router.put("/{template_id}", response_model=Template)
def update_template(
    body: TemplateUpdate,
    template_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    tpl = template_crud.get(db, template_id)
    if not tpl:
        raise NotFound("Plantilla no encontrada")
    return template_crud.update_template(db, tpl, body)

@router.delete("/{template_id}", response_model=Message)
def delete_template(template_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_admin)):
    promoted = template_crud.delete_template(db, template_id)
    msg = "Plantilla eliminada"
    if promoted is not None:
        msg += f"; '{promoted.name}' es ahora la plantilla por defecto"
    return Message(message=msg)
