# certperu/api/v1/course_requests.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.core.errors import NotFound
from certperu.core.rbac import require_admin, require_editor
from certperu.crud.base import CRUDBase, paginate
from certperu.models.course_request import CourseRequest as CourseRequestModel, CourseRequestState
from certperu.schemas.common import Message, Page, Pagination
from certperu.schemas.course_request import CourseRequest, CourseRequestCreate, CourseRequestUpdate

router = APIRouter()
course_request_crud = CRUDBase[CourseRequestModel, CourseRequestCreate, CourseRequestUpdate](CourseRequestModel)

@router.post("/", response_model=CourseRequest, status_code=status.HTTP_201_CREATED)
def create_request(body: CourseRequestCreate, db: Session = Depends(get_db)):
    return course_request_crud.create(db, body, extra={"email": str(body.email).lower() if body.email else None})

@router.get("/", response_model=Page[CourseRequest])
def list_requests(
    state: Optional[CourseRequestState] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    stmt = select(CourseRequestModel)
    if state is not None:
        stmt = stmt.where(CourseRequestModel.state == state)
    stmt = stmt.order_by(CourseRequestModel.created_at.desc(), CourseRequestModel.id.desc())
    rows, total = paginate(db, stmt, page, limit)
    return Page[CourseRequest](
        items=[CourseRequest.model_validate(r) for r in rows],
        pagination=Pagination.build(total, page, limit),
    )

@router.patch("/{request_id}", response_model=CourseRequest)
def update_request(
    body: CourseRequestUpdate,
    request_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    obj = course_request_crud.get(db, request_id)
    if not obj:
        raise NotFound("Solicitud no encontrada")
    return course_request_crud.update(db, obj, body)

@router.delete("/{request_id}", response_model=Message)
def delete_request(request_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_admin)):
    if not course_request_crud.remove(db, request_id):
        raise NotFound("Solicitud no encontrada")
    return Message(message="Solicitud eliminada")
