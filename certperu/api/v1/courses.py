# certperu/api/v1/courses.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.core.errors import NotFound
from certperu.core.rbac import require_admin, require_editor
from certperu.crud.course import category_crud, course_crud
from certperu.models.course import CourseType
from certperu.schemas.common import Page, Pagination
from certperu.schemas.course import (
    Category, CategoryCreate, Course, CourseAdmin, CourseCreate, CourseDeleted, CourseUpdate,
)

router = APIRouter()        # público: /courses, /categories
admin_router = APIRouter()  # back-office: /admin/courses, /admin/categories

def _to_admin(db: Session, c) -> CourseAdmin:
    return CourseAdmin.model_validate(c).model_copy(update=course_crud.counts(db, c.id))

# ----------------------- catálogo público -----------------------

@router.get("/courses", response_model=Page[Course])
def list_public_courses(
    category: Optional[str] = Query(None, description="Slug de la categoría"),
    type: Optional[CourseType] = Query(None),
    q: Optional[str] = Query(None, description="Busca en nombre y descripción"),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = course_crud.search(
        db, q=q, type=type, active=True, featured=featured, category_slug=category, page=page, page_size=limit,
    )
    return Page[Course](items=[Course.model_validate(c) for c in rows], pagination=Pagination.build(total, page, limit))

@router.get("/courses/{slug}", response_model=Course)
def get_public_course(slug: str, db: Session = Depends(get_db)):
    c = course_crud.get_by_slug(db, slug)
    if not c or not c.active:
        raise NotFound("Curso no encontrado")
    return c

@router.get("/categories", response_model=List[Category])
def list_public_categories(db: Session = Depends(get_db)):
    return [
        Category.model_validate(cat).model_copy(update={"course_count": n})
        for cat, n in category_crud.list_with_counts(db, only_active=True)
    ]

# ----------------------- administración -----------------------

@admin_router.get("/categories", response_model=List[Category])
def list_categories(db: Session = Depends(get_db), _=Depends(require_editor)):
    return [
        Category.model_validate(cat).model_copy(update={"course_count": n})
        for cat, n in category_crud.list_with_counts(db, only_active=False)
    ]

@admin_router.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(body: CategoryCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    return category_crud.create(db, body)

@admin_router.get("/courses", response_model=Page[CourseAdmin])
def list_courses(
    type: Optional[CourseType] = Query(None),
    active: Optional[bool] = Query(None),
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    rows, total = course_crud.search(db, q=q, type=type, active=active, page=page, page_size=limit)
    return Page[CourseAdmin](items=[_to_admin(db, c) for c in rows], pagination=Pagination.build(total, page, limit))

@admin_router.post("/courses", response_model=CourseAdmin, status_code=status.HTTP_201_CREATED)
def create_course(body: CourseCreate, db: Session = Depends(get_db), _=Depends(require_editor)):
    return _to_admin(db, course_crud.create(db, body))

@admin_router.get("/courses/{course_id}", response_model=CourseAdmin)
def get_course(course_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    c = course_crud.get(db, course_id)
    if not c:
        raise NotFound("Curso no encontrado")
    return _to_admin(db, c)

@admin_router.put("/courses/{course_id}", response_model=CourseAdmin)
def update_course(
    body: CourseUpdate,
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    c = course_crud.get(db, course_id)
    if not c:
        raise NotFound("Curso no encontrado")
    return _to_admin(db, course_crud.update_course(db, c, body))

@admin_router.delete("/courses/{course_id}", response_model=CourseDeleted)
def delete_course(course_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_admin)):
    deactivated = course_crud.delete_or_deactivate(db, course_id)
    msg = (
        "El curso tiene inscripciones o certificados: se desactivó"
        if deactivated else "Curso eliminado"
    )
    return CourseDeleted(deactivated=deactivated, message=msg)
