import logging
from typing import Optional, List, Tuple, Dict
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from certperu.core.errors import AlreadyExists, NotFound, ValidationFailed
from certperu.core.text import slugify, like_pattern
from certperu.crud.base import CRUDBase, paginate
from certperu.models.category import Category
from certperu.models.course import Course, CourseType
from certperu.models.enrollment import Enrollment
from certperu.models.certificate import Certificate
from certperu.schemas.course import CourseCreate, CourseUpdate, CategoryCreate

logger = logging.getLogger(__name__)

class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):
    def get_by_slug(self, db: Session, slug: str) -> Optional[Course]:
        return db.scalar(
            select(Course).options(selectinload(Course.category)).where(Course.slug == slug)
        )

    def _ensure_slug_free(self, db: Session, slug: str, exclude_id: Optional[int] = None) -> None:
        if not slug:
            raise ValidationFailed("No se pudo generar el slug a partir del nombre")
        stmt = select(Course.id).where(Course.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Course.id != exclude_id)
        if db.scalar(stmt):
            raise AlreadyExists(f"Ya existe un curso con el slug '{slug}'")

    def _ensure_category(self, db: Session, category_id: Optional[int]) -> None:
        if category_id is not None and not db.get(Category, category_id):
            raise NotFound("Categoría no encontrada")

    def create(self, db: Session, obj_in: CourseCreate, extra=None) -> Course:
        slug = slugify(obj_in.name)
        self._ensure_slug_free(db, slug)
        self._ensure_category(db, obj_in.category_id)
        return super().create(db, obj_in, extra={"slug": slug, **(extra or {})})

    def update_course(self, db: Session, course: Course, obj_in: CourseUpdate) -> Course:
        data = obj_in.model_dump(exclude_unset=True)
        # slug se regenera si cambia el nombre y no vino explícito
        if data.get("name") and not data.get("slug"):
            data["slug"] = slugify(data["name"])
        if data.get("slug"):
            data["slug"] = slugify(data["slug"])
            self._ensure_slug_free(db, data["slug"], exclude_id=course.id)
        if "category_id" in data:
            self._ensure_category(db, data["category_id"])
        for required in ("name", "type", "modality", "academic_hours", "price", "active", "featured", "slug"):
            if required in data and data[required] is None:
                data.pop(required)
        return self.update(db, course, data)

    def counts(self, db: Session, course_id: int) -> Dict[str, int]:
        enr = db.scalar(select(func.count(Enrollment.id)).where(Enrollment.course_id == course_id)) or 0
        cert = db.scalar(select(func.count(Certificate.id)).where(Certificate.course_id == course_id)) or 0
        return {"enrollment_count": enr, "certificate_count": cert}

    def delete_or_deactivate(self, db: Session, course_id: int) -> bool:
        """True si quedó desactivado (tenía dependencias), False si se eliminó."""
        course = self.get(db, course_id)
        if not course:
            raise NotFound("Curso no encontrado")
        c = self.counts(db, course_id)
        if c["enrollment_count"] > 0 or c["certificate_count"] > 0:
            course.active = False
            db.add(course); db.commit()
            logger.info("Curso %s desactivado (%s inscripciones, %s certificados)",
                        course_id, c["enrollment_count"], c["certificate_count"])
            return True
        db.delete(course); db.commit()
        logger.info("Curso %s eliminado", course_id)
        return False

    def search(
        self, db: Session, *, q: Optional[str] = None, type: Optional[CourseType] = None,
        active: Optional[bool] = None, featured: Optional[bool] = None,
        category_slug: Optional[str] = None, page: int = 1, page_size: int = 20,
    ) -> Tuple[List[Course], int]:
        stmt = select(Course).options(selectinload(Course.category))
        if type is not None:
            stmt = stmt.where(Course.type == type)
        if active is not None:
            stmt = stmt.where(Course.active.is_(active))
        if featured is not None:
            stmt = stmt.where(Course.featured.is_(featured))
        if category_slug:
            stmt = stmt.join(Category, Category.id == Course.category_id).where(Category.slug == category_slug)
        if q:
            like = like_pattern(q)
            stmt = stmt.where(Course.name.ilike(like) | Course.description.ilike(like))
        stmt = stmt.order_by(Course.created_at.desc(), Course.id.desc())
        return paginate(db, stmt, page, page_size)

course_crud = CRUDCourse(Course)

class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryCreate]):
    def create(self, db: Session, obj_in: CategoryCreate, extra=None) -> Category:
        slug = slugify(obj_in.slug or obj_in.name)
        if db.scalar(select(Category.id).where(Category.slug == slug)):
            raise AlreadyExists(f"Ya existe una categoría con el slug '{slug}'")
        return super().create(db, obj_in, extra={"slug": slug})

    def list_with_counts(self, db: Session, *, only_active: bool = True) -> List[Tuple[Category, int]]:
        stmt = (
            select(Category, func.count(Course.id))
            .outerjoin(Course, (Course.category_id == Category.id) & Course.active.is_(True))
            .group_by(Category.id)
            .order_by(Category.name)
        )
        if only_active:
            stmt = stmt.where(Category.active.is_(True))
        return [(cat, n) for cat, n in db.execute(stmt).all()]

category_crud = CRUDCategory(Category)
