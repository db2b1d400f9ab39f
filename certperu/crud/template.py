from typing import Optional, List
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from certperu.core.errors import NotFound
from certperu.crud.base import CRUDBase
from certperu.models.course import CourseType
from certperu.models.certificate_template import CertificateTemplate
from certperu.schemas.template import TemplateCreate, TemplateUpdate, TemplateConfig

class CRUDTemplate(CRUDBase[CertificateTemplate, TemplateCreate, TemplateUpdate]):
    def _clear_default(self, db: Session, course_type: CourseType, keep_id: Optional[int] = None) -> None:
        stmt = (
            update(CertificateTemplate)
            .where(CertificateTemplate.course_type == course_type, CertificateTemplate.is_default.is_(True))
            .values(is_default=False)
        )
        if keep_id is not None:
            stmt = stmt.where(CertificateTemplate.id != keep_id)
        db.execute(stmt)

    def create_template(self, db: Session, obj_in: TemplateCreate, creator_id: Optional[int]) -> CertificateTemplate:
        # a lo más una default por tipo: se limpia la anterior en la misma transacción
        if obj_in.is_default:
            self._clear_default(db, obj_in.course_type)
        data = obj_in.model_dump(mode="json")
        obj = CertificateTemplate(**{**data, "course_type": obj_in.course_type,
                                     "orientation": obj_in.orientation, "creator_id": creator_id})
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    def update_template(self, db: Session, tpl: CertificateTemplate, obj_in: TemplateUpdate) -> CertificateTemplate:
        data = obj_in.model_dump(exclude_unset=True)
        if "config" in data:
            data["config"] = obj_in.config.model_dump(mode="json") if obj_in.config else TemplateConfig().model_dump(mode="json")
        for required in ("name", "course_type", "orientation", "active", "is_default"):
            if required in data and data[required] is None:
                data.pop(required)
        target_type = data.get("course_type", tpl.course_type)
        becomes_default = data.get("is_default", tpl.is_default)
        if becomes_default:
            self._clear_default(db, target_type, keep_id=tpl.id)
        for k, v in data.items():
            setattr(tpl, k, v)
        db.add(tpl); db.commit(); db.refresh(tpl)
        return tpl

    def list_templates(self, db: Session, course_type: Optional[CourseType] = None) -> List[CertificateTemplate]:
        stmt = select(CertificateTemplate)
        if course_type is not None:
            stmt = stmt.where(CertificateTemplate.course_type == course_type)
        stmt = stmt.order_by(CertificateTemplate.is_default.desc(), CertificateTemplate.created_at.desc(),
                             CertificateTemplate.id.desc())
        return list(db.scalars(stmt).all())

    def get_default(self, db: Session, course_type: CourseType) -> Optional[CertificateTemplate]:
        return db.scalar(
            select(CertificateTemplate).where(
                CertificateTemplate.course_type == course_type,
                CertificateTemplate.is_default.is_(True),
                CertificateTemplate.active.is_(True),
            )
        )

    def delete_template(self, db: Session, template_id: int) -> Optional[CertificateTemplate]:
        """Elimina; si era la default de su tipo, promueve otra activa. Devuelve la promovida."""
        tpl = self.get(db, template_id)
        if not tpl:
            raise NotFound("Plantilla no encontrada")
        promoted = None
        if tpl.is_default:
            promoted = db.scalar(
                select(CertificateTemplate)
                .where(
                    CertificateTemplate.course_type == tpl.course_type,
                    CertificateTemplate.id != tpl.id,
                    CertificateTemplate.active.is_(True),
                )
                .order_by(CertificateTemplate.created_at.desc(), CertificateTemplate.id.desc())
                .limit(1)
            )
        db.delete(tpl)
        db.flush()
        if promoted is not None:
            promoted.is_default = True
        db.commit()
        return promoted

template_crud = CRUDTemplate(CertificateTemplate)
