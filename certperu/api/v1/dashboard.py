# certperu/api/v1/dashboard.py
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from certperu.api.deps import get_db
from certperu.core.rbac import require_editor
from certperu.models.certificate import Certificate
from certperu.models.course import Course, CourseType
from certperu.models.enrollment import Enrollment, EnrollmentStatus
from certperu.models.participant import Participant

router = APIRouter()

def _count(db: Session, stmt) -> int:
    return db.scalar(stmt) or 0

@router.get("/")
def dashboard(db: Session = Depends(get_db), _=Depends(require_editor)):
    month_start = dt.datetime.now(dt.timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    by_type = dict(
        db.execute(select(Course.type, func.count(Course.id)).group_by(Course.type)).all()
    )
    revenue, month_enrollments = db.execute(
        select(func.coalesce(func.sum(Enrollment.amount), 0), func.count(Enrollment.id)).where(
            Enrollment.enrolled_at >= month_start,
            Enrollment.status.in_([EnrollmentStatus.PAGADO, EnrollmentStatus.COMPLETADO]),
        )
    ).one()

    latest = db.scalars(
        select(Enrollment)
        .options(selectinload(Enrollment.participant), selectinload(Enrollment.course))
        .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
        .limit(5)
    ).all()

    popular = db.execute(
        select(Course, func.count(Enrollment.id).label("n"))
        .outerjoin(Enrollment, Enrollment.course_id == Course.id)
        .group_by(Course.id)
        .order_by(func.count(Enrollment.id).desc(), Course.id)
        .limit(4)
    ).all()

    return {
        "stats": {
            "total_courses": _count(db, select(func.count(Course.id))),
            "total_participants": _count(db, select(func.count(Participant.id))),
            "total_certificates": _count(db, select(func.count(Certificate.id))),
            "active_courses": _count(db, select(func.count(Course.id)).where(Course.active.is_(True))),
            "diplomados": by_type.get(CourseType.DIPLOMADO, 0),
            "certificados": by_type.get(CourseType.CERTIFICADO, 0),
            "constancias": by_type.get(CourseType.CONSTANCIA, 0),
            "month_revenue": float(revenue or 0),
            "month_enrollments": month_enrollments,
        },
        "latest_enrollments": [
            {
                "id": e.id,
                "participant": e.participant.full_name,
                "course": e.course.name,
                "type": e.course.type.value.lower(),
                "enrolled_at": e.enrolled_at,
            }
            for e in latest
        ],
        "popular_courses": [
            {"id": c.id, "name": c.name, "type": c.type.value.lower(), "enrollments": n}
            for c, n in popular
        ],
    }
