from typing import Optional, List, Tuple
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from certperu.core.text import like_pattern
from certperu.crud.base import paginate
from certperu.models.enrollment import Enrollment, EnrollmentStatus
from certperu.models.participant import Participant
from certperu.models.course import Course

def get_pair(db: Session, participant_id: int, course_id: int) -> Optional[Enrollment]:
    return db.scalar(
        select(Enrollment).where(Enrollment.participant_id == participant_id, Enrollment.course_id == course_id)
    )

def count_for_course(db: Session, course_id: int) -> int:
    return db.scalar(select(func.count(Enrollment.id)).where(Enrollment.course_id == course_id)) or 0

def get_detailed(db: Session, enrollment_id: int) -> Optional[Enrollment]:
    return db.scalar(
        select(Enrollment)
        .options(selectinload(Enrollment.participant), selectinload(Enrollment.course))
        .where(Enrollment.id == enrollment_id)
    )

def list_for_participant(db: Session, participant_id: int) -> List[Enrollment]:
    return list(db.scalars(
        select(Enrollment)
        .options(selectinload(Enrollment.course))
        .where(Enrollment.participant_id == participant_id)
        .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
    ).all())

def search(
    db: Session, *, status: Optional[EnrollmentStatus] = None, q: Optional[str] = None,
    page: int = 1, page_size: int = 20,
) -> Tuple[List[Enrollment], int]:
    stmt = (
        select(Enrollment)
        .join(Participant, Participant.id == Enrollment.participant_id)
        .join(Course, Course.id == Enrollment.course_id)
        .options(selectinload(Enrollment.participant), selectinload(Enrollment.course))
    )
    if status is not None:
        stmt = stmt.where(Enrollment.status == status)
    if q:
        like = like_pattern(q)
        stmt = stmt.where(
            Participant.full_name.ilike(like)
            | Participant.document_number.ilike(like)
            | Participant.email.ilike(like)
            | Course.name.ilike(like)
        )
    # más nuevas primero; el id desempata inscripciones del mismo segundo
    stmt = stmt.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
    return paginate(db, stmt, page, page_size)
