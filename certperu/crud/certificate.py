from typing import Optional, List, Tuple
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from certperu.core.text import like_pattern
from certperu.crud.base import paginate
from certperu.models.certificate import Certificate, CertificateState
from certperu.models.course import CourseType
from certperu.models.participant import Participant

def get_by_code(db: Session, code: str) -> Optional[Certificate]:
    return db.scalar(
        select(Certificate)
        .options(selectinload(Certificate.participant))
        .where(Certificate.verification_code == code)
    )

def code_exists(db: Session, code: str) -> bool:
    return db.scalar(select(Certificate.id).where(Certificate.verification_code == code)) is not None

def find_issued(db: Session, participant_id: int, course_id: int, exclude_id: Optional[int] = None) -> Optional[Certificate]:
    stmt = select(Certificate).where(
        Certificate.participant_id == participant_id,
        Certificate.course_id == course_id,
        Certificate.state == CertificateState.EMITIDO,
    )
    if exclude_id is not None:
        stmt = stmt.where(Certificate.id != exclude_id)
    return db.scalar(stmt)

def for_enrollment(db: Session, enrollment_id: int) -> Optional[Certificate]:
    # la emitida primero; si no hay, la última anulada
    return db.scalar(
        select(Certificate)
        .where(Certificate.enrollment_id == enrollment_id)
        .order_by((Certificate.state == CertificateState.EMITIDO).desc(), Certificate.issued_at.desc())
        .limit(1)
    )

def list_for_participant(db: Session, participant_id: int) -> List[Certificate]:
    return list(db.scalars(
        select(Certificate)
        .where(Certificate.participant_id == participant_id)
        .order_by(Certificate.issued_at.desc())
    ).all())

def search(
    db: Session, *, q: Optional[str] = None, course_type: Optional[CourseType] = None,
    state: Optional[CertificateState] = None, page: int = 1, page_size: int = 10,
) -> Tuple[List[Certificate], int]:
    stmt = (
        select(Certificate)
        .join(Participant, Participant.id == Certificate.participant_id)
        .options(selectinload(Certificate.participant))
    )
    if q:
        like = like_pattern(q)
        stmt = stmt.where(
            Certificate.verification_code.ilike(like)
            | Certificate.course_name.ilike(like)
            | Participant.full_name.ilike(like)
            | Participant.document_number.ilike(like)
        )
    if course_type is not None:
        stmt = stmt.where(Certificate.course_type == course_type)
    if state is not None:
        stmt = stmt.where(Certificate.state == state)
    stmt = stmt.order_by(Certificate.issued_at.desc(), Certificate.id.desc())
    return paginate(db, stmt, page, page_size)
