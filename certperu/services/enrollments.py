# certperu/services/enrollments.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, FrozenSet, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from certperu.core.errors import AlreadyEnrolled, CourseUnavailable, NotFound, ValidationFailed
from certperu.crud import enrollment as enrollment_crud
from certperu.models.course import Course
from certperu.models.enrollment import Enrollment, EnrollmentStatus
from certperu.models.participant import Participant

logger = logging.getLogger(__name__)

PENDIENTE = EnrollmentStatus.PENDIENTE
PAGADO = EnrollmentStatus.PAGADO
CURSANDO = EnrollmentStatus.CURSANDO
COMPLETADO = EnrollmentStatus.COMPLETADO

# estado actual -> estados a los que puede pasar
ALLOWED_TRANSITIONS: Dict[EnrollmentStatus, FrozenSet[EnrollmentStatus]] = {
    PENDIENTE: frozenset({PAGADO}),
    PAGADO: frozenset({PENDIENTE, CURSANDO, COMPLETADO}),
    CURSANDO: frozenset({PAGADO, COMPLETADO}),
    COMPLETADO: frozenset({CURSANDO}),
}

def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

def can_transition(current: EnrollmentStatus, new: EnrollmentStatus) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS.get(current, frozenset())

def enroll(db: Session, participant_id: int, course_id: int) -> Enrollment:
    participant = db.get(Participant, participant_id)
    if not participant:
        raise NotFound("Participante no encontrado")
    course = db.get(Course, course_id)
    if not course:
        raise NotFound("Curso no encontrado")

    if enrollment_crud.get_pair(db, participant_id, course_id):
        raise AlreadyEnrolled()
    if not course.active:
        raise CourseUnavailable("El curso no está disponible")
    if course.max_capacity is not None and enrollment_crud.count_for_course(db, course_id) >= course.max_capacity:
        raise CourseUnavailable("El curso ha alcanzado su capacidad máxima")

    obj = Enrollment(
        participant_id=participant_id,
        course_id=course_id,
        status=PENDIENTE,
        amount=course.price or 0,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as exc:
        # dos inscripciones simultáneas del mismo par: gana la primera
        db.rollback()
        raise AlreadyEnrolled() from exc
    db.refresh(obj)
    logger.info("Participante %s inscrito en curso %s (inscripción %s)", participant_id, course_id, obj.id)
    return obj

def transition(
    db: Session,
    enrollment_id: int,
    new_status: Optional[EnrollmentStatus] = None,
    *,
    observations: Optional[str] = None,
    update_observations: bool = False,
) -> Enrollment:
    enr = db.get(Enrollment, enrollment_id)
    if not enr:
        raise NotFound("Inscripción no encontrada")

    if new_status is not None and new_status != enr.status:
        if not can_transition(enr.status, new_status):
            raise ValidationFailed(
                f"Transición no permitida: {enr.status.value} -> {new_status.value}",
                details={
                    "from": enr.status.value,
                    "to": new_status.value,
                    "allowed": sorted(s.value for s in ALLOWED_TRANSITIONS[enr.status]),
                },
            )
        if enr.status == PENDIENTE and new_status == PAGADO and enr.paid_at is None:
            enr.paid_at = _now()
        logger.info("Inscripción %s: %s -> %s", enr.id, enr.status.value, new_status.value)
        enr.status = new_status

    if update_observations:
        enr.observations = observations

    db.add(enr)
    db.commit()
    db.refresh(enr)
    return enr
