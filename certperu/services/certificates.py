# certperu/services/certificates.py
from __future__ import annotations

import datetime as dt
import logging
import secrets
import string
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from certperu.core.config import settings
from certperu.core.errors import (
    CertificateEmitted,
    CodeGenerationExhausted,
    DuplicateCertificate,
    NotEligible,
    NotFound,
    ValidationFailed,
)
from certperu.crud import certificate as certificate_crud
from certperu.models.certificate import Certificate, CertificateState, CourseSnapshot, InstitutionSnapshot
from certperu.models.course import Course
from certperu.models.enrollment import Enrollment, EnrollmentStatus
from certperu.models.participant import Participant
from certperu.schemas.certificate import CertificateManualCreate, CertificateUpdate
from certperu.schemas.setting import InstitutionConfig

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MANUAL_CODE_PREFIX = "CP-"
ISSUABLE = {EnrollmentStatus.PAGADO, EnrollmentStatus.CURSANDO, EnrollmentStatus.COMPLETADO}
EDITABLE_FIELDS = frozenset({"grade", "grade_text", "remarks", "start_date", "end_date"})
DEFAULT_VOID_REASON = "Sin motivo especificado"

# -------------------------- Utils --------------------------

def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

def _aware(value: dt.datetime) -> dt.datetime:
    # SQLite devuelve datetimes sin zona
    return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)

def generate_code(length: Optional[int] = None) -> str:
    n = length or settings.VERIFY_CODE_LENGTH
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(n))

def generate_manual_code() -> str:
    return f"{MANUAL_CODE_PREFIX}{secrets.token_hex(6).upper()}"

def verification_url(code: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/verificar/{code}"

def snapshot_of(course: Course) -> CourseSnapshot:
    return CourseSnapshot(
        name=course.name,
        type=course.type,
        modality=course.modality,
        academic_hours=course.academic_hours or 0,
        chronological_hours=course.chronological_hours,
        credits=course.credits,
        syllabus=list(course.syllabus or []),
    )

def institution_of(cfg: InstitutionConfig) -> InstitutionSnapshot:
    return InstitutionSnapshot(name=cfg.name, ruc=cfg.ruc, address=cfg.address)

def _violated(exc: IntegrityError) -> str:
    msg = str(getattr(exc, "orig", exc)).lower()
    if "uq_certificates_issued_pair" in msg or ("participant_id" in msg and "course_id" in msg):
        return "issued_pair"
    if "verification_code" in msg:
        return "code"
    return "other"

def _get_or_404(db: Session, certificate_id: int) -> Certificate:
    cert = db.get(Certificate, certificate_id)
    if not cert:
        raise NotFound("Certificado no encontrado")
    return cert

# -------------------- Inserción con código único --------------------

def _insert_with_unique_code(
    db: Session,
    build: Callable[[str], Certificate],
    *,
    participant_id: int,
    course_id: int,
    code_factory: Optional[Callable[[], str]] = None,
) -> Certificate:
    """
    Inserta dentro de un savepoint. La unicidad la garantiza la base: un choque
    de código consume un intento, un choque del par emitido es DuplicateCertificate.
    """
    next_code = code_factory or generate_code
    attempts = settings.VERIFY_CODE_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        code = next_code()
        if certificate_crud.code_exists(db, code):
            logger.warning("Código %s ya existe (intento %s/%s)", code, attempt, attempts)
            continue
        cert = build(code)
        try:
            with db.begin_nested():
                db.add(cert)
                db.flush()
        except IntegrityError as exc:
            kind = _violated(exc)
            if kind == "issued_pair":
                existing = certificate_crud.find_issued(db, participant_id, course_id)
                raise DuplicateCertificate(existing) from exc
            if kind == "code":
                logger.warning("Colisión de código %s al insertar (intento %s/%s)", code, attempt, attempts)
                continue
            raise
        return cert
    logger.error("Sin código único tras %s intentos (participante %s, curso %s)", attempts, participant_id, course_id)
    raise CodeGenerationExhausted()

# -------------------- Emisión --------------------

def issue_for_enrollment(
    db: Session,
    enrollment_id: int,
    *,
    institution: InstitutionConfig,
    issuer_id: Optional[int] = None,
) -> Certificate:
    enr = db.get(Enrollment, enrollment_id)
    if not enr:
        raise NotFound("Inscripción no encontrada")
    participant = db.get(Participant, enr.participant_id)
    course = db.get(Course, enr.course_id)
    if not participant or not course:
        raise NotFound("Participante o curso no encontrado")

    if enr.status not in ISSUABLE:
        raise NotEligible()

    existing = certificate_crud.find_issued(db, participant.id, course.id)
    if existing:
        raise DuplicateCertificate(existing)

    now = _now()
    snapshot = snapshot_of(course)
    inst = institution_of(institution)
    signatories = [s.model_dump() for s in institution.default_signatories()]

    def build(code: str) -> Certificate:
        return Certificate(
            verification_code=code,
            verification_url=verification_url(code),
            participant_id=participant.id,
            course_id=course.id,
            enrollment_id=enr.id,
            issued_by_id=issuer_id,
            snapshot=snapshot,
            institution=inst,
            signatories=signatories,
            start_date=course.start_date or enr.enrolled_at,
            end_date=course.end_date or now,
            issued_at=now,
            state=CertificateState.EMITIDO,
        )

    cert = _insert_with_unique_code(db, build, participant_id=participant.id, course_id=course.id)

    # misma transacción: o se guardan ambos o ninguno
    enr.status = EnrollmentStatus.COMPLETADO
    db.add(enr)
    db.commit()
    db.refresh(cert)
    logger.info("Certificado %s emitido para inscripción %s", cert.verification_code, enr.id)
    return cert

def issue_manual(
    db: Session,
    body: CertificateManualCreate,
    *,
    institution: InstitutionConfig,
    issuer_id: Optional[int] = None,
) -> Certificate:
    participant = db.get(Participant, body.participant_id)
    if not participant:
        raise NotFound("Participante no encontrado")
    course = db.get(Course, body.course_id)
    if not course:
        raise NotFound("Curso no encontrado")

    existing = certificate_crud.find_issued(db, participant.id, course.id)
    if existing:
        raise DuplicateCertificate(existing)

    now = _now()
    start = body.start_date or now
    end = body.end_date or now
    if _aware(start) > _aware(end):
        raise ValidationFailed("La fecha de inicio no puede ser posterior a la fecha de fin")
    snapshot = snapshot_of(course)
    inst = institution_of(institution)
    signatories = [s.model_dump() for s in (body.signatories or institution.default_signatories())]

    def build(code: str) -> Certificate:
        return Certificate(
            verification_code=code,
            verification_url=verification_url(code),
            participant_id=participant.id,
            course_id=course.id,
            issued_by_id=issuer_id,
            snapshot=snapshot,
            institution=inst,
            signatories=signatories,
            start_date=start,
            end_date=end,
            issued_at=now,
            grade=body.grade,
            grade_text=body.grade_text or "Aprobado",
            remarks=body.remarks,
            state=CertificateState.EMITIDO,
        )

    cert = _insert_with_unique_code(
        db, build, participant_id=participant.id, course_id=course.id, code_factory=generate_manual_code,
    )
    db.commit()
    db.refresh(cert)
    logger.info("Certificado %s emitido manualmente (participante %s, curso %s)",
                cert.verification_code, participant.id, course.id)
    return cert

# -------------------- Ciclo de vida --------------------

def update_certificate(db: Session, certificate_id: int, data: Dict[str, Any]) -> Certificate:
    cert = _get_or_404(db, certificate_id)
    rejected = sorted(set(data) - EDITABLE_FIELDS)
    if rejected:
        raise ValidationFailed(
            "Solo se pueden editar la nota, la nota en letras, las observaciones y las fechas",
            details={"fields": rejected},
        )
    try:
        body = CertificateUpdate.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(details={"errors": exc.errors(include_url=False, include_context=False)}) from exc

    changes = body.model_dump(exclude_unset=True)
    start = changes.get("start_date", cert.start_date)
    end = changes.get("end_date", cert.end_date)
    if start and end and _aware(start) > _aware(end):
        raise ValidationFailed("La fecha de inicio no puede ser posterior a la fecha de fin")
    for k, v in changes.items():
        setattr(cert, k, v)
    db.add(cert); db.commit(); db.refresh(cert)
    return cert

def void(db: Session, certificate_id: int, reason: Optional[str] = None) -> Certificate:
    cert = _get_or_404(db, certificate_id)
    if cert.state == CertificateState.ANULADO:
        raise ValidationFailed("El certificado ya está anulado")
    note = f"[ANULADO: {(reason or '').strip() or DEFAULT_VOID_REASON}]"
    cert.remarks = f"{cert.remarks}\n{note}" if cert.remarks else note
    cert.state = CertificateState.ANULADO
    db.add(cert); db.commit(); db.refresh(cert)
    logger.info("Certificado %s anulado", cert.verification_code)
    return cert

def reactivate(db: Session, certificate_id: int) -> Certificate:
    cert = _get_or_404(db, certificate_id)
    if cert.state == CertificateState.EMITIDO:
        raise ValidationFailed("El certificado ya está emitido")
    if cert.course_id is not None:
        other = certificate_crud.find_issued(db, cert.participant_id, cert.course_id, exclude_id=cert.id)
        if other:
            raise DuplicateCertificate(other)
    cert.state = CertificateState.EMITIDO
    db.add(cert)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _violated(exc) == "issued_pair":
            raise DuplicateCertificate(
                certificate_crud.find_issued(db, cert.participant_id, cert.course_id, exclude_id=cert.id)
            ) from exc
        raise
    db.refresh(cert)
    logger.info("Certificado %s reactivado", cert.verification_code)
    return cert

def delete(db: Session, certificate_id: int) -> None:
    cert = _get_or_404(db, certificate_id)
    if cert.state == CertificateState.EMITIDO:
        raise CertificateEmitted()
    code = cert.verification_code
    db.delete(cert)
    db.commit()
    logger.info("Certificado %s eliminado", code)
