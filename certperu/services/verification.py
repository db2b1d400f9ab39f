# certperu/services/verification.py
from typing import Optional
from sqlalchemy.orm import Session

from certperu.core.config import settings
from certperu.core.text import mask_document
from certperu.crud import certificate as certificate_crud
from certperu.models.certificate import Certificate, CertificateState
from certperu.schemas.certificate import (
    CourseSnapshotOut,
    VerificationResult,
    VerifiedCertificate,
    VerifiedDates,
    VerifiedInstitution,
    VerifiedParticipant,
)

PREVIEW_MESSAGE = "Este es un certificado de vista previa. No es válido hasta que se complete el pago."
VOIDED_MESSAGE = "Este certificado ha sido anulado."
NOT_FOUND_MESSAGE = "Certificado no encontrado"

def is_preview_code(code: str) -> bool:
    return code.startswith(settings.PREVIEW_PREFIX)

def preview_code(enrollment_id: int) -> str:
    return f"{settings.PREVIEW_PREFIX}{enrollment_id:08d}"

def redacted_view(cert: Certificate) -> VerifiedCertificate:
    p = cert.participant
    return VerifiedCertificate(
        id=cert.id,
        verification_code=cert.verification_code,
        participant=VerifiedParticipant(
            full_name=p.full_name,
            document_type=p.document_type.value,
            document_number=mask_document(p.document_number),
        ),
        course=CourseSnapshotOut.model_validate(cert.snapshot),
        dates=VerifiedDates(start=cert.start_date, end=cert.end_date, issued=cert.issued_at),
        institution=VerifiedInstitution(name=cert.institution_name, ruc=cert.institution_ruc),
        grade=cert.grade,
        grade_text=cert.grade_text,
    )

def verify(db: Session, code: str) -> Optional[VerificationResult]:
    """None cuando el código no existe; el router lo responde como 404."""
    code = (code or "").strip()
    # un código de vista previa nunca se busca en la base
    if is_preview_code(code):
        return VerificationResult(valid=False, is_preview=True, message=PREVIEW_MESSAGE)

    cert = certificate_crud.get_by_code(db, code)
    if cert is None:
        return None
    if cert.state == CertificateState.ANULADO:
        return VerificationResult(valid=False, status=CertificateState.ANULADO, message=VOIDED_MESSAGE)
    return VerificationResult(valid=True, status=cert.state, certificate=redacted_view(cert))
