# certperu/api/v1/enrollments.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from certperu.api.deps import get_current_admin, get_db, get_identity, get_institution
from certperu.core.errors import Forbidden, NotFound, ValidationFailed
from certperu.core.rbac import require_editor
from certperu.core.tokens import KIND_ADMIN
from certperu.crud import certificate as certificate_crud
from certperu.crud import enrollment as enrollment_crud
from certperu.models.enrollment import EnrollmentStatus
from certperu.schemas.certificate import Certificate
from certperu.schemas.common import Page, Pagination
from certperu.schemas.enrollment import (
    CertificateSummary, Enrollment, EnrollmentCreate, EnrollmentDetail, EnrollmentUpdate,
)
from certperu.schemas.setting import InstitutionConfig
from certperu.schemas.token import Identity
from certperu.services import certificates as issuer
from certperu.services import enrollments as ledger

router = APIRouter()

def enrollment_detail(db: Session, enr) -> EnrollmentDetail:
    out = EnrollmentDetail.model_validate(enr)
    cert = certificate_crud.for_enrollment(db, enr.id)
    if cert is not None:
        out.certificate = CertificateSummary.model_validate(cert)
    return out

@router.post("/", response_model=Enrollment, status_code=status.HTTP_201_CREATED)
def create_enrollment(
    body: EnrollmentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    if identity.kind == KIND_ADMIN:
        # valida que el admin exista y esté activo
        get_current_admin(identity, db)
        if body.participant_id is None:
            raise ValidationFailed("participant_id es obligatorio")
        participant_id = body.participant_id
    else:
        if body.participant_id is not None and body.participant_id != identity.id:
            raise Forbidden("Solo puedes inscribirte a ti mismo")
        participant_id = identity.id
    return ledger.enroll(db, participant_id, body.course_id)

@router.get("/", response_model=Page[EnrollmentDetail])
def list_enrollments(
    status_: Optional[EnrollmentStatus] = Query(None, alias="status"),
    q: Optional[str] = Query(None, description="Busca por participante (nombre, documento, email) o curso"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    rows, total = enrollment_crud.search(db, status=status_, q=q, page=page, page_size=limit)
    return Page[EnrollmentDetail](items=[enrollment_detail(db, e) for e in rows], pagination=Pagination.build(total, page, limit))

@router.get("/{enrollment_id}", response_model=EnrollmentDetail)
def get_enrollment(enrollment_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    enr = enrollment_crud.get_detailed(db, enrollment_id)
    if not enr:
        raise NotFound("Inscripción no encontrada")
    return enrollment_detail(db, enr)

@router.patch("/{enrollment_id}", response_model=EnrollmentDetail)
def update_enrollment(
    body: EnrollmentUpdate,
    enrollment_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    enr = ledger.transition(
        db, enrollment_id, body.status,
        observations=body.observations,
        update_observations="observations" in body.model_fields_set,
    )
    return enrollment_detail(db, enr)

@router.post("/{enrollment_id}/issue-certificate", response_model=Certificate)
def issue_certificate(
    enrollment_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    institution: InstitutionConfig = Depends(get_institution),
    admin=Depends(require_editor),
):
    return issuer.issue_for_enrollment(db, enrollment_id, institution=institution, issuer_id=admin.id)
