# certperu/api/v1/certificates.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from certperu.api.deps import get_current_participant, get_db, get_institution
from certperu.core.errors import Forbidden, NotEligible, NotFound
from certperu.core.rbac import require_admin, require_editor
from certperu.crud import certificate as certificate_crud
from certperu.models.certificate import Certificate as CertificateModel, CertificateState
from certperu.models.course import CourseType
from certperu.models.participant import Participant
from certperu.schemas.certificate import (
    Certificate, CertificateAction, CertificateDetail, CertificateManualCreate,
)
from certperu.schemas.common import Message, Page, Pagination
from certperu.schemas.setting import InstitutionConfig
from certperu.services import certificates as issuer
from certperu.services import pdf

router = APIRouter()

def pdf_response(db: Session, cert: CertificateModel, filename: str, disposition: str = "attachment") -> Response:
    layout = pdf.resolve_layout(db, cert.course_type)
    content = pdf.render_pdf(pdf.document_for_certificate(cert), layout)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'{disposition}; filename="{filename}"'},
    )

def download_owned(db: Session, certificate_id: int, participant: Participant) -> Response:
    cert = db.get(CertificateModel, certificate_id)
    if not cert:
        raise NotFound("Certificado no encontrado")
    if cert.participant_id != participant.id:
        raise Forbidden("El certificado no te pertenece")
    if cert.state != CertificateState.EMITIDO:
        raise NotEligible("El certificado no está emitido")
    return pdf_response(db, cert, f"certificado-{cert.verification_code}.pdf")

# -------------------------- administración --------------------------

@router.get("/", response_model=Page[CertificateDetail])
def list_certificates(
    q: Optional[str] = Query(None, description="Código, curso, nombre o documento del participante"),
    type: Optional[CourseType] = Query(None),
    state: Optional[CertificateState] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    rows, total = certificate_crud.search(db, q=q, course_type=type, state=state, page=page, page_size=limit)
    return Page[CertificateDetail](
        items=[CertificateDetail.model_validate(c) for c in rows],
        pagination=Pagination.build(total, page, limit),
    )

@router.post("/", response_model=Certificate, status_code=status.HTTP_201_CREATED)
def issue_manual(
    body: CertificateManualCreate,
    db: Session = Depends(get_db),
    institution: InstitutionConfig = Depends(get_institution),
    admin=Depends(require_editor),
):
    return issuer.issue_manual(db, body, institution=institution, issuer_id=admin.id)

@router.get("/{certificate_id}", response_model=CertificateDetail)
def get_certificate(certificate_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    cert = db.get(CertificateModel, certificate_id)
    if not cert:
        raise NotFound("Certificado no encontrado")
    return cert

@router.put("/{certificate_id}", response_model=Certificate)
def update_certificate(
    certificate_id: int = Path(..., ge=1),
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    # el cuerpo llega crudo para poder rechazar campos no editables con un error de dominio
    return issuer.update_certificate(db, certificate_id, body)

@router.patch("/{certificate_id}", response_model=Certificate)
def certificate_action(
    body: CertificateAction,
    certificate_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    if body.action == "void":
        return issuer.void(db, certificate_id, body.reason)
    return issuer.reactivate(db, certificate_id)

@router.delete("/{certificate_id}", response_model=Message)
def delete_certificate(certificate_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_admin)):
    issuer.delete(db, certificate_id)
    return Message(message="Certificado eliminado")

@router.get("/{certificate_id}/pdf")
def admin_pdf(certificate_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    cert = db.get(CertificateModel, certificate_id)
    if not cert:
        raise NotFound("Certificado no encontrado")
    return pdf_response(db, cert, f"certificado-{cert.verification_code}.pdf", disposition="inline")

# -------------------------- participante --------------------------

@router.get("/{certificate_id}/download")
def download_certificate(
    certificate_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    participant: Participant = Depends(get_current_participant),
):
    return download_owned(db, certificate_id, participant)
