# certperu/api/v1/me.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response
from sqlalchemy.orm import Session

from certperu.api.deps import get_current_participant, get_db, get_institution
from certperu.api.v1.certificates import download_owned
from certperu.api.v1.enrollments import enrollment_detail
from certperu.core.errors import Forbidden, NotFound
from certperu.crud import certificate as certificate_crud
from certperu.crud import enrollment as enrollment_crud
from certperu.crud.participant import participant_crud
from certperu.models.enrollment import EnrollmentStatus
from certperu.models.participant import Participant as ParticipantModel
from certperu.schemas.certificate import Certificate
from certperu.schemas.enrollment import EnrollmentDetail
from certperu.schemas.participant import Participant, ParticipantUpdate, ProfileUpdate
from certperu.schemas.setting import InstitutionConfig
from certperu.services import pdf

router = APIRouter()

@router.get("/profile", response_model=Participant)
def get_profile(me: ParticipantModel = Depends(get_current_participant)):
    return me

@router.put("/profile", response_model=Participant)
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    me: ParticipantModel = Depends(get_current_participant),
):
    changes = ParticipantUpdate(**body.model_dump(exclude_unset=True))
    return participant_crud.update_checked(db, me, changes)

@router.get("/certificates", response_model=List[Certificate])
def my_certificates(db: Session = Depends(get_db), me: ParticipantModel = Depends(get_current_participant)):
    return certificate_crud.list_for_participant(db, me.id)

@router.get("/certificates/{certificate_id}/download")
def download_my_certificate(
    certificate_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    me: ParticipantModel = Depends(get_current_participant),
):
    return download_owned(db, certificate_id, me)

@router.get("/enrollments", response_model=List[EnrollmentDetail])
def my_enrollments(db: Session = Depends(get_db), me: ParticipantModel = Depends(get_current_participant)):
    return [enrollment_detail(db, enr) for enr in enrollment_crud.list_for_participant(db, me.id)]

@router.get("/enrollments/{enrollment_id}/preview")
def preview_certificate(
    enrollment_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    institution: InstitutionConfig = Depends(get_institution),
    me: ParticipantModel = Depends(get_current_participant),
):
    enr = enrollment_crud.get_detailed(db, enrollment_id)
    if not enr:
        raise NotFound("Inscripción no encontrada")
    if enr.participant_id != me.id:
        raise Forbidden("La inscripción no te pertenece")
    layout = pdf.resolve_layout(db, enr.course.type)
    content = pdf.render_pdf(pdf.document_for_preview(enr, institution), layout)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="certificado-preview-{enr.course.slug}.pdf"'},
    )

@router.get("/stats")
def my_stats(db: Session = Depends(get_db), me: ParticipantModel = Depends(get_current_participant)):
    enrollments = enrollment_crud.list_for_participant(db, me.id)
    return {
        "total_courses": len(enrollments),
        "completed_courses": sum(1 for e in enrollments if e.status == EnrollmentStatus.COMPLETADO),
        "certificates": participant_crud.certificate_count(db, me.id),
        "total_hours": sum((e.course.academic_hours or 0) for e in enrollments if e.course),
    }
