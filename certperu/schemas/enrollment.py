from pydantic import BaseModel
from typing import Optional
from decimal import Decimal
from datetime import datetime

from certperu.models.enrollment import EnrollmentStatus
from certperu.models.certificate import CertificateState
from certperu.schemas.participant import ParticipantRef
from certperu.schemas.course import CourseRef

class EnrollmentCreate(BaseModel):
    course_id: int
    # obligatorio cuando inscribe un admin; un participante se inscribe a sí mismo
    participant_id: Optional[int] = None

class EnrollmentUpdate(BaseModel):
    status: Optional[EnrollmentStatus] = None
    observations: Optional[str] = None

class CertificateSummary(BaseModel):
    id: int
    verification_code: str
    state: CertificateState

    model_config = {"from_attributes": True}

class Enrollment(BaseModel):
    id: int
    participant_id: int
    course_id: int
    status: EnrollmentStatus
    amount: Decimal
    observations: Optional[str] = None
    enrolled_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class EnrollmentDetail(Enrollment):
    participant: ParticipantRef
    course: CourseRef
    certificate: Optional[CertificateSummary] = None
