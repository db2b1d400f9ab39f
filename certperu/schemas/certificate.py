from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal
from decimal import Decimal
from datetime import datetime

from certperu.models.certificate import CertificateState
from certperu.models.course import CourseType, Modality
from certperu.schemas.participant import ParticipantRef

class Signatory(BaseModel):
    name: str
    title: str

class CourseSnapshotOut(BaseModel):
    name: str
    type: CourseType
    modality: Modality
    academic_hours: int
    chronological_hours: Optional[int] = None
    credits: Optional[int] = None
    syllabus: List[str] = []

    model_config = {"from_attributes": True}

class InstitutionOut(BaseModel):
    name: str
    ruc: Optional[str] = None
    address: Optional[str] = None

    model_config = {"from_attributes": True}

class Certificate(BaseModel):
    id: int
    verification_code: str
    participant_id: int
    course_id: Optional[int] = None
    enrollment_id: Optional[int] = None
    snapshot: CourseSnapshotOut
    institution: InstitutionOut
    signatories: List[Signatory] = []
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    issued_at: datetime
    grade: Optional[Decimal] = None
    grade_text: Optional[str] = None
    remarks: Optional[str] = None
    state: CertificateState
    verification_url: str
    issued_by_id: Optional[int] = None

    model_config = {"from_attributes": True}

class CertificateDetail(Certificate):
    participant: ParticipantRef

class CertificateManualCreate(BaseModel):
    participant_id: int
    course_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    grade: Optional[Decimal] = Field(default=None, ge=0, le=20)
    grade_text: Optional[str] = None
    remarks: Optional[str] = None
    signatories: Optional[List[Signatory]] = None

class CertificateUpdate(BaseModel):
    # cualquier otro campo (participante, curso, código...) se rechaza
    model_config = ConfigDict(extra="forbid")

    grade: Optional[Decimal] = Field(default=None, ge=0, le=20)
    grade_text: Optional[str] = None
    remarks: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

class CertificateAction(BaseModel):
    action: Literal["void", "reactivate"]
    reason: Optional[str] = None

# ---- verificación pública ----

class VerifiedParticipant(BaseModel):
    full_name: str
    document_type: str
    document_number: str  # siempre enmascarado

class VerifiedDates(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    issued: datetime

class VerifiedInstitution(BaseModel):
    name: str
    ruc: Optional[str] = None

class VerifiedCertificate(BaseModel):
    id: int
    verification_code: str
    participant: VerifiedParticipant
    course: CourseSnapshotOut
    dates: VerifiedDates
    institution: VerifiedInstitution
    grade: Optional[Decimal] = None
    grade_text: Optional[str] = None

class VerificationResult(BaseModel):
    valid: bool
    status: Optional[CertificateState] = None
    is_preview: bool = False
    message: Optional[str] = None
    certificate: Optional[VerifiedCertificate] = None
