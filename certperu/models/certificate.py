from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, List, Dict
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship, composite
from sqlalchemy import (
    ForeignKey, String, Text, Integer, Numeric, JSON, DateTime, Index, Enum as SAEnum, text, func,
)
from certperu.db.base_class import Base
from certperu.models.course import CourseType, Modality

class CertificateState(str, Enum):
    EMITIDO = "EMITIDO"
    ANULADO = "ANULADO"

@dataclass(frozen=True)
class CourseSnapshot:
    """Copia de los datos del curso al momento de la emisión."""
    name: str
    type: CourseType
    modality: Modality
    academic_hours: int
    chronological_hours: Optional[int] = None
    credits: Optional[int] = None
    syllabus: List[str] = field(default_factory=list)

    def __composite_values__(self):
        return (self.name, self.type, self.modality, self.academic_hours,
                self.chronological_hours, self.credits, list(self.syllabus or []))

@dataclass(frozen=True)
class InstitutionSnapshot:
    name: str
    ruc: Optional[str] = None
    address: Optional[str] = None

class Certificate(Base):
    __tablename__ = "certificates"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    verification_code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    participant_id: Mapped[int] = mapped_column(ForeignKey("participants.id"), index=True)
    # solo para reportes; los datos del curso viven en el snapshot
    course_id: Mapped[Optional[int]] = mapped_column(ForeignKey("courses.id", ondelete="SET NULL"), nullable=True, index=True)
    enrollment_id: Mapped[Optional[int]] = mapped_column(ForeignKey("enrollments.id", ondelete="SET NULL"), nullable=True, index=True)
    issued_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("admin_users.id"), nullable=True)

    course_name: Mapped[str] = mapped_column(String(200))
    course_type: Mapped[CourseType] = mapped_column(SAEnum(CourseType, native_enum=False, length=20))
    modality: Mapped[Modality] = mapped_column(SAEnum(Modality, native_enum=False, length=20))
    academic_hours: Mapped[int] = mapped_column(Integer)
    chronological_hours: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    credits: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    syllabus: Mapped[List[str]] = mapped_column(JSON, default=list)
    snapshot: Mapped[CourseSnapshot] = composite(
        CourseSnapshot, "course_name", "course_type", "modality", "academic_hours",
        "chronological_hours", "credits", "syllabus",
    )

    institution_name: Mapped[str] = mapped_column(String(200))
    institution_ruc: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    institution_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    institution: Mapped[InstitutionSnapshot] = composite(
        InstitutionSnapshot, "institution_name", "institution_ruc", "institution_address",
    )
    signatories: Mapped[List[Dict[str, str]]] = mapped_column(JSON, default=list)

    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    grade: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    grade_text: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[CertificateState] = mapped_column(
        SAEnum(CertificateState, native_enum=False, length=20), default=CertificateState.EMITIDO
    )
    verification_url: Mapped[str] = mapped_column(String(255))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    participant = relationship("Participant", back_populates="certificates")
    course = relationship("Course")
    enrollment = relationship("Enrollment")

    __table_args__ = (
        # a lo más un certificado EMITIDO por (participante, curso), también bajo concurrencia
        Index(
            "uq_certificates_issued_pair", "participant_id", "course_id",
            unique=True,
            sqlite_where=text("state = 'EMITIDO'"),
            postgresql_where=text("state = 'EMITIDO'"),
        ),
    )
