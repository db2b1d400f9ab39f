from enum import Enum
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, Enum as SAEnum, func
from certperu.db.base_class import Base

class DocumentType(str, Enum):
    DNI = "DNI"
    CE = "CE"
    PASAPORTE = "PASAPORTE"

class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(200))
    document_type: Mapped[DocumentType] = mapped_column(SAEnum(DocumentType, native_enum=False, length=20), default=DocumentType.DNI)
    document_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    province: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    district: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    occupation: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    workplace: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    enrollments = relationship("Enrollment", back_populates="participant", cascade="all, delete-orphan")
    certificates = relationship("Certificate", back_populates="participant")
