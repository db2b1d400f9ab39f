from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
import re

from certperu.models.participant import DocumentType

def _normalize_document(value: str) -> str:
    if value is None:
        raise ValueError("Número de documento obligatorio.")
    cleaned = re.sub(r"[\s.\-]", "", str(value)).upper()
    if not cleaned or not cleaned.isalnum():
        raise ValueError("Número de documento inválido.")
    if len(cleaned) > 20:
        raise ValueError("Número de documento demasiado largo.")
    return cleaned

# largo mínimo por tipo; el DNI además es de 8 dígitos exactos
DOCUMENT_MIN_LENGTH = {
    DocumentType.DNI: 8,
    DocumentType.CE: 8,
    DocumentType.PASAPORTE: 6,
}

def _check_document(doc_type: DocumentType | None, number: str) -> None:
    if doc_type == DocumentType.DNI and not (len(number) == 8 and number.isdigit()):
        raise ValueError("El DNI debe tener 8 dígitos.")
    minimum = DOCUMENT_MIN_LENGTH[doc_type] if doc_type else min(DOCUMENT_MIN_LENGTH.values())
    if len(number) < minimum:
        raise ValueError(f"Número de documento demasiado corto (mínimo {minimum}).")

class ParticipantBase(BaseModel):
    full_name: str = Field(min_length=3, max_length=200)
    document_type: DocumentType = DocumentType.DNI
    document_number: str
    email: EmailStr
    phone: Optional[str] = None

    @field_validator("document_number", mode="before")
    @classmethod
    def _valida_documento(cls, v):
        return _normalize_document(v)

    @field_validator("email", mode="after")
    @classmethod
    def _email_minusculas(cls, v):
        return str(v).lower()

    @model_validator(mode="after")
    def _documento_segun_tipo(self):
        _check_document(self.document_type, self.document_number)
        return self

class ParticipantRegister(ParticipantBase):
    password: str = Field(min_length=8, max_length=128)

class ParticipantAdminCreate(ParticipantBase):
    # sin contraseña: la inicial es el número de documento
    address: Optional[str] = None
    department: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    occupation: Optional[str] = None
    workplace: Optional[str] = None

class ParticipantUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    occupation: Optional[str] = None
    workplace: Optional[str] = None

    @field_validator("document_number", mode="before")
    @classmethod
    def _valida_documento_update(cls, v):
        if v in (None, ""):
            return None
        return _normalize_document(v)

    @model_validator(mode="after")
    def _documento_segun_tipo(self):
        if self.document_number is not None:
            _check_document(self.document_type, self.document_number)
        return self

class ProfileUpdate(BaseModel):
    # el participante no cambia su documento ni su email desde el perfil
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    occupation: Optional[str] = None
    workplace: Optional[str] = None

class Participant(BaseModel):
    id: int
    full_name: str
    document_type: DocumentType
    document_number: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    occupation: Optional[str] = None
    workplace: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class ParticipantRef(BaseModel):
    id: int
    full_name: str
    document_type: DocumentType
    document_number: str
    email: str

    model_config = {"from_attributes": True}
