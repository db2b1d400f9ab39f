# certperu/core/errors.py
"""
Errores de dominio. Cada uno sabe su código y su status HTTP; el handler de
main.py los convierte en {"code", "message", "details"}.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    code: str = "DOMAIN_ERROR"
    status_code: int = 400
    default_message: str = "Error de negocio"

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFound(DomainError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Recurso no encontrado"


class AlreadyExists(DomainError):
    code = "ALREADY_EXISTS"
    status_code = 409
    default_message = "El registro ya existe"


class AlreadyEnrolled(DomainError):
    code = "ALREADY_ENROLLED"
    status_code = 400
    default_message = "Ya estás inscrito en este curso"


class DuplicateCertificate(DomainError):
    code = "DUPLICATE_CERTIFICATE"
    status_code = 400
    default_message = "El participante ya tiene un certificado emitido para este curso"

    def __init__(self, existing: Any = None, message: Optional[str] = None):
        # existing: Certificate ORM; se expone solo lo necesario
        self.existing = existing
        details = None
        if existing is not None:
            details = {
                "certificate_id": existing.id,
                "verification_code": existing.verification_code,
                "state": str(getattr(existing.state, "value", existing.state)),
            }
        super().__init__(message, details=details)


class NotEligible(DomainError):
    code = "NOT_ELIGIBLE"
    status_code = 400
    default_message = "Solo se pueden emitir certificados para inscripciones con pago verificado"


class Unauthorized(DomainError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "No autorizado"


class Forbidden(DomainError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Acceso denegado"


class CourseUnavailable(DomainError):
    code = "COURSE_UNAVAILABLE"
    status_code = 400
    default_message = "El curso no está disponible"


class CodeGenerationExhausted(DomainError):
    code = "CODE_GENERATION_EXHAUSTED"
    status_code = 503
    default_message = "No se pudo generar un código de verificación único"


class ValidationFailed(DomainError):
    code = "VALIDATION_ERROR"
    status_code = 422
    default_message = "Datos inválidos"


class CertificateEmitted(DomainError):
    code = "CERTIFICATE_EMITTED"
    status_code = 400
    default_message = "No se puede eliminar un certificado emitido. Primero debe anularlo."
