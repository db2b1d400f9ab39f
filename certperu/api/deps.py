from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from certperu.core.errors import Forbidden, Unauthorized
from certperu.core.tokens import KIND_ADMIN, KIND_PARTICIPANT, decode_access
from certperu.crud.setting import load_institution_config
from certperu.db.session import get_db
from certperu.models.admin_user import AdminUser
from certperu.models.participant import Participant
from certperu.schemas.setting import InstitutionConfig
from certperu.schemas.token import Identity

# ----------------------------------------------------------------------
# Lee el Bearer del header Authorization (sin OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: Optional[str] = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise Unauthorized("Falta el header Authorization")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized("Header Authorization inválido")
    return parts[1]

def get_identity(token: str = Depends(get_bearer_token)) -> Identity:
    payload = decode_access(token)
    if not payload:
        raise Unauthorized("Token inválido o expirado")
    try:
        sub = int(payload["sub"])
    except (TypeError, ValueError):
        raise Unauthorized("Token inválido")
    return Identity(id=sub, kind=payload["kind"], role=payload.get("role"))

# ----------------------------------------------------------------------
# Resuelve la identidad contra la base según su tipo
# ----------------------------------------------------------------------
def get_current_admin(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)) -> AdminUser:
    if identity.kind != KIND_ADMIN:
        raise Forbidden("Se requiere una cuenta de administrador")
    admin = db.get(AdminUser, identity.id)
    if not admin or not admin.active:
        raise Unauthorized("Administrador no encontrado o inactivo")
    return admin

def get_current_participant(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)) -> Participant:
    if identity.kind != KIND_PARTICIPANT:
        raise Forbidden("Se requiere una cuenta de participante")
    participant = db.get(Participant, identity.id)
    if not participant:
        raise Unauthorized("Participante no encontrado")
    return participant

def get_institution(db: Session = Depends(get_db)) -> InstitutionConfig:
    # una lectura por request; el emisor la recibe ya armada
    return load_institution_config(db)
