# certperu/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.core.errors import Unauthorized
from certperu.core.security_password import verify_and_maybe_upgrade
from certperu.core.tokens import KIND_ADMIN, KIND_PARTICIPANT, create_access_token
from certperu.crud.participant import participant_crud
from certperu.models.admin_user import AdminUser
from certperu.schemas.participant import Participant, ParticipantRegister
from certperu.schemas.token import LoginIn, Token

logger = logging.getLogger(__name__)

router = APIRouter()

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

def _check_password(db: Session, user, password: str) -> bool:
    ok, new_hash = verify_and_maybe_upgrade(password, user.hashed_password)
    if ok and new_hash:
        # rehash transparente cuando cambia el esquema preferido
        user.hashed_password = new_hash
        db.add(user); db.commit()
    return ok

@router.post("/admin/login", response_model=Token)
def admin_login(body: LoginIn, db: Session = Depends(get_db)):
    admin = db.scalar(select(AdminUser).where(AdminUser.email == normalize_email(body.email)))
    if not admin or not admin.active or not _check_password(db, admin, body.password):
        raise Unauthorized("Credenciales inválidas")
    logger.info("Login de administrador %s", admin.id)
    return Token(
        access_token=create_access_token(sub=admin.id, kind=KIND_ADMIN, role=admin.role.value),
        kind=KIND_ADMIN,
        user={"id": admin.id, "name": admin.name, "email": admin.email, "role": admin.role.value},
    )

@router.post("/login", response_model=Token)
def participant_login(body: LoginIn, db: Session = Depends(get_db)):
    participant = participant_crud.get_by_email(db, normalize_email(body.email))
    if not participant or not _check_password(db, participant, body.password):
        raise Unauthorized("Credenciales inválidas")
    return Token(
        access_token=create_access_token(sub=participant.id, kind=KIND_PARTICIPANT),
        kind=KIND_PARTICIPANT,
        user={"id": participant.id, "name": participant.full_name, "email": participant.email},
    )

@router.post("/register", response_model=Participant, status_code=status.HTTP_201_CREATED)
def register(body: ParticipantRegister, db: Session = Depends(get_db)):
    return participant_crud.register(db, body)
