# certperu/core/security_password.py
"""
Contraseñas de las dos clases de cuenta: administradores (AdminUser) y
participantes (Participant).

Ambas se guardan con el mismo CryptContext. argon2 es el esquema preferido;
los hashes bcrypt heredados se siguen aceptando y se reemplazan por argon2
en el siguiente login exitoso (ver `verify_and_maybe_upgrade`).
"""
from __future__ import annotations
from typing import Tuple
from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["argon2", "bcrypt_sha256", "bcrypt"],
    deprecated="auto",
    argon2__time_cost=2,
    argon2__memory_cost=19456,
    argon2__parallelism=1,
)

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def initial_participant_hash(document_number: str) -> str:
    """Clave inicial de un participante dado de alta por un administrador: su número de documento."""
    return hash_password(document_number)

def verify_and_maybe_upgrade(plain: str, stored_hash: str | None) -> Tuple[bool, str | None]:
    """Devuelve (válida, nuevo_hash). `nuevo_hash` solo viene cuando el esquema guardado quedó obsoleto.

    Una cuenta sin hash (p. ej. importada sin clave) nunca autentica.
    """
    if not stored_hash:
        return False, None
    if not pwd_context.identify(stored_hash):
        return False, None
    ok = pwd_context.verify(plain, stored_hash)
    if not ok:
        return False, None
    if pwd_context.needs_update(stored_hash):
        return True, pwd_context.hash(plain)
    return True, None
