# certperu/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from certperu.core.config import settings

KIND_ADMIN = "admin"
KIND_PARTICIPANT = "participant"

def _now() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(*, sub: int, kind: str, role: Optional[str] = None,
                        expires_minutes: Optional[int] = None) -> str:
    """Access token firmado con SECRET_KEY. `kind` separa admins de participantes."""
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload: Dict[str, Any] = {
        "type": "access",
        "sub": str(sub),
        "kind": kind,
        "role": role,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int((_now() + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    if not payload.get("sub") or payload.get("kind") not in {KIND_ADMIN, KIND_PARTICIPANT}:
        return None
    return payload
