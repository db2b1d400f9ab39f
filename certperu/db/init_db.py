# certperu/db/init_db.py
import logging
from sqlalchemy import select
from sqlalchemy.orm import Session

from certperu.core.config import settings
from certperu.core.security_password import hash_password
from certperu.crud.setting import DESCRIPTIONS
from certperu.models.admin_user import AdminUser, AdminRole
from certperu.models.setting import Setting

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "institucion_nombre": "CertificadosPerú",
    "institucion_ruc": "20123456789",
    "institucion_direccion": "Av. Principal 123, Lima, Perú",
    "firma_director": "Dr. Juan Pérez García",
    "cargo_director": "Director General",
}

def init_db(db: Session) -> None:
    """Idempotente: crea el superadmin y la configuración de la institución si faltan."""
    email = settings.ADMIN_EMAIL.strip().lower()
    admin = db.scalar(select(AdminUser).where(AdminUser.email == email))
    if not admin:
        db.add(AdminUser(
            name="Administrador",
            email=email,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            role=AdminRole.SUPERADMIN,
            active=True,
        ))
        logger.info("Superadmin %s creado", email)

    existing = set(db.scalars(select(Setting.key).where(Setting.key.in_(list(DEFAULT_SETTINGS)))).all())
    for key, value in DEFAULT_SETTINGS.items():
        if key not in existing:
            db.add(Setting(key=key, value=value, description=DESCRIPTIONS.get(key)))

    db.commit()
