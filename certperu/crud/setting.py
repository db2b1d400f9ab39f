# certperu/crud/setting.py
from typing import Dict
from sqlalchemy import select
from sqlalchemy.orm import Session

from certperu.models.setting import Setting
from certperu.schemas.setting import InstitutionConfig, InstitutionConfigUpdate

# clave en la tabla settings -> campo de InstitutionConfig
INSTITUTION_KEYS: Dict[str, str] = {
    "institucion_nombre": "name",
    "institucion_ruc": "ruc",
    "institucion_direccion": "address",
    "firma_director": "director_name",
    "cargo_director": "director_title",
}

DESCRIPTIONS = {
    "institucion_nombre": "Nombre de la institución",
    "institucion_ruc": "RUC de la institución",
    "institucion_direccion": "Dirección de la institución",
    "firma_director": "Nombre del director para firmas",
    "cargo_director": "Cargo del director",
}

def load_institution_config(db: Session) -> InstitutionConfig:
    rows = db.scalars(select(Setting).where(Setting.key.in_(list(INSTITUTION_KEYS)))).all()
    values = {INSTITUTION_KEYS[r.key]: r.value for r in rows if r.value not in (None, "")}
    return InstitutionConfig(**values)

def save_institution_config(db: Session, body: InstitutionConfigUpdate) -> InstitutionConfig:
    data = body.model_dump(exclude_unset=True)
    by_field = {v: k for k, v in INSTITUTION_KEYS.items()}
    existing = {s.key: s for s in db.scalars(select(Setting).where(Setting.key.in_(list(INSTITUTION_KEYS)))).all()}
    for field, value in data.items():
        key = by_field[field]
        row = existing.get(key)
        if row is None:
            row = Setting(key=key, value=value or "", description=DESCRIPTIONS.get(key))
            db.add(row)
        else:
            row.value = value or ""
    db.commit()
    return load_institution_config(db)
