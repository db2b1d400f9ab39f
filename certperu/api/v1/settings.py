# certperu/api/v1/settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from certperu.api.deps import get_db, get_institution
from certperu.core.rbac import require_admin, require_superadmin
from certperu.crud.setting import save_institution_config
from certperu.schemas.setting import InstitutionConfig, InstitutionConfigUpdate

router = APIRouter()

@router.get("/institution", response_model=InstitutionConfig)
def read_institution(cfg: InstitutionConfig = Depends(get_institution), _=Depends(require_admin)):
    return cfg

@router.put("/institution", response_model=InstitutionConfig)
def update_institution(body: InstitutionConfigUpdate, db: Session = Depends(get_db), _=Depends(require_superadmin)):
    return save_institution_config(db, body)
