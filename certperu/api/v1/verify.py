# certperu/api/v1/verify.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.schemas.certificate import VerificationResult
from certperu.services.verification import NOT_FOUND_MESSAGE, verify

router = APIRouter()

# -------------------- verificación pública --------------------

@router.get(
    "/{code}",
    response_model=VerificationResult,
    response_model_exclude_none=True,
    responses={404: {"description": "Código inexistente: {valid: false, error}"}},
)
def verify_public(code: str, db: Session = Depends(get_db)):
    result = verify(db, code)
    if result is None:
        return JSONResponse(status_code=404, content={"valid": False, "error": NOT_FOUND_MESSAGE})
    return result
