# certperu/api/v1/participants.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from certperu.api.deps import get_db
from certperu.core.errors import NotFound
from certperu.core.rbac import require_admin, require_editor
from certperu.crud.participant import participant_crud
from certperu.schemas.common import Message, Page, Pagination
from certperu.schemas.participant import Participant, ParticipantAdminCreate, ParticipantUpdate

router = APIRouter()

@router.get("/", response_model=Page[Participant])
def list_participants(
    q: Optional[str] = Query(None, description="Busca por nombre, email o documento"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    rows, total = participant_crud.search(db, q=q, page=page, page_size=limit)
    return Page[Participant](items=[Participant.model_validate(r) for r in rows], pagination=Pagination.build(total, page, limit))

@router.post("/", response_model=Participant, status_code=status.HTTP_201_CREATED)
def create_participant(body: ParticipantAdminCreate, db: Session = Depends(get_db), _=Depends(require_editor)):
    return participant_crud.create_by_admin(db, body)

@router.get("/{participant_id}", response_model=Participant)
def get_participant(participant_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_editor)):
    p = participant_crud.get(db, participant_id)
    if not p:
        raise NotFound("Participante no encontrado")
    return p

@router.put("/{participant_id}", response_model=Participant)
def update_participant(
    body: ParticipantUpdate,
    participant_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_editor),
):
    p = participant_crud.get(db, participant_id)
    if not p:
        raise NotFound("Participante no encontrado")
    return participant_crud.update_checked(db, p, body)

@router.delete("/{participant_id}", response_model=Message)
def delete_participant(participant_id: int = Path(..., ge=1), db: Session = Depends(get_db), _=Depends(require_admin)):
    participant_crud.delete_guarded(db, participant_id)
    return Message(message="Participante eliminado")
