from typing import Optional, List, Tuple
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from certperu.core.errors import AlreadyExists, NotFound, ValidationFailed
from certperu.core.security_password import hash_password, initial_participant_hash
from certperu.core.text import like_pattern
from certperu.crud.base import CRUDBase, paginate
from certperu.models.participant import Participant
from certperu.models.certificate import Certificate
from certperu.schemas.participant import ParticipantRegister, ParticipantAdminCreate, ParticipantUpdate

class CRUDParticipant(CRUDBase[Participant, ParticipantRegister, ParticipantUpdate]):
    def get_by_email(self, db: Session, email: str) -> Optional[Participant]:
        return db.scalar(select(Participant).where(Participant.email == (email or "").strip().lower()))

    def get_by_document(self, db: Session, number: str) -> Optional[Participant]:
        return db.scalar(select(Participant).where(Participant.document_number == number))

    def register(self, db: Session, obj_in: ParticipantRegister) -> Participant:
        if self.get_by_email(db, obj_in.email):
            raise AlreadyExists("El correo electrónico ya está registrado")
        if self.get_by_document(db, obj_in.document_number):
            raise AlreadyExists("El número de documento ya está registrado")
        data = obj_in.model_dump()
        data["hashed_password"] = hash_password(data.pop("password"))
        obj = Participant(**data)
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    def create_by_admin(self, db: Session, obj_in: ParticipantAdminCreate) -> Participant:
        dup = db.scalar(select(Participant.id).where(or_(
            Participant.document_number == obj_in.document_number, Participant.email == obj_in.email,
        )))
        if dup:
            raise AlreadyExists("Ya existe un participante con ese documento o email")
        obj = Participant(**obj_in.model_dump(), hashed_password=initial_participant_hash(obj_in.document_number))
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    def update_checked(self, db: Session, db_obj: Participant, obj_in: ParticipantUpdate) -> Participant:
        data = obj_in.model_dump(exclude_unset=True)
        if data.get("email"):
            data["email"] = str(data["email"]).lower()
        conds = []
        if data.get("document_number"):
            conds.append(Participant.document_number == data["document_number"])
        if data.get("email"):
            conds.append(Participant.email == data["email"])
        if conds:
            dup = db.scalar(select(Participant.id).where(Participant.id != db_obj.id, or_(*conds)))
            if dup:
                raise AlreadyExists("Ya existe otro participante con ese documento o email")
        # campos obligatorios no se vacían
        for required in ("full_name", "document_type", "document_number", "email"):
            if required in data and data[required] is None:
                data.pop(required)
        return self.update(db, db_obj, data)

    def certificate_count(self, db: Session, participant_id: int) -> int:
        return db.scalar(
            select(func.count(Certificate.id)).where(Certificate.participant_id == participant_id)
        ) or 0

    def delete_guarded(self, db: Session, participant_id: int) -> None:
        obj = self.get(db, participant_id)
        if not obj:
            raise NotFound("Participante no encontrado")
        if self.certificate_count(db, participant_id) > 0:
            raise ValidationFailed("No se puede eliminar un participante con certificados emitidos")
        # las inscripciones se van por cascade
        db.delete(obj)
        db.commit()

    def search(self, db: Session, *, q: Optional[str], page: int, page_size: int) -> Tuple[List[Participant], int]:
        stmt = select(Participant)
        if q:
            like = like_pattern(q)
            stmt = stmt.where(
                Participant.full_name.ilike(like)
                | Participant.email.ilike(like)
                | Participant.document_number.ilike(like)
            )
        stmt = stmt.order_by(Participant.created_at.desc(), Participant.id.desc())
        return paginate(db, stmt, page, page_size)

participant_crud = CRUDParticipant(Participant)
