from enum import Enum
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Enum as SAEnum, func
from certperu.db.base_class import Base

class CourseRequestState(str, Enum):
    PENDIENTE = "PENDIENTE"
    REVISADO = "REVISADO"
    ATENDIDO = "ATENDIDO"
    DESCARTADO = "DESCARTADO"

class CourseRequest(Base):
    __tablename__ = "course_requests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    requested_course: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    state: Mapped[CourseRequestState] = mapped_column(
        SAEnum(CourseRequestState, native_enum=False, length=20), default=CourseRequestState.PENDIENTE
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
