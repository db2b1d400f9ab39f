from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, JSON, DateTime, ForeignKey, Enum as SAEnum, func
from certperu.db.base_class import Base
from certperu.models.course import CourseType

class Orientation(str, Enum):
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"

class CertificateTemplate(Base):
    __tablename__ = "certificate_templates"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    course_type: Mapped[CourseType] = mapped_column(SAEnum(CourseType, native_enum=False, length=20), index=True)
    orientation: Mapped[Orientation] = mapped_column(SAEnum(Orientation, native_enum=False, length=20), default=Orientation.HORIZONTAL)
    background_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    background_color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    # validado por schemas.template.TemplateConfig antes de persistir
    config: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    creator_id: Mapped[Optional[int]] = mapped_column(ForeignKey("admin_users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
