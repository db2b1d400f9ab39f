from enum import Enum
from decimal import Decimal
from typing import Optional, List
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Integer, Boolean, Numeric, JSON, DateTime, ForeignKey, Enum as SAEnum, func
from certperu.db.base_class import Base

class CourseType(str, Enum):
    DIPLOMADO = "DIPLOMADO"
    CERTIFICADO = "CERTIFICADO"
    CONSTANCIA = "CONSTANCIA"

class Modality(str, Enum):
    VIRTUAL = "VIRTUAL"
    PRESENCIAL = "PRESENCIAL"
    SEMIPRESENCIAL = "SEMIPRESENCIAL"

class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"), nullable=True)
    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(220), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    type: Mapped[CourseType] = mapped_column(SAEnum(CourseType, native_enum=False, length=20))
    modality: Mapped[Modality] = mapped_column(SAEnum(Modality, native_enum=False, length=20), default=Modality.VIRTUAL)
    academic_hours: Mapped[int] = mapped_column(Integer, default=0)
    chronological_hours: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    credits: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    syllabus: Mapped[List[str]] = mapped_column(JSON, default=list)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    original_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    max_capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    category = relationship("Category", back_populates="courses")
    enrollments = relationship("Enrollment", back_populates="course")
