from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from certperu.models.course import CourseType, Modality

# ---------------------------
# Category
# ---------------------------

class CategoryCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    active: bool = True

class Category(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    active: bool = True
    course_count: int = 0

    model_config = {"from_attributes": True}

class CategoryRef(BaseModel):
    id: int
    name: str
    slug: str

    model_config = {"from_attributes": True}

# ---------------------------
# Course
# ---------------------------

class CourseBase(BaseModel):
    name: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    short_description: Optional[str] = None
    type: CourseType
    modality: Modality = Modality.VIRTUAL
    academic_hours: int = Field(ge=0)
    chronological_hours: Optional[int] = Field(default=None, ge=0)
    credits: Optional[int] = Field(default=None, ge=0)
    syllabus: List[str] = Field(default_factory=list)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    original_price: Optional[Decimal] = Field(default=None, ge=0)
    image: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    active: bool = True
    featured: bool = False
    category_id: Optional[int] = None

class CourseCreate(CourseBase):
    pass

class CourseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    type: Optional[CourseType] = None
    modality: Optional[Modality] = None
    academic_hours: Optional[int] = Field(default=None, ge=0)
    chronological_hours: Optional[int] = Field(default=None, ge=0)
    credits: Optional[int] = Field(default=None, ge=0)
    syllabus: Optional[List[str]] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    original_price: Optional[Decimal] = Field(default=None, ge=0)
    image: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    active: Optional[bool] = None
    featured: Optional[bool] = None
    category_id: Optional[int] = None

class Course(CourseBase):
    id: int
    slug: str
    category: Optional[CategoryRef] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class CourseAdmin(Course):
    enrollment_count: int = 0
    certificate_count: int = 0

class CourseRef(BaseModel):
    id: int
    name: str
    slug: str
    type: CourseType
    modality: Modality
    academic_hours: int
    price: Decimal

    model_config = {"from_attributes": True}

class CourseDeleted(BaseModel):
    success: bool = True
    deactivated: bool
    message: str
