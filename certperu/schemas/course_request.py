from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, model_validator

from certperu.models.course_request import CourseRequestState

class CourseRequestCreate(BaseModel):
    requested_course: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @model_validator(mode="after")
    def _algun_contacto(self):
        if not self.email and not self.phone:
            raise ValueError("Debes proporcionar un email o teléfono de contacto")
        return self

class CourseRequestUpdate(BaseModel):
    state: CourseRequestState

class CourseRequest(BaseModel):
    id: int
    requested_course: str
    description: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    state: CourseRequestState
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
