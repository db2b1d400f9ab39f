# certperu/schemas/token.py
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    kind: str
    user: dict

class Identity(BaseModel):
    """Identidad opaca que reciben los handlers: quién es y con qué rol."""
    id: int
    kind: str
    role: Optional[str] = None
