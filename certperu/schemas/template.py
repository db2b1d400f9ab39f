"""
Configuración de plantillas de certificado.

Las posiciones están en porcentaje de la página (0-100, origen arriba a la
izquierda). Cada sección tiene defaults explícitos: una plantilla guardada con
`config: {}` se dibuja igual que la plantilla por defecto.
"""
from __future__ import annotations

from typing import Optional, Literal
from datetime import datetime
from jinja2 import Environment, TemplateSyntaxError
from pydantic import BaseModel, Field, field_validator

from certperu.models.course import CourseType
from certperu.models.certificate_template import Orientation

Align = Literal["left", "center", "right"]
COLOR = r"^#[0-9a-fA-F]{6}$"

_syntax_env = Environment()

# ---------------------------
# Fuentes
# ---------------------------

class FontSpec(BaseModel):
    family: Literal["serif", "sans-serif", "monospace"] = "sans-serif"
    size: float = Field(default=12, gt=0, le=120)
    weight: Literal["normal", "bold"] = "normal"
    color: str = Field(default="#555555", pattern=COLOR)

class Fonts(BaseModel):
    title: FontSpec = FontSpec(family="serif", size=48, weight="bold", color="#1a1a1a")
    subtitle: FontSpec = FontSpec(family="serif", size=24, color="#4a4a4a")
    name: FontSpec = FontSpec(family="serif", size=36, weight="bold", color="#1a1a1a")
    course: FontSpec = FontSpec(size=20, weight="bold", color="#333333")
    body: FontSpec = FontSpec(size=12, color="#555555")
    small: FontSpec = FontSpec(size=10, color="#777777")

# ---------------------------
# Elementos
# ---------------------------

class Element(BaseModel):
    enabled: bool = True
    x: float = Field(default=50, ge=0, le=100)
    y: float = Field(default=50, ge=0, le=100)
    align: Align = "center"
    # admite placeholders Jinja2: {{ institution.name }}, {{ course.type }}...
    text: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _plantilla_valida(cls, v):
        if v:
            try:
                _syntax_env.parse(v)
            except TemplateSyntaxError as exc:
                raise ValueError(f"Texto de plantilla inválido: {exc.message}")
        return v

class BoxElement(BaseModel):
    enabled: bool = True
    x: float = Field(default=50, ge=0, le=100)
    y: float = Field(default=50, ge=0, le=100)
    width: float = Field(default=12, gt=0, le=100)
    height: float = Field(default=12, gt=0, le=100)

class SyllabusElement(BaseModel):
    enabled: bool = True
    x: float = Field(default=50, ge=0, le=100)
    y: float = Field(default=50, ge=0, le=100)
    width: float = Field(default=80, gt=0, le=100)
    max_items: int = Field(default=6, ge=0, le=30)

class SignatureElement(BaseModel):
    enabled: bool = True
    x: float = Field(default=50, ge=0, le=100)
    y: float = Field(default=50, ge=0, le=100)
    width: float = Field(default=20, gt=0, le=100)
    label: str = ""
    name: str = ""

class Elements(BaseModel):
    logo: BoxElement = BoxElement(x=5, y=3, width=15, height=10)
    title: Element = Element(x=50, y=18, text="{{ course.type }}")
    subtitle: Element = Element(x=50, y=25, text="Otorgado por {{ institution.name }}")
    certify_text: Element = Element(x=50, y=33, text="Se certifica que:")
    participant_name: Element = Element(x=50, y=42)
    participant_document: Element = Element(x=50, y=48)
    course_label: Element = Element(x=50, y=55, text="Ha culminado satisfactoriamente el programa de:")
    course_name: Element = Element(x=50, y=62)
    course_details: Element = Element(x=50, y=70)
    syllabus: SyllabusElement = SyllabusElement(x=10, y=75)
    dates: Element = Element(x=50, y=85)
    qr_code: BoxElement = BoxElement(x=8, y=80, width=12, height=12)
    verification_code: Element = Element(x=14, y=95)
    signature1: SignatureElement = SignatureElement(x=75, y=88, label="Director Académico")
    signature2: SignatureElement = SignatureElement(enabled=False, x=50, y=88)
    footer: Element = Element(x=50, y=97, text="Verificar en: {{ verify_base }}")

# ---------------------------
# Decoraciones
# ---------------------------

class BorderSpec(BaseModel):
    enabled: bool = True
    color: str = Field(default="#d4af37", pattern=COLOR)
    width: float = Field(default=3, ge=0, le=20)
    style: Literal["solid", "double", "dashed"] = "solid"
    margin: float = Field(default=15, ge=0, le=100)

class CornerOrnaments(BaseModel):
    enabled: bool = True
    style: Literal["classic", "modern"] = "classic"
    color: str = Field(default="#d4af37", pattern=COLOR)

class Decorations(BaseModel):
    border: BorderSpec = BorderSpec(width=3, style="double", margin=15)
    inner_border: BorderSpec = BorderSpec(width=1, margin=25)
    corner_ornaments: CornerOrnaments = CornerOrnaments()

class TemplateConfig(BaseModel):
    fonts: Fonts = Fonts()
    elements: Elements = Elements()
    decorations: Decorations = Decorations()

# ---------------------------
# CRUD
# ---------------------------

class TemplateCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    description: Optional[str] = None
    course_type: CourseType
    orientation: Orientation = Orientation.HORIZONTAL
    background_url: Optional[str] = None
    background_color: Optional[str] = Field(default=None, pattern=COLOR)
    config: TemplateConfig = TemplateConfig()
    active: bool = True
    is_default: bool = False

class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    description: Optional[str] = None
    course_type: Optional[CourseType] = None
    orientation: Optional[Orientation] = None
    background_url: Optional[str] = None
    background_color: Optional[str] = Field(default=None, pattern=COLOR)
    config: Optional[TemplateConfig] = None
    active: Optional[bool] = None
    is_default: Optional[bool] = None

class Template(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    course_type: CourseType
    orientation: Orientation
    background_url: Optional[str] = None
    background_color: Optional[str] = None
    config: TemplateConfig
    active: bool
    is_default: bool
    creator_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
