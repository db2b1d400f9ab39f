# certperu/services/pdf.py
"""
Dibujo del certificado en PDF con reportlab.

La plantilla (TemplateConfig) ubica cada elemento en porcentaje de la página
con origen arriba a la izquierda; reportlab usa puntos con origen abajo a la
izquierda, así que toda coordenada pasa por `_Page.at`.
"""
from __future__ import annotations

import io
import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from jinja2.sandbox import SandboxedEnvironment
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from sqlalchemy.orm import Session

from certperu.core.config import settings
from certperu.crud.template import template_crud
from certperu.models.certificate import Certificate
from certperu.models.certificate_template import Orientation
from certperu.models.course import CourseType
from certperu.models.enrollment import Enrollment
from certperu.schemas.setting import InstitutionConfig
from certperu.schemas.template import (
    BorderSpec, Element, FontSpec, SignatureElement, SyllabusElement, TemplateConfig,
)
from certperu.services.qr import qr_png
from certperu.services.verification import preview_code

MONTHS = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]
MODALITY_LABELS = {"VIRTUAL": "Virtual", "PRESENCIAL": "Presencial", "SEMIPRESENCIAL": "Semipresencial"}

# texto por defecto de los elementos que no traen `text` en la plantilla
DEFAULT_TEXTS = {
    "participant_name": "{{ participant.name }}",
    "participant_document": "{{ participant.document_type }}: {{ participant.document_number }}",
    "course_name": "{{ course.name }}",
    "course_details": (
        "Horas académicas: {{ course.academic_hours }}"
        "{% if course.chronological_hours %} | Horas cronológicas: {{ course.chronological_hours }}{% endif %}"
        "{% if course.credits %} | Créditos: {{ course.credits }}{% endif %}"
        " | Modalidad: {{ course.modality }}"
    ),
    "dates": "Del {{ dates.start }} al {{ dates.end }} · Emitido el {{ dates.issued }}",
    "verification_code": "Código: {{ code }}",
}

_FONTS = {
    ("serif", "normal"): "Times-Roman",
    ("serif", "bold"): "Times-Bold",
    ("sans-serif", "normal"): "Helvetica",
    ("sans-serif", "bold"): "Helvetica-Bold",
    ("monospace", "normal"): "Courier",
    ("monospace", "bold"): "Courier-Bold",
}

_env = SandboxedEnvironment(autoescape=False)

def format_date(value: Optional[dt.datetime]) -> str:
    if not value:
        return "Por definir"
    # los valores se guardan en UTC; SQLite los devuelve sin zona
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    value = value.astimezone(ZoneInfo(settings.TIMEZONE))
    return f"{value.day:02d} de {MONTHS[value.month - 1]} de {value.year}"

# -------------------- Datos del documento --------------------

@dataclass
class CertificateDocument:
    participant_name: str
    document_type: str
    document_number: str
    course_name: str
    course_type: str
    modality: str
    academic_hours: int
    verification_code: str
    verification_url: str
    institution_name: str
    chronological_hours: Optional[int] = None
    credits: Optional[int] = None
    syllabus: List[str] = field(default_factory=list)
    start_date: Optional[dt.datetime] = None
    end_date: Optional[dt.datetime] = None
    issued_at: Optional[dt.datetime] = None
    institution_ruc: Optional[str] = None
    signatories: List[Dict[str, str]] = field(default_factory=list)
    grade: Optional[Decimal] = None
    grade_text: Optional[str] = None
    is_preview: bool = False

    def context(self) -> Dict[str, Any]:
        return {
            "participant": {
                "name": self.participant_name,
                "document_type": self.document_type,
                "document_number": self.document_number,
            },
            "course": {
                "name": self.course_name,
                "type": self.course_type,
                "modality": MODALITY_LABELS.get(self.modality, self.modality),
                "academic_hours": self.academic_hours,
                "chronological_hours": self.chronological_hours,
                "credits": self.credits,
            },
            "institution": {"name": self.institution_name, "ruc": self.institution_ruc},
            "dates": {
                "start": format_date(self.start_date),
                "end": format_date(self.end_date),
                "issued": format_date(self.issued_at),
            },
            "grade": self.grade,
            "grade_text": self.grade_text,
            "code": self.verification_code,
            "verify_url": self.verification_url,
            "verify_base": f"{settings.PUBLIC_BASE_URL.rstrip('/')}/verificar",
        }

def _enum_value(v: Any) -> str:
    return str(getattr(v, "value", v))

def document_for_certificate(cert: Certificate) -> CertificateDocument:
    p = cert.participant
    snap = cert.snapshot
    return CertificateDocument(
        participant_name=p.full_name,
        document_type=_enum_value(p.document_type),
        document_number=p.document_number,
        course_name=snap.name,
        course_type=_enum_value(snap.type),
        modality=_enum_value(snap.modality),
        academic_hours=snap.academic_hours,
        chronological_hours=snap.chronological_hours,
        credits=snap.credits,
        syllabus=list(snap.syllabus or []),
        start_date=cert.start_date,
        end_date=cert.end_date,
        issued_at=cert.issued_at,
        verification_code=cert.verification_code,
        verification_url=cert.verification_url,
        institution_name=cert.institution_name,
        institution_ruc=cert.institution_ruc,
        signatories=list(cert.signatories or []),
        grade=cert.grade,
        grade_text=cert.grade_text,
    )

def document_for_preview(enr: Enrollment, institution: InstitutionConfig) -> CertificateDocument:
    """Vista previa desde la inscripción: datos vivos del curso y un código PREVIEW- que nunca valida."""
    p, c = enr.participant, enr.course
    code = preview_code(enr.id)
    return CertificateDocument(
        participant_name=p.full_name,
        document_type=_enum_value(p.document_type),
        document_number=p.document_number,
        course_name=c.name,
        course_type=_enum_value(c.type),
        modality=_enum_value(c.modality),
        academic_hours=c.academic_hours or 0,
        chronological_hours=c.chronological_hours,
        credits=c.credits,
        syllabus=list(c.syllabus or []),
        start_date=c.start_date,
        end_date=c.end_date,
        issued_at=dt.datetime.now(dt.timezone.utc),
        verification_code=code,
        verification_url=f"{settings.PUBLIC_BASE_URL.rstrip('/')}/verificar/{code}",
        institution_name=institution.name,
        institution_ruc=institution.ruc,
        signatories=[s.model_dump() for s in institution.default_signatories()],
        is_preview=True,
    )

@dataclass
class Layout:
    config: TemplateConfig
    orientation: Orientation = Orientation.HORIZONTAL
    background_color: Optional[str] = None

def resolve_layout(db: Session, course_type: CourseType) -> Layout:
    """Plantilla default activa del tipo; sin ella, la configuración por defecto."""
    tpl = template_crud.get_default(db, course_type)
    if tpl is None:
        return Layout(config=TemplateConfig())
    return Layout(
        config=TemplateConfig.model_validate(tpl.config or {}),
        orientation=tpl.orientation,
        background_color=tpl.background_color,
    )

# -------------------- Dibujo --------------------

class _Page:
    def __init__(self, c: canvas.Canvas, size: Tuple[float, float]):
        self.c = c
        self.w, self.h = size

    def at(self, x_pct: float, y_pct: float) -> Tuple[float, float]:
        return self.w * x_pct / 100.0, self.h * (1 - y_pct / 100.0)

    def font(self, spec: FontSpec) -> None:
        self.c.setFont(_FONTS.get((spec.family, spec.weight), "Helvetica"), spec.size)
        self.c.setFillColor(colors.HexColor(spec.color))

    def text(self, x: float, y: float, value: str, align: str = "center") -> None:
        if align == "left":
            self.c.drawString(x, y, value)
        elif align == "right":
            self.c.drawRightString(x, y, value)
        else:
            self.c.drawCentredString(x, y, value)

def _render_text(source: str, ctx: Dict[str, Any]) -> str:
    return _env.from_string(source).render(**ctx).strip()

def _draw_element(page: _Page, el: Element, font: FontSpec, source: Optional[str], ctx: Dict[str, Any]) -> None:
    if not el.enabled or not source:
        return
    value = _render_text(source, ctx)
    if not value:
        return
    page.font(font)
    x, y = page.at(el.x, el.y)
    page.text(x, y, value, el.align)

def _draw_border(page: _Page, spec: BorderSpec) -> None:
    if not spec.enabled or spec.width <= 0:
        return
    c = page.c
    c.saveState()
    c.setStrokeColor(colors.HexColor(spec.color))
    c.setLineWidth(spec.width)
    if spec.style == "dashed":
        c.setDash(6, 4)
    m = spec.margin
    c.rect(m, m, page.w - 2 * m, page.h - 2 * m, stroke=1, fill=0)
    if spec.style == "double":
        gap = spec.width * 2 + 2
        c.setLineWidth(max(spec.width / 3.0, 0.5))
        c.rect(m + gap, m + gap, page.w - 2 * (m + gap), page.h - 2 * (m + gap), stroke=1, fill=0)
    c.restoreState()

def _draw_corners(page: _Page, cfg: TemplateConfig) -> None:
    orn = cfg.decorations.corner_ornaments
    if not orn.enabled:
        return
    c = page.c
    m = cfg.decorations.border.margin + 8
    size = 28
    c.saveState()
    c.setStrokeColor(colors.HexColor(orn.color))
    c.setLineWidth(2)
    for cx, cy, dx, dy in (
        (m, m, 1, 1), (page.w - m, m, -1, 1), (m, page.h - m, 1, -1), (page.w - m, page.h - m, -1, -1),
    ):
        c.line(cx, cy, cx + dx * size, cy)
        c.line(cx, cy, cx, cy + dy * size)
        if orn.style == "classic":
            c.circle(cx + dx * 6, cy + dy * 6, 2.5, stroke=1, fill=0)
    c.restoreState()

def _draw_logo(page: _Page, cfg: TemplateConfig, doc: CertificateDocument) -> None:
    box = cfg.elements.logo
    if not box.enabled:
        return
    # sin imágenes: el nombre de la institución ocupa el lugar del logo
    x, y = page.at(box.x, box.y)
    width = page.w * box.width / 100.0
    page.font(FontSpec(family="serif", size=11, weight="bold", color=cfg.decorations.border.color))
    page.text(x, y - 12, doc.institution_name.upper()[:40], "left")
    page.font(cfg.fonts.small)
    page.text(x, y - 24, "Formación profesional certificada", "left")
    page.c.setStrokeColor(colors.HexColor(cfg.decorations.border.color))
    page.c.line(x, y - 28, x + width, y - 28)

def _draw_syllabus(page: _Page, el: SyllabusElement, cfg: TemplateConfig, items: List[str]) -> None:
    if not el.enabled or not items or el.max_items == 0:
        return
    x, y = page.at(el.x, el.y)
    page.font(FontSpec(family=cfg.fonts.small.family, size=cfg.fonts.small.size, weight="bold",
                       color=cfg.fonts.small.color))
    page.text(x, y, "CONTENIDO TEMÁTICO", "left")
    page.font(cfg.fonts.small)
    line = cfg.fonts.small.size + 2
    shown = items[: el.max_items]
    for i, item in enumerate(shown, start=1):
        page.text(x, y - i * line, f"• {item}"[:120], "left")
    if len(items) > len(shown):
        page.text(x, y - (len(shown) + 1) * line, f"... y {len(items) - len(shown)} temas más", "left")

def _draw_signature(page: _Page, el: SignatureElement, cfg: TemplateConfig, signatory: Optional[Dict[str, str]]) -> None:
    if not el.enabled:
        return
    name = el.name or (signatory or {}).get("name", "")
    label = (signatory or {}).get("title") or el.label
    if not name and not label:
        return
    x, y = page.at(el.x, el.y)
    half = page.w * el.width / 200.0
    page.c.setStrokeColor(colors.HexColor(cfg.fonts.body.color))
    page.c.setLineWidth(0.8)
    page.c.line(x - half, y, x + half, y)
    page.font(cfg.fonts.body)
    page.text(x, y - cfg.fonts.body.size - 2, name)
    page.font(cfg.fonts.small)
    page.text(x, y - cfg.fonts.body.size - cfg.fonts.small.size - 6, label)

def _draw_qr(page: _Page, cfg: TemplateConfig, url: str) -> None:
    box = cfg.elements.qr_code
    if not box.enabled:
        return
    side = min(page.w * box.width / 100.0, page.h * box.height / 100.0)
    x, y = page.at(box.x, box.y)
    # (x, y) es la esquina superior izquierda del recuadro
    page.c.drawImage(ImageReader(io.BytesIO(qr_png(url))), x, y - side, width=side, height=side)

def _draw_preview_marks(page: _Page) -> None:
    c = page.c
    c.saveState()
    c.setFillColor(colors.Color(0.8, 0.1, 0.1, alpha=0.12))
    c.setFont("Helvetica-Bold", 90)
    c.translate(page.w / 2, page.h / 2)
    c.rotate(30)
    c.drawCentredString(0, 0, "VISTA PREVIA")
    c.restoreState()

    c.saveState()
    c.setFillColor(colors.HexColor("#b91c1c"))
    c.roundRect(page.w - 230, page.h - 48, 200, 22, 4, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 10)
    c.drawCentredString(page.w - 130, page.h - 41, "VISTA PREVIA - NO VÁLIDO")
    c.restoreState()

def render_pdf(doc: CertificateDocument, layout: Optional[Layout] = None) -> bytes:
    layout = layout or Layout(config=TemplateConfig())
    cfg = layout.config
    size = landscape(A4) if layout.orientation == Orientation.HORIZONTAL else A4

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    c.setTitle(f"Certificado {doc.verification_code}")
    c.setAuthor(doc.institution_name)
    page = _Page(c, size)

    if layout.background_color:
        c.setFillColor(colors.HexColor(layout.background_color))
        c.rect(0, 0, page.w, page.h, stroke=0, fill=1)

    _draw_border(page, cfg.decorations.border)
    _draw_border(page, cfg.decorations.inner_border)
    _draw_corners(page, cfg)
    if doc.is_preview:
        _draw_preview_marks(page)

    ctx = doc.context()
    el, fonts = cfg.elements, cfg.fonts
    _draw_logo(page, cfg, doc)
    for name, font in (
        ("title", fonts.title),
        ("subtitle", fonts.subtitle),
        ("certify_text", fonts.body),
        ("participant_name", fonts.name),
        ("participant_document", fonts.body),
        ("course_label", fonts.body),
        ("course_name", fonts.course),
        ("course_details", fonts.body),
        ("dates", fonts.body),
        ("verification_code", fonts.small),
        ("footer", fonts.small),
    ):
        element: Element = getattr(el, name)
        _draw_element(page, element, font, element.text or DEFAULT_TEXTS.get(name), ctx)

    _draw_syllabus(page, el.syllabus, cfg, doc.syllabus)
    _draw_qr(page, cfg, doc.verification_url)
    signatories = doc.signatories or []
    _draw_signature(page, el.signature1, cfg, signatories[0] if signatories else None)
    _draw_signature(page, el.signature2, cfg, signatories[1] if len(signatories) > 1 else None)

    c.showPage()
    c.save()
    return buf.getvalue()
