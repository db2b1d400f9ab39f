import datetime as dt

from certperu.core.config import settings
from certperu.crud.setting import load_institution_config
from certperu.models import CourseType, EnrollmentStatus
from certperu.schemas.template import TemplateConfig
from certperu.services import pdf
from certperu.services.verification import preview_code

from conftest import make_enrollment, make_participant, participant_headers_for


def issued(client, enrollment_id, headers) -> dict:
    r = client.post(f"/api/v1/enrollments/{enrollment_id}/issue-certificate", headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_format_date_in_spanish():
    assert pdf.format_date(dt.datetime(2026, 3, 5, 15, 0)) == "05 de marzo de 2026"
    assert pdf.format_date(None) == "Por definir"


def test_format_date_uses_lima_time(monkeypatch):
    monkeypatch.setattr(settings, "TIMEZONE", "America/Lima")
    late = dt.datetime(2026, 1, 1, 2, 30, tzinfo=dt.timezone.utc)
    assert pdf.format_date(late) == "31 de diciembre de 2025"
    # SQLite devuelve el mismo instante sin zona
    assert pdf.format_date(late.replace(tzinfo=None)) == "31 de diciembre de 2025"

    monkeypatch.setattr(settings, "TIMEZONE", "UTC")
    assert pdf.format_date(late) == "01 de enero de 2026"


def test_render_pdf_with_custom_text(db, participant, course, paid_enrollment):
    cfg = TemplateConfig.model_validate({
        "elements": {"title": {"text": "{{ course.type }} otorgado por {{ institution.name }}"}},
    })
    enr = paid_enrollment
    db.refresh(enr)
    doc = pdf.document_for_preview(enr, load_institution_config(db))
    assert doc.is_preview
    assert doc.verification_code == preview_code(enr.id)
    assert pdf.render_pdf(doc, pdf.Layout(config=cfg)).startswith(b"%PDF")


def test_participant_downloads_own_certificate(client, db, editor_headers, participant_headers, paid_enrollment):
    cert = issued(client, paid_enrollment.id, editor_headers)
    r = client.get(f"/api/v1/certificates/{cert['id']}/download", headers=participant_headers)
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == f'attachment; filename="certificado-{cert["verification_code"]}.pdf"'
    assert r.content.startswith(b"%PDF")

    r = client.get(f"/api/v1/me/certificates/{cert['id']}/download", headers=participant_headers)
    assert r.status_code == 200


def test_download_guards(client, db, editor_headers, participant_headers, paid_enrollment):
    cert = issued(client, paid_enrollment.id, editor_headers)
    url = f"/api/v1/certificates/{cert['id']}/download"

    assert client.get(url).status_code == 401
    assert client.get(url, headers=editor_headers).status_code == 403

    stranger = make_participant(db, "70707070")
    assert client.get(url, headers=participant_headers_for(stranger)).status_code == 403

    assert client.get("/api/v1/certificates/9999/download", headers=participant_headers).status_code == 404

    client.patch(f"/api/v1/certificates/{cert['id']}", json={"action": "void"}, headers=editor_headers)
    r = client.get(url, headers=participant_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "NOT_ELIGIBLE"


def test_admin_views_pdf_inline(client, editor_headers, paid_enrollment):
    cert = issued(client, paid_enrollment.id, editor_headers)
    r = client.get(f"/api/v1/certificates/{cert['id']}/pdf", headers=editor_headers)
    assert r.status_code == 200
    assert r.headers["content-disposition"].startswith("inline;")
    assert r.content.startswith(b"%PDF")


def test_preview_for_unpaid_enrollment(client, db, participant, participant_headers, course):
    enr = make_enrollment(db, participant, course, EnrollmentStatus.PENDIENTE)
    r = client.get(f"/api/v1/me/enrollments/{enr.id}/preview", headers=participant_headers)
    assert r.status_code == 200
    assert r.headers["content-disposition"] == 'inline; filename="certificado-preview-gestion-publica.pdf"'
    assert r.content.startswith(b"%PDF")

    stranger = make_participant(db, "70707070")
    r = client.get(f"/api/v1/me/enrollments/{enr.id}/preview", headers=participant_headers_for(stranger))
    assert r.status_code == 403


def test_pdf_uses_default_template_of_course_type(client, db, editor_headers, paid_enrollment):
    r = client.post(
        "/api/v1/templates/",
        json={
            "name": "Vertical diplomado",
            "course_type": CourseType.DIPLOMADO.value,
            "orientation": "VERTICAL",
            "is_default": True,
            "background_color": "#fffdf5",
        },
        headers=editor_headers,
    )
    assert r.status_code == 201, r.text

    layout = pdf.resolve_layout(db, CourseType.DIPLOMADO)
    assert layout.orientation.value == "VERTICAL"
    assert layout.background_color == "#fffdf5"
    assert pdf.resolve_layout(db, CourseType.CONSTANCIA).orientation.value == "HORIZONTAL"

    cert = issued(client, paid_enrollment.id, editor_headers)
    r = client.get(f"/api/v1/certificates/{cert['id']}/pdf", headers=editor_headers)
    assert r.content.startswith(b"%PDF")
