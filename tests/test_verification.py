import pytest

from certperu.core.text import mask_document
from certperu.models import EnrollmentStatus
from certperu.services import verification

from conftest import make_enrollment, make_participant


def test_mask_document():
    assert mask_document("12345678") == "****5678"
    assert mask_document("AB12") == "****B12"
    assert mask_document("12") == "****2"
    assert mask_document("7") == "****"
    assert mask_document(None) == "****"


def test_preview_code_never_validates(client, monkeypatch):
    def boom(*a, **kw):
        raise AssertionError("no debe consultar la base")

    monkeypatch.setattr(verification.certificate_crud, "get_by_code", boom)
    code = verification.preview_code(42)
    assert code == "PREVIEW-00000042"

    r = client.get(f"/api/v1/verify/{code}")
    assert r.status_code == 200
    assert r.json() == {"valid": False, "is_preview": True, "message": verification.PREVIEW_MESSAGE}


def test_unknown_code_is_404_with_body(client):
    r = client.get("/api/v1/verify/NOEXISTE1234")
    assert r.status_code == 404
    assert r.json() == {"valid": False, "error": "Certificado no encontrado"}


def test_valid_certificate_is_redacted(client, db, editor_headers, participant, course):
    enr = make_enrollment(db, participant, course, EnrollmentStatus.CURSANDO)
    cert = client.post(f"/api/v1/enrollments/{enr.id}/issue-certificate", headers=editor_headers).json()

    body = client.get(f"/api/v1/verify/{cert['verification_code']}").json()
    assert body["valid"] is True
    assert "message" not in body
    shown = body["certificate"]
    assert shown["participant"] == {
        "full_name": "María Quispe Huamán", "document_type": "DNI", "document_number": "****5678",
    }
    assert "email" not in shown["participant"]
    assert shown["institution"]["name"] == "CertificadosPerú"
    assert shown["course"]["syllabus"] == ["Módulo I: Estado", "Módulo II: Presupuesto"]


def test_verify_is_public(client, db, editor_headers, participant, course):
    enr = make_enrollment(db, participant, course, EnrollmentStatus.PAGADO)
    code = client.post(f"/api/v1/enrollments/{enr.id}/issue-certificate", headers=editor_headers).json()["verification_code"]
    assert client.get(f"/api/v1/verify/{code}", headers={}).status_code == 200


def test_short_document_is_never_shown_whole(client, db, editor_headers, course):
    # registros antiguos pueden traer documentos cortos
    p = make_participant(db, "1234", full_name="Pedro Huanca")
    enr = make_enrollment(db, p, course, EnrollmentStatus.PAGADO)
    code = client.post(f"/api/v1/enrollments/{enr.id}/issue-certificate", headers=editor_headers).json()["verification_code"]

    shown = client.get(f"/api/v1/verify/{code}").json()["certificate"]["participant"]["document_number"]
    assert shown == "****234"
    assert "1234" not in shown


@pytest.mark.parametrize("doc_type,number", [
    ("DNI", "123"),
    ("DNI", "1234567A"),
    ("CE", "1234"),
    ("PASAPORTE", "AB1"),
])
def test_register_rejects_short_documents(client, doc_type, number):
    r = client.post("/api/v1/auth/register", json={
        "full_name": "Pedro Huanca", "document_type": doc_type, "document_number": number,
        "email": "pedro@correo.pe", "password": "clave-segura",
    })
    assert r.status_code == 422
    assert r.json()["detail"][0]["type"] == "value_error"
