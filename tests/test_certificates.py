import re

import pytest
from sqlalchemy import func, select

from certperu.core.config import settings
from certperu.core.errors import DuplicateCertificate
from certperu.crud import certificate as certificate_crud
from certperu.crud.setting import load_institution_config
from certperu.models import Certificate, CertificateState, EnrollmentStatus
from certperu.services import certificates as issuer

from conftest import make_course, make_enrollment, make_participant


def issue(client, enrollment_id, headers):
    return client.post(f"/api/v1/enrollments/{enrollment_id}/issue-certificate", headers=headers)


def issued_count(db, participant_id, course_id) -> int:
    return db.scalar(
        select(func.count(Certificate.id)).where(
            Certificate.participant_id == participant_id,
            Certificate.course_id == course_id,
            Certificate.state == CertificateState.EMITIDO,
        )
    )


def test_issue_verify_and_lookup(client, db, editor_headers, participant, course, paid_enrollment):
    r = issue(client, paid_enrollment.id, editor_headers)
    assert r.status_code == 200, r.text
    cert = r.json()
    code = cert["verification_code"]
    assert re.fullmatch(r"[A-Z0-9]{12}", code)
    assert cert["state"] == "EMITIDO"
    assert cert["snapshot"]["name"] == "Gestión Pública"
    assert cert["institution"]["name"] == "CertificadosPerú"
    assert cert["signatories"] == [{"name": "Dr. Juan Pérez García", "title": "Director General"}]
    assert cert["verification_url"].endswith(f"/verificar/{code}")

    db.refresh(paid_enrollment)
    assert paid_enrollment.status == EnrollmentStatus.COMPLETADO

    r = client.get(f"/api/v1/verify/{code}")
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is True
    assert body["status"] == "EMITIDO"
    assert body["certificate"]["participant"]["document_number"] == "****5678"
    assert body["certificate"]["course"]["academic_hours"] == 120

    r = client.get(f"/api/v1/enrollments/{paid_enrollment.id}", headers=editor_headers)
    assert r.json()["certificate"]["verification_code"] == code


def test_pending_enrollment_is_not_eligible(client, db, editor_headers, participant, course):
    enr = make_enrollment(db, participant, course)
    r = issue(client, enr.id, editor_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "NOT_ELIGIBLE"
    assert db.scalar(select(func.count(Certificate.id))) == 0


def test_second_issue_returns_existing(client, editor_headers, paid_enrollment):
    first = issue(client, paid_enrollment.id, editor_headers).json()
    r = issue(client, paid_enrollment.id, editor_headers)
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == "DUPLICATE_CERTIFICATE"
    assert body["details"]["certificate_id"] == first["id"]
    assert body["details"]["verification_code"] == first["verification_code"]


def test_concurrent_issue_caught_by_unique_index(db, monkeypatch, participant, course, paid_enrollment):
    institution = load_institution_config(db)
    issuer.issue_for_enrollment(db, paid_enrollment.id, institution=institution)

    # simula la carrera: la lectura previa no ve el certificado del otro request
    monkeypatch.setattr(certificate_crud, "find_issued", lambda *a, **kw: None)
    with pytest.raises(DuplicateCertificate):
        issuer.issue_for_enrollment(db, paid_enrollment.id, institution=institution)

    db.rollback()
    assert issued_count(db, participant.id, course.id) == 1


def test_code_collision_consumes_an_attempt(db, monkeypatch, participant, course, paid_enrollment):
    institution = load_institution_config(db)
    other = make_participant(db, "99999999")
    first = issuer.issue_for_enrollment(
        db, make_enrollment(db, other, course, EnrollmentStatus.PAGADO).id, institution=institution,
    )

    codes = iter([first.verification_code, "NUEVOCODIGO1"])
    monkeypatch.setattr(issuer, "generate_code", lambda: next(codes))
    cert = issuer.issue_for_enrollment(db, paid_enrollment.id, institution=institution)
    assert cert.verification_code == "NUEVOCODIGO1"


def test_code_collision_at_insert_time_retries(db, monkeypatch, participant, course, paid_enrollment):
    institution = load_institution_config(db)
    other = make_participant(db, "99999999")
    first = issuer.issue_for_enrollment(
        db, make_enrollment(db, other, course, EnrollmentStatus.PAGADO).id, institution=institution,
    )

    # la consulta previa no ve el choque; lo detecta el índice único al insertar
    monkeypatch.setattr(certificate_crud, "code_exists", lambda *a, **kw: False)
    codes = iter([first.verification_code, "NUEVOCODIGO2"])
    monkeypatch.setattr(issuer, "generate_code", lambda: next(codes))
    cert = issuer.issue_for_enrollment(db, paid_enrollment.id, institution=institution)
    assert cert.verification_code == "NUEVOCODIGO2"
    assert cert.state == CertificateState.EMITIDO


def test_code_generation_exhausted(client, db, monkeypatch, editor_headers, course, paid_enrollment):
    other = make_participant(db, "99999999")
    taken = issue(client, make_enrollment(db, other, course, EnrollmentStatus.PAGADO).id, editor_headers).json()

    monkeypatch.setattr(settings, "VERIFY_CODE_MAX_ATTEMPTS", 3)
    monkeypatch.setattr(issuer, "generate_code", lambda: taken["verification_code"])
    r = issue(client, paid_enrollment.id, editor_headers)
    assert r.status_code == 503
    assert r.json()["code"] == "CODE_GENERATION_EXHAUSTED"

    db.refresh(paid_enrollment)
    assert paid_enrollment.status == EnrollmentStatus.PAGADO


def test_snapshot_survives_course_edit(client, db, editor_headers, course, paid_enrollment):
    cert = issue(client, paid_enrollment.id, editor_headers).json()
    r = client.put(
        f"/api/v1/admin/courses/{course.id}",
        json={"name": "Gestión Pública Avanzada", "academic_hours": 200},
        headers=editor_headers,
    )
    assert r.status_code == 200, r.text

    r = client.get(f"/api/v1/certificates/{cert['id']}", headers=editor_headers)
    snap = r.json()["snapshot"]
    assert snap["name"] == "Gestión Pública"
    assert snap["academic_hours"] == 120


def test_manual_issue(client, db, editor_headers, participant, course):
    r = client.post(
        "/api/v1/certificates/",
        json={"participant_id": participant.id, "course_id": course.id, "grade": 17},
        headers=editor_headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["verification_code"].startswith("CP-")
    assert body["enrollment_id"] is None
    assert body["grade_text"] == "Aprobado"

    r = client.post(
        "/api/v1/certificates/",
        json={"participant_id": participant.id, "course_id": course.id},
        headers=editor_headers,
    )
    assert r.status_code == 400
    assert r.json()["code"] == "DUPLICATE_CERTIFICATE"


def test_manual_issue_rejects_inverted_dates(client, editor_headers, participant, course):
    r = client.post(
        "/api/v1/certificates/",
        json={
            "participant_id": participant.id, "course_id": course.id,
            "start_date": "2026-06-30T00:00:00Z", "end_date": "2026-01-01T00:00:00Z",
        },
        headers=editor_headers,
    )
    assert r.status_code == 422
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_update_accepts_only_editable_fields(client, editor_headers, paid_enrollment):
    cert = issue(client, paid_enrollment.id, editor_headers).json()
    url = f"/api/v1/certificates/{cert['id']}"

    r = client.put(url, json={"grade": 18, "remarks": "Mención honrosa"}, headers=editor_headers)
    assert r.status_code == 200, r.text
    assert r.json()["remarks"] == "Mención honrosa"

    r = client.put(url, json={"participant_id": 7, "verification_code": "X"}, headers=editor_headers)
    assert r.status_code == 422
    assert r.json()["details"]["fields"] == ["participant_id", "verification_code"]

    r = client.put(url, json={"grade": 25}, headers=editor_headers)
    assert r.status_code == 422


def test_void_and_reactivate(client, editor_headers, paid_enrollment):
    cert = issue(client, paid_enrollment.id, editor_headers).json()
    url = f"/api/v1/certificates/{cert['id']}"

    r = client.patch(url, json={"action": "void", "reason": "Error en el nombre"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["state"] == "ANULADO"
    assert r.json()["remarks"].endswith("[ANULADO: Error en el nombre]")

    r = client.get(f"/api/v1/verify/{cert['verification_code']}")
    assert r.status_code == 200
    assert r.json() == {
        "valid": False, "status": "ANULADO", "is_preview": False, "message": "Este certificado ha sido anulado.",
    }

    r = client.patch(url, json={"action": "void"}, headers=editor_headers)
    assert r.status_code == 422

    r = client.patch(url, json={"action": "reactivate"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["state"] == "EMITIDO"


def test_void_without_reason_uses_default(client, editor_headers, paid_enrollment):
    cert = issue(client, paid_enrollment.id, editor_headers).json()
    r = client.patch(f"/api/v1/certificates/{cert['id']}", json={"action": "void"}, headers=editor_headers)
    assert r.json()["remarks"] == "[ANULADO: Sin motivo especificado]"


def test_reactivate_blocked_by_newer_certificate(client, editor_headers, participant, course, paid_enrollment):
    old = issue(client, paid_enrollment.id, editor_headers).json()
    client.patch(f"/api/v1/certificates/{old['id']}", json={"action": "void"}, headers=editor_headers)

    r = client.post(
        "/api/v1/certificates/",
        json={"participant_id": participant.id, "course_id": course.id},
        headers=editor_headers,
    )
    assert r.status_code == 201

    r = client.patch(f"/api/v1/certificates/{old['id']}", json={"action": "reactivate"}, headers=editor_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "DUPLICATE_CERTIFICATE"


def test_delete_requires_void_first(client, db, editor_headers, admin_headers, paid_enrollment):
    cert = issue(client, paid_enrollment.id, editor_headers).json()
    url = f"/api/v1/certificates/{cert['id']}"

    r = client.delete(url, headers=editor_headers)
    assert r.status_code == 403

    r = client.delete(url, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "CERTIFICATE_EMITTED"

    client.patch(url, json={"action": "void"}, headers=admin_headers)
    r = client.delete(url, headers=admin_headers)
    assert r.status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 404


def test_admin_search(client, db, editor_headers, course):
    ana = make_participant(db, "44444444", full_name="Ana Torres")
    other_course = make_course(db, "Contrataciones del Estado")
    for p, c in ((ana, course), (ana, other_course)):
        issue(client, make_enrollment(db, p, c, EnrollmentStatus.PAGADO).id, editor_headers)

    r = client.get("/api/v1/certificates/", params={"q": "contrataciones"}, headers=editor_headers)
    assert r.status_code == 200
    items = r.json()["items"]
    assert len(items) == 1
    assert items[0]["participant"]["full_name"] == "Ana Torres"

    r = client.get("/api/v1/certificates/", params={"q": "44444444", "state": "EMITIDO"}, headers=editor_headers)
    assert r.json()["pagination"]["total"] == 2
