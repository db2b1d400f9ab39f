from certperu.core.security_password import pwd_context, verify_and_maybe_upgrade
from certperu.models import EnrollmentStatus

from conftest import make_course, make_enrollment, make_participant


NEW_PARTICIPANT = {
    "full_name": "Rosa Mamani Condori",
    "document_type": "DNI",
    "document_number": "40.123.456",
    "email": "Rosa.Mamani@Correo.pe",
}


def test_register_and_login(client):
    r = client.post("/api/v1/auth/register", json={**NEW_PARTICIPANT, "password": "clave-segura"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["document_number"] == "40123456"
    assert body["email"] == "rosa.mamani@correo.pe"
    assert "hashed_password" not in body

    r = client.post("/api/v1/auth/login", json={"email": "rosa.mamani@correo.pe", "password": "clave-segura"})
    assert r.status_code == 200
    assert r.json()["kind"] == "participant"

    r = client.post("/api/v1/auth/login", json={"email": "rosa.mamani@correo.pe", "password": "otra-clave"})
    assert r.status_code == 401

    r = client.post("/api/v1/auth/register", json={**NEW_PARTICIPANT, "password": "clave-segura"})
    assert r.status_code == 409


def test_admin_login_and_role_checks(client, participant_headers):
    r = client.post("/api/v1/auth/admin/login", json={"email": "admin@certificadosperu.com", "password": "admin12345"})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["role"] == "SUPERADMIN"

    assert client.get("/api/v1/participants/").status_code == 401
    assert client.get("/api/v1/participants/", headers={"Authorization": "Bearer basura"}).status_code == 401
    assert client.get("/api/v1/participants/", headers=participant_headers).status_code == 403


def test_admin_created_participant_logs_in_with_document(client, editor_headers):
    r = client.post("/api/v1/participants/", json=NEW_PARTICIPANT, headers=editor_headers)
    assert r.status_code == 201, r.text

    r = client.post("/api/v1/auth/login", json={"email": "rosa.mamani@correo.pe", "password": "40123456"})
    assert r.status_code == 200

    r = client.post("/api/v1/participants/", json=NEW_PARTICIPANT, headers=editor_headers)
    assert r.status_code == 409


def test_search_and_update(client, db, editor_headers):
    make_participant(db, "11111111", full_name="Carlos Huamán")
    p = make_participant(db, "22222222", full_name="Lucía Flores")

    r = client.get("/api/v1/participants/", params={"q": "flores"}, headers=editor_headers)
    assert [i["id"] for i in r.json()["items"]] == [p.id]

    r = client.put(f"/api/v1/participants/{p.id}", json={"email": "p11111111@correo.pe"}, headers=editor_headers)
    assert r.status_code == 409

    r = client.put(f"/api/v1/participants/{p.id}", json={"phone": "999888777"}, headers=editor_headers)
    assert r.json()["phone"] == "999888777"


def test_delete_participant_with_certificate_is_blocked(client, db, editor_headers, admin_headers, participant, paid_enrollment):
    client.post(f"/api/v1/enrollments/{paid_enrollment.id}/issue-certificate", headers=editor_headers)
    r = client.delete(f"/api/v1/participants/{participant.id}", headers=admin_headers)
    assert r.status_code == 422

    other = make_participant(db, "33333333")
    assert client.delete(f"/api/v1/participants/{other.id}", headers=admin_headers).status_code == 200


def test_profile_and_stats(client, db, editor_headers, participant, participant_headers, course):
    second = make_course(db, "Oratoria", academic_hours=40)
    enr = make_enrollment(db, participant, course, EnrollmentStatus.PAGADO)
    make_enrollment(db, participant, second)
    client.post(f"/api/v1/enrollments/{enr.id}/issue-certificate", headers=editor_headers)

    r = client.put("/api/v1/me/profile", json={"occupation": "Contador"}, headers=participant_headers)
    assert r.status_code == 200
    assert r.json()["occupation"] == "Contador"

    r = client.put("/api/v1/me/profile", json={"email": "otro@correo.pe"}, headers=participant_headers)
    assert r.status_code == 422

    assert client.get("/api/v1/me/stats", headers=participant_headers).json() == {
        "total_courses": 2, "completed_courses": 1, "certificates": 1, "total_hours": 160,
    }

    mine = client.get("/api/v1/me/enrollments", headers=participant_headers).json()
    by_course = {e["course"]["name"]: e for e in mine}
    assert by_course["Gestión Pública"]["certificate"]["state"] == "EMITIDO"
    assert by_course["Oratoria"]["certificate"] is None

    certs = client.get("/api/v1/me/certificates", headers=participant_headers).json()
    assert len(certs) == 1


def test_password_helpers():
    assert verify_and_maybe_upgrade("x", None) == (False, None)
    assert verify_and_maybe_upgrade("x", "texto-que-no-es-hash") == (False, None)


def test_login_rehashes_weaker_argon2(client, db):
    weak = pwd_context.handler("argon2").using(memory_cost=8192).hash("clave-antigua")
    p = make_participant(db, "66666666", hashed_password=weak)

    r = client.post("/api/v1/auth/login", json={"email": p.email, "password": "clave-antigua"})
    assert r.status_code == 200
    db.refresh(p)
    assert p.hashed_password != weak
    assert not pwd_context.needs_update(p.hashed_password)


def test_participant_without_password_cannot_login(client, db):
    p = make_participant(db, "67676767")
    r = client.post("/api/v1/auth/login", json={"email": p.email, "password": "67676767"})
    assert r.status_code == 401
