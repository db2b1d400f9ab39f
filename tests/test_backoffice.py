from certperu.models import EnrollmentStatus

from conftest import make_course, make_enrollment, make_participant


def test_institution_settings_permissions(client, editor_headers, admin_headers, super_headers):
    assert client.get("/api/v1/settings/institution", headers=editor_headers).status_code == 403

    r = client.get("/api/v1/settings/institution", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["ruc"] == "20123456789"

    update = {"name": "Instituto Andino", "director_name": "Dra. Ana Salas"}
    assert client.put("/api/v1/settings/institution", json=update, headers=admin_headers).status_code == 403
    r = client.put("/api/v1/settings/institution", json=update, headers=super_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Instituto Andino"
    assert r.json()["address"] == "Av. Principal 123, Lima, Perú"


def test_new_certificates_snapshot_current_institution(client, super_headers, paid_enrollment):
    client.put("/api/v1/settings/institution", json={"name": "Instituto Andino"}, headers=super_headers)
    cert = client.post(f"/api/v1/enrollments/{paid_enrollment.id}/issue-certificate", headers=super_headers).json()
    assert cert["institution"]["name"] == "Instituto Andino"

    client.put("/api/v1/settings/institution", json={"name": "Otro Nombre"}, headers=super_headers)
    again = client.get(f"/api/v1/certificates/{cert['id']}", headers=super_headers).json()
    assert again["institution"]["name"] == "Instituto Andino"


def test_course_requests_flow(client, editor_headers, admin_headers):
    r = client.post("/api/v1/course-requests/", json={"requested_course": "Power BI para el sector público"})
    assert r.status_code == 422

    r = client.post(
        "/api/v1/course-requests/",
        json={"requested_course": "Power BI para el sector público", "email": "Interesado@Correo.pe"},
    )
    assert r.status_code == 201
    req = r.json()
    assert req["state"] == "PENDIENTE"
    assert req["email"] == "interesado@correo.pe"

    assert client.get("/api/v1/course-requests/").status_code == 401

    r = client.patch(f"/api/v1/course-requests/{req['id']}", json={"state": "REVISADO"}, headers=editor_headers)
    assert r.json()["state"] == "REVISADO"

    r = client.get("/api/v1/course-requests/", params={"state": "PENDIENTE"}, headers=editor_headers)
    assert r.json()["pagination"]["total"] == 0

    assert client.delete(f"/api/v1/course-requests/{req['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/api/v1/course-requests/{req['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/v1/course-requests/{req['id']}", headers=admin_headers).status_code == 404


def test_dashboard(client, db, editor_headers, participant, course):
    other = make_participant(db, "66666666")
    cheap = make_course(db, "Redacción Administrativa", price=50)
    make_enrollment(db, participant, course, EnrollmentStatus.PAGADO)
    make_enrollment(db, other, course)
    make_enrollment(db, other, cheap, EnrollmentStatus.COMPLETADO)

    r = client.get("/api/v1/dashboard/", headers=editor_headers)
    assert r.status_code == 200
    body = r.json()
    stats = body["stats"]
    assert stats["total_courses"] == 2
    assert stats["total_participants"] == 2
    assert stats["diplomados"] == 2
    assert stats["month_enrollments"] == 2
    assert stats["month_revenue"] == 200.0
    assert len(body["latest_enrollments"]) == 3
    assert body["popular_courses"][0] == {"id": course.id, "name": "Gestión Pública", "type": "diplomado", "enrollments": 2}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
