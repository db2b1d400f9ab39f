from certperu.core.text import slugify

from conftest import make_course, make_enrollment


COURSE = {
    "name": "Gestión Pública 2026",
    "type": "DIPLOMADO",
    "modality": "VIRTUAL",
    "academic_hours": 240,
    "price": "350.00",
    "syllabus": ["Modernización del Estado", "Presupuesto por resultados"],
}


def test_slugify():
    assert slugify("Gestión Pública 2024") == "gestion-publica-2024"
    assert slugify("  ¡Ñandú & Cía!  ") == "nandu-cia"


def test_create_course_generates_slug(client, editor_headers):
    r = client.post("/api/v1/admin/courses", json=COURSE, headers=editor_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["slug"] == "gestion-publica-2026"
    assert body["enrollment_count"] == 0

    r = client.post("/api/v1/admin/courses", json=COURSE, headers=editor_headers)
    assert r.status_code == 409
    assert r.json()["code"] == "ALREADY_EXISTS"


def test_public_catalog_hides_inactive(client, db):
    make_course(db, "Contrataciones del Estado", featured=True)
    make_course(db, "Curso Retirado", active=False)

    r = client.get("/api/v1/courses")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["items"]] == ["Contrataciones del Estado"]

    assert client.get("/api/v1/courses/curso-retirado").status_code == 404
    assert client.get("/api/v1/courses/contrataciones-del-estado").json()["featured"] is True


def test_category_filter_and_counts(client, db, admin_headers):
    r = client.post("/api/v1/admin/categories", json={"name": "Gestión Pública"}, headers=admin_headers)
    assert r.status_code == 201
    category = r.json()
    make_course(db, "SIAF Básico", category_id=category["id"])
    make_course(db, "Oratoria")

    r = client.get("/api/v1/courses", params={"category": "gestion-publica"})
    assert [c["name"] for c in r.json()["items"]] == ["SIAF Básico"]

    cats = client.get("/api/v1/categories").json()
    assert cats == [{**category, "course_count": 1}]


def test_delete_course_without_history(client, db, admin_headers):
    c = make_course(db, "Excel Intermedio")
    r = client.delete(f"/api/v1/admin/courses/{c.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["deactivated"] is False
    assert client.get(f"/api/v1/admin/courses/{c.id}", headers=admin_headers).status_code == 404


def test_delete_course_with_enrollments_deactivates(client, db, admin_headers, participant, course):
    make_enrollment(db, participant, course)
    r = client.delete(f"/api/v1/admin/courses/{course.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["deactivated"] is True

    r = client.get(f"/api/v1/admin/courses/{course.id}", headers=admin_headers)
    assert r.json()["active"] is False
    assert r.json()["enrollment_count"] == 1


def test_editor_cannot_delete_course(client, editor_headers, course):
    assert client.delete(f"/api/v1/admin/courses/{course.id}", headers=editor_headers).status_code == 403


def test_rename_regenerates_slug(client, editor_headers, course):
    r = client.put(f"/api/v1/admin/courses/{course.id}", json={"name": "Gestión Municipal"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["slug"] == "gestion-municipal"
