from certperu.crud.template import template_crud
from certperu.models import CourseType


def create(client, headers, name, **kw):
    payload = {"name": name, "course_type": "CERTIFICADO", **kw}
    r = client.post("/api/v1/templates/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def defaults(client, headers, course_type="CERTIFICADO"):
    items = client.get("/api/v1/templates/", params={"type": course_type}, headers=headers).json()
    return [t["name"] for t in items if t["is_default"]]


def test_empty_config_gets_defaults(client, editor_headers):
    tpl = create(client, editor_headers, "Clásica", config={})
    assert tpl["config"]["elements"]["title"]["text"] == "{{ course.type }}"
    assert tpl["config"]["decorations"]["border"]["style"] == "double"
    assert tpl["orientation"] == "HORIZONTAL"


def test_single_default_per_type(client, editor_headers):
    create(client, editor_headers, "Primera", is_default=True)
    second = create(client, editor_headers, "Segunda", is_default=True)
    create(client, editor_headers, "Diplomado", course_type="DIPLOMADO", is_default=True)
    assert defaults(client, editor_headers) == ["Segunda"]
    assert defaults(client, editor_headers, "DIPLOMADO") == ["Diplomado"]

    first_id = [t for t in client.get("/api/v1/templates/", headers=editor_headers).json() if t["name"] == "Primera"][0]["id"]
    r = client.put(f"/api/v1/templates/{first_id}", json={"is_default": True}, headers=editor_headers)
    assert r.status_code == 200
    assert defaults(client, editor_headers) == ["Primera"]
    assert client.get(f"/api/v1/templates/{second['id']}", headers=editor_headers).json()["is_default"] is False


def test_deleting_default_promotes_another(client, db, editor_headers, admin_headers):
    create(client, editor_headers, "Respaldo")
    main = create(client, editor_headers, "Principal", is_default=True)

    r = client.delete(f"/api/v1/templates/{main['id']}", headers=editor_headers)
    assert r.status_code == 403

    r = client.delete(f"/api/v1/templates/{main['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert "Respaldo" in r.json()["message"]
    assert template_crud.get_default(db, CourseType.CERTIFICADO).name == "Respaldo"


def test_invalid_color_and_text_rejected(client, editor_headers):
    r = client.post(
        "/api/v1/templates/",
        json={"name": "Mala", "course_type": "CERTIFICADO", "background_color": "red"},
        headers=editor_headers,
    )
    assert r.status_code == 422

    r = client.post(
        "/api/v1/templates/",
        json={"name": "Mala", "course_type": "CERTIFICADO",
              "config": {"elements": {"title": {"text": "{{ course.name "}}}},
        headers=editor_headers,
    )
    assert r.status_code == 422


def test_missing_template_is_404(client, editor_headers):
    assert client.get("/api/v1/templates/999", headers=editor_headers).status_code == 404
