import pytest
from bson import ObjectId

import mock_data
from conftest import bearer


def add_section(mongo, section="hero", **fields):
    return str(mongo["content"].insert_one({"section": section, "title": "Titulo", "body": "Texto", **fields}).inserted_id)


def test_get_section_from_database(client, mongo):
    add_section(mongo, "hero", title="Negromate")

    response = client.get("/api/content/hero")

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Negromate"


def test_missing_section_is_404(client):
    response = client.get("/api/content/nada")

    assert response.status_code == 404
    assert response.json()["msg"] == "No se encontró contenido para la sección 'nada'"


@pytest.mark.parametrize("section,key", [
    ("gallery-murals", "murals"),
    ("Gallery-customClothing", "customClothing"),
    ("gallery-graphicDesign", "graphicDesign"),
])
def test_gallery_sections_come_from_static_table(client, mongo, section, key):
    # A database document with the same name is ignored
    add_section(mongo, section)

    response = client.get(f"/api/content/{section}")

    assert response.status_code == 200
    assert response.json()["data"] == mock_data.GALLERY_IMAGES[key]


@pytest.mark.parametrize("section", ["gallery", "gallery-unknown"])
def test_unknown_gallery_key_is_an_empty_list(client, section):
    response = client.get(f"/api/content/{section}")

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_list_content_is_admin_only(client, mongo, user, admin):
    add_section(mongo, "hero")
    add_section(mongo, "contact")

    assert client.get("/api/content").status_code == 401
    assert client.get("/api/content", headers=bearer(user["token"])).status_code == 403
    response = client.get("/api/content", headers=bearer(admin["token"]))
    assert {c["section"] for c in response.json()["data"]} == {"hero", "contact"}


def test_create_content(client, mongo, admin):
    payload = {
        "section": "aboutUs",
        "title": "Sobre nosotros",
        "artists": {"title": "Artistas", "instagram": {"yoel": "https://instagram.com/yoel"}, "paragraphs": ["Bio"]},
    }

    response = client.post("/api/content", json=payload, headers=bearer(admin["token"]))

    assert response.status_code == 201
    stored = mongo["content"].find_one({"section": "aboutUs"})
    assert stored["artists"]["instagram"] == {"yoel": "https://instagram.com/yoel"}
    assert stored["body"] == ""


def test_create_requires_section(client, admin):
    response = client.post("/api/content", json={"title": "Sin sección"}, headers=bearer(admin["token"]))

    assert response.status_code == 400
    assert response.json()["msg"] == "El campo 'section' es obligatorio"


def test_create_duplicate_section_conflicts(client, mongo, admin):
    add_section(mongo, "hero")

    response = client.post("/api/content", json={"section": "hero", "title": "Otra"}, headers=bearer(admin["token"]))

    assert response.status_code == 409
    assert response.json()["msg"] == "Ya existe contenido para la sección 'hero'"
    assert mongo["content"].count_documents({"section": "hero"}) == 1


def test_create_rejects_malformed_blocks(client, mongo, admin):
    payload = {"section": "aboutUs", "galleryImages": {"murals": [{"title": "sin id"}]}}

    response = client.post("/api/content", json=payload, headers=bearer(admin["token"]))

    assert response.status_code == 400
    assert mongo["content"].count_documents({}) == 0


def test_create_rejects_unknown_fields(client, mongo, admin):
    payload = {"section": "promo", "heroSubtitle": "Rebajas"}

    response = client.post("/api/content", json=payload, headers=bearer(admin["token"]))

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert mongo["content"].count_documents({}) == 0


def test_update_rejects_unknown_fields(client, mongo, admin):
    cid = add_section(mongo, "hero")
    before = mongo["content"].find_one({"_id": ObjectId(cid)})

    response = client.put(f"/api/content/{cid}", json={"heroSubtitle": "x"}, headers=bearer(admin["token"]))

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert mongo["content"].find_one({"_id": ObjectId(cid)}) == before


def test_partial_update(client, mongo, admin):
    cid = add_section(mongo, "hero")

    response = client.put(f"/api/content/{cid}", json={"body": "Nuevo texto"}, headers=bearer(admin["token"]))

    assert response.status_code == 200
    stored = mongo["content"].find_one({"_id": ObjectId(cid)})
    assert stored["body"] == "Nuevo texto"
    assert stored["title"] == "Titulo"


def test_update_without_body_leaves_content_unchanged(client, mongo, admin):
    cid = add_section(mongo, "hero")
    before = mongo["content"].find_one({"_id": ObjectId(cid)})

    response = client.put(f"/api/content/{cid}", headers=bearer(admin["token"]))

    assert response.status_code == 200
    assert mongo["content"].find_one({"_id": ObjectId(cid)}) == before


def test_rename_to_existing_section_conflicts(client, mongo, admin):
    add_section(mongo, "hero")
    cid = add_section(mongo, "contact")

    response = client.put(f"/api/content/{cid}", json={"section": "hero"}, headers=bearer(admin["token"]))

    assert response.status_code == 409
    assert mongo["content"].find_one({"_id": ObjectId(cid)})["section"] == "contact"


def test_update_and_delete_unknown_content_is_404(client, admin):
    missing = str(ObjectId())

    assert client.put(f"/api/content/{missing}", json={"title": "x"}, headers=bearer(admin["token"])).status_code == 404
    assert client.delete(f"/api/content/{missing}", headers=bearer(admin["token"])).status_code == 404


def test_delete_content(client, mongo, admin):
    cid = add_section(mongo, "hero")

    response = client.delete(f"/api/content/{cid}", headers=bearer(admin["token"]))

    assert response.status_code == 200
    assert response.json()["data"] == {"_id": cid}
    assert mongo["content"].count_documents({}) == 0
