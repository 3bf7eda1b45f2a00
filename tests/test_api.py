import pytest
from fastapi.testclient import TestClient

from contentful_to_sanity.api.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_convert_schemas(client, export_data):
    response = client.post("/api/schemas/convert", json={"export": export_data, "keep_markdown": True})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    media_page = body["types"][0]
    assert media_page["name"] == "mediaPage"
    assert {f["name"]: f["type"] for f in media_page["fields"]}["image"] == "image"
    assert {f["name"]: f["type"] for f in media_page["fields"]}["pdf"] == "file"


def test_convert_schemas_mapping_error(client):
    export = {
        "contentTypes": [{
            "sys": {"id": "article"},
            "name": "Article",
            "fields": [{"id": "broken", "name": "Broken"}],
        }],
    }

    response = client.post("/api/schemas/convert", json={"export": export})

    assert response.status_code == 422
    assert "broken" in response.json()["detail"]


def test_convert_dataset(client, export_data):
    response = client.post("/api/dataset/convert", json={"export": export_data, "weak_refs": True})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["documents"][0]["author"] == {"_type": "reference", "_ref": "person1", "_weak": True}
    assert any("missing" in warning for warning in body["warnings"])
