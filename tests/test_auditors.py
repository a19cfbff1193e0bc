"""
Tests for auditor and area reference data.
"""
from fastapi import status

from app.models.area import Area
from app.services.auditor_service import ensure_areas_seeded, list_areas


def test_create_and_list_auditors_ordered_by_name(client):
    for name in ("Sam Roe", "Alex Doe", "Jo Poe"):
        assert client.post("/api/v1/auditors/", json={"name": name}).status_code == status.HTTP_201_CREATED

    data = client.get("/api/v1/auditors/").json()

    assert data["total"] == 3
    assert [item["name"] for item in data["items"]] == ["Alex Doe", "Jo Poe", "Sam Roe"]


def test_create_trims_name(client):
    data = client.post("/api/v1/auditors/", json={"name": "  Alex Doe  "}).json()

    assert data["name"] == "Alex Doe"


def test_duplicate_trimmed_name_conflicts(client):
    client.post("/api/v1/auditors/", json={"name": "Alex Doe"})

    response = client.post("/api/v1/auditors/", json={"name": " Alex Doe "})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "auditor with this name already exists"
    assert client.get("/api/v1/auditors/").json()["total"] == 1


def test_blank_name_is_rejected(client):
    response = client.post("/api/v1/auditors/", json={"name": "   "})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_rename_auditor(client):
    created = client.post("/api/v1/auditors/", json={"name": "Alex Doe"}).json()

    response = client.put(f"/api/v1/auditors/{created['id']}", json={"name": "Alexandra Doe"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Alexandra Doe"


def test_rename_to_existing_name_conflicts(client):
    client.post("/api/v1/auditors/", json={"name": "Alex Doe"})
    other = client.post("/api/v1/auditors/", json={"name": "Sam Roe"}).json()

    response = client.put(f"/api/v1/auditors/{other['id']}", json={"name": "Alex Doe"})

    assert response.status_code == status.HTTP_409_CONFLICT
    names = [item["name"] for item in client.get("/api/v1/auditors/").json()["items"]]
    assert names == ["Alex Doe", "Sam Roe"]


def test_rename_to_own_name_is_allowed(client):
    created = client.post("/api/v1/auditors/", json={"name": "Alex Doe"}).json()

    response = client.put(f"/api/v1/auditors/{created['id']}", json={"name": "Alex Doe"})

    assert response.status_code == status.HTTP_200_OK


def test_rename_missing_auditor_returns_404(client):
    response = client.put("/api/v1/auditors/99999", json={"name": "Nobody"})

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_auditor_keeps_their_audits(client, make_audit):
    created = client.post("/api/v1/auditors/", json={"name": "Alex Doe"}).json()
    audit = make_audit(auditor="Alex Doe")

    assert client.delete(f"/api/v1/auditors/{created['id']}").status_code == status.HTTP_200_OK
    assert client.delete(f"/api/v1/auditors/{created['id']}").status_code == status.HTTP_404_NOT_FOUND

    response = client.get(f"/api/v1/audits/{audit.id}")
    assert response.json()["auditor"] == "Alex Doe"


def test_list_areas_ordered_by_name(client, db_session):
    for name in ("Yard", "Office", "Warehouse"):
        db_session.add(Area(name=name))
    db_session.commit()

    data = client.get("/api/v1/areas/").json()

    assert data["total"] == 3
    assert [item["name"] for item in data["items"]] == ["Office", "Warehouse", "Yard"]


def test_ensure_areas_seeded_is_idempotent(db_session):
    assert ensure_areas_seeded(db_session, ["Yard", " Office ", "", "Yard"]) == 2
    assert ensure_areas_seeded(db_session, ["Yard", "Office", "Dock"]) == 1

    assert [area.name for area in list_areas(db_session)] == ["Dock", "Office", "Yard"]


def test_ensure_areas_seeded_with_nothing_to_do(db_session):
    assert ensure_areas_seeded(db_session, []) == 0
    assert list_areas(db_session) == []
