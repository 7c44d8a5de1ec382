# tests/test_plants_api.py

from __future__ import annotations

from models.task import Task
from services import plant_info


PLANT_BODY = {
    "name": "Basil on the sill",
    "species": "Ocimum basilicum",
    "date_acquired": "2024-03-01",
    "location": "Kitchen",
    "watering_frequency": 2,
    "fertilizing_frequency": 21,
}


def test_create_and_list_plants(client, auth_headers, other_headers) -> None:
    res = client.post("/plants/", json=PLANT_BODY, headers=auth_headers)

    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Basil on the sill"
    assert body["last_watered"] is None

    mine = client.get("/plants/", headers=auth_headers).json()
    theirs = client.get("/plants/", headers=other_headers).json()
    assert [p["plant_id"] for p in mine] == [body["plant_id"]]
    assert theirs == []


def test_create_rejects_non_positive_frequency(client, auth_headers) -> None:
    res = client.post("/plants/", json={**PLANT_BODY, "watering_frequency": 0}, headers=auth_headers)

    assert res.status_code == 422


def test_get_plant_scoped_to_owner(client, auth_headers, other_headers, plant) -> None:
    assert client.get(f"/plants/{plant.plant_id}", headers=auth_headers).status_code == 200

    res = client.get(f"/plants/{plant.plant_id}", headers=other_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Plant not found"


def test_update_plant(client, auth_headers, plant) -> None:
    res = client.patch(
        f"/plants/{plant.plant_id}",
        json={"location": "Balcony", "last_watered": "2024-04-02", "name": None},
        headers=auth_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["location"] == "Balcony"
    assert body["last_watered"] == "2024-04-02"
    assert body["name"] == "Monty"


def test_delete_plant_removes_its_tasks(client, db_session, auth_headers, plant) -> None:
    client.post(
        "/tasks/",
        json={"plant_id": str(plant.plant_id), "kind": "watering", "due_date": "2024-01-01"},
        headers=auth_headers,
    )

    res = client.delete(f"/plants/{plant.plant_id}", headers=auth_headers)

    assert res.status_code == 200
    assert client.get(f"/plants/{plant.plant_id}", headers=auth_headers).status_code == 404
    assert db_session.query(Task).count() == 0


def test_species_info_endpoint(client, auth_headers, monkeypatch) -> None:
    def _fetch(search_term):
        return {
            "summary": "Basil is a culinary herb.",
            "image_url": "https://example.org/basil.jpg",
            "scientific_name": "Basil",
            "family": None,
            "care": plant_info.care_for_species(search_term),
        }

    monkeypatch.setattr(plant_info, "fetch_plant_info", _fetch)

    res = client.get("/plants/species/Basil", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["summary"] == "Basil is a culinary herb."
    assert body["care"]["light"] == "Full sun to partial shade"


def test_species_info_requires_authentication(client) -> None:
    assert client.get("/plants/species/basil").status_code == 401
