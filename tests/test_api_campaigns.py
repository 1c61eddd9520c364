"""
tests/test_api_campaigns.py

Campaign, settings and backup endpoints.
"""

from __future__ import annotations


def _unit(client, unit_id: str, lat_lng: str = "30.0444,31.2357") -> str:
    response = client.post(
        "/units",
        json={"unit_id": unit_id, "location": f"{unit_id} site", "governorate": "Cairo", "lat_lng": lat_lng},
    )
    return response.json()["id"]


def test_campaign_lifecycle(client) -> None:
    unit_pk = _unit(client, "UNI001")

    created = client.post("/campaigns", json={"name": "Launch", "unit_ids": [unit_pk]})
    assert created.status_code == 201
    campaign_pk = created.json()["id"]

    detail = client.get(f"/campaigns/{campaign_pk}").json()
    assert [unit["unit_id"] for unit in detail["units"]] == ["UNI001"]

    updated = client.put(f"/campaigns/{campaign_pk}", json={"name": "Launch v2", "unit_ids": [unit_pk]})
    assert updated.json()["name"] == "Launch v2"

    assert [c["name"] for c in client.get("/campaigns").json()] == ["Launch v2"]
    assert client.delete(f"/campaigns/{campaign_pk}").status_code == 204
    assert client.get(f"/campaigns/{campaign_pk}").status_code == 404


def test_campaign_validation_errors(client) -> None:
    response = client.post("/campaigns", json={"name": "ab", "unit_ids": []})

    assert response.status_code == 422
    assert [error["field"] for error in response.json()["detail"]["errors"]] == ["name", "unit_ids"]


def test_campaign_with_deleted_unit_shows_zero_units(client) -> None:
    unit_pk = _unit(client, "UNI001")
    campaign_pk = client.post("/campaigns", json={"name": "Ghost", "unit_ids": [unit_pk]}).json()["id"]
    client.delete(f"/units/{unit_pk}")

    assert client.get(f"/campaigns/{campaign_pk}").json()["units"] == []
    view = client.get(f"/campaigns/{campaign_pk}/map").json()
    assert view["unit_count"] == 0
    assert view["bounds"] is None


def test_map_uses_saved_settings(client) -> None:
    unit_pk = _unit(client, "UNI001", "31.2001,29.9187")
    campaign_pk = client.post("/campaigns", json={"name": "Coast", "unit_ids": [unit_pk]}).json()["id"]
    client.put("/settings", json={"default_zoom": 7})

    view = client.get(f"/campaigns/{campaign_pk}/map").json()

    assert view["zoom"] == 7
    assert view["markers"][0]["lat"] == 31.2001
    assert view["bounds"] == {"south": 31.2001, "west": 29.9187, "north": 31.2001, "east": 29.9187}


def test_publish_and_download(client) -> None:
    unit_pk = _unit(client, "UNI001")
    campaign_pk = client.post("/campaigns", json={"name": "Summer Sale", "unit_ids": [unit_pk]}).json()["id"]

    published = client.post(f"/campaigns/{campaign_pk}/publish")
    assert published.status_code == 200
    assert published.json()["export_url"].endswith(f"/campaigns/{campaign_pk}/map")

    download = client.get(f"/campaigns/{campaign_pk}/download")
    assert 'filename="summer_sale_data.json"' in download.headers["content-disposition"]
    assert download.json()["units"][0]["unit_id"] == "UNI001"


def test_settings_defaults_and_validation(client) -> None:
    current = client.get("/settings").json()
    assert current["saved"] is False
    assert current["default_zoom"] == 10

    rejected = client.put("/settings", json={"default_zoom": 0})
    assert rejected.status_code == 422
    assert client.get("/settings").json()["saved"] is False

    saved = client.put("/settings", json={"default_zoom": 12, "preferred_governorate": "Giza"})
    assert saved.status_code == 200
    assert saved.json()["saved"] is True
    assert client.get("/settings").json()["preferred_governorate"] == "Giza"


def test_backup_and_clear(client) -> None:
    unit_pk = _unit(client, "UNI001")
    client.post("/campaigns", json={"name": "Launch", "unit_ids": [unit_pk]})

    backup = client.get("/backup")
    assert backup.status_code == 200
    assert 'filename="unipole_backup_' in backup.headers["content-disposition"]
    body = backup.json()
    assert body["version"] == "1.0"
    assert len(body["units"]) == 1
    assert len(body["campaigns"]) == 1
    assert body["settings"] is None

    assert client.delete("/data").status_code == 204
    assert client.get("/units").json() == []
    assert client.get("/campaigns").json() == []


def test_unknown_campaign_is_404(client) -> None:
    missing = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/campaigns/{missing}").status_code == 404
    assert client.get(f"/campaigns/{missing}/map").status_code == 404
    assert client.post(f"/campaigns/{missing}/publish").status_code == 404
