import os
from collections.abc import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from signage.api.dependencies import get_caller
from signage.main import app
from signage.models.entities import CallerIdentity
from tests.helpers.db_env import isolated_database

ANA = CallerIdentity(ref=str(uuid4()), label="Ana", desk="Desk 1")
ADMIN = CallerIdentity(ref=str(uuid4()), label="Admin", role="super_admin")


@pytest.fixture(scope="module")
def integration_client() -> Iterator[TestClient]:
    base_url = os.getenv("TEST_DATABASE_URL")
    if not base_url:
        pytest.skip("Set TEST_DATABASE_URL to run integration tests.")

    with isolated_database(base_url, schema_prefix="signage_api_test"):
        with TestClient(app) as client:
            yield client
    app.dependency_overrides.clear()


def test_queue_end_to_end_flow(integration_client: TestClient) -> None:
    app.dependency_overrides[get_caller] = lambda: ANA

    service_type = integration_client.post("/api/service-types", json={"name": "Enrollment"})
    assert service_type.status_code == 201
    service_type_id = service_type.json()["data"]["id"]

    duplicate = integration_client.post("/api/service-types", json={"name": "enrollment"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "SERVICE_TYPE_NAME_CONFLICT"

    numbers = [integration_client.post("/api/tickets").json()["data"]["number"] for _ in range(3)]
    assert numbers == ["#001", "#002", "#003"]

    kiosk = integration_client.get("/api/queue/kiosk/002")
    assert kiosk.status_code == 200
    assert kiosk.json()["data"]["called"] is False

    called = integration_client.post("/api/tickets/call-next")
    assert called.status_code == 200
    ticket = called.json()["data"]
    assert ticket["number"] == "#001"
    assert ticket["attendant_ref"] == ANA.ref

    recall = integration_client.post(f"/api/tickets/{ticket['id']}/call")
    assert recall.status_code == 409

    attendant_queue = integration_client.get("/api/queue/attendant").json()["data"]
    assert attendant_queue["current"]["id"] == ticket["id"]
    assert attendant_queue["waiting_count"] == 2

    display = integration_client.get("/api/queue/display").json()["data"]
    assert display["current"]["number"] == "#001"
    assert display["waiting_count"] == 2

    missing_type = integration_client.post(f"/api/tickets/{ticket['id']}/complete", json={})
    assert missing_type.status_code == 400
    assert missing_type.json()["error"]["code"] == "SERVICE_TYPE_REQUIRED"

    completed = integration_client.post(
        f"/api/tickets/{ticket['id']}/complete",
        json={"service_type_id": service_type_id},
    )
    assert completed.status_code == 200
    assert completed.json()["data"]["status"] == "completed"

    deleted = integration_client.delete(f"/api/service-types/{service_type_id}")
    assert deleted.status_code == 204
    reloaded = integration_client.get(f"/api/tickets/{ticket['id']}").json()["data"]
    assert reloaded["service_type_ref"] == service_type_id

    app.dependency_overrides[get_caller] = lambda: ADMIN
    report = integration_client.get("/api/reports/queue")
    assert report.status_code == 200
    payload = report.json()["data"]
    assert payload["total_created"] == 3
    assert payload["total_handled"] == 1
    assert payload["efficiency_percent"] == 33

    app.dependency_overrides.clear()


def test_signage_end_to_end_flow(integration_client: TestClient) -> None:
    app.dependency_overrides[get_caller] = lambda: ADMIN

    playlist = integration_client.post("/api/playlists", json={"name": "Lobby loop"})
    assert playlist.status_code == 201
    playlist_id = playlist.json()["data"]["id"]
    for url in ("a.png", "b.png"):
        slide = integration_client.post(
            f"/api/playlists/{playlist_id}/slides",
            json={"url": url, "duration": 10},
        )
        assert slide.status_code == 201

    display = integration_client.post(
        "/api/displays",
        json={"name": "Lobby", "location": "Hall", "orientation": "portrait"},
    )
    assert display.status_code == 201
    display_id = display.json()["data"]["id"]
    assert display.json()["data"]["resolution"] == {"width": 1080, "height": 1920}

    assigned = integration_client.put(
        f"/api/displays/{display_id}/playlist",
        json={"playlist_id": playlist_id},
    )
    assert assigned.status_code == 200

    content = integration_client.get(f"/api/displays/{display_id}/content").json()["data"]
    assert [slide["url"] for slide in content["playlist"]["slides"]] == ["a.png", "b.png"]
    assert content["queue"] is None

    queue_mode = integration_client.patch(f"/api/displays/{display_id}", json={"display_mode": "queue"})
    assert queue_mode.status_code == 200
    content = integration_client.get(f"/api/displays/{display_id}/content").json()["data"]
    assert content["queue"] is not None

    unknown = integration_client.put(
        f"/api/displays/{display_id}/playlist",
        json={"playlist_id": str(uuid4())},
    )
    assert unknown.status_code == 400
    assert unknown.json()["error"]["code"] == "INVALID_PLAYLIST"

    removed = integration_client.delete(f"/api/playlists/{playlist_id}")
    assert removed.status_code == 204
    reloaded = integration_client.get(f"/api/displays/{display_id}").json()["data"]
    assert reloaded["assigned_playlist_id"] is None

    app.dependency_overrides.clear()
