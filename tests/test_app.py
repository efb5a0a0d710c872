import time

import pytest
from fastapi.testclient import TestClient

import borsuk
from borsuk import status as messages
from borsuk.config import Configuration


@pytest.fixture
def client(tmp_path, monkeypatch):
    config = Configuration(str(tmp_path / "config.json"))
    config.dry_run = True
    config.settle_delay = 0
    config.turn_phase_time = 0
    config.forward_time_per_unit = 0
    monkeypatch.setattr(borsuk, "config", config)
    monkeypatch.setattr(borsuk, "commands", None)
    monkeypatch.setattr(borsuk, "session", None)
    monkeypatch.setattr(borsuk, "current_status", messages.IDLE)
    with TestClient(borsuk.app) as client:
        yield client


def test_initial_status(client):
    data = client.get("/api/status").json()
    assert data["status"] == {"message": "Load a drawing file.", "severity": "info"}
    assert data["file_ready"] is False
    assert data["drawing"] is False


def test_root_redirects_to_ui(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/ui"


def test_ui_page(client):
    response = client.get("/ui")
    assert response.status_code == 200
    assert "fileInput" in response.text


def test_upload_valid_file(client):
    response = client.post("/api/file", content="0 5 rlineto\n5 5 lineto")
    assert response.status_code == 200
    assert response.json()["command_count"] == 2
    data = client.get("/api/status").json()
    assert data["status"]["message"] == "File ready!"
    assert data["file_ready"] is True


def test_upload_invalid_file(client):
    response = client.post("/api/file", content="0 5 rlineto\n5 5 circle")
    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown command on line 2."
    data = client.get("/api/status").json()
    assert data["status"] == {"message": "Unknown command on line 2.", "severity": "error"}
    assert data["file_ready"] is False


def test_start_without_file(client):
    assert client.post("/api/start").status_code == 400


def test_stop_discards_file(client):
    client.post("/api/file", content="0 5 rlineto")
    data = client.post("/api/stop").json()
    assert data["status"]["severity"] == "error"
    assert client.get("/api/status").json()["file_ready"] is False
    assert client.post("/api/start").status_code == 400


def test_draw_in_background(client):
    client.post("/api/file", content="0 5 rlineto\n5 5 lineto")
    response = client.post("/api/start")
    assert response.status_code == 200
    assert response.json()["status"]["message"] == "Drawing started!"

    for _ in range(200):
        data = client.get("/api/status").json()
        if not data["drawing"]:
            break
        time.sleep(0.01)
    assert data["status"]["message"] == "Drawing finished."


def test_preview(client):
    assert client.get("/api/preview").status_code == 404
    client.post("/api/file", content="0 5 rlineto\n5 5 lineto")
    response = client.get("/api/preview")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_config_roundtrip(client, tmp_path):
    assert client.get("/api/config").json()["dry_run"] is True
    response = client.post("/api/config", json={"settle_delay": 0.75})
    assert response.status_code == 200
    assert response.json()["config"]["settle_delay"] == 0.75
    assert Configuration(str(tmp_path / "config.json")).settle_delay == 0.75


def test_config_unknown_key(client):
    assert client.post("/api/config", json={"speed": 3}).status_code == 400


@pytest.mark.parametrize("values", [{"dry_run": "false"}, {"forward_power": "fast"}])
def test_config_wrong_type_is_not_saved(client, tmp_path, values):
    response = client.post("/api/config", json=values)
    assert response.status_code == 400
    assert not (tmp_path / "config.json").exists()
    assert client.get("/api/config").json()["forward_power"] == 15


def test_status_routes(client):
    for path in ("/status", "/api/status", "/api/"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["status"]["message"] == "Load a drawing file."
