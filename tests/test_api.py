from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from db import database
from db.store import PersistenceError
from main import app


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[review]",
                "page_size = 100",
                "timezone = \"UTC\"",
                "",
                "[logging]",
                "level = \"WARNING\"",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    config_dir = tmp_path / ".vaultrecall"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "vaultrecall.db")
    for name in ("REVIEW_PAGE_SIZE", "REVIEW_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    with TestClient(app) as test_client:
        yield test_client


def _generate(client, item_id, title, content):
    response = client.post("/flashcards/generate", json={"id": item_id, "title": title, "content": content})
    assert response.status_code == 201
    return response.json()


def test_review_flow_over_http(client):
    first = _generate(client, "item-1", "ACID", "Atomicity, consistency, isolation, durability")
    _generate(client, "item-2", "CAP theorem", "Pick two of consistency, availability, partition tolerance")

    view = client.post("/review/start").json()
    assert view["active"] is True
    assert view["remaining"] == 2
    assert view["stats"]["due_today"] == 2
    assert view["active_card"]["id"] == first[0]["id"]
    assert view["active_card"]["question"] == "Explain: ACID"
    assert view["active_card"]["answer"] is None

    view = client.post("/review/reveal", json={"typed_answer": "atomicity, consistency, isolation, durability"}).json()
    assert view["revealed"] is True
    assert view["active_card"]["answer"] == "Atomicity, consistency, isolation, durability"
    assert view["recall_similarity"] == 100

    view = client.post("/review/rate", json={"rating": 2}).json()
    assert view["remaining"] == 1
    assert view["revealed"] is False
    assert view["stats"]["due_today"] == 1
    assert view["stats"]["upcoming"] == 1

    client.post("/review/reveal")
    view = client.post("/review/rate", json={"rating": 0}).json()
    assert view["caught_up"] is True
    assert view["active"] is True

    view = client.post("/review/close").json()
    assert view["active"] is False
    assert client.get("/review").json()["active"] is False

    history = client.get(f"/flashcards/{first[0]['id']}/history").json()
    assert [event["rating"] for event in history["events"]] == [2]
    assert history["consistent"] is True


def test_rate_without_reveal_changes_nothing(client):
    card = _generate(client, "item-1", "ACID", "Atomicity...")[0]
    client.post("/review/start")

    view = client.post("/review/rate", json={"rating": 3}).json()

    assert view["remaining"] == 1
    assert client.get(f"/flashcards/{card['id']}/history").json()["events"] == []


def test_rating_outside_scale_is_rejected(client):
    _generate(client, "item-1", "ACID", "Atomicity...")
    client.post("/review/start")
    client.post("/review/reveal")

    response = client.post("/review/rate", json={"rating": 4})

    assert response.status_code == 422


def test_list_flashcards_and_stats(client):
    _generate(client, "item-1", "ACID", "Atomicity...")

    cards = client.get("/flashcards").json()
    stats = client.get("/stats").json()

    assert len(cards) == 1
    assert cards[0]["type"] == "basic_qa"
    assert stats == {"due_today": 1, "overdue": 0, "upcoming": 0, "mastery": 0}


def test_history_for_unknown_card_is_404(client):
    response = client.get("/flashcards/card-missing/history")
    assert response.status_code == 404


def test_storage_failure_maps_to_503(client, monkeypatch):
    store = client.app.state.store

    def broken(as_of):
        raise PersistenceError("database is locked")

    monkeypatch.setattr(store, "get_dashboard_counts", broken)

    response = client.get("/stats")

    assert response.status_code == 503
    assert response.json()["detail"] == "database is locked"
