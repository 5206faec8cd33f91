import pytest
from fastapi.testclient import TestClient

from app.main import app
from srd.mappers import map_armor, map_monster, map_spell
from srd.sink import UpsertSink

from helpers import GOBLIN


@pytest.fixture
def client(monkeypatch, session_factory):
    monkeypatch.setattr("app.main.SessionLocal", session_factory)
    with session_factory() as session:
        sink = UpsertSink(session)
        sink.write(map_monster(GOBLIN))
        sink.write(
            map_monster(
                {
                    "index": "adult-red-dragon",
                    "name": "Adult Red Dragon",
                    "size": "Huge",
                    "type": "dragon",
                    "hit_points": 256,
                    "challenge_rating": 17,
                }
            )
        )
        sink.write(
            map_monster(
                {"index": "zombie", "name": "Zombie", "type": "undead", "hit_points": 22}
            )
        )
        sink.write(
            map_spell(
                {
                    "index": "fireball",
                    "name": "Fireball",
                    "level": 3,
                    "school": {"name": "Evocation"},
                    "damage": {"damage_type": {"name": "Fire"}},
                    "classes": [{"index": "sorcerer"}, {"index": "wizard"}],
                }
            )
        )
        sink.write(
            map_spell(
                {
                    "index": "bless",
                    "name": "Bless",
                    "level": 1,
                    "school": {"name": "Enchantment"},
                    "concentration": True,
                    "classes": [{"index": "cleric"}],
                }
            )
        )
        sink.write(map_armor({"index": "leather-armor", "name": "Leather Armor"}))
    return TestClient(app)


def test_monster_search_filters_by_type(client) -> None:
    response = client.get("/srd/monsters/search", params={"type": "DRAG"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 1
    assert payload["data"][0]["slug"] == "adult-red-dragon"
    assert payload["data"][0]["cr"] == "17"


def test_monster_search_hp_range_and_sort(client) -> None:
    response = client.get(
        "/srd/monsters/search", params={"hp_min": 5, "hp_max": 100, "sort": "hp_desc"}
    )
    payload = response.json()
    assert [item["slug"] for item in payload["data"]] == ["zombie", "goblin"]


def test_monster_payload_shape(client) -> None:
    payload = client.get("/srd/monsters/search", params={"name": "gob"}).json()
    goblin = payload["data"][0]
    assert goblin["int"] == 10
    assert goblin["str"] == 8
    assert "intl" not in goblin
    assert goblin["actions"][0]["name"] == "Scimitar"


def test_pagination_envelope(client) -> None:
    payload = client.get("/srd/monsters/search", params={"per_page": 2, "page": 2}).json()
    assert payload["total"] == 3
    assert payload["count"] == 1
    assert payload["page"] == 2
    assert payload["per_page"] == 2
    assert payload["total_pages"] == 2
    assert payload["has_more"] is False


def test_invalid_pagination_falls_back_to_defaults(client) -> None:
    payload = client.get("/srd/monsters/search", params={"per_page": 500, "page": "x"}).json()
    assert payload["page"] == 1
    assert payload["per_page"] == 20


def test_spell_search_filters(client) -> None:
    by_class = client.get("/srd/spells/search", params={"class": "wizard"}).json()
    assert [item["slug"] for item in by_class["data"]] == ["fireball"]

    by_concentration = client.get("/srd/spells/search", params={"concentration": "true"}).json()
    assert [item["slug"] for item in by_concentration["data"]] == ["bless"]

    by_level = client.get("/srd/spells/search", params={"level_min": 2}).json()
    assert [item["slug"] for item in by_level["data"]] == ["fireball"]

    by_damage = client.get("/srd/spells/search", params={"damage_type": "FIRE"}).json()
    assert by_damage["total"] == 1


def test_get_entry_by_slug(client) -> None:
    response = client.get("/srd/armor/leather-armor")
    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "Leather Armor"
    assert payload["ac"] == 10
    assert "id" not in payload


def test_get_entry_missing_and_unknown_kind(client) -> None:
    assert client.get("/srd/armor/mithral-plate").status_code == 404
    assert client.get("/srd/vehicles/cart").status_code == 404


def test_health_reports_unavailable_store(monkeypatch) -> None:
    def broken():
        raise RuntimeError("no database")

    monkeypatch.setattr("app.main.check_db_connection", broken)
    response = TestClient(app).get("/health")
    assert response.status_code == 503
