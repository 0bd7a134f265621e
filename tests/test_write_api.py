# tests/test_write_api.py
import logging

NEW_EVENT = {
    "title": "Lights over the bay",
    "category": "Sighting",
    "date": "May 5, 2010",
    "craft_type": "Orb",
}


def test_create_assigns_next_id(client, seeded):
    r = client.post("/api/events", json=NEW_EVENT)
    assert r.status_code == 201
    ev = r.json()
    assert ev["id"] == "22"
    assert ev["likes"] == 0 and ev["dislikes"] == 0

    r = client.get("/api/events/22")
    assert r.json()["title"] == "Lights over the bay"


def test_create_on_empty_store_starts_at_one(client):
    r = client.post("/api/events", json=NEW_EVENT)
    assert r.json()["id"] == "1"


def test_create_rejects_unknown_category(client):
    r = client.post("/api/events", json={**NEW_EVENT, "category": "Cryptids"})
    assert r.status_code == 422
    assert "category" in r.json()["error"]


def test_create_validates_deep_dive(client):
    bad = {**NEW_EVENT, "deep_dive_content": {"Images": [{"type": "video", "content": []}]}}
    assert client.post("/api/events", json=bad).status_code == 422

    good = {**NEW_EVENT, "deep_dive_content": {"Images": [{"type": "slider", "content": ["a.jpg"]}]}}
    r = client.post("/api/events", json=good)
    assert r.status_code == 201
    assert r.json()["deep_dive_content"] == {"Images": [{"type": "slider", "content": ["a.jpg"]}]}


def test_update_is_partial(client, seeded):
    r = client.put("/api/events/14", json={"notoriety": "99"})
    assert r.status_code == 200
    ev = r.json()
    assert ev["notoriety"] == "99"
    assert ev["title"] == "Japan Air Lines Flight 1628"
    assert ev["id"] == "14"


def test_update_and_delete_unknown(client):
    assert client.put("/api/events/404", json={"title": "x"}).status_code == 404
    r = client.delete("/api/events/404")
    assert r.status_code == 404
    assert r.json() == {"error": "Event not found"}


def test_delete(client, seeded):
    r = client.delete("/api/events/3")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get("/api/events/3").status_code == 404


def test_rating_increments(client, seeded):
    r = client.post("/api/events/17/rating", json={"rating": "LIKE"})
    assert r.status_code == 200
    assert r.json() == {"success": True, "likes": 1, "dislikes": 0}

    r = client.post("/api/events/17/rating", json={"rating": "DISLIKE"})
    assert r.json()["dislikes"] == 1

    r = client.post("/api/events/17/rating", json={"rating": "MEH"})
    assert r.status_code == 422


def test_rating_is_logged(client, seeded, caplog):
    caplog.set_level(logging.INFO, logger="ufo_timeline.db.crud")
    client.post("/api/events/17/rating", json={"rating": "LIKE"})
    assert "rated event 17: LIKE" in caplog.text
