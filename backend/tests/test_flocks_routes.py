# backend/tests/test_flocks_routes.py
"""Routes élevages, tâches et complétions (utilisateur authentifié par override)."""

import datetime as dt

from bson import ObjectId


def _create(client, **payload):
    r = client.post("/flocks", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_default_flock(client):
    flock = _create(client)
    assert flock["name"] == "My Flock"
    assert flock["status"] == "preparing"
    assert flock["current_week"] == 0
    assert ObjectId.is_valid(flock["id"])


def test_create_without_body(client):
    r = client.post("/flocks")
    assert r.status_code == 201
    assert r.json()["status"] == "preparing"


def test_create_rejects_long_name(client):
    r = client.post("/flocks", json={"name": "x" * 51})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_list_get_patch_start(client):
    flock = _create(client, name="Spring girls")
    assert [f["id"] for f in client.get("/flocks").json()] == [flock["id"]]
    assert client.get(f"/flocks/{flock['id']}").json()["name"] == "Spring girls"

    r = client.patch(f"/flocks/{flock['id']}", json={"action": "start"})
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["current_week"] == 1
    assert r.json()["start_date"] is not None

    r = client.patch(f"/flocks/{flock['id']}", json={"action": "start"})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "INVALID_TRANSITION"

    r = client.patch(f"/flocks/{flock['id']}", json={"name": "Summer girls"})
    assert r.json()["name"] == "Summer girls"


def test_foreign_and_missing_flocks(client, fake_db):
    foreign = fake_db["flocks"]
    foreign.seed([{"user_id": ObjectId(), "name": "Not mine", "status": "preparing", "current_week": 0,
                   "created_at": dt.datetime.now(dt.timezone.utc)}])
    foreign_id = str(foreign.docs[0]["_id"])

    assert client.get(f"/flocks/{foreign_id}").status_code == 403
    assert client.delete(f"/flocks/{foreign_id}").status_code == 403
    assert client.get(f"/flocks/{ObjectId()}").status_code == 404
    assert client.get("/flocks/not-an-id").status_code == 404


def test_tasks_and_completions(client, seeded_tasks):
    flock = _create(client, start_date=dt.datetime.now(dt.timezone.utc).isoformat())
    tasks = client.get(f"/flocks/{flock['id']}/tasks").json()
    assert tasks["current_week"] == 1
    assert tasks["current_day"] == 1
    assert tasks["flock_status"] == "active"
    daily = next(t for t in tasks["tasks"] if t["frequency"] == "daily")
    assert daily["is_applicable_today"] and not daily["is_completed"]

    r = client.post(f"/flocks/{flock['id']}/completions", json={"task_id": daily["id"], "notes": "Topped up"})
    assert r.status_code == 201, r.text
    assert r.json()["is_completed"] is True

    tasks = client.get(f"/flocks/{flock['id']}/tasks?week=1").json()
    assert next(t for t in tasks["tasks"] if t["id"] == daily["id"])["is_completed"] is True

    day = client.get(f"/flocks/{flock['id']}/completions").json()
    assert [c["task_id"] for c in day] == [daily["id"]]
    assert day[0]["task"]["id"] == daily["id"]

    stats = client.get(f"/flocks/{flock['id']}/completions/stats").json()
    assert stats["total_completed"] == 1

    r = client.post(f"/flocks/{flock['id']}/completions", json={"task_id": daily["id"], "action": "undo"})
    assert r.status_code == 200
    assert r.json()["is_completed"] is False


def test_undo_never_completed_is_404(client, seeded_tasks):
    flock = _create(client)
    task_id = str(seeded_tasks[0]["_id"])
    r = client.post(
        f"/flocks/{flock['id']}/completions",
        json={"task_id": task_id, "action": "undo", "day_date": "2026-03-05"},
    )
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


def test_explicit_day_date_is_normalized(client, seeded_tasks):
    flock = _create(client)
    task_id = str(seeded_tasks[0]["_id"])
    # 02:00 UTC le 6 mars = 5 mars dans le fuseau de référence
    r = client.post(
        f"/flocks/{flock['id']}/completions",
        json={"task_id": task_id, "day_date": "2026-03-06T02:00:00Z"},
    )
    assert r.status_code == 201
    assert r.json()["day_date"] == "2026-03-05"

    listed = client.get(f"/flocks/{flock['id']}/completions?day=2026-03-05").json()
    assert len(listed) == 1


def test_completion_for_unknown_task_is_404(client):
    flock = _create(client)
    r = client.post(f"/flocks/{flock['id']}/completions", json={"task_id": str(ObjectId())})
    assert r.status_code == 404


def test_delete_flock(client):
    flock = _create(client)
    r = client.delete(f"/flocks/{flock['id']}")
    assert r.status_code == 200
    assert r.json()["deleted"]["flocks"] == 1
    assert client.get(f"/flocks/{flock['id']}").status_code == 404


def test_catalog_routes(client, seeded_tasks):
    week0 = client.get("/tasks?week=0").json()
    assert len(week0) == 7
    one = client.get(f"/tasks/{week0[0]['id']}")
    assert one.status_code == 200
    assert one.json()["code"] == week0[0]["code"]
    assert client.get(f"/tasks/{ObjectId()}").status_code == 404


def test_returned_day_date_can_be_sent_back(client, seeded_tasks):
    flock = _create(client)
    task_id = str(seeded_tasks[0]["_id"])
    url = f"/flocks/{flock['id']}/completions"

    done = client.post(url, json={"task_id": task_id, "day_date": "2026-03-05", "notes": "fed"}).json()
    again = client.post(url, json={"task_id": task_id, "day_date": done["day_date"]})
    assert again.status_code == 201
    assert again.json()["id"] == done["id"]
    assert again.json()["notes"] == "fed"

    r = client.post(url, json={"task_id": task_id, "action": "undo", "day_date": done["day_date"]})
    assert r.status_code == 200, r.text
    assert r.json()["day_date"] == "2026-03-05"
    assert r.json()["is_completed"] is False
    assert client.get(f"{url}?day=2026-03-04").json() == []
