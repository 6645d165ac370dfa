# backend/tests/test_seed_data.py
"""Chargement versionné du catalogue de tâches."""

import json

import pytest

from chickcare.db.seed_data import load_task_seed, seed_tasks


def test_seed_file_is_valid():
    version, tasks = load_task_seed()
    assert len(version) == 12
    assert len(tasks) == 65
    counts = {}
    for t in tasks:
        counts[t.week_number] = counts.get(t.week_number, 0) + 1
    assert counts == {0: 7, 1: 17, 2: 9, 3: 10, 4: 10, 5: 12}


def test_duplicate_codes_rejected(tmp_path):
    entry = {
        "code": "w0-01",
        "title": "Set up brooder",
        "description": "",
        "week_number": 0,
        "frequency": "once",
        "category": "preparation",
    }
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([entry, entry]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_task_seed(path)


@pytest.mark.asyncio
async def test_seed_is_idempotent_and_keeps_ids(fake_db):
    first = await seed_tasks()
    assert first["upserted"] == 65 and not first["skipped"]
    ids = {d["code"]: d["_id"] for d in fake_db["tasks"].docs}

    second = await seed_tasks()
    assert second["skipped"]

    forced = await seed_tasks(force=True)
    assert forced["upserted"] == 0
    assert forced["updated"] == 0
    assert {d["code"]: d["_id"] for d in fake_db["tasks"].docs} == ids
    assert fake_db["meta"].docs[0]["version"] == first["version"]


@pytest.mark.asyncio
async def test_seed_updates_changed_tasks(fake_db, tmp_path):
    await seed_tasks()
    _, tasks = load_task_seed()
    data = [t.model_dump() for t in tasks]
    data[0]["title"] = "Set up the brooder (revised)"
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    summary = await seed_tasks(file_path=path)
    assert summary["updated"] == 1
    assert summary["upserted"] == 0
    doc = next(d for d in fake_db["tasks"].docs if d["code"] == data[0]["code"])
    assert doc["title"] == "Set up the brooder (revised)"
