# backend/tests/test_task_resolution.py
"""Résolution des tâches d'un élevage : semaine affichée, état du jour, applicabilité."""

import datetime as dt

import pytest
from bson import ObjectId

from chickcare.core.calendar_utils import today
from chickcare.services import completion_ledger
from chickcare.services.flocks import create_flock, start_flock
from chickcare.services.task_resolution import resolve_tasks_for_flock

UTC = dt.timezone.utc
START = dt.datetime(2026, 3, 1, 17, 0, tzinfo=UTC)  # 09:00 à Los Angeles


def _by_code(result):
    return {t["code"]: t for t in result["tasks"]}


@pytest.mark.asyncio
async def test_preparing_flock_gets_week_zero(seeded_tasks):
    flock = await create_flock(ObjectId())
    result = await resolve_tasks_for_flock(flock)

    assert result["current_week"] == 0
    assert result["current_day"] == 0
    assert result["flock_status"] == "preparing"
    assert len(result["tasks"]) == 7
    assert all(t["week_number"] == 0 for t in result["tasks"])
    assert not any(t["is_completed"] for t in result["tasks"])


@pytest.mark.asyncio
async def test_started_flock_on_day_one(seeded_tasks):
    flock = await start_flock(await create_flock(ObjectId()), START)
    result = await resolve_tasks_for_flock(flock, now=START)

    assert (result["current_week"], result["current_day"]) == (1, 1)
    tasks = _by_code(result)
    assert tasks["w1-01"]["is_applicable_today"]  # quotidienne
    assert tasks["w1-06"]["is_applicable_today"]  # épinglée jour 1
    assert not tasks["w1-08"]["is_applicable_today"]  # épinglée jour 2


@pytest.mark.asyncio
async def test_completion_shown_only_today(seeded_tasks):
    flock = await start_flock(await create_flock(ObjectId()), START)
    task = next(t for t in seeded_tasks if t["code"] == "w1-01")
    day_d = START + dt.timedelta(hours=2)

    await completion_ledger.complete(flock.id, task["_id"], today(day_d))

    same_day = await resolve_tasks_for_flock(flock, requested_week=1, now=day_d)
    assert _by_code(same_day)["w1-01"]["is_completed"] is True

    next_day = await resolve_tasks_for_flock(flock, requested_week=1, now=day_d + dt.timedelta(days=1))
    assert _by_code(next_day)["w1-01"]["is_completed"] is False


@pytest.mark.asyncio
async def test_requested_week_overrides_current(seeded_tasks):
    flock = await start_flock(await create_flock(ObjectId()), START)
    result = await resolve_tasks_for_flock(flock, requested_week=3, now=START + dt.timedelta(days=2))

    assert result["current_week"] == 1
    assert result["current_day"] == 3
    assert result["tasks"] and all(t["week_number"] == 3 for t in result["tasks"])


@pytest.mark.asyncio
async def test_other_week_completion_not_overlaid(seeded_tasks):
    """Une tâche d'une autre semaine n'apparaît jamais comme faite (annotation du jour seulement)."""
    flock = await start_flock(await create_flock(ObjectId()), START)
    now = START + dt.timedelta(days=9)
    past = next(t for t in seeded_tasks if t["code"] == "w1-06")
    await completion_ledger.complete(flock.id, past["_id"], today(START))

    result = await resolve_tasks_for_flock(flock, requested_week=1, now=now)
    assert result["current_week"] == 2
    assert _by_code(result)["w1-06"]["is_completed"] is False


@pytest.mark.asyncio
async def test_week_caps_at_eight(seeded_tasks):
    flock = await start_flock(await create_flock(ObjectId()), START)
    result = await resolve_tasks_for_flock(flock, now=START + dt.timedelta(days=120))
    assert result["current_week"] == 8
    assert result["tasks"] == []
