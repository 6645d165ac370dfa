# backend/tests/test_task_catalog.py
"""Catalogue de tâches : requêtes par semaine / jour / fréquence / catégorie."""

import pytest
from bson import ObjectId

from chickcare.core.errors import TaskNotFound
from chickcare.services.task_catalog import (
    all_tasks,
    collect,
    get_task,
    tasks_by_category,
    tasks_by_frequency,
    tasks_for_week,
    tasks_for_week_and_day,
)


@pytest.mark.asyncio
async def test_week_zero_is_preparation(seeded_tasks):
    tasks = await collect(tasks_for_week(0))
    assert len(tasks) == 7
    assert {t.category for t in tasks} == {"preparation"}
    assert [t.sort_order for t in tasks] == sorted(t.sort_order for t in tasks)


@pytest.mark.asyncio
async def test_week_order_puts_unpinned_tasks_first(seeded_tasks):
    tasks = await collect(tasks_for_week(1))
    assert len(tasks) == 17
    days = [t.day_number for t in tasks]
    first_pinned = next(i for i, d in enumerate(days) if d is not None)
    assert all(d is None for d in days[:first_pinned])
    pinned = days[first_pinned:]
    assert None not in pinned
    assert pinned == sorted(pinned)


@pytest.mark.asyncio
async def test_sequence_is_restartable(seeded_tasks):
    it1 = await collect(tasks_for_week(2))
    it2 = await collect(tasks_for_week(2))
    assert [t.id for t in it1] == [t.id for t in it2]


@pytest.mark.asyncio
async def test_empty_week_is_empty_sequence(seeded_tasks):
    assert await collect(tasks_for_week(7)) == []


@pytest.mark.asyncio
async def test_week_and_day_includes_daily_tasks(seeded_tasks):
    tasks = await collect(tasks_for_week_and_day(1, 2))
    codes = {t.code for t in tasks}
    assert {"w1-08", "w1-09", "w1-10"} <= codes
    assert {"w1-01", "w1-02"} <= codes  # quotidiennes sans jour
    assert "w1-06" not in codes  # épinglée jour 1


@pytest.mark.asyncio
async def test_by_frequency(seeded_tasks):
    daily = await collect(tasks_by_frequency(1, "daily"))
    assert daily and all(t.frequency == "daily" for t in daily)
    assert all(t.week_number == 1 for t in daily)


@pytest.mark.asyncio
async def test_all_and_by_category(seeded_tasks):
    everything = await collect(all_tasks())
    assert len(everything) == 65
    weeks = [t.week_number for t in everything]
    assert weeks == sorted(weeks)

    milestones = await collect(tasks_by_category("milestone"))
    assert milestones and all(t.category == "milestone" for t in milestones)


@pytest.mark.asyncio
async def test_get_task(seeded_tasks):
    doc = seeded_tasks[0]
    task = await get_task(str(doc["_id"]))
    assert task.code == doc["code"]

    with pytest.raises(TaskNotFound):
        await get_task(ObjectId())
    with pytest.raises(TaskNotFound):
        await get_task("not-an-id")
