# chickcare/db/seed_indexes.py
"""
Idempotent index seeding for ChickCare.

- Uses get_collection() (no direct client here).
- Matching by KEYS: if an index with same keys exists, keep it when options match.
- If options differ (unique / partialFilterExpression / collation), drop & recreate.
- task_completions: the unique (flock_id, task_id, day_date) index is what makes
  concurrent completions converge on a single row.
- Users: case-insensitive unique indexes (collation strength=2) on username & email.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collation import Collation
from pymongo.operations import IndexModel

from chickcare.db.mongodb import (
    CHICK_NOTES,
    CHICK_PHOTOS,
    CHICKS,
    FLOCKS,
    TASK_COMPLETIONS,
    TASKS,
    USERS,
    get_collection,
)

KeySpec = List[Tuple[str, int]]

# Case-insensitive (accent-sensitive) collation for users
COLLATION_CI = Collation(locale="en", strength=2)


def _normalize_key_from_mongo(key_doc: Dict[str, Any]) -> KeySpec:
    """Mongo returns an ordered mapping; convert to list of (field, direction)."""
    return [(k, int(v)) for k, v in key_doc.items()]


async def _find_existing_by_keys(coll, keys: KeySpec) -> Optional[Dict[str, Any]]:
    async for ix in coll.list_indexes():
        if "key" in ix and _normalize_key_from_mongo(ix["key"]) == keys:
            return ix
    return None


def _same_options(existing: Dict[str, Any], *, unique: Optional[bool], partial: Optional[Dict[str, Any]], collation: Optional[Collation]) -> bool:
    if bool(unique) != bool(existing.get("unique", False)):
        return False
    if (partial or None) != (existing.get("partialFilterExpression") or None):
        return False
    wanted = collation.document if collation is not None else None
    ex_collation = existing.get("collation")
    if wanted is None or ex_collation is None:
        return wanted is None and ex_collation is None
    # Mongo complète la collation avec ses valeurs par défaut : on compare le sous-ensemble demandé
    return all(ex_collation.get(k) == v for k, v in wanted.items())


async def ensure_index(coll_name: str, keys: KeySpec, *, name: Optional[str] = None,
                       unique: Optional[bool] = None,
                       partial: Optional[Dict[str, Any]] = None,
                       collation: Optional[Collation] = None) -> None:
    coll = await get_collection(coll_name)
    existing = await _find_existing_by_keys(coll, keys)
    if existing and _same_options(existing, unique=unique, partial=partial, collation=collation):
        return
    if existing:
        await coll.drop_index(existing["name"])
    opts: Dict[str, Any] = {}
    if name:
        opts["name"] = name
    if unique is not None:
        opts["unique"] = unique
    if partial:
        opts["partialFilterExpression"] = partial
    if collation is not None:
        opts["collation"] = collation
    await coll.create_indexes([IndexModel(keys, **opts)])


async def ensure_indexes() -> None:
    # ---------- users (CI uniques via collation) ----------
    await ensure_index(USERS, [("username", ASCENDING)], name="uniq_username_ci", unique=True, collation=COLLATION_CI)
    await ensure_index(USERS, [("email", ASCENDING)], name="uniq_email_ci", unique=True, collation=COLLATION_CI)

    # ---------- flocks ----------
    await ensure_index(FLOCKS, [("user_id", ASCENDING), ("created_at", DESCENDING)], name="ix_flocks__by_user_created")

    # ---------- tasks (catalogue) ----------
    await ensure_index(TASKS, [("code", ASCENDING)], name="uniq_task_code", unique=True)
    await ensure_index(TASKS, [("week_number", ASCENDING), ("day_number", ASCENDING), ("sort_order", ASCENDING)], name="ix_tasks__week_day_order")
    await ensure_index(TASKS, [("category", ASCENDING)])

    # ---------- task_completions ----------
    # Unicité d'une complétion par (élevage, tâche, jour)
    await ensure_index(TASK_COMPLETIONS, [("flock_id", ASCENDING), ("task_id", ASCENDING), ("day_date", ASCENDING)],
                       name="uniq_completion_per_flock_task_day", unique=True)
    await ensure_index(TASK_COMPLETIONS, [("flock_id", ASCENDING), ("day_date", ASCENDING), ("undone_at", ASCENDING)],
                       name="ix_completions__flock_day")
    await ensure_index(TASK_COMPLETIONS, [("flock_id", ASCENDING), ("completed_at", DESCENDING)])

    # ---------- chicks / photos / notes ----------
    await ensure_index(CHICKS, [("flock_id", ASCENDING), ("created_at", ASCENDING)])
    await ensure_index(CHICK_PHOTOS, [("chick_id", ASCENDING), ("taken_at", DESCENDING)])
    await ensure_index(CHICK_NOTES, [("chick_id", ASCENDING), ("created_at", DESCENDING)])


if __name__ == "__main__":
    asyncio.run(ensure_indexes())
