# backend/tests/test_ownership.py

import pytest
from bson import ObjectId

from chickcare.core.errors import ChickNotFound, FlockNotFound, ForbiddenError
from chickcare.core.settings import get_settings
from chickcare.services.flocks import create_flock
from chickcare.services.ownership import get_flock_chick, get_owned_flock


@pytest.mark.asyncio
async def test_owner_gets_flock():
    owner = ObjectId()
    flock = await create_flock(owner)
    assert (await get_owned_flock(owner, str(flock.id))).id == flock.id


@pytest.mark.asyncio
async def test_missing_or_malformed_id_is_not_found():
    with pytest.raises(FlockNotFound):
        await get_owned_flock(ObjectId(), ObjectId())
    with pytest.raises(FlockNotFound):
        await get_owned_flock(ObjectId(), "nope")


@pytest.mark.asyncio
async def test_foreign_flock_is_forbidden():
    flock = await create_flock(ObjectId())
    with pytest.raises(ForbiddenError):
        await get_owned_flock(ObjectId(), flock.id)


@pytest.mark.asyncio
async def test_foreign_flock_hidden_when_configured(monkeypatch):
    flock = await create_flock(ObjectId())
    monkeypatch.setattr(get_settings(), "hide_foreign_resources", True)
    with pytest.raises(FlockNotFound):
        await get_owned_flock(ObjectId(), flock.id)


@pytest.mark.asyncio
async def test_chick_from_another_flock_is_not_found(fake_db):
    owner = ObjectId()
    mine = await create_flock(owner)
    theirs = await create_flock(ObjectId())
    res = await fake_db["chicks"].insert_one({"flock_id": theirs.id, "name": "Pip"})
    with pytest.raises(ChickNotFound):
        await get_flock_chick(mine, res.inserted_id)
