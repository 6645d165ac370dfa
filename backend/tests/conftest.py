# backend/tests/conftest.py
# Fixtures communes : settings de test, base MongoDB en mémoire, client HTTP authentifié.

import copy
import functools
import os
import tempfile
from types import SimpleNamespace

# Settings de test, posés avant tout import de chickcare (get_settings est mis en cache)
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOGS_DIR"] = tempfile.mkdtemp(prefix="chickcare-logs-")
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="chickcare-uploads-")
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["REFERENCE_TIMEZONE"] = "America/Los_Angeles"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from chickcare.core.security import get_current_user
from chickcare.db import mongodb
from chickcare.db.seed_data import load_task_seed
from chickcare.models.user import User
from chickcare.services.photo_storage import PhotoStorage, get_photo_storage


# ---------------------------------------------------------------------------
# Base MongoDB en mémoire (sous-ensemble de l'API Motor utilisé par l'application)
# ---------------------------------------------------------------------------


def _fold(value, ci):
    if ci and isinstance(value, str):
        return value.casefold()
    return value


def _eq(a, b, ci=False):
    return _fold(a, ci) == _fold(b, ci)


def _match_op(value, op, arg, ci):
    if op == "$in":
        return any(_eq(value, a, ci) for a in arg)
    if op == "$nin":
        return not any(_eq(value, a, ci) for a in arg)
    if op == "$ne":
        return not _eq(value, arg, ci)
    if op == "$exists":
        return (value is not None) == bool(arg)
    if value is None:
        return False
    if op == "$gt":
        return value > arg
    if op == "$gte":
        return value >= arg
    if op == "$lt":
        return value < arg
    if op == "$lte":
        return value <= arg
    raise NotImplementedError(op)


def _matches(doc, flt, ci=False):
    for key, cond in (flt or {}).items():
        if key == "$or":
            if not any(_matches(doc, sub, ci) for sub in cond):
                return False
            continue
        if key == "$and":
            if not all(_matches(doc, sub, ci) for sub in cond):
                return False
            continue
        value = doc.get(key)
        if isinstance(cond, dict) and cond and all(k.startswith("$") for k in cond):
            if not all(_match_op(value, op, arg, ci) for op, arg in cond.items()):
                return False
        elif not _eq(value, cond, ci):
            return False
    return True


def _compare(a, b):
    # Ordre Mongo simplifié : None (ou champ absent) avant toute valeur
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return (a > b) - (a < b)


def _sorted(docs, sort):
    if not sort:
        return list(docs)

    def cmp(x, y):
        for field, direction in sort:
            c = _compare(x.get(field), y.get(field))
            if c:
                return c * direction
        return 0

    return sorted(docs, key=functools.cmp_to_key(cmp))


def _project(doc, projection):
    if not projection:
        return copy.deepcopy(doc)
    included = [k for k, v in projection.items() if v]
    if included:
        out = {k: doc[k] for k in included if k in doc}
        if projection.get("_id", 1) and "_id" in doc:
            out["_id"] = doc["_id"]
        return copy.deepcopy(out)
    return copy.deepcopy({k: v for k, v in doc.items() if k not in projection})


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        spec = key if isinstance(key, list) else [(key, direction)]
        self._docs = _sorted(self._docs, spec)
        return self

    def __aiter__(self):
        self._it = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._it)
        except StopIteration:
            raise StopAsyncIteration

    async def to_list(self, length=None):
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    """Collection en mémoire : filtres usuels, upserts, index uniques (collation CI comprise)."""

    def __init__(self, name):
        self.name = name
        self.docs = []
        self.indexes = {"_id_": {"key": {"_id": 1}, "name": "_id_", "unique": True}}

    # --- helpers ---
    def seed(self, docs):
        """Insertion synchrone (préparation des tests de routes)."""
        for d in docs:
            d.setdefault("_id", ObjectId())
            self.docs.append(copy.deepcopy(d))

    def _check_unique(self, candidate):
        for ix in self.indexes.values():
            if not ix.get("unique"):
                continue
            ci = (ix.get("collation") or {}).get("strength") in (1, 2)
            fields = list(ix["key"].keys())
            key = tuple(_fold(candidate.get(f), ci) for f in fields)
            for other in self.docs:
                if other["_id"] == candidate["_id"]:
                    continue
                if tuple(_fold(other.get(f), ci) for f in fields) == key:
                    raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {ix['name']}", 11000)

    def _find_all(self, flt, collation=None):
        ci = collation is not None
        return [d for d in self.docs if _matches(d, flt, ci)]

    @staticmethod
    def _apply(doc, update, inserting=False):
        new = copy.deepcopy(doc)
        for k, v in update.get("$set", {}).items():
            new[k] = copy.deepcopy(v)
        if inserting:
            for k, v in update.get("$setOnInsert", {}).items():
                new[k] = copy.deepcopy(v)
        for k in update.get("$unset", {}):
            new.pop(k, None)
        for k, v in update.get("$inc", {}).items():
            new[k] = new.get(k, 0) + v
        return new

    def _replace(self, old, new):
        self._check_unique(new)
        idx = next(i for i, d in enumerate(self.docs) if d["_id"] == old["_id"])
        self.docs[idx] = new

    def _upsert_doc(self, flt, update):
        base = {k: v for k, v in flt.items() if not k.startswith("$") and not isinstance(v, dict)}
        base["_id"] = base.get("_id", ObjectId())
        new = self._apply(base, update, inserting=True)
        self._check_unique(new)
        self.docs.append(new)
        return new

    # --- API Motor ---
    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        new = copy.deepcopy(doc)
        self._check_unique(new)
        self.docs.append(new)
        return SimpleNamespace(inserted_id=new["_id"], acknowledged=True)

    async def find_one(self, flt=None, projection=None, *, sort=None, collation=None):
        docs = _sorted(self._find_all(flt, collation), sort)
        return _project(docs[0], projection) if docs else None

    def find(self, flt=None, projection=None, *, sort=None, collation=None):
        docs = _sorted(self._find_all(flt, collation), sort)
        return FakeCursor([_project(d, projection) for d in docs])

    async def count_documents(self, flt):
        return len(self._find_all(flt))

    async def update_one(self, flt, update, upsert=False):
        found = self._find_all(flt)
        if found:
            old = found[0]
            new = self._apply(old, update)
            self._replace(old, new)
            return SimpleNamespace(matched_count=1, modified_count=int(new != old), upserted_id=None)
        if upsert:
            new = self._upsert_doc(flt, update)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=new["_id"])
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def find_one_and_update(self, flt, update, projection=None, *, upsert=False, return_document=False, sort=None):
        found = _sorted(self._find_all(flt), sort)
        if found:
            old = found[0]
            new = self._apply(old, update)
            self._replace(old, new)
            return _project(new if return_document else old, projection)
        if upsert:
            new = self._upsert_doc(flt, update)
            return _project(new, projection) if return_document else None
        return None

    async def delete_one(self, flt):
        found = self._find_all(flt)
        if found:
            self.docs.remove(found[0])
        return SimpleNamespace(deleted_count=len(found[:1]))

    async def delete_many(self, flt):
        found = self._find_all(flt)
        for d in found:
            self.docs.remove(d)
        return SimpleNamespace(deleted_count=len(found))

    def list_indexes(self):
        return FakeCursor(copy.deepcopy(list(self.indexes.values())))

    async def create_indexes(self, models):
        names = []
        for m in models:
            doc = dict(m.document)
            doc["key"] = dict(doc["key"])
            self.indexes[doc["name"]] = doc
            names.append(doc["name"])
        return names

    async def drop_index(self, name):
        self.indexes.pop(name, None)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name):
        return {"ok": 1.0}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    """Remplace la base Motor par une base en mémoire (aucun MongoDB requis)."""
    db = FakeDatabase()
    monkeypatch.setattr(mongodb, "db", db)
    return db


@pytest.fixture
def seeded_tasks(fake_db):
    """Catalogue réel (data/seeds/tasks.json) inséré dans la base en mémoire."""
    _, tasks = load_task_seed()
    fake_db["tasks"].seed([t.model_dump() for t in tasks])
    return fake_db["tasks"].docs


@pytest.fixture
def user():
    return User(_id=ObjectId(), username="henrietta", email="henrietta@example.com")


@pytest.fixture
def storage(tmp_path):
    return PhotoStorage(uploads_dir=tmp_path / "photos", base_url="/uploads/photos", max_bytes=5 * 1024 * 1024)


@pytest.fixture
def client(user, storage):
    """TestClient authentifié (override de get_current_user) avec stockage photo temporaire."""
    from chickcare.main import app

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_photo_storage] = lambda: storage
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
