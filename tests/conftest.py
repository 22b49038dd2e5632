import copy
import os
import time
import uuid
from types import SimpleNamespace

os.environ["LOG_TO_FILE"] = "0"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DATABASE_NAME", None)

import gridfs  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from pymongo.errors import DuplicateKeyError  # noqa: E402

import database  # noqa: E402
import main  # noqa: E402
from autosave import Debouncer  # noqa: E402
from content import ContentStore  # noqa: E402


class FakeCursor(list):
    def limit(self, n):
        return FakeCursor(self[:n])


class FakeCollection:
    """Just enough of pymongo's Collection for the store and auth."""

    def __init__(self):
        self.docs = []
        self.fail_on = {}
        self.calls = []
        self.delay_on = {}

    def _check(self, name):
        self.calls.append(name)
        if name in self.delay_on:
            time.sleep(self.delay_on[name])
        exc = self.fail_on.get(name)
        if exc is not None:
            raise exc

    @staticmethod
    def _match(doc, filt):
        return all(doc.get(k) == v for k, v in (filt or {}).items())

    def find_one(self, filt=None):
        self._check("find_one")
        for doc in self.docs:
            if self._match(doc, filt):
                return copy.deepcopy(doc)
        return None

    def find(self, filt=None):
        self._check("find")
        return FakeCursor(copy.deepcopy(d) for d in self.docs if self._match(d, filt))

    def insert_one(self, doc):
        self._check("insert_one")
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", uuid.uuid4().hex)
        if any(d["_id"] == doc["_id"] for d in self.docs):
            raise DuplicateKeyError("duplicate key")
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def replace_one(self, filt, doc, upsert=False):
        self._check("replace_one")
        for i, existing in enumerate(self.docs):
            if self._match(existing, filt):
                self.docs[i] = copy.deepcopy(doc)
                return SimpleNamespace(matched_count=1)
        if upsert:
            self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(matched_count=0)

    def delete_one(self, filt):
        self._check("delete_one")
        for i, existing in enumerate(self.docs):
            if self._match(existing, filt):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDB(dict):
    def __missing__(self, name):
        self[name] = FakeCollection()
        return self[name]

    def list_collection_names(self):
        return list(self.keys())


class FakeStream:
    def __init__(self, data, metadata):
        self._data = data
        self.metadata = metadata

    def read(self):
        return self._data


class FakeBucket:
    def __init__(self):
        self.files = {}

    def upload_from_stream(self, name, data, metadata=None):
        self.files[name] = (bytes(data), metadata or {})

    def open_download_stream_by_name(self, name):
        if name not in self.files:
            raise gridfs.NoFile(name)
        data, metadata = self.files[name]
        return FakeStream(data, metadata)


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def cache_path(tmp_path):
    return str(tmp_path / "cache" / "portfolio.json")


@pytest.fixture
def store(collection, cache_path):
    return ContentStore(collection=collection, cache_path=cache_path)


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDB()
    monkeypatch.setattr(database, "db", db)
    return db


@pytest.fixture
def debouncer():
    d = Debouncer(delay=0.3)
    yield d
    d.shutdown()


@pytest.fixture
def client(fake_db, store, bucket, debouncer):
    store.load()
    main.app.dependency_overrides[main.get_store] = lambda: store
    main.app.dependency_overrides[main.get_bucket] = lambda: bucket
    main.app.dependency_overrides[main.get_debouncer] = lambda: debouncer
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    r = client.post("/auth/signup", json={"email": "admin@portfolio.com", "password": "s3cret-pass"})
    assert r.status_code == 200
    r = client.post("/auth/login", json={"email": "admin@portfolio.com", "password": "s3cret-pass"})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
