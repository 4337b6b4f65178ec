import copy
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth
from google.api_core.exceptions import NotFound, PermissionDenied

import config
from main import app
from routers.deps import get_bucket, get_store
from services.query_service import ListingStore


# ── In-memory Firestore ─────────────────────────────────────────────────────

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id    = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocument:
    def __init__(self, db, collection, doc_id):
        self._db        = db
        self.collection = collection
        self.id         = doc_id

    def _docs(self):
        self._db.check(self.collection)
        return self._db.data[self.collection]

    def get(self):
        return FakeSnapshot(self.id, self._docs().get(self.id))

    def set(self, data):
        self._docs()[self.id] = copy.deepcopy(data)

    def update(self, changes):
        docs = self._docs()
        if self.id not in docs:
            raise NotFound(f"No document to update: {self.collection}/{self.id}")
        docs[self.id].update(copy.deepcopy(changes))

    def delete(self):
        self._docs().pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection, filters=(), orders=(), limit_to=None):
        self._db        = db
        self.collection = collection
        self._filters   = filters
        self._orders    = orders
        self._limit     = limit_to

    def where(self, filter=None):
        return FakeQuery(self._db, self.collection, self._filters + (filter,), self._orders, self._limit)

    def order_by(self, field_path, direction="ASCENDING"):
        orders = self._orders + ((field_path, direction == "DESCENDING"),)
        return FakeQuery(self._db, self.collection, self._filters, orders, self._limit)

    def limit(self, count):
        return FakeQuery(self._db, self.collection, self._filters, self._orders, count)

    def stream(self):
        self._db.check(self.collection)
        self._db.reads.append(self.collection)
        rows = [
            (doc_id, data) for doc_id, data in self._db.data[self.collection].items()
            if all(data.get(f.field_path) == f.value for f in self._filters)
        ]
        for field_path, descending in reversed(self._orders):
            rows.sort(key=lambda item: item[1].get(field_path), reverse=descending)
        if self._limit is not None:
            rows = rows[:self._limit]
        snapshots = [FakeSnapshot(doc_id, copy.deepcopy(data)) for doc_id, data in rows]
        # rows are already read; let a test run a concurrent write before they arrive
        pause = self._db.mid_stream.pop(self.collection, None)
        if pause is not None:
            pause()
        return iter(snapshots)


class FakeCollection(FakeQuery):
    def document(self, document_id=None):
        return FakeDocument(self._db, self.collection, document_id or uuid.uuid4().hex[:20])


class FakeFirestore:
    def __init__(self):
        self.data       = defaultdict(dict)
        self.reads      = []
        self.failing    = set()
        self.mid_stream = {}

    def collection(self, name):
        return FakeCollection(self, name)

    def check(self, collection):
        if collection in self.failing:
            raise PermissionDenied("Missing or insufficient permissions.")

    def seed(self, collection, doc_id, **fields):
        fields.setdefault("created_at", datetime(2026, 1, 1, tzinfo=timezone.utc))
        self.data[collection][doc_id] = fields
        return doc_id


# ── Storage / auth doubles ──────────────────────────────────────────────────

class FakeBlob:
    def __init__(self, bucket, name):
        self._bucket = bucket
        self.name    = name
        self.public  = False

    def upload_from_string(self, data, content_type=None):
        self._bucket.objects[self.name] = (data, content_type)

    def make_public(self):
        self.public = True

    @property
    def public_url(self):
        return f"https://storage.example.test/{self.name}"


class FakeBucket:
    def __init__(self):
        self.objects = {}

    def blob(self, name):
        return FakeBlob(self, name)


TOKENS = {
    "admin-token": {"uid": "u-admin", "email": "admin@example.test", "name": "Admin"},
    "user-token":  {"uid": "u-1", "email": "guest@example.test", "name": "Guest"},
    "other-token": {"uid": "u-2", "email": "other@example.test", "name": "Other"}
}


def fake_verify(token):
    if token not in TOKENS:
        raise ValueError("Invalid ID token")
    return dict(TOKENS[token])


class FakeVerifier:
    """Accepts TOKENS, refusing users whose refresh tokens were revoked."""

    def __init__(self):
        self.revoked = set()

    def __call__(self, token, check_revoked=False):
        claims = fake_verify(token)
        if check_revoked and claims["uid"] in self.revoked:
            raise auth.RevokedIdTokenError("The Firebase ID token has been revoked.")
        return claims


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def db():
    db = FakeFirestore()
    db.seed("user_roles", "r-admin", user_id="u-admin", role="admin")
    db.seed("user_roles", "r-user", user_id="u-1", role="user")
    db.seed("profiles", "u-1", full_name="Guest Person")
    return db


@pytest.fixture
def store(db):
    return ListingStore(db, ttl=30)


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def verifier(monkeypatch):
    verifier = FakeVerifier()
    monkeypatch.setattr(config, "init_firebase", lambda: None)
    monkeypatch.setattr(auth, "verify_id_token", verifier)
    monkeypatch.setattr(auth, "revoke_refresh_tokens", verifier.revoked.add)
    return verifier


@pytest.fixture
def client(store, bucket, verifier):
    app.dependency_overrides[get_store]  = lambda: store
    app.dependency_overrides[get_bucket] = lambda: bucket
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db):
    """Three cities and ten tours; four of them in Samarkand."""
    db.seed("cities", "c-sam", slug="samarkand", name={"en": "Samarkand", "ru": "Самарканд"})
    db.seed("cities", "c-bkh", slug="bukhara", name={"en": "Bukhara", "ru": "Бухара"})
    db.seed("cities", "c-tas", slug="tashkent", name="Tashkent")
    layout = ["c-sam", "c-bkh", "c-sam", "c-tas", "c-sam", None, "c-bkh", "c-sam", "c-tas", "c-bkh"]
    start  = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i, city_id in enumerate(layout):
        db.seed(
            "tours", f"t-{i}",
            slug=f"tour-{i}",
            title={"en": f"Tour {i}", "ru": f"Тур {i}"},
            description={"en": "Walk"},
            price=100,
            duration=1 + i % 3,
            images=[f"https://img.example.test/{i}.jpg"],
            city_id=city_id,
            created_at=start + timedelta(hours=i)
        )
    return db
