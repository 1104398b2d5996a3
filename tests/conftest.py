"""
conftest.py
-----------
Shared pytest fixtures.

Provides:
- An in-memory stand-in for the Supabase query builder
- A scriptable identity provider
- Factories for identities, poems and boards
"""
import copy
from datetime import datetime, timedelta, timezone

import pytest

from schemas import Identity, Poem
from services.board_service import PoemBoard
from services.identity_service import IdentityResolver
from services.poem_service import PoemService
from services.signature_service import InMemoryKeyValueStore, SignatureService

BASE_TIME = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)


# ----- Fake Supabase -----

class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table, operation, payload=None):
        self.db = db
        self.table = table
        self.operation = operation
        self.payload = payload
        self.filters = []
        self.order_by = None

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        return self.db.execute(self)


class FakeTable:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def select(self, *columns):
        return FakeQuery(self.db, self.name, "select")

    def insert(self, record):
        return FakeQuery(self.db, self.name, "insert", record)

    def update(self, data):
        return FakeQuery(self.db, self.name, "update", data)

    def delete(self):
        return FakeQuery(self.db, self.name, "delete")


class FakeSupabase:
    """Mimics ``client.table(...)`` chains closely enough for PoemService."""

    def __init__(self):
        self.rows = []
        self.next_id = 1
        self.calls = []
        self.failure = None
        self.silent_rls = False

    def table(self, name):
        return FakeTable(self, name)

    def fail_with(self, error):
        self.failure = error

    def seed(self, **fields):
        row = {
            "id": self.next_id,
            "kind": "haiku",
            "text": "古池や\n蛙飛びこむ\n水の音",
            "author": "芭蕉",
            "lat": 35.0,
            "lon": 135.0,
            "owner_id": "U1",
            "created_at": (BASE_TIME + timedelta(minutes=self.next_id)).isoformat(),
            "likes": [],
        }
        row.update(fields)
        self.next_id += 1
        self.rows.append(row)
        return copy.deepcopy(row)

    def execute(self, query):
        self.calls.append((query.operation, list(query.filters)))
        if self.failure is not None:
            raise self.failure

        if query.operation == "insert":
            return FakeResponse([self.seed(**query.payload)])

        matched = [row for row in self.rows if query.matches(row)]
        if query.operation == "select":
            if query.order_by:
                column, desc = query.order_by
                matched = sorted(matched, key=lambda row: row[column], reverse=desc)
            return FakeResponse(copy.deepcopy(matched))

        # Row-level security filters rows out instead of raising
        if self.silent_rls:
            return FakeResponse([])

        if query.operation == "update":
            for row in matched:
                row.update(query.payload)
            return FakeResponse(copy.deepcopy(matched))

        if query.operation == "delete":
            self.rows = [row for row in self.rows if not query.matches(row)]
            return FakeResponse(copy.deepcopy(matched))

        raise AssertionError(f"unexpected operation {query.operation}")

    def write_calls(self):
        return [call for call in self.calls if call[0] != "select"]


# ----- Identity -----

class FakeIdentityProvider:
    def __init__(self, identity=None, error=None):
        self.identity = identity
        self.error = error
        self.callbacks = []

    def get_current_identity(self):
        if self.error is not None:
            raise self.error
        return self.identity

    def on_change(self, callback):
        self.callbacks.append(callback)
        return lambda: self.callbacks.remove(callback)

    def emit(self, identity):
        self.identity = identity
        for callback in list(self.callbacks):
            callback(identity)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def u1():
    return Identity(handle="U1", display_name="芭蕉", email="basho@example.jp")


@pytest.fixture
def u2():
    return Identity(handle="U2", email="buson@example.jp")


@pytest.fixture
def make_poem():
    def factory(**fields):
        record = {
            "id": 1,
            "kind": "haiku",
            "text": "古池や\n蛙飛びこむ\n水の音",
            "author": "芭蕉",
            "lat": 35.0,
            "lon": 135.0,
            "owner_id": "U1",
            "created_at": BASE_TIME.isoformat(),
            "likes": [],
        }
        record.update(fields)
        return Poem.model_validate(record)
    return factory


@pytest.fixture
def make_board(fake_db):
    def factory(identity=None, retain_position=True, signature_store=None):
        provider = FakeIdentityProvider(identity)
        store = signature_store or InMemoryKeyValueStore()
        board = PoemBoard(
            PoemService(fake_db, table="poems"),
            IdentityResolver(provider),
            SignatureService(store, "chizurashi"),
            retain_position=retain_position,
            anonymous_signature="無署名",
        )
        board.provider = provider
        return board
    return factory
