"""
Poem Store Gateway Tests
========================

PoemService against an in-memory Supabase stand-in: ordering, ingress
validation and translation of store failures.
"""
import httpx
import pytest
from supabase import PostgrestAPIError

from core.errors import PoemNotFound, QueryFailed, StoreUnavailable, WriteRejected
from schemas import PoemCreate, PoemKind, Position
from services.poem_service import PoemService

pytestmark = pytest.mark.anyio


def rls_error():
    return PostgrestAPIError({
        "message": "new row violates row-level security policy",
        "code": "42501",
        "hint": None,
        "details": None,
    })


@pytest.fixture
def service(fake_db):
    return PoemService(fake_db, table="poems")


@pytest.fixture
def poem_in():
    return PoemCreate(
        kind=PoemKind.HAIKU,
        text="古池や\n蛙飛びこむ\n水の音",
        author="芭蕉",
        position=Position(lat=35.0, lon=135.0),
    )


class TestListAndGet:

    async def test_newest_first(self, service, fake_db):
        fake_db.seed()
        fake_db.seed(author="蕪村")
        poems = await service.list_poems()
        assert [p.id for p in poems] == [2, 1]

    async def test_transport_failure(self, service, fake_db):
        fake_db.fail_with(httpx.ConnectError("connection refused"))
        with pytest.raises(StoreUnavailable):
            await service.list_poems()

    async def test_query_failure(self, service, fake_db):
        fake_db.fail_with(rls_error())
        with pytest.raises(QueryFailed):
            await service.list_poems()

    async def test_malformed_record_is_skipped(self, service, fake_db):
        fake_db.seed()
        fake_db.seed(text="一行だけ")
        fake_db.seed(text="古池や\nC:\\new\n水の音")
        poems = await service.list_poems()
        assert [p.id for p in poems] == [3, 1]
        assert poems[0].lines[1] == "C:\\new"

    async def test_malformed_single_record(self, service, fake_db):
        fake_db.seed(text="一行だけ")
        with pytest.raises(QueryFailed):
            await service.get_poem(1)

    async def test_get_missing(self, service):
        with pytest.raises(PoemNotFound):
            await service.get_poem(42)


class TestWrites:

    async def test_create_returns_authoritative_record(self, service, fake_db, poem_in):
        poem = await service.create_poem(poem_in, "U1")
        assert poem.id == 1
        assert poem.owner_id == "U1"
        assert poem.appreciated_by == []
        assert poem.created_at is not None
        assert fake_db.rows[0]["owner_id"] == "U1"

    async def test_create_rejected(self, service, fake_db, poem_in):
        fake_db.fail_with(rls_error())
        with pytest.raises(WriteRejected):
            await service.create_poem(poem_in, None)

    async def test_update_text(self, service, fake_db):
        fake_db.seed()
        poem = await service.update_text(1, "古池や\n蛙飛びこむ\n水の音よ")
        assert poem.lines[-1] == "水の音よ"

    async def test_update_appreciation(self, service, fake_db):
        fake_db.seed()
        poem = await service.update_appreciation(1, ["U2"])
        assert poem.appreciated_by == ["U2"]
        assert fake_db.rows[0]["likes"] == ["U2"]

    async def test_silent_rls_is_rejection(self, service, fake_db):
        fake_db.seed()
        fake_db.silent_rls = True
        with pytest.raises(WriteRejected):
            await service.update_text(1, "a\nb\nc")
        with pytest.raises(WriteRejected):
            await service.delete_poem(1)

    async def test_delete_twice_fails(self, service, fake_db):
        fake_db.seed()
        await service.delete_poem(1)
        assert fake_db.rows == []
        with pytest.raises(WriteRejected):
            await service.delete_poem(1)

    async def test_write_transport_failure(self, service, fake_db):
        fake_db.seed()
        fake_db.fail_with(httpx.ReadTimeout("timed out"))
        with pytest.raises(StoreUnavailable):
            await service.update_appreciation(1, [])
