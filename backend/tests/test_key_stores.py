"""
키 저장소 구현체 테스트 — 원자적 사용 처리, 장애 전파, 파일 형식
"""
import json
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from domain.entities.access_key import AccessKeyEntity
from domain.enums import Plan
from domain.exceptions import StoreUnavailableError, KeyNotFoundError, KeyAlreadyUsedError
from infrastructure.persistence.database import Database
from infrastructure.persistence.access_key_repository import SqlAccessKeyRepository
from infrastructure.persistence.json_key_store import JsonFileAccessKeyRepository

NOW = datetime(2026, 10, 18, 14, 5, tzinfo=timezone.utc)


def make_key(code="14WABC", plan=Plan.WEEK, created_at=NOW):
    return AccessKeyEntity(code=code, plan=plan, created_at=created_at,
                           expires_at=created_at + timedelta(days=7))


class TestRepositoryContract:
    """SQLite / JSON 공통 동작"""

    @pytest.mark.asyncio
    async def test_starts_empty(self, repository):
        assert await repository.list_all() == []
        assert await repository.get("14WABC") is None

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, repository):
        await repository.upsert(make_key())
        stored = await repository.get("14WABC")
        assert stored == make_key()

    @pytest.mark.asyncio
    async def test_consume_sets_used_once(self, repository):
        await repository.upsert(make_key())
        used_at = NOW + timedelta(minutes=5)

        consumed = await repository.consume("14WABC", used_by="u1", used_at=used_at)
        assert consumed.used is True
        assert consumed.used_by == "u1"
        assert consumed.used_at == used_at

        with pytest.raises(KeyAlreadyUsedError):
            await repository.consume("14WABC", used_by="u2", used_at=used_at)
        assert (await repository.get("14WABC")).used_by == "u1"

    @pytest.mark.asyncio
    async def test_consume_missing_key(self, repository):
        with pytest.raises(KeyNotFoundError):
            await repository.consume("14WXYZ", used_by="u1", used_at=NOW)

    @pytest.mark.asyncio
    async def test_clear_all_returns_count(self, repository):
        await repository.upsert(make_key("14WAAA"))
        await repository.upsert(make_key("14MBBB", plan=Plan.MONTH))

        assert await repository.clear_all() == 2
        assert await repository.list_all() == []
        assert await repository.clear_all() == 0

    @pytest.mark.asyncio
    async def test_data_survives_reopen(self, repository, tmp_path):
        await repository.upsert(make_key())
        await repository.close()

        if isinstance(repository, SqlAccessKeyRepository):
            reopened = SqlAccessKeyRepository(Database(f"sqlite+aiosqlite:///{tmp_path / 'keys.db'}"))
        else:
            reopened = JsonFileAccessKeyRepository(tmp_path / "access_keys.json")
        await reopened.init()
        try:
            assert await reopened.get("14WABC") == make_key()
        finally:
            await reopened.close()


class TestJsonFileStore:

    @pytest.mark.asyncio
    async def test_init_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "access_keys.json"
        store = JsonFileAccessKeyRepository(path)
        await store.init()
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    @pytest.mark.asyncio
    async def test_reads_legacy_express_file(self, tmp_path):
        """기존 Node 서버가 남긴 access_keys.json 을 그대로 읽는다"""
        path = tmp_path / "access_keys.json"
        path.write_text(json.dumps({
            "09MK2Z": {
                "key": "09MK2Z", "plan": "month", "planCode": "M",
                "expiration": "2026-11-17T09:12:30.120Z", "createdAt": "2026-10-18T09:12:30.120Z",
                "used": True, "usedAt": "2026-10-18T09:20:00.000Z", "usedBy": "device-7",
            }
        }), encoding="utf-8")
        store = JsonFileAccessKeyRepository(path)
        await store.init()

        key = await store.get("09MK2Z")
        assert key.plan == Plan.MONTH
        assert key.used is True
        assert key.used_by == "device-7"
        assert key.created_at == datetime(2026, 10, 18, 9, 12, 30, 120000, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_written_file_uses_wire_field_names(self, tmp_path):
        path = tmp_path / "access_keys.json"
        store = JsonFileAccessKeyRepository(path)
        await store.init()
        await store.upsert(make_key())

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["14WABC"] == {
            "key": "14WABC", "plan": "week", "planCode": "W",
            "expiration": "2026-10-25T14:05:00Z", "createdAt": "2026-10-18T14:05:00Z",
            "used": False, "usedAt": None, "usedBy": None,
        }

    @pytest.mark.asyncio
    async def test_corrupt_file_is_not_treated_as_empty(self, tmp_path):
        path = tmp_path / "access_keys.json"
        store = JsonFileAccessKeyRepository(path)
        await store.init()
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            await store.get("14WABC")
        with pytest.raises(StoreUnavailableError):
            await store.consume("14WABC", used_by="u1", used_at=NOW)
        with pytest.raises(StoreUnavailableError):
            await store.list_all()

    @pytest.mark.asyncio
    async def test_deleted_file_after_init_fails(self, tmp_path):
        path = tmp_path / "access_keys.json"
        store = JsonFileAccessKeyRepository(path)
        await store.init()
        path.unlink()

        with pytest.raises(StoreUnavailableError):
            await store.get("14WABC")

    @pytest.mark.asyncio
    async def test_init_rejects_corrupt_existing_file(self, tmp_path):
        path = tmp_path / "access_keys.json"
        path.write_text("[]garbage", encoding="utf-8")
        with pytest.raises(StoreUnavailableError):
            await JsonFileAccessKeyRepository(path).init()


class TestSqlStore:

    @pytest.fixture
    async def sql_store(self, tmp_path):
        store = SqlAccessKeyRepository(Database(f"sqlite+aiosqlite:///{tmp_path / 'data' / 'keys.db'}"))
        await store.init()
        yield store
        await store.close()

    @pytest.mark.asyncio
    async def test_init_creates_database_directory(self, sql_store, tmp_path):
        assert (tmp_path / "data" / "keys.db").exists()

    @pytest.mark.asyncio
    async def test_blocked_database_directory_raises_store_unavailable(self, tmp_path):
        blocker = tmp_path / "data"
        blocker.write_text("not a directory")
        store = SqlAccessKeyRepository(Database(f"sqlite+aiosqlite:///{blocker / 'keys.db'}"))

        with pytest.raises(StoreUnavailableError):
            await store.init()
        await store.close()

    @pytest.mark.asyncio
    async def test_timestamps_round_trip_as_utc(self, sql_store):
        seoul_time = NOW.astimezone(timezone(timedelta(hours=9)))
        await sql_store.upsert(make_key(created_at=seoul_time))

        stored = await sql_store.get("14WABC")
        assert stored.created_at == NOW
        assert stored.created_at.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_broken_table_raises_store_unavailable(self, sql_store):
        await sql_store.upsert(make_key())
        async with sql_store._db.engine.begin() as conn:
            await conn.execute(text("DROP TABLE access_keys"))

        with pytest.raises(StoreUnavailableError):
            await sql_store.get("14WABC")
        with pytest.raises(StoreUnavailableError):
            await sql_store.consume("14WABC", used_by="u1", used_at=NOW)
        with pytest.raises(StoreUnavailableError):
            await sql_store.clear_all()
