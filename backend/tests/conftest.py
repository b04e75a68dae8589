"""공통 테스트 픽스처"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

# main 모듈 import 시 로그 파일이 작업 디렉토리에 생기지 않도록
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.mkdtemp(), "app.log"))

import pytest
from fastapi.testclient import TestClient

from config import Settings
from infrastructure.persistence.database import Database
from infrastructure.persistence.access_key_repository import SqlAccessKeyRepository
from infrastructure.persistence.json_key_store import JsonFileAccessKeyRepository

ADMIN_TOKEN = "test-admin-token"


class FixedClock:
    """테스트용 시계 — 호출하면 현재 설정된 시각을 반환"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    # 14:05 UTC (테스트 시간대도 UTC)
    return FixedClock(datetime(2026, 10, 18, 14, 5, tzinfo=timezone.utc))


@pytest.fixture(params=["sqlite", "json"])
async def repository(request, tmp_path):
    """두 저장소 구현체 모두에 대해 같은 테스트를 수행"""
    if request.param == "sqlite":
        repo = SqlAccessKeyRepository(Database(f"sqlite+aiosqlite:///{tmp_path / 'keys.db'}"))
    else:
        repo = JsonFileAccessKeyRepository(tmp_path / "access_keys.json")
    await repo.init()
    yield repo
    await repo.close()


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        KEY_STORE_BACKEND="sqlite",
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        KEYS_FILE=str(tmp_path / "api_keys.json"),
        KEY_TIMEZONE="UTC",
        ADMIN_TOKEN=ADMIN_TOKEN,
    )


@pytest.fixture
def client(app_settings, clock):
    from main import create_app

    with TestClient(create_app(app_settings, now_fn=clock)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}
