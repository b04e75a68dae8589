"""설정에 따라 액세스 키 저장소 구현체 선택"""
from config import Settings
from application.ports.access_key_repository import AccessKeyRepository
from infrastructure.persistence.database import Database
from infrastructure.persistence.access_key_repository import SqlAccessKeyRepository
from infrastructure.persistence.json_key_store import JsonFileAccessKeyRepository


def build_key_repository(settings: Settings) -> AccessKeyRepository:
    backend = settings.KEY_STORE_BACKEND.lower()
    if backend == "sqlite":
        return SqlAccessKeyRepository(Database(settings.DB_URL, echo=settings.DB_ECHO))
    if backend == "json":
        return JsonFileAccessKeyRepository(settings.KEYS_FILE)
    raise ValueError(f"지원하지 않는 키 저장소: {settings.KEY_STORE_BACKEND}")
