"""SQLAlchemy 기반 액세스 키 저장소"""
import asyncio
from datetime import datetime, timezone
from typing import Optional, List

from loguru import logger
from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError

from domain.entities.access_key import AccessKeyEntity
from domain.exceptions import StoreUnavailableError, KeyNotFoundError, KeyAlreadyUsedError
from application.ports.access_key_repository import AccessKeyRepository
from infrastructure.persistence.database import Database
from infrastructure.persistence.models.access_key import AccessKey


def _to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _to_entity(row: AccessKey) -> AccessKeyEntity:
    return AccessKeyEntity(
        code=row.code, plan=row.plan,
        expires_at=_from_db_time(row.expires_at), created_at=_from_db_time(row.created_at),
        used=row.used, used_at=_from_db_time(row.used_at), used_by=row.used_by,
    )


def _to_row(key: AccessKeyEntity) -> AccessKey:
    return AccessKey(
        code=key.code, plan=key.plan, plan_code=key.plan_code,
        expires_at=_to_db_time(key.expires_at), created_at=_to_db_time(key.created_at),
        used=key.used, used_at=_to_db_time(key.used_at), used_by=key.used_by,
    )


def _unavailable(operation: str, error: Exception) -> StoreUnavailableError:
    logger.error(f"키 저장소 오류 ({operation}): {error}")
    return StoreUnavailableError(operation)


class SqlAccessKeyRepository(AccessKeyRepository):
    """쓰기는 프로세스 내 단일 writer 락으로 직렬화하고,
    사용 처리는 `UPDATE ... WHERE used = false` 조건부 갱신(compare-and-set)으로 수행한다.
    """

    def __init__(self, database: Database):
        self._db = database
        self._write_lock = asyncio.Lock()

    async def init(self) -> None:
        try:
            await self._db.init()
        except (SQLAlchemyError, OSError) as e:
            raise _unavailable("init", e) from e
        logger.info(f"키 저장소 초기화 완료: {self._db.url}")

    async def close(self) -> None:
        await self._db.dispose()

    async def upsert(self, key: AccessKeyEntity) -> None:
        async with self._write_lock:
            try:
                async with self._db.session() as session:
                    await session.merge(_to_row(key))
            except SQLAlchemyError as e:
                raise _unavailable("upsert", e) from e

    async def get(self, code: str) -> Optional[AccessKeyEntity]:
        try:
            async with self._db.session() as session:
                row = await session.get(AccessKey, code)
                return _to_entity(row) if row else None
        except SQLAlchemyError as e:
            raise _unavailable("get", e) from e

    async def consume(self, code: str, used_by: str, used_at: datetime) -> AccessKeyEntity:
        async with self._write_lock:
            try:
                async with self._db.session() as session:
                    result = await session.execute(
                        update(AccessKey)
                        .where(AccessKey.code == code, AccessKey.used == False)
                        .values(used=True, used_at=_to_db_time(used_at), used_by=used_by)
                        .execution_options(synchronize_session=False)
                    )
                    row = await session.get(AccessKey, code)
                    consumed = result.rowcount == 1
                    entity = _to_entity(row) if row else None
            except SQLAlchemyError as e:
                raise _unavailable("consume", e) from e

        if entity is None:
            raise KeyNotFoundError(code)
        if not consumed:
            raise KeyAlreadyUsedError(code)
        return entity

    async def list_all(self) -> List[AccessKeyEntity]:
        try:
            async with self._db.session() as session:
                result = await session.execute(select(AccessKey))
                return [_to_entity(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _unavailable("list", e) from e

    async def clear_all(self) -> int:
        async with self._write_lock:
            try:
                async with self._db.session() as session:
                    result = await session.execute(delete(AccessKey))
                    return result.rowcount
            except SQLAlchemyError as e:
                raise _unavailable("clear", e) from e
