"""JSON 파일 기반 액세스 키 저장소

기존 Express 서버의 access_keys.json 과 같은 형식
({code: {key, plan, planCode, expiration, createdAt, used, usedAt, usedBy}})을 읽고 쓴다.
모든 쓰기는 asyncio.Lock 아래에서 읽기-수정-쓰기로 수행하고,
임시 파일 + os.replace 로 파일을 원자적으로 교체한다.
"""
import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, List

import aiofiles
import aiofiles.os
from loguru import logger

from domain.entities.access_key import AccessKeyEntity
from domain.enums import Plan
from domain.exceptions import StoreUnavailableError, KeyNotFoundError
from application.ports.access_key_repository import AccessKeyRepository


def format_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def key_to_dict(key: AccessKeyEntity) -> dict:
    return {
        "key": key.code,
        "plan": key.plan.value,
        "planCode": key.plan_code,
        "expiration": format_time(key.expires_at),
        "createdAt": format_time(key.created_at),
        "used": key.used,
        "usedAt": format_time(key.used_at),
        "usedBy": key.used_by,
    }


def key_from_dict(data: dict) -> AccessKeyEntity:
    return AccessKeyEntity(
        code=data["key"],
        plan=Plan(data["plan"]),
        expires_at=parse_time(data["expiration"]),
        created_at=parse_time(data["createdAt"]),
        used=bool(data.get("used", False)),
        used_at=parse_time(data.get("usedAt")),
        used_by=data.get("usedBy"),
    )


class JsonFileAccessKeyRepository(AccessKeyRepository):
    def __init__(self, path):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    async def _load(self, operation: str) -> Dict[str, AccessKeyEntity]:
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                raw = json.loads(await f.read())
            return {code: key_from_dict(data) for code, data in raw.items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"키 파일 읽기 실패 ({operation}): {e}")
            raise StoreUnavailableError(operation) from e

    async def _save(self, keys: Dict[str, AccessKeyEntity], operation: str) -> None:
        payload = {code: key_to_dict(key) for code, key in keys.items()}
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(payload, ensure_ascii=False, indent=2))
            await aiofiles.os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(f"키 파일 쓰기 실패 ({operation}): {e}")
            raise StoreUnavailableError(operation) from e

    async def init(self) -> None:
        """파일이 없을 때만 빈 저장소를 만든다. 기존 파일은 읽어서 검증한다."""
        async with self._lock:
            if not self._path.exists():
                try:
                    self._path.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise StoreUnavailableError("init") from e
                await self._save({}, "init")
            keys = await self._load("init")
        logger.info(f"키 저장소 초기화 완료: {self._path} ({len(keys)}건)")

    async def close(self) -> None:
        pass

    async def upsert(self, key: AccessKeyEntity) -> None:
        async with self._lock:
            keys = await self._load("upsert")
            keys[key.code] = key
            await self._save(keys, "upsert")

    async def get(self, code: str) -> Optional[AccessKeyEntity]:
        keys = await self._load("get")
        return keys.get(code)

    async def consume(self, code: str, used_by: str, used_at: datetime) -> AccessKeyEntity:
        async with self._lock:
            keys = await self._load("consume")
            key = keys.get(code)
            if key is None:
                raise KeyNotFoundError(code)
            key.mark_used(used_by, used_at)
            await self._save(keys, "consume")
        return key

    async def list_all(self) -> List[AccessKeyEntity]:
        keys = await self._load("list")
        return list(keys.values())

    async def clear_all(self) -> int:
        async with self._lock:
            keys = await self._load("clear")
            await self._save({}, "clear")
        return len(keys)
