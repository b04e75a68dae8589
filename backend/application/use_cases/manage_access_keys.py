"""액세스 키 관리 유스케이스 (관리자 전용)"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List

from loguru import logger

from domain.clock import utc_now
from domain.entities.access_key import AccessKeyEntity
from domain.enums import Plan
from application.ports.access_key_repository import AccessKeyRepository


@dataclass
class AccessKeyStats:
    total: int = 0
    unused: int = 0
    used: int = 0
    expired: int = 0
    by_plan: Dict[str, int] = field(default_factory=lambda: {p.value: 0 for p in Plan})


class ListAccessKeysUseCase:
    def __init__(self, key_repo: AccessKeyRepository):
        self._key_repo = key_repo

    async def execute(self) -> List[AccessKeyEntity]:
        keys = await self._key_repo.list_all()
        return sorted(keys, key=lambda k: k.created_at, reverse=True)


class ClearAccessKeysUseCase:
    def __init__(self, key_repo: AccessKeyRepository):
        self._key_repo = key_repo

    async def execute(self) -> int:
        deleted = await self._key_repo.clear_all()
        logger.warning(f"전체 액세스 키 삭제: {deleted}건")
        return deleted


class AccessKeyStatsUseCase:
    """상태별/플랜별 집계. 사용된 키는 만료 여부와 무관하게 used 로 센다."""

    def __init__(self, key_repo: AccessKeyRepository, now_fn: Callable[[], datetime] = utc_now):
        self._key_repo = key_repo
        self._now = now_fn

    async def execute(self) -> AccessKeyStats:
        now = self._now()
        stats = AccessKeyStats()
        for key in await self._key_repo.list_all():
            stats.total += 1
            stats.by_plan[key.plan.value] += 1
            if key.used:
                stats.used += 1
            elif key.is_expired(now):
                stats.expired += 1
            else:
                stats.unused += 1
        return stats
