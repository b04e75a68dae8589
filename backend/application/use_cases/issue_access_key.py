"""액세스 키 발급 유스케이스"""
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable, Optional

from loguru import logger

from domain.access_code import generate_access_code
from domain.clock import utc_now
from domain.entities.access_key import AccessKeyEntity
from domain.enums import Plan
from domain.exceptions import InvalidPlanError
from application.ports.access_key_repository import AccessKeyRepository


@dataclass
class IssueAccessKeyInput:
    plan: Any


@dataclass
class IssueAccessKeyOutput:
    code: str
    plan: str
    expires_at: datetime


class IssueAccessKeyUseCase:
    """플랜 검증 → 코드 생성 → 만료 시각 계산 → 저장

    같은 시각/플랜/난수 부분이 겹치면 기존 레코드를 덮어쓴다 (last writer wins).
    """

    def __init__(
        self,
        key_repo: AccessKeyRepository,
        tz: Optional[tzinfo] = None,
        now_fn: Callable[[], datetime] = utc_now,
        rng: random.Random = None,
    ):
        self._key_repo = key_repo
        self._tz = tz
        self._now = now_fn
        self._rng = rng

    async def execute(self, input: IssueAccessKeyInput) -> IssueAccessKeyOutput:
        # 문자열이 아닌 값(숫자, 배열 등)도 잘못된 플랜으로 처리
        if not isinstance(input.plan, str):
            raise InvalidPlanError(input.plan)
        try:
            plan = Plan(input.plan)
        except ValueError:
            raise InvalidPlanError(input.plan)

        now = self._now()
        code = generate_access_code(plan.code, now, tz=self._tz, rng=self._rng)
        expires_at = now + timedelta(days=plan.duration_days)

        await self._key_repo.upsert(AccessKeyEntity(
            code=code, plan=plan, expires_at=expires_at, created_at=now,
        ))
        logger.info(f"액세스 키 발급: {code} ({plan.value}, 만료 {expires_at.isoformat()})")
        return IssueAccessKeyOutput(code=code, plan=plan.value, expires_at=expires_at)
