"""액세스 키 검증(사용 처리) 유스케이스"""
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Callable, Optional

from loguru import logger

from domain.access_code import is_valid_access_code, code_hour, local_hour
from domain.clock import utc_now
from domain.exceptions import (
    MissingCodeError, InvalidFormatError, KeyNotFoundError,
    KeyAlreadyUsedError, KeyExpiredError, HourMismatchError,
)
from application.ports.access_key_repository import AccessKeyRepository

ANONYMOUS_USER = "anonymous"


@dataclass
class ValidateAccessKeyInput:
    code: Any
    user_id: Optional[str] = None


@dataclass
class ValidateAccessKeyOutput:
    plan: str
    expires_at: datetime


class ValidateAccessKeyUseCase:
    """형식 → 존재 → 사용 여부 → 만료 → 발급 시각(hour) → 사용 처리 순으로 검사한다.

    마지막 사용 처리는 저장소의 원자적 consume 으로 수행하므로,
    동시에 같은 키를 검증해도 성공은 한 번뿐이다.
    """

    def __init__(
        self,
        key_repo: AccessKeyRepository,
        tz: Optional[tzinfo] = None,
        now_fn: Callable[[], datetime] = utc_now,
        anonymous_user: str = ANONYMOUS_USER,
    ):
        self._key_repo = key_repo
        self._tz = tz
        self._now = now_fn
        self._anonymous_user = anonymous_user

    async def execute(self, input: ValidateAccessKeyInput) -> ValidateAccessKeyOutput:
        code = input.code

        # 1. 존재 여부
        if not code:
            raise MissingCodeError()

        # 2. 형식 (문자열이 아닌 값 포함)
        if not isinstance(code, str) or not is_valid_access_code(code):
            raise InvalidFormatError(code)

        # 3. 저장소 조회
        key = await self._key_repo.get(code)
        if key is None:
            raise KeyNotFoundError(code)

        # 4. 사용 여부
        if key.used:
            raise KeyAlreadyUsedError(code)

        # 5. 만료
        now = self._now()
        if key.is_expired(now):
            raise KeyExpiredError(code)

        # 6. 발급 시각(hour) 일치
        current_hour = local_hour(now, self._tz)
        if code_hour(code) != current_hour:
            raise HourMismatchError(code, code_hour(code), current_hour)

        # 7. 사용 처리 (원자적)
        used_by = input.user_id or self._anonymous_user
        consumed = await self._key_repo.consume(code, used_by=used_by, used_at=now)
        logger.info(f"액세스 키 사용: {code} ({consumed.plan.value}) by {used_by}")
        return ValidateAccessKeyOutput(plan=consumed.plan.value, expires_at=consumed.expires_at)
