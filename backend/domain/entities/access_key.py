"""액세스 키 도메인 엔티티"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.enums import Plan
from domain.exceptions import KeyAlreadyUsedError


@dataclass
class AccessKeyEntity:
    """발급된 1회용 액세스 키 — ORM/JSON 저장 형식과 무관한 비즈니스 객체"""
    code: str
    plan: Plan
    expires_at: datetime
    created_at: datetime
    used: bool = False
    used_at: Optional[datetime] = None
    used_by: Optional[str] = None

    @property
    def plan_code(self) -> str:
        return self.plan.code

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def mark_used(self, used_by: str, used_at: datetime) -> None:
        """used 플래그는 false → true 로만 전이한다"""
        if self.used:
            raise KeyAlreadyUsedError(self.code)
        self.used = True
        self.used_at = used_at
        self.used_by = used_by
