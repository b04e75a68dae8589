"""액세스 키 저장소 인터페이스"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from domain.entities.access_key import AccessKeyEntity


class AccessKeyRepository(ABC):
    """코드 → 키 레코드 저장소

    구현체는 I/O 실패 시 StoreUnavailableError 를 던져야 하며,
    consume 은 "used=False 확인 후 used=True 기록"을 하나의 원자적 연산으로 수행해야 한다.
    """

    @abstractmethod
    async def init(self) -> None: ...
    @abstractmethod
    async def close(self) -> None: ...
    @abstractmethod
    async def upsert(self, key: AccessKeyEntity) -> None: ...
    @abstractmethod
    async def get(self, code: str) -> Optional[AccessKeyEntity]: ...
    @abstractmethod
    async def consume(self, code: str, used_by: str, used_at: datetime) -> AccessKeyEntity:
        """미사용 키를 사용 처리한다.

        이미 사용된 경우 KeyAlreadyUsedError, 레코드가 없으면 KeyNotFoundError.
        """
    @abstractmethod
    async def list_all(self) -> List[AccessKeyEntity]: ...
    @abstractmethod
    async def clear_all(self) -> int: ...
