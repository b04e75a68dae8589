"""
FastAPI 의존성 주입 (Depends)

저장소와 설정은 lifespan 에서 app.state 에 올려두고 요청마다 꺼내 쓴다.
"""
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from config import Settings
from application.ports.access_key_repository import AccessKeyRepository
from application.use_cases.issue_access_key import IssueAccessKeyUseCase
from application.use_cases.validate_access_key import ValidateAccessKeyUseCase
from application.use_cases.manage_access_keys import (
    ListAccessKeysUseCase, ClearAccessKeysUseCase, AccessKeyStatsUseCase,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_key_repository(request: Request) -> AccessKeyRepository:
    return request.app.state.key_repository


def get_clock(request: Request):
    return request.app.state.now_fn


def get_issue_use_case(
    key_repo: AccessKeyRepository = Depends(get_key_repository),
    app_settings: Settings = Depends(get_app_settings),
    now_fn=Depends(get_clock),
) -> IssueAccessKeyUseCase:
    return IssueAccessKeyUseCase(key_repo, tz=app_settings.key_tz, now_fn=now_fn)


def get_validate_use_case(
    key_repo: AccessKeyRepository = Depends(get_key_repository),
    app_settings: Settings = Depends(get_app_settings),
    now_fn=Depends(get_clock),
) -> ValidateAccessKeyUseCase:
    return ValidateAccessKeyUseCase(key_repo, tz=app_settings.key_tz, now_fn=now_fn,
                                    anonymous_user=app_settings.ANONYMOUS_USER)


def get_list_use_case(key_repo: AccessKeyRepository = Depends(get_key_repository)) -> ListAccessKeysUseCase:
    return ListAccessKeysUseCase(key_repo)


def get_clear_use_case(key_repo: AccessKeyRepository = Depends(get_key_repository)) -> ClearAccessKeysUseCase:
    return ClearAccessKeysUseCase(key_repo)


def get_stats_use_case(
    key_repo: AccessKeyRepository = Depends(get_key_repository),
    now_fn=Depends(get_clock),
) -> AccessKeyStatsUseCase:
    return AccessKeyStatsUseCase(key_repo, now_fn=now_fn)


async def require_admin(
    x_admin_token: Optional[str] = Header(None),
    app_settings: Settings = Depends(get_app_settings),
) -> None:
    """관리자 토큰 확인"""
    if not app_settings.ADMIN_TOKEN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="관리자 API가 비활성화되어 있습니다.")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, app_settings.ADMIN_TOKEN):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="유효하지 않은 관리자 토큰입니다.")
