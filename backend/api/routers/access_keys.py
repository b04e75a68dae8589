"""액세스 키 라우터"""
from typing import Optional

from fastapi import APIRouter, Body, Depends

from api.schemas.access_keys import (
    GenerateKeyRequest, GenerateKeyResponse, ValidateKeyRequest, ValidateKeyResponse,
    AccessKeyItem, AccessKeyListResponse, AccessKeyStatsResponse, ClearKeysResponse,
)
from api.dependencies import (
    get_issue_use_case, get_validate_use_case, get_list_use_case,
    get_clear_use_case, get_stats_use_case, require_admin,
)
from application.use_cases.issue_access_key import IssueAccessKeyUseCase, IssueAccessKeyInput
from application.use_cases.validate_access_key import ValidateAccessKeyUseCase, ValidateAccessKeyInput
from application.use_cases.manage_access_keys import (
    ListAccessKeysUseCase, ClearAccessKeysUseCase, AccessKeyStatsUseCase,
)

router = APIRouter(prefix="/api/access-keys", tags=["액세스 키"])


@router.post("/generate", response_model=GenerateKeyResponse)
async def generate_key(request: Optional[GenerateKeyRequest] = Body(None),
                       use_case: IssueAccessKeyUseCase = Depends(get_issue_use_case)):
    request = request or GenerateKeyRequest()
    result = await use_case.execute(IssueAccessKeyInput(plan=request.plan))
    return GenerateKeyResponse(key=result.code, plan=result.plan, expiration=result.expires_at)


@router.post("/validate", response_model=ValidateKeyResponse)
async def validate_key(request: Optional[ValidateKeyRequest] = Body(None),
                       use_case: ValidateAccessKeyUseCase = Depends(get_validate_use_case)):
    request = request or ValidateKeyRequest()
    result = await use_case.execute(ValidateAccessKeyInput(code=request.key, user_id=request.user_id))
    return ValidateKeyResponse(plan=result.plan, expiration=result.expires_at)


@router.get("", response_model=AccessKeyListResponse, dependencies=[Depends(require_admin)])
async def list_keys(use_case: ListAccessKeysUseCase = Depends(get_list_use_case)):
    keys = await use_case.execute()
    items = [AccessKeyItem(key=k.code, plan=k.plan.value, plan_code=k.plan_code,
                           expiration=k.expires_at, created_at=k.created_at, used=k.used,
                           used_at=k.used_at, used_by=k.used_by) for k in keys]
    return AccessKeyListResponse(success=True, count=len(items), keys=items)


@router.get("/stats", response_model=AccessKeyStatsResponse, dependencies=[Depends(require_admin)])
async def key_stats(use_case: AccessKeyStatsUseCase = Depends(get_stats_use_case)):
    stats = await use_case.execute()
    return AccessKeyStatsResponse(total=stats.total, unused=stats.unused, used=stats.used,
                                  expired=stats.expired, by_plan=stats.by_plan)


@router.delete("", response_model=ClearKeysResponse, dependencies=[Depends(require_admin)])
async def clear_keys(use_case: ClearAccessKeysUseCase = Depends(get_clear_use_case)):
    deleted = await use_case.execute()
    return ClearKeysResponse(success=True, message="모든 액세스 키가 삭제되었습니다.", deleted=deleted)
