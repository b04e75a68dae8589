"""액세스 키 스키마 — 필드명은 기존 클라이언트와 맞춘다 (key, expiration, userId ...)"""
from datetime import datetime
from typing import Any, Optional, List, Dict
from pydantic import BaseModel, Field

from api.schemas.common import ResponseBase


class GenerateKeyRequest(BaseModel):
    # 문자열이 아닌 값도 그대로 받아 유스케이스에서 INVALID_PLAN 으로 거부
    plan: Any = Field(None, description='"week" 또는 "month"')


class GenerateKeyResponse(ResponseBase):
    key: str
    plan: str
    expiration: datetime


class ValidateKeyRequest(BaseModel):
    key: Any = None
    user_id: Optional[str] = Field(None, alias="userId", max_length=255)

    class Config:
        populate_by_name = True


class ValidateKeyResponse(ResponseBase):
    plan: str
    expiration: datetime


class AccessKeyItem(BaseModel):
    key: str
    plan: str
    plan_code: str = Field(..., alias="planCode")
    expiration: datetime
    created_at: datetime = Field(..., alias="createdAt")
    used: bool
    used_at: Optional[datetime] = Field(None, alias="usedAt")
    used_by: Optional[str] = Field(None, alias="usedBy")

    class Config:
        populate_by_name = True


class AccessKeyListResponse(ResponseBase):
    count: int
    keys: List[AccessKeyItem]


class AccessKeyStatsResponse(ResponseBase):
    total: int
    unused: int
    used: int
    expired: int
    by_plan: Dict[str, int]


class ClearKeysResponse(ResponseBase):
    deleted: int
