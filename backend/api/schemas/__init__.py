"""
API 스키마 re-export

사용법:
  from api.schemas import GenerateKeyRequest, ValidateKeyResponse
"""
from api.schemas.common import ResponseBase, ErrorResponse
from api.schemas.access_keys import (
    GenerateKeyRequest, GenerateKeyResponse,
    ValidateKeyRequest, ValidateKeyResponse,
    AccessKeyItem, AccessKeyListResponse, AccessKeyStatsResponse, ClearKeysResponse,
)
