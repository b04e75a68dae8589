"""도메인 예외 → HTTP 응답 변환"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from domain.exceptions import (
    DomainError, InvalidPlanError, MissingCodeError, InvalidFormatError, KeyNotFoundError,
    KeyAlreadyUsedError, KeyExpiredError, HourMismatchError, StoreUnavailableError,
)
from api.schemas.common import ErrorResponse

STATUS_BY_ERROR = {
    InvalidPlanError: status.HTTP_400_BAD_REQUEST,
    MissingCodeError: status.HTTP_400_BAD_REQUEST,
    InvalidFormatError: status.HTTP_400_BAD_REQUEST,
    KeyNotFoundError: status.HTTP_404_NOT_FOUND,
    KeyAlreadyUsedError: status.HTTP_400_BAD_REQUEST,
    KeyExpiredError: status.HTTP_400_BAD_REQUEST,
    HourMismatchError: status.HTTP_400_BAD_REQUEST,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} 실패: {exc.code}")
    else:
        logger.debug(f"{request.method} {request.url.path} 거부: {exc.code}")
    body = ErrorResponse(error=str(exc), code=exc.code)
    headers = {"Retry-After": "5"} if isinstance(exc, StoreUnavailableError) else None
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """본문이 JSON 객체가 아니거나 userId 가 잘못된 경우 등"""
    logger.debug(f"{request.method} {request.url.path} 요청 형식 오류: {exc.errors()}")
    body = ErrorResponse(error="요청 형식이 올바르지 않습니다.", code="INVALID_REQUEST")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} 처리 중 오류: {exc}")
    body = ErrorResponse(error="서버 내부 오류가 발생했습니다.", code="INTERNAL_ERROR")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
