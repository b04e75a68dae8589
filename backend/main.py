"""
액세스 키 서비스 - FastAPI 메인 애플리케이션
"""
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import Settings, settings
from domain.clock import utc_now
from application.ports.access_key_repository import AccessKeyRepository
from infrastructure.persistence.factory import build_key_repository
from api.errors import register_exception_handlers
from api.routers import access_keys, health


def configure_logging(app_settings: Settings) -> None:
    """파일 로그 싱크 추가"""
    log_dir = os.path.dirname(app_settings.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    logger.add(
        app_settings.LOG_FILE,
        rotation="10 MB",
        retention="30 days",
        level=app_settings.LOG_LEVEL
    )


def create_app(
    app_settings: Optional[Settings] = None,
    key_repository: Optional[AccessKeyRepository] = None,
    now_fn: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """앱 팩토리 — 저장소를 주입하지 않으면 설정에 따라 생성한다"""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 수명 주기 관리"""
        # 시작 시
        logger.info("서비스 시작...")
        repo = key_repository or build_key_repository(app_settings)
        await repo.init()
        app.state.key_repository = repo

        yield

        # 종료 시
        logger.info("서비스 종료...")
        await repo.close()

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="1회용 액세스 키 발급/검증 서비스",
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.now_fn = now_fn

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(access_keys.router)
    return app


configure_logging(settings)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
