"""헬스 체크 라우터"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from config import Settings
from api.dependencies import get_app_settings

router = APIRouter(tags=["시스템"])


@router.get("/health")
async def health_check(app_settings: Settings = Depends(get_app_settings)):
    return {"status": "healthy", "service": app_settings.APP_NAME, "version": app_settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/")
async def root(app_settings: Settings = Depends(get_app_settings)):
    return {"service": app_settings.APP_NAME, "version": app_settings.APP_VERSION,
            "docs": "/docs", "health": "/health"}
