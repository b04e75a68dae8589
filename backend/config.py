"""
액세스 키 서비스 설정
"""
from datetime import tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "액세스 키 서비스"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # 키 저장소 설정 ("sqlite" | "json")
    KEY_STORE_BACKEND: str = "sqlite"
    DB_URL: str = "sqlite+aiosqlite:///./data/access_keys.db"
    DB_ECHO: bool = False
    KEYS_FILE: str = "./data/access_keys.json"

    # 액세스 키 정책 (만료 일수는 플랜에 고정: domain.enums.PLAN_DURATIONS)
    KEY_TIMEZONE: str = ""  # 비어 있으면 서버 로컬 시간대
    ANONYMOUS_USER: str = "anonymous"

    # 관리자 API 토큰 (비어 있으면 관리자 API 비활성화)
    ADMIN_TOKEN: str = ""

    # CORS 설정
    CORS_ORIGINS: list = ["*"]

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"

    @field_validator("KEY_TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """알 수 없는 시간대 이름은 기동 시점에 거부"""
        if v:
            try:
                ZoneInfo(v)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"알 수 없는 시간대입니다: {v}")
        return v

    @property
    def key_tz(self) -> Optional[tzinfo]:
        """시(hour) 비교 기준 시간대. None 이면 시스템 로컬"""
        return ZoneInfo(self.KEY_TIMEZONE) if self.KEY_TIMEZONE else None


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


# 설정 인스턴스
settings = get_settings()
