"""Runtime configuration for the Money Routine backend.

All settings come from environment variables so the same image can run in
development (in-memory storage) and in production (DATABASE_URL set).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_ADMIN_PASSWORD = "admin1234"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "t", "yes", "y")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """애플리케이션 설정 값 묶음"""

    admin_password: str = DEFAULT_ADMIN_PASSWORD
    database_url: Optional[str] = None
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    log_to_file: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    market_timeout_seconds: float = 5.0
    market_slow_timeout_seconds: float = 8.0
    market_max_workers: int = 16
    seed_content: bool = True


def load_settings() -> Settings:
    """환경 변수에서 설정을 읽어 Settings 객체를 만듭니다.

    - ADMIN_PASSWORD: 관리자 비밀번호 (없으면 기본값 사용)
    - DATABASE_URL: 지정하면 SQLAlchemy 저장소, 없으면 메모리 저장소
    - LOG_LEVEL / LOG_DIR / LOG_TO_FILE: 로깅 설정
    - CORS_ORIGINS: 콤마로 구분한 허용 도메인 목록
    - MARKET_TIMEOUT_SECONDS / MARKET_SLOW_TIMEOUT_SECONDS: 시세 소스별 타임아웃
    - MARKET_MAX_WORKERS: 시세 조회 스레드 풀 크기
    - SEED_CONTENT: 빈 저장소에 기본 아티클을 채울지 여부
    """
    log_dir = os.getenv("LOG_DIR")
    return Settings(
        admin_password=os.getenv("ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        database_url=os.getenv("DATABASE_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=Path(log_dir) if log_dir else None,
        log_to_file=_env_bool("LOG_TO_FILE", True),
        cors_origins=_env_list("CORS_ORIGINS", ["*"]),
        market_timeout_seconds=_env_float("MARKET_TIMEOUT_SECONDS", 5.0),
        market_slow_timeout_seconds=_env_float("MARKET_SLOW_TIMEOUT_SECONDS", 8.0),
        market_max_workers=_env_int("MARKET_MAX_WORKERS", 16),
        seed_content=_env_bool("SEED_CONTENT", True),
    )
