"""
로깅 시스템 중앙 설정 모듈

Money Routine 백엔드의 모든 로깅을 한 곳에서 설정합니다.

주요 기능:
1. 중앙 집중식 로깅 설정 (main.py에서 한 번만 호출)
2. 자동 로그 파일 로테이션 (크기 기반)
3. 외부 라이브러리(urllib3 등)의 과도한 로그 억제

사용법:
- 앱 시작 시: setup_logging()을 한 번만 호출
- 각 모듈에서: logger = logging.getLogger(__name__)로 사용
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

# 프로젝트 루트 기준 로그 디렉토리 경로
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_LOGS_DIR = PROJECT_ROOT / "logs"

# 시세 조회 시 요청마다 연결 로그를 남기는 라이브러리들
NOISY_LOGGERS = ("urllib3", "requests", "httpx", "sqlalchemy.engine")


class SmartFormatter(logging.Formatter):
    """
    로그 종류에 따라 다른 포맷을 적용하는 포맷터.

    - 요청 로그 (app.main): 요청 ID가 메시지에 포함되므로 시각 + 메시지만 표시
    - 그 외 로그: 시각, 로거 이름, 레벨을 모두 표시
    """

    def __init__(self):
        super().__init__()
        self.default_fmt = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.access_fmt = logging.Formatter(
            '%(asctime)s - ACCESS - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record):
        if record.name == 'app.main' and record.levelno < logging.WARNING:
            return self.access_fmt.format(record)
        return self.default_fmt.format(record)


def setup_logging(
    logs_dir=None,
    log_level: str = "INFO",
    log_to_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
):
    """
    애플리케이션 전체의 로깅을 설정합니다.

    main.py에서 앱 시작 시 **딱 한 번만** 호출해야 합니다.

    Args:
        logs_dir (str | Path, optional): 로그 파일 디렉토리. 기본값은 프로젝트 루트의 'logs'.
        log_level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL" 중 하나.
        log_to_file (bool): False면 콘솔 핸들러만 등록합니다.
        max_bytes (int): 로그 파일 최대 크기. 초과 시 로테이션됩니다.
        backup_count (int): 보관할 이전 로그 파일 개수.

    Returns:
        Path | None: 로그 파일 경로 (파일 로깅을 끈 경우 None)
    """
    level = get_log_level(log_level)

    root_logger = logging.getLogger()

    # 기존 핸들러가 있으면 제거 (중복 방지, uvicorn reload 대비)
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # 루트는 모든 레벨을 받고, 필터링은 핸들러에서
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)

    log_filename = None
    if log_to_file:
        target_logs_dir = Path(logs_dir) if logs_dir else DEFAULT_LOGS_DIR
        target_logs_dir.mkdir(parents=True, exist_ok=True)
        log_filename = target_logs_dir / f"moneyroutine_{datetime.now().strftime('%Y%m%d')}.log"

        file_handler = RotatingFileHandler(
            filename=log_filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(SmartFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_filename is not None:
        root_logger.info(f"로깅 시스템 초기화 완료 - 로그 파일: {log_filename}")
    else:
        root_logger.info("로깅 시스템 초기화 완료 - 콘솔 출력만 사용")
    root_logger.info(f"로그 레벨: {log_level}, 최대 파일 크기: {max_bytes / (1024*1024):.1f}MB, 백업 개수: {backup_count}")
    return log_filename


def get_log_level(level_str: str) -> int:
    """
    문자열 로그 레벨을 logging 모듈의 상수로 변환합니다.

    알 수 없는 값이면 INFO를 돌려줍니다.

    예시:
        >>> get_log_level("info")
        20
        >>> get_log_level("verbose")
        20
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL
    }
    return level_map.get((level_str or "").upper(), logging.INFO)
