"""
로깅 설정

웹 서비스와 클라이언트 프로세스가 공유
- 콘솔: INFO
- 파일: INFO (TimedRotatingFileHandler, 일 단위)

사용법:
    from core.logging import setup_logging
    setup_logging("web")     # 현금 장부 웹 서비스
    setup_logging("client")  # 클라이언트 스크립트
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 7일치 보관

# WARNING으로 고정할 로거 (로그 과다 방지)
NOISY_LOGGERS = [
    "aiosqlite",       # 쿼리마다 executing/completed 출력
    "httpcore",        # 연결 상세
    "httpx",           # 요청마다 한 줄
    "asyncio",
    "uvicorn.access",  # 요청마다 한 줄
]


def get_log_file_path(process_name: str) -> Path:
    """프로세스별 로그 파일 경로

    Args:
        process_name: "web", "client" 또는 기타 이름

    Returns:
        로그 파일 Path
    """
    if process_name == "web":
        return Paths.WEB_LOGS_DIR / f"{process_name}.log"
    if process_name == "client":
        return Paths.CLIENT_LOGS_DIR / f"{process_name}.log"
    return Paths.LOGS_DIR / f"{process_name}.log"


def setup_logging(
    process_name: str,
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """루트 로깅 초기화

    파일은 자정마다 교체됨

    Args:
        process_name: 프로세스 이름 ("web" 또는 "client")
        console_level: 콘솔 로그 레벨 (기본 INFO)
        file_level: 파일 로그 레벨 (기본 INFO)
        log_file: 로그 파일 경로 (지정 시 기본 경로 대신 사용)

    Returns:
        설정된 루트 로거
    """
    if log_file is None:
        log_file = get_log_file_path(process_name)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 필터링은 핸들러에서

    # 기존 핸들러 제거 (중복 설정 방지)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2025-01-31 형식
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"로깅 초기화 완료: {process_name}")
    root_logger.info(f"  - 파일: {log_file} (daily rotation, {LOG_FILE_BACKUP_COUNT}일 보관)")

    return root_logger
