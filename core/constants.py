"""
하드코딩 상수 - 거의 변하지 않는 고정값

중요: 모든 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값"""

    API_BASE_URL: str = "http://127.0.0.1:5000/api"
    API_TIMEOUT_SEC: float = 30.0

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 엔티티 목록은 한 페이지로 조회
    LIST_FETCH_LIMIT: int = 1000
    TRANSACTIONS_PAGE_SIZE: int = 20


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    CLIENT_LOGS_DIR: Path = LOGS_DIR / "client"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    LEDGER_DB: Path = DATA_DIR / "cashbook.db"


class CacheTTL:
    """캐시 TTL 프리셋 (초)"""

    SHORT: float = 2 * 60
    MEDIUM: float = 5 * 60
    LONG: float = 15 * 60
    VERY_LONG: float = 60 * 60


class Limits:
    """원장 항목 검증 한도"""

    NAME_MAX_LENGTH: int = 100
    DESCRIPTION_MAX_LENGTH: int = 500
    AMOUNT_MAX: Decimal = Decimal("999999999.99")
    IMAGE_MAX_BYTES: int = 5 * 1024 * 1024
