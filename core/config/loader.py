"""
설정 로더

settings.yaml 로드 및 관심사별 설정 객체 생성.
모든 섹션은 선택 사항이며 없는 키는 ``Defaults`` 값 사용

settings.yaml 예시:
```yaml
api:
  base_url: http://127.0.0.1:5000/api
  timeout_sec: 30
  token: ""
cache:
  enabled: true
ledger:
  optimistic_concurrency: false
  db_path: data/cashbook.db
web:
  host: 127.0.0.1
  port: 8000
log_level: INFO
```
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths


@dataclass(frozen=True)
class ApiConfig:
    """원격 원장 API 연결 설정

    ``token``이 비어 있지 않으면 고정 bearer 토큰으로 전송
    """

    base_url: str = Defaults.API_BASE_URL
    timeout_sec: float = Defaults.API_TIMEOUT_SEC
    token: str = ""


@dataclass(frozen=True)
class CacheConfig:
    """클라이언트 캐시 설정"""

    enabled: bool = True


@dataclass(frozen=True)
class LedgerConfig:
    """원장 동작 설정

    Attributes:
        optimistic_concurrency: 변경 요청 시 메모 버전 전송/검증
        db_path: 현금 장부 SQLite 파일
    """

    optimistic_concurrency: bool = False
    db_path: Path = Paths.LEDGER_DB


@dataclass(frozen=True)
class WebConfig:
    """웹 서비스 바인드 주소"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """전체 설정

    불변 데이터 구조로 런타임 설정 변경 방지
    """

    api: ApiConfig = field(default_factory=ApiConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_level: str = Defaults.LOG_LEVEL


class SettingsLoadError(Exception):
    """settings.yaml 로드 실패"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml section '{name}' must be a mapping")
    return section


def _resolve_path(value: Any) -> Path:
    path = Path(str(value))
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def parse_settings(data: dict[str, Any]) -> AppConfig:
    """파싱된 YAML로 AppConfig 생성

    Raises:
        SettingsLoadError: 섹션 타입 또는 값 오류
    """
    api = _section(data, "api")
    cache = _section(data, "cache")
    ledger = _section(data, "ledger")
    web = _section(data, "web")

    try:
        return AppConfig(
            api=ApiConfig(
                base_url=str(api.get("base_url", Defaults.API_BASE_URL)).rstrip("/"),
                timeout_sec=float(api.get("timeout_sec", Defaults.API_TIMEOUT_SEC)),
                token=str(api.get("token") or ""),
            ),
            cache=CacheConfig(enabled=bool(cache.get("enabled", True))),
            ledger=LedgerConfig(
                optimistic_concurrency=bool(ledger.get("optimistic_concurrency", False)),
                db_path=_resolve_path(ledger["db_path"]) if ledger.get("db_path") else Paths.LEDGER_DB,
            ),
            web=WebConfig(
                host=str(web.get("host", Defaults.WEB_HOST)),
                port=int(web.get("port", Defaults.WEB_PORT)),
            ),
            log_level=str(data.get("log_level", Defaults.LOG_LEVEL)).upper(),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"Invalid value in settings.yaml: {e}") from e


def load_settings(path: Path | None = None) -> AppConfig:
    """settings.yaml 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식 오류
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"Failed to parse settings.yaml: {e}") from e

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml must contain a mapping")

    return parse_settings(data)


class Settings:
    """애플리케이션 설정 (싱글톤)

    기본 설정 파일이 없으면 기본값 사용.
    명시적으로 지정한 경로는 반드시 존재해야 함
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            if settings_path is None and not Paths.SETTINGS_FILE.exists():
                type(self)._config = AppConfig()
            else:
                type(self)._config = load_settings(settings_path)

    @property
    def config(self) -> AppConfig:
        assert self._config is not None
        return self._config

    @property
    def api(self) -> ApiConfig:
        return self.config.api

    @property
    def cache(self) -> CacheConfig:
        return self.config.cache

    @property
    def ledger(self) -> LedgerConfig:
        return self.config.ledger

    @property
    def web(self) -> WebConfig:
        return self.config.web

    @property
    def log_level(self) -> str:
        return self.config.log_level

    @classmethod
    def reset(cls) -> None:
        """싱글톤 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 싱글톤 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로)
    """
    return Settings(settings_path)
