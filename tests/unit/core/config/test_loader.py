"""
core/config/loader.py 테스트

settings.yaml 로드, 기본값, Settings 싱글톤
"""

from pathlib import Path

import pytest

from core.config.loader import (
    ApiConfig,
    AppConfig,
    Settings,
    SettingsLoadError,
    get_settings,
    load_settings,
    parse_settings,
)
from core.constants import PROJECT_ROOT, Defaults, Paths


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestParseSettings:
    """parse_settings 테스트"""

    def test_empty_mapping_gives_defaults(self) -> None:
        config = parse_settings({})

        assert config == AppConfig()
        assert config.api.base_url == Defaults.API_BASE_URL
        assert config.ledger.db_path == Paths.LEDGER_DB
        assert config.ledger.optimistic_concurrency is False

    def test_values(self) -> None:
        config = parse_settings({
            "api": {"base_url": "https://ledger.example.com/api/", "timeout_sec": "10", "token": "t"},
            "cache": {"enabled": False},
            "ledger": {"optimistic_concurrency": True, "db_path": "var/book.db"},
            "web": {"host": "0.0.0.0", "port": "9000"},
            "log_level": "debug",
        })

        assert config.api == ApiConfig(base_url="https://ledger.example.com/api", timeout_sec=10.0, token="t")
        assert config.cache.enabled is False
        assert config.ledger.optimistic_concurrency is True
        assert config.ledger.db_path == PROJECT_ROOT / "var" / "book.db"
        assert config.web.port == 9000
        assert config.log_level == "DEBUG"

    def test_absolute_db_path_kept(self, tmp_path: Path) -> None:
        config = parse_settings({"ledger": {"db_path": str(tmp_path / "x.db")}})
        assert config.ledger.db_path == tmp_path / "x.db"

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(SettingsLoadError):
            parse_settings({"api": "http://nope"})

    def test_bad_value(self) -> None:
        with pytest.raises(SettingsLoadError):
            parse_settings({"web": {"port": "eighty"}})

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.log_level = "DEBUG"  # type: ignore


class TestLoadSettings:
    """load_settings 테스트"""

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(SettingsLoadError):
            load_settings(temp_dir / "missing.yaml")

    def test_empty_file(self, temp_dir: Path) -> None:
        assert load_settings(_write(temp_dir / "s.yaml", "")) == AppConfig()

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        with pytest.raises(SettingsLoadError):
            load_settings(_write(temp_dir / "s.yaml", "api: [unclosed"))

    def test_not_a_mapping(self, temp_dir: Path) -> None:
        with pytest.raises(SettingsLoadError):
            load_settings(_write(temp_dir / "s.yaml", "- a\n- b\n"))

    def test_file(self, temp_dir: Path) -> None:
        path = _write(temp_dir / "s.yaml", "api:\n  token: abc\nweb:\n  port: 8100\n")

        config = load_settings(path)

        assert config.api.token == "abc"
        assert config.web.port == 8100
        assert config.web.host == Defaults.WEB_HOST

    def test_bundled_example(self) -> None:
        """config/의 예제 파일 로드"""
        config = load_settings(Paths.SETTINGS_FILE)
        assert config.ledger.db_path == Paths.LEDGER_DB


class TestSettings:
    """Settings 싱글톤"""

    def test_singleton(self, temp_dir: Path) -> None:
        path = _write(temp_dir / "s.yaml", "log_level: warning\n")

        first = get_settings(path)
        second = get_settings()

        assert first is second
        assert second.log_level == "WARNING"

    def test_reset(self, temp_dir: Path) -> None:
        get_settings(_write(temp_dir / "a.yaml", "web:\n  port: 1\n"))
        Settings.reset()

        settings = get_settings(_write(temp_dir / "b.yaml", "web:\n  port: 2\n"))

        assert settings.web.port == 2

    def test_properties(self, temp_dir: Path) -> None:
        settings = get_settings(_write(temp_dir / "s.yaml", "ledger:\n  optimistic_concurrency: true\n"))

        assert settings.ledger.optimistic_concurrency is True
        assert settings.api == ApiConfig()
        assert settings.cache.enabled is True
        assert settings.config.web == settings.web

    def test_explicit_missing_path(self, temp_dir: Path) -> None:
        with pytest.raises(SettingsLoadError):
            get_settings(temp_dir / "missing.yaml")
