"""
core/logging.py 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import get_log_file_path, setup_logging


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogFilePath:
    """get_log_file_path 테스트"""

    def test_known_processes(self) -> None:
        assert get_log_file_path("web") == Paths.WEB_LOGS_DIR / "web.log"
        assert get_log_file_path("client") == Paths.CLIENT_LOGS_DIR / "client.log"

    def test_other_process(self) -> None:
        assert get_log_file_path("seed") == Paths.LOGS_DIR / "seed.log"


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_handlers(self, temp_dir: Path, restore_root_handlers) -> None:
        log_file = temp_dir / "nested" / "web.log"

        root = setup_logging("web", log_file=log_file)

        assert log_file.exists()
        assert len(root.handlers) == 2
        assert any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self, temp_dir: Path, restore_root_handlers) -> None:
        setup_logging("client", log_file=temp_dir / "a.log")
        root = setup_logging("client", log_file=temp_dir / "b.log")

        assert len(root.handlers) == 2

    def test_file_receives_records(self, temp_dir: Path, restore_root_handlers) -> None:
        log_file = temp_dir / "client.log"
        setup_logging("client", console_level=logging.WARNING, log_file=log_file)

        logging.getLogger("core.ledger.book").info("Daily cash memo created")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "| INFO     | core.ledger.book | Daily cash memo created" in text
