from __future__ import annotations

import logging
import warnings
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

import pytest

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def fresh_logger_utils() -> Iterator[None]:
    root_logger: logging.Logger = logging.getLogger("Typepad")
    saved_handlers: list[logging.Handler] = list(root_logger.handlers)
    saved_level: int = root_logger.level
    saved_showwarning = warnings.showwarning
    root_logger.handlers = []
    LoggerUtils._instance = None  # noqa: SLF001
    LoggerUtils._configured = False  # noqa: SLF001
    yield
    for handler in root_logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    root_logger.handlers = saved_handlers
    root_logger.setLevel(saved_level)
    warnings.showwarning = saved_showwarning
    LoggerUtils._instance = None  # noqa: SLF001
    LoggerUtils._configured = False  # noqa: SLF001


def test_get_logger_uses_application_namespace() -> None:
    assert LoggerUtils.get_logger("core.speech.manager").name == "Typepad.core.speech.manager"
    assert LoggerUtils.get_logger().name == "Typepad"


@pytest.mark.usefixtures("fresh_logger_utils")
def test_configures_console_and_rotating_file_once(tmp_path: Path) -> None:
    log_file: Path = tmp_path / "typepad.log"

    first = LoggerUtils(log_file)
    second = LoggerUtils(tmp_path / "other.log")

    assert first is second
    handlers: list[logging.Handler] = logging.getLogger("Typepad").handlers
    assert sum(type(h) is RotatingFileHandler for h in handlers) == 1
    assert sum(type(h) is logging.StreamHandler for h in handlers) == 1
    assert not (tmp_path / "other.log").exists()

    LoggerUtils.get_logger("test").debug("not written below INFO")
    LoggerUtils.get_logger("test").info("written to file")
    for handler in handlers:
        handler.flush()
    content: str = log_file.read_text(encoding="utf-8")
    assert "written to file" in content
    assert "not written below INFO" not in content


@pytest.mark.usefixtures("fresh_logger_utils")
def test_set_level_accepts_names_and_falls_back_to_info(tmp_path: Path) -> None:
    logger_utils = LoggerUtils(tmp_path / "typepad.log", use_null_console=True)

    logger_utils.set_level("DEBUG")
    assert logging.getLogger("Typepad").level == logging.DEBUG

    logger_utils.set_level("VERBOSE")  # type: ignore[arg-type]
    assert logging.getLogger("Typepad").level == logging.INFO


@pytest.mark.usefixtures("fresh_logger_utils")
def test_warnings_are_routed_to_log(tmp_path: Path) -> None:
    log_file: Path = tmp_path / "typepad.log"
    LoggerUtils(log_file, use_null_console=True)

    warnings.showwarning("deprecated call", DeprecationWarning, "module.py", 12)
    for handler in logging.getLogger("Typepad").handlers:
        handler.flush()

    assert "module.py:12: DeprecationWarning: deprecated call" in log_file.read_text(encoding="utf-8")
