from __future__ import annotations

import logging
from pathlib import Path

import pytest

from leptos_ids.logging import LOGGER_NAME
from leptos_ids.logging import LogConfig
from leptos_ids.logging import configure_logging
from leptos_ids.logging import verbosity_to_level


@pytest.mark.parametrize(
    ("verbosity", "level"),
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)
def test_verbosity_to_level(verbosity: int, level: int) -> None:
    assert verbosity_to_level(verbosity) == level


def test_configure_logging_replaces_handlers() -> None:
    logger = configure_logging()
    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 1
    configure_logging()
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_configure_logging_with_file(tmp_path: Path) -> None:
    log_file = tmp_path / "leptos-ids.log"
    logger = configure_logging(LogConfig(log_file=log_file))
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG

    logging.getLogger("leptos_ids.driver").debug("scanned %s", "a.rs")
    for handler in logger.handlers:
        handler.flush()
    assert "leptos_ids.driver - DEBUG - scanned a.rs" in log_file.read_text()
