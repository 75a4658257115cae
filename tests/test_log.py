from __future__ import annotations

import logging

import pytest

from capitol_fetcher.log import configure_logging


@pytest.fixture
def restore_logger():
    root = logging.getLogger("capitol_fetcher")
    level, handlers = root.level, list(root.handlers)
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(level)
    for h in handlers:
        root.addHandler(h)


def test_warn_maps_to_warning(restore_logger):
    root = configure_logging("warn")
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1


def test_unknown_level_rejected(restore_logger):
    with pytest.raises(ValueError):
        configure_logging("loud")


def test_log_dir_writes_combined_and_error_files(tmp_path, restore_logger):
    root = configure_logging("info", log_dir=str(tmp_path / "logs"))
    logging.getLogger("capitol_fetcher.pipeline").info("Fetching trades from x")
    logging.getLogger("capitol_fetcher.pipeline").error("Fetch failed for x")
    for h in root.handlers:
        h.flush()

    combined = (tmp_path / "logs" / "combined.log").read_text(encoding="utf-8")
    errors = (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
    assert "[INFO]: Fetching trades from x" in combined
    assert "Fetch failed for x" in combined
    assert "Fetching trades" not in errors
    assert "[ERROR]: Fetch failed for x" in errors


def test_reconfiguring_does_not_stack_handlers(restore_logger):
    configure_logging("info")
    root = configure_logging("debug")
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
