# tests/test_logging.py
from __future__ import annotations

import logging

import pytest

from makemyloop.infra.logging import get_logger, init_logging, log_banner


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if isinstance(h, logging.FileHandler):
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_env_level_overrides_argument(monkeypatch):
    monkeypatch.setenv("MAKEMYLOOP_LOG_LEVEL", "WARNING")

    init_logging(level="DEBUG")

    assert logging.getLogger().level == logging.WARNING


def test_stdout_only_by_default(monkeypatch):
    monkeypatch.delenv("MAKEMYLOOP_LOG_LEVEL", raising=False)

    assert init_logging(level="INFO") is None
    assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)


def test_file_output_uses_bracketed_format(tmp_path, monkeypatch):
    monkeypatch.delenv("MAKEMYLOOP_LOG_LEVEL", raising=False)
    log_file = tmp_path / "run.log"

    path = init_logging(level="INFO", log_file=log_file)
    log_banner(get_logger("makemyloop.test"), "hello", width=10)
    for h in logging.getLogger().handlers:
        h.flush()

    assert path == log_file.resolve()
    text = log_file.read_text(encoding="utf-8")
    assert "[INFO][makemyloop.test] hello" in text
    assert "=" * 10 in text


def test_run_log_lands_under_logs_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("MAKEMYLOOP_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", ["bulk_loops.py"])

    path = init_logging(level="INFO", run_log=True)

    assert path.parent == (tmp_path / "logs").resolve()
    assert path.name.startswith("bulk_loops__")
