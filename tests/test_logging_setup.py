import logging

import pytest
import structlog

from cicd_demo.logging_setup import _lower_level, get_logger, init_logging


@pytest.fixture
def restore_logging():
  root = logging.getLogger()
  handlers, level = root.handlers[:], root.level
  uvicorn_levels = {n: logging.getLogger(n).level for n in ("uvicorn", "uvicorn.error", "uvicorn.access")}
  yield
  root.handlers[:] = handlers
  root.setLevel(level)
  for name, lvl in uvicorn_levels.items():
    logging.getLogger(name).setLevel(lvl)
  structlog.reset_defaults()


def test_uvicorn_loggers_follow_configured_level(restore_logging):
  init_logging("WARNING")
  assert logging.getLogger().level == logging.WARNING
  assert logging.getLogger("uvicorn.error").level == logging.WARNING
  assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_events_reach_stdlib(restore_logging, caplog):
  init_logging("INFO")
  logging.getLogger().addHandler(caplog.handler)
  get_logger("cicd_demo.test").info("listener_started", port=3000)
  assert any("listener_started" in r.getMessage() and "port=3000" in r.getMessage() for r in caplog.records)


def test_level_is_lower_cased():
  assert _lower_level(None, "info", {"level": "INFO", "event": "x"})["level"] == "info"
