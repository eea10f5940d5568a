import logging
from typing import Any, Mapping

import structlog


def init_logging(level: str = "INFO") -> None:
  """Configure structlog + stdlib logging for console output.

  uvicorn logs through stdlib logging, so both end up on the same handler
  at the same level.
  """
  numeric = getattr(logging, level.upper(), logging.INFO)
  logging.basicConfig(level=numeric, format="%(message)s", force=True)
  for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(name).setLevel(numeric)

  structlog.configure(
    processors=[
      structlog.contextvars.merge_contextvars,
      structlog.processors.add_log_level,
      structlog.processors.TimeStamper(fmt="iso", key="ts"),
      _lower_level,
      structlog.dev.ConsoleRenderer(colors=False),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.make_filtering_bound_logger(numeric),
    cache_logger_on_first_use=True,
  )


def _lower_level(logger: Any, method_name: str, event_dict: Mapping[str, Any]):
  level = event_dict.get("level")
  if level:
    event_dict = dict(event_dict)
    event_dict["level"] = str(level).lower()
  return event_dict


def get_logger(name: str = "cicd_demo") -> structlog.stdlib.BoundLogger:
  return structlog.get_logger(name)
