import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_PORT = 3000
DEFAULT_VERSION = "1.0.0"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
  """Raised when an environment variable holds an unusable value."""

  def __init__(self, name: str, value: str, reason: str):
    self.name = name
    self.value = value
    super().__init__(f"{name}={value!r}: {reason}")


def _env(environ: Mapping[str, str], name: str, default: str) -> str:
  # An empty variable falls back to the default, same as an unset one
  return environ.get(name) or default


def _parse_port(raw: str) -> int:
  try:
    port = int(raw)
  except ValueError:
    raise ConfigError("PORT", raw, "not an integer") from None
  if not 0 <= port <= 65535:
    raise ConfigError("PORT", raw, "must be between 0 and 65535")
  return port


def _parse_log_level(raw: str) -> str:
  level = raw.upper()
  if level not in LOG_LEVELS:
    raise ConfigError("LOG_LEVEL", raw, "unknown logging level")
  return level


class Settings(BaseModel):
  """Process-wide configuration, read once at startup and never mutated."""

  model_config = ConfigDict(frozen=True)

  port: int = Field(DEFAULT_PORT, ge=0, le=65535)
  version: str = DEFAULT_VERSION
  host: str = DEFAULT_HOST
  log_level: str = DEFAULT_LOG_LEVEL

  @classmethod
  def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
    if environ is None:
      environ = os.environ
    return cls(
      port=_parse_port(_env(environ, "PORT", str(DEFAULT_PORT))),
      version=_env(environ, "VERSION", DEFAULT_VERSION),
      host=_env(environ, "HOST", DEFAULT_HOST),
      log_level=_parse_log_level(_env(environ, "LOG_LEVEL", DEFAULT_LOG_LEVEL)),
    )
