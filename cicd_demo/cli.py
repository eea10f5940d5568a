import argparse
import os
from typing import List, Mapping, Optional

from .config import ConfigError, Settings
from .logging_setup import get_logger, init_logging
from .api import create_app
from .server import serve


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="cicd-demo",
    description="Serve the CI/CD demo API (PORT and VERSION are read from the environment).",
  )
  parser.add_argument("--host", help="interface to bind (overrides HOST)")
  parser.add_argument("--port", help="port to bind (overrides PORT)")
  return parser


def load_settings(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> Settings:
  env = dict(os.environ if environ is None else environ)
  if args.host:
    env["HOST"] = args.host
  if args.port:
    env["PORT"] = args.port
  return Settings.from_env(env)


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> None:
  args = build_parser().parse_args(argv)
  try:
    settings = load_settings(args, environ)
  except ConfigError as exc:
    init_logging()
    get_logger(__name__).error("invalid_configuration", variable=exc.name, error=str(exc))
    raise SystemExit(2) from exc

  init_logging(settings.log_level)
  serve(create_app(settings), settings)
