import socket
import threading
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .config import Settings
from .logging_setup import get_logger


logger = get_logger(__name__)


class BindError(RuntimeError):
  """The listener could not bind its configured address."""

  def __init__(self, host: str, port: int, error: OSError):
    self.host = host
    self.port = port
    self.errno = error.errno
    super().__init__(f"cannot bind {host}:{port}: {error.strerror or error}")


def bind_socket(host: str, port: int) -> socket.socket:
  """Bind and listen on (host, port), raising BindError on failure."""
  family = socket.AF_INET6 if ":" in host else socket.AF_INET
  sock = socket.socket(family, socket.SOCK_STREAM)
  try:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, port))
    sock.listen(2048)
  except OSError as exc:
    sock.close()
    raise BindError(host, port, exc) from exc
  sock.set_inheritable(True)
  return sock


def _uvicorn_config(app: FastAPI, settings: Settings) -> uvicorn.Config:
  # log_config=None keeps the handlers installed by init_logging
  return uvicorn.Config(
    app,
    host=settings.host,
    port=settings.port,
    log_config=None,
    log_level=settings.log_level.lower(),
  )


class Listener:
  """Runs the app on a bound socket in a background thread.

  Used wherever the service has to be started and stopped in-process, such
  as the test suite. The socket is bound in start() so a port conflict
  surfaces there as BindError instead of inside the server thread.
  """

  def __init__(self, app: FastAPI, settings: Settings):
    self.app = app
    self.settings = settings
    self._sock: Optional[socket.socket] = None
    self._server: Optional[uvicorn.Server] = None
    self._thread: Optional[threading.Thread] = None

  @property
  def port(self) -> int:
    if self._sock is None:
      return self.settings.port
    return self._sock.getsockname()[1]

  @property
  def url(self) -> str:
    host = self.settings.host
    if host in ("0.0.0.0", ""):
      host = "127.0.0.1"
    elif host == "::":
      host = "::1"
    if ":" in host:
      host = f"[{host}]"
    return f"http://{host}:{self.port}"

  @property
  def running(self) -> bool:
    return self._thread is not None and self._thread.is_alive()

  def start(self, timeout: float = 5.0) -> "Listener":
    if self._thread is not None:
      raise RuntimeError("listener already started")

    self._sock = bind_socket(self.settings.host, self.settings.port)
    self._server = uvicorn.Server(_uvicorn_config(self.app, self.settings))
    self._thread = threading.Thread(
      target=self._server.run,
      kwargs={"sockets": [self._sock]},
      name=f"listener-{self.port}",
      daemon=True,
    )
    self._thread.start()

    deadline = time.monotonic() + timeout
    while not self._server.started:
      if not self._thread.is_alive() or time.monotonic() > deadline:
        self.stop()
        raise RuntimeError("server failed to start")
      time.sleep(0.01)

    logger.info("listener_started", host=self.settings.host, port=self.port)
    return self

  def stop(self, timeout: float = 5.0) -> None:
    if self._thread is None:
      return
    port = self.port
    if self._server is not None:
      self._server.should_exit = True
    self._thread.join(timeout)
    if self._sock is not None:
      self._sock.close()
    self._sock = None
    self._server = None
    self._thread = None
    logger.info("listener_stopped", port=port)

  def __enter__(self) -> "Listener":
    return self.start()

  def __exit__(self, *exc_info) -> None:
    self.stop()


def serve(app: FastAPI, settings: Settings) -> None:
  """Bind and serve in the foreground until uvicorn is told to exit."""
  try:
    sock = bind_socket(settings.host, settings.port)
  except BindError as exc:
    logger.error("bind_failed", host=exc.host, port=exc.port, error=str(exc))
    raise SystemExit(1) from exc

  port = sock.getsockname()[1]
  logger.info(f"Server running on port {port}", host=settings.host, version=settings.version)
  try:
    uvicorn.Server(_uvicorn_config(app, settings)).run(sockets=[sock])
  finally:
    sock.close()
  logger.info("server_stopped", port=port)
