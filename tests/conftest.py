"""Pytest fixtures for the CI/CD demo API."""
import pytest
from fastapi.testclient import TestClient

from cicd_demo.api import create_app
from cicd_demo.config import Settings
from cicd_demo.server import Listener


@pytest.fixture
def settings():
  return Settings(host="127.0.0.1", port=0, version="2.3.4")


@pytest.fixture
def client(settings):
  return TestClient(create_app(settings))


@pytest.fixture
def listener(settings):
  """A real server on an OS-assigned port, stopped after the test."""
  running = Listener(create_app(settings), settings).start()
  yield running
  running.stop()
