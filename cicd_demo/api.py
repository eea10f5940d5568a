from fastapi import FastAPI
from pydantic import BaseModel

from .config import Settings


GREETING = "Hello from Jenkins CI/CD!"


class RootResponse(BaseModel):
  message: str
  version: str


class HealthResponse(BaseModel):
  status: str


def create_app(settings: Settings) -> FastAPI:
  app = FastAPI(
    title="CI/CD Demo API",
    description="Complete CI/CD pipeline demonstration",
    version=settings.version
  )
  app.state.settings = settings

  @app.get("/", response_model=RootResponse)
  def read_root():
    return {
      "message": GREETING,
      "version": settings.version
    }

  @app.get("/health", response_model=HealthResponse)
  def health_check():
    """Liveness probe used by the deploy smoke tests."""
    return {"status": "healthy"}

  return app
