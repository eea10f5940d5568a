"""ASGI entry point: `uvicorn cicd_demo.main:app`."""
from .api import create_app
from .config import Settings


app = create_app(Settings.from_env())
