"""ASGI entry point: ``uvicorn src.main:app``."""

from src.core.application import create_application
from src.core.initialization import initialize_application

initialize_application()

app = create_application()
