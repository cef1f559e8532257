"""FastAPI application entry point."""

import uvicorn

from src.application import create_app
from src.config import settings

app = create_app()


def main() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.log_level.lower(),
    )


__all__ = ["app", "main"]
