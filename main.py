"""
Root entrypoint.

    uvicorn main:app --reload
    python main.py        # host/port from settings, reload in development
"""

from contracthub.core.config import settings
from contracthub.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level="debug" if settings.DEBUG else "info",
    )
