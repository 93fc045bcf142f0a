"""Entry point for the Course Signup API.

Serves ``course_signup_api.app.main:app`` with Uvicorn.  Host and port
come from the ``HOST`` and ``PORT`` environment variables (defaults
``0.0.0.0`` and ``3000``); the JSON documents are kept in ``DATA_DIR``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from course_signup_api.app.core.config import settings
from course_signup_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Serving on http://%s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
