from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Minimal logging configuration for this repo.

    Notes:
    - Stdlib logging; uvicorn already configures handlers, this only sets levels for our package.
    - Set `APP_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    - Passwords, hashes and bearer tokens are never passed to a logger.
    """

    normalized = level.upper()
    logging.getLogger("app").setLevel(normalized)
    # Ensure child loggers under app.* inherit this level.
    logging.getLogger("app").propagate = True
