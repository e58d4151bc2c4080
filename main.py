#!/usr/bin/env python3
"""
Product Catalog -- server entry point.

Usage:
  python main.py

Environment variables (all optional, see core/config.py):
  PORT          Listen port (default 8080). Binds 0.0.0.0.
  DATABASE_URL  Full connection string. Overrides DB_HOST, DB_PORT, DB_NAME,
                DB_USER and DB_PASSWORD.

uvicorn runs the lifespan in api/main.py: the schema is created before the
socket is bound, and SIGTERM closes the connection pool before exit. If the
schema cannot be created uvicorn exits with a non-zero status.
"""

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host="0.0.0.0",  # nosec B104 -- container deployment
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
