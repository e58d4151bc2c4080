"""
web/frontend.py -- Static frontend for the product catalog.

The frontend is a single-page app in Settings.static_dir (default ./public),
served by Starlette's StaticFiles:
  - a path naming an existing file is served as that file (stylesheets,
    scripts, images);
  - / serves index.html (html=True);
  - anything else that StaticFiles answers with 404 gets index.html too, so
    client-side routes such as /products survive a page reload.

StaticFiles resolves every path against the directory and refuses anything
that escapes it, so /../secret.txt is a 404 and falls back to index.html.

Mount order matters. The mount at "/" matches every path, so asgi.py mounts
it after the API routes; /health and /api/* are matched first.
"""

import logging

from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.types import Scope

from core.config import get_settings

logger = logging.getLogger("catalog.web")

_INDEX = "index.html"


class FrontendFiles(StaticFiles):
    """StaticFiles that answers unknown paths with the entry document."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
        # A missing index.html re-raises 404 from here.
        return await super().get_response(_INDEX, scope)


def frontend_app() -> FrontendFiles:
    """Build the frontend app over the configured static directory.

    check_dir=False so a missing build does not stop the API from starting.
    """
    directory = get_settings().static_dir
    logger.info("Serving frontend from %s", directory)
    return FrontendFiles(directory=directory, html=True, check_dir=False)
