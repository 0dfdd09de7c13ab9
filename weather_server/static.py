"""Static frontend assets with single-page-application fallback."""

import logging
from typing import Any

from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Scope

logger = logging.getLogger(__name__)

ASSET_NOT_FOUND = "404 - Asset Not Found"


class SPAStaticFiles(StaticFiles):
    """
    StaticFiles that serves the index document for unknown paths.

    Requests for ``/``, for directories and for missing files all receive
    the index document so client-side routing keeps working. If the index
    document itself is missing the response is a plain-text 404.
    """

    def __init__(self, *args: Any, index_document: str = "index.html", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.index_document = index_document

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise

        try:
            return await super().get_response(self.index_document, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            logger.warning(f"Fallback document missing: {self.index_document}")
            return PlainTextResponse(ASSET_NOT_FOUND, status_code=404)
