import logging

from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"
API_PREFIX = "api/"


class SPAStaticFiles(StaticFiles):
    """
    Static files with a single-page-app fallback.

    When no file matches the requested path the index document is served
    with status 200 so client-side routing can take over. API paths are
    left alone and keep their 404.
    """

    def __init__(self, *args, index: str = INDEX_DOCUMENT, **kwargs):
        kwargs.setdefault("html", True)
        super().__init__(*args, **kwargs)
        self.index = index

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or path.startswith(API_PREFIX) or path == "api":
                raise
            logger.debug(f"No static file for '{path}', serving {self.index}")
            return await super().get_response(self.index, scope)
