"""
Retired URL middleware.

Pages that were removed on purpose answer ``410 Gone`` so search engines drop
them instead of retrying a 404.
"""

import re
from typing import Callable, Iterable, List, Optional, Pattern

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import HTMLResponse, Response
from starlette.types import ASGIApp

from sws_blog.core.logging_config import get_logger
from sws_blog.server.core.constant import GONE_URL_PATTERNS

logger = get_logger(__name__)

GONE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="robots" content="noindex">
  <title>410 - Page Gone</title>
</head>
<body>
  <h1>410 - Page Gone</h1>
  <p>This page has been permanently removed.</p>
  <p><a href="/">Go to the homepage</a></p>
</body>
</html>
"""


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    return [re.compile(p) for p in patterns]


class GoneUrlMiddleware(BaseHTTPMiddleware):
    """Answer 410 with a small HTML page for retired paths."""

    def __init__(self, app: ASGIApp, patterns: Optional[Iterable[str]] = None) -> None:
        super().__init__(app)
        self.patterns = compile_patterns(GONE_URL_PATTERNS if patterns is None else patterns)

    def is_gone(self, path: str) -> bool:
        return any(p.match(path) for p in self.patterns)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if self.is_gone(path):
            logger.debug(f"410 Gone: {path}")
            return HTMLResponse(GONE_PAGE, status_code=410, headers={"X-Robots-Tag": "noindex"})
        return await call_next(request)
