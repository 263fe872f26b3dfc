"""
Generation error taxonomy.

InvalidRequest and UpstreamError are the only failures that reach the
HTTP layer; parse problems never leave the extraction ladder.
"""
from typing import Optional


class InvalidRequest(ValueError):
    """Client-side problem with the request (maps to HTTP 400)"""


class UpstreamError(Exception):
    """The remote model provider failed or returned a non-success status.

    Carries a locally rendered component so callers always have something
    renderable to hand back.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, fallback_code: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.fallback_code = fallback_code
