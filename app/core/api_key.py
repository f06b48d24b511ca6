"""
API key request gate.

A gate inspects request headers and either lets the request through or
returns a denial message. ApiKeyMiddleware applies a gate in front of the
routers, so the endpoint handlers never see authentication concerns.
The default gate allows everything.
"""

import hmac
import logging
from typing import Callable, Iterable, Optional

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.core.config import Settings
from app.core.errors import ErrorKind, error_response

logger = logging.getLogger(__name__)

# Returns None to allow the request, or the reason it was denied
RequestGate = Callable[[Headers], Optional[str]]

OPEN_PATHS = ("/", "/health", "/health/detailed", "/docs", "/redoc", "/openapi.json")


def allow_all(headers: Headers) -> Optional[str]:
    return None


def require_api_key(expected: str, header_name: str = "X-API-Key") -> RequestGate:
    """Build a gate that accepts only requests carrying the expected key."""

    def gate(headers: Headers) -> Optional[str]:
        provided = headers.get(header_name)
        if provided is None:
            return "Missing API Key"
        if not hmac.compare_digest(provided.encode(), expected.encode()):
            return "Incorrect API Key"
        return None

    return gate


def build_gate(settings: Settings) -> RequestGate:
    if not settings.API_KEY:
        return allow_all
    return require_api_key(settings.API_KEY, settings.API_KEY_HEADER)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    Run a RequestGate before routing.

    With log_only=True denials are logged and the request proceeds anyway,
    which is useful while rolling keys out to clients.
    """

    def __init__(self, app, gate: RequestGate = allow_all, log_only: bool = False,
                 open_paths: Iterable[str] = OPEN_PATHS):
        super().__init__(app)
        self.gate = gate
        self.log_only = log_only
        self.open_paths = frozenset(open_paths)

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or request.url.path in self.open_paths:
            return await call_next(request)

        reason = self.gate(request.headers)
        if reason is not None:
            if self.log_only:
                logger.debug(f"{reason} on {request.method} {request.url.path}, passing through")
            else:
                logger.info(f"Rejected {request.method} {request.url.path}: {reason}")
                return error_response(ErrorKind.UNAUTHORIZED, reason)

        return await call_next(request)
