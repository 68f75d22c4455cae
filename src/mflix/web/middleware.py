"""Token gate in front of the protected API routes."""

from collections.abc import Callable, Sequence

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from mflix.core.modules.session.models import TokenClaims
from mflix.errors import AccessDeniedError
from mflix.web.responses import create_envelope_response

logger = structlog.get_logger(__name__)

PROTECTED_PREFIXES = ("/api/movies",)
PUBLIC_PREFIXES = ("/api/auth/login", "/api/auth/register", "/api-doc")


def get_bearer_token(scope: Scope) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    for key, value in scope.get("headers") or []:
        if key.decode("latin-1").lower() != "authorization":
            continue
        scheme, _, credentials = value.decode("latin-1").partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None
    return None


class TokenGateMiddleware:
    """Raw ASGI middleware: missing token → 401, invalid or expired → 403, valid → pass.

    Only signature and expiry are checked, the store is never consulted.
    """

    def __init__(
        self,
        app: ASGIApp,
        verify_token: Callable[[str], TokenClaims],
        protected_prefixes: Sequence[str] = PROTECTED_PREFIXES,
        public_prefixes: Sequence[str] = PUBLIC_PREFIXES,
    ) -> None:
        self.app = app
        self.verify_token = verify_token
        self.protected_prefixes = tuple(protected_prefixes)
        self.public_prefixes = tuple(public_prefixes)

    def is_protected(self, path: str) -> bool:
        if path.startswith(self.public_prefixes):
            return False
        return path.startswith(self.protected_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.is_protected(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        token = get_bearer_token(scope)
        if token is None:
            response = create_envelope_response(status_code=401, message="Missing token")
            await response(scope, receive, send)
            return

        try:
            claims = self.verify_token(token)
        except AccessDeniedError as e:
            logger.info("token_rejected", path=scope.get("path"), reason=e.error or e.message)
            response = create_envelope_response(status_code=403, message="Invalid token")
            await response(scope, receive, send)
            return

        logger.debug("token_verified", user_id=claims.user_id, role=claims.role)
        await self.app(scope, receive, send)
