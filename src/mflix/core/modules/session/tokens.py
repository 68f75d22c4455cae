from datetime import datetime
from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from mflix.core.modules.session.models import AuthToken, TokenClaims
from mflix.core.modules.user.models import User
from mflix.errors import AccessDeniedError

JWT_ALGORITHM = "HS256"


class TokenSigner:
    """Issues and verifies HS256 tokens with a fixed lifetime.

    The secret is captured once at construction and never changes afterwards.
    """

    def __init__(self, secret: str, ttl_seconds: int) -> None:
        if not secret:
            raise ValueError("jwt_secret_blank")
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def issue(self, user: User, issued_at: datetime) -> tuple[AuthToken, TokenClaims]:
        iat = int(issued_at.timestamp())
        claims = TokenClaims(
            user_id=str(user.id),
            email=user.email,
            role=str(user.role),
            iat=iat,
            exp=iat + self.ttl_seconds,
        )
        token = jwt.encode(claims.model_dump(), self._secret, algorithm=JWT_ALGORITHM)
        return AuthToken(token), claims

    def verify(self, token: str) -> TokenClaims:
        """Check signature and expiry.

        Raises:
            AccessDeniedError: If the token is malformed, tampered with or expired
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AccessDeniedError("Invalid token", "Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise AccessDeniedError("Invalid token") from e
        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as e:
            raise AccessDeniedError("Invalid token", "Unexpected claims") from e
