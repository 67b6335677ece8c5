# backend/app/core/auth.py

import hmac
import logging
from typing import Dict, Optional

from jose import jwt, JWTError

from backend.app.core.errors import Unauthorized

logger = logging.getLogger(__name__)


class TokenVerifier:
    """
    Verifies bearer tokens issued by the auth provider and returns the user id
    (the `sub` claim).
    """

    def __init__(self, secret: str, algorithm: str = "HS256", audience: Optional[str] = "authenticated"):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience or None

    def verify(self, token: str) -> Dict:
        if not self.secret:
            logger.error("AUTH_JWT_SECRET is not configured; rejecting token")
            raise Unauthorized(details="Authentication is not configured")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.warning("JWT verification failed: %s", e)
            raise Unauthorized(details="Invalid or expired token") from e

    def user_id_from_header(self, authorization: Optional[str]) -> str:
        if not authorization:
            raise Unauthorized(details="No user found in session")
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise Unauthorized(details="Invalid authorization header format")
        claims = self.verify(parts[1])
        user_id = claims.get("sub")
        if not user_id:
            raise Unauthorized(details="No user found in session")
        return str(user_id)


def secret_matches(provided: Optional[str], expected: str) -> bool:
    """Constant-time shared-secret check; an unset secret never matches."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())
