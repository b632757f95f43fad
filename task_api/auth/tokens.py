"""
Bearer token issuing and verification.

Tokens are HS256 JWTs carrying the user id (``sub``) and ``email`` with an
``exp`` claim. The secret and lifetime come from ``Settings`` and are bound
into a ``TokenService`` when the app is built.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel


class TokenClaim(BaseModel):
    user_id: str
    email: str
    expires_at: datetime


class InvalidTokenError(Exception):
    """Token failed signature, expiry or payload checks."""


class TokenService:
    def __init__(self, secret: str, expire_minutes: int, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret is not defined")
        self.secret = secret
        self.expire_minutes = expire_minutes
        self.algorithm = algorithm

    def create_access_token(
        self,
        user_id: str,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a JWT access token for a user."""
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = {"sub": user_id, "email": email, "exp": expire}
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenClaim:
        """Verify ``token`` and return its claim.

        Every failure, whether a bad signature, an expired token or a payload
        missing its identity fields, is raised as ``InvalidTokenError``.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        user_id = payload.get("sub")
        email = payload.get("email")
        exp = payload.get("exp")
        if not user_id or not email or exp is None:
            raise InvalidTokenError("Token payload is incomplete")
        return TokenClaim(
            user_id=user_id,
            email=email,
            expires_at=datetime.fromtimestamp(exp, timezone.utc),
        )
