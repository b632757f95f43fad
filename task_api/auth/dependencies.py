"""
FastAPI dependencies for authentication.

``get_current_claim`` guards every protected route: it reads the
``Authorization`` header, verifies the bearer token and stores the claim on
``request.state``. It never touches the database.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from ..errors import AuthError
from .tokens import InvalidTokenError, TokenClaim, TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def resolve_claim(authorization: Optional[str], tokens: TokenService) -> TokenClaim:
    """Turn a raw ``Authorization`` header value into a verified claim."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError(
            "No token provided. Authorization denied.",
            kind=AuthError.MISSING_TOKEN,
        )

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError("Invalid token format.", kind=AuthError.MALFORMED_TOKEN)

    try:
        return tokens.decode_token(token)
    except InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise AuthError(
            "Token is not valid or has expired.",
            kind=AuthError.INVALID_OR_EXPIRED_TOKEN,
        ) from exc


async def get_current_claim(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaim:
    """Get the authenticated claim from the request's bearer token."""
    claim = resolve_claim(request.headers.get("Authorization"), tokens)
    request.state.claim = claim
    return claim
