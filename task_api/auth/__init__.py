from .dependencies import get_current_claim, get_token_service
from .tokens import TokenClaim, TokenService

__all__ = ["get_current_claim", "get_token_service", "TokenClaim", "TokenService"]
