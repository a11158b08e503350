from .tokens import AccessTokenClaims, OneTimeToken, TokenKind

__all__ = ["AccessTokenClaims", "OneTimeToken", "TokenKind"]
