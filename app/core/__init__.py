"""Core module exports."""

from .security import (
    ALGORITHMS,
    JWKSClient,
    decode_token,
    get_token_roles,
    is_admin_payload,
    jwks_client,
)

__all__ = [
    "ALGORITHMS",
    "JWKSClient",
    "decode_token",
    "get_token_roles",
    "is_admin_payload",
    "jwks_client",
]
