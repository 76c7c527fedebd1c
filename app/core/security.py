"""Bearer token validation against the identity provider's JWKS."""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

import httpx
from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import InvalidCredentialsException

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]

# Minimum seconds between forced JWKS refreshes on unknown key ids
JWKS_MIN_REFRESH_INTERVAL = 12


class JWKSClient:
    """Fetch and cache the JSON Web Key Set published by the identity provider."""

    def __init__(self, jwks_url: str, cache_seconds: int = 600, timeout: float = 5.0):
        self.jwks_url = jwks_url
        self.cache_seconds = cache_seconds
        self.timeout = timeout
        self._keys: Dict[str, Dict[str, Any]] = {}
        self._fetched_at: float = 0.0
        self._lock = threading.Lock()

    def _fetch(self) -> None:
        response = httpx.get(self.jwks_url, timeout=self.timeout)
        response.raise_for_status()
        keys = response.json().get("keys", [])
        self._keys = {key["kid"]: key for key in keys if "kid" in key}
        self._fetched_at = time.monotonic()
        logger.info(f"JWKS refreshed from {self.jwks_url}: {len(self._keys)} key(s)")

    def get_signing_key(self, kid: str) -> Dict[str, Any]:
        """Return the JWK for `kid`, refreshing the cache when stale or when the kid is unknown."""
        with self._lock:
            age = time.monotonic() - self._fetched_at
            if not self._keys or age > self.cache_seconds:
                self._fetch()
            elif kid not in self._keys and age > JWKS_MIN_REFRESH_INTERVAL:
                self._fetch()

            key = self._keys.get(kid)
        if key is None:
            raise KeyError(f"Signing key not found: {kid}")
        return key


jwks_client = JWKSClient(
    f"https://{settings.AUTH0_DOMAIN}/.well-known/jwks.json",
    cache_seconds=settings.JWKS_CACHE_SECONDS,
)


def decode_token(token: str, client: Optional[JWKSClient] = None) -> Dict[str, Any]:
    """Decode and verify an RS256 access token.

    Args:
        token: Encoded JWT from the Authorization header
        client: JWKS client to resolve the signing key (defaults to the module client)

    Returns:
        Verified claims

    Raises:
        InvalidCredentialsException: If the token is malformed, unsigned by a known key,
            expired, or issued for another audience/issuer
    """
    client = client or jwks_client
    try:
        header = jwt.get_unverified_header(token)
        key = client.get_signing_key(header.get("kid", ""))
        return jwt.decode(
            token,
            key,
            algorithms=ALGORITHMS,
            audience=settings.AUTH0_AUDIENCE,
            issuer=f"https://{settings.AUTH0_DOMAIN}/",
        )
    except (JWTError, KeyError) as e:
        logger.warning(f"[AUTH] Token validation failed: {type(e).__name__}: {e}")
        raise InvalidCredentialsException() from e
    except httpx.HTTPError as e:
        logger.error(f"[AUTH] Could not fetch JWKS: {e}")
        raise InvalidCredentialsException() from e


def get_token_roles(payload: Dict[str, Any]) -> List[str]:
    """Roles carried in the namespaced roles claim."""
    roles = payload.get(settings.AUTH0_ROLES_CLAIM) or []
    if isinstance(roles, str):
        return [roles]
    return list(roles)


def is_admin_payload(payload: Optional[Dict[str, Any]]) -> bool:
    """Whether the token grants the admin role."""
    if not payload:
        return False
    return settings.ADMIN_ROLE in get_token_roles(payload)
