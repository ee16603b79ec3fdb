"""JWT authentication provider implementation.

Accepts tokens issued by the accounts service. Two signing schemes are
supported:

- ES256 tokens from Supabase, verified against the project's JWKS
- HS256 tokens signed with the shared ``jwt_secret_key`` (local and tests)

Expected claims: ``sub`` (account UUID), ``email``, ``exp`` and optionally
``name`` or ``user_metadata.name``.
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# kid -> JWK, fetched lazily and refreshed when an unknown kid shows up
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Fetch and cache the JWKS signing keys."""
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("jwks_fetch_failed", url=jwks_url, error=str(e))
        return {}

    _jwks_cache = {
        key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
    }
    logger.info("jwks_fetched", key_count=len(_jwks_cache))
    return _jwks_cache


class JWTAuthProvider:
    """Validates bearer JWTs and, for tests, issues HS256 ones."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the account it belongs to.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        try:
            owner_id = UUID(user_id)
        except ValueError:
            return None

        metadata = payload.get("user_metadata") or {}
        return TokenUser(
            id=owner_id,
            email=email,
            name=metadata.get("name") or payload.get("name"),
        )

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        """Verify an ES256 token with the JWKS key named by its ``kid``."""
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Keys may have rotated since the cache was filled
            key_data = (await _get_jwks_keys(refresh=True)).get(kid)
        if not key_data:
            logger.warning("jwks_key_not_found", kid=kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Issue an HS256 token for ``user`` (used by tests and local tooling)."""
        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.name,
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
