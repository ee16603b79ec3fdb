"""Unit tests for JWTAuthProvider.

Covers:
- validate_token returning None for missing or malformed claims
- _get_jwks_keys() fetching, caching and error handling
- _decode_es256() key lookup and refetch on key rotation
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_jwks_client(keys: list[dict]) -> AsyncMock:
    """Build an AsyncClient stand-in whose GET returns the given JWKS."""
    mock_response = MagicMock()
    mock_response.json.return_value = {"keys": keys}
    mock_response.raise_for_status = MagicMock()

    mock_client_instance = AsyncMock()
    mock_client_instance.get.return_value = mock_response
    mock_client_instance.__aenter__ = AsyncMock(return_value=mock_client_instance)
    mock_client_instance.__aexit__ = AsyncMock(return_value=False)
    return mock_client_instance


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache before and after every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: HS256 round trip and claims
# ---------------------------------------------------------------------------


class TestValidateTokenClaims:
    """validate_token should only accept tokens carrying a UUID sub and an email."""

    async def test_should_read_name_from_user_metadata(self, hs256_provider: JWTAuthProvider):
        user_id = uuid4()
        token = _make_hs256_token(
            {
                "sub": str(user_id),
                "email": "user@example.com",
                "user_metadata": {"name": "Meta Name"},
                "exp": 9999999999,
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result == TokenUser(id=user_id, email="user@example.com", name="Meta Name")

    async def test_should_round_trip_created_token(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="user@example.com", name="Dev")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result == user

    async def test_should_return_none_when_token_has_no_sub_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_when_token_has_no_email_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": str(uuid4()), "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_when_sub_is_not_a_uuid(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": "abc", "email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_garbage(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not-a-jwt") is None


# ---------------------------------------------------------------------------
# Tests: _get_jwks_keys
# ---------------------------------------------------------------------------


class TestGetJwksKeys:
    """Tests for the module-level _get_jwks_keys() helper."""

    async def test_should_return_empty_dict_when_no_supabase_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.supabase_jwks_url = ""

            result = await _get_jwks_keys()

            assert result == {}

    async def test_should_fetch_and_cache_jwks_keys(self):
        mock_client_instance = _mock_jwks_client(
            [
                {"kid": "key-1", "kty": "EC", "crv": "P-256", "x": "aa", "y": "bb"},
                {"kid": "key-2", "kty": "EC", "crv": "P-256", "x": "cc", "y": "dd"},
            ]
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(
                jwt_provider_module.httpx, "AsyncClient", return_value=mock_client_instance
            ),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert set(result) == {"key-1", "key-2"}
            assert result["key-1"]["kty"] == "EC"

            # Second call is served from the cache
            mock_client_instance.get.reset_mock()
            cached_result = await _get_jwks_keys()
            mock_client_instance.get.assert_not_called()
            assert cached_result == result

    async def test_should_refetch_when_refresh_requested(self):
        mock_client_instance = _mock_jwks_client([{"kid": "key-1", "kty": "EC"}])

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(
                jwt_provider_module.httpx, "AsyncClient", return_value=mock_client_instance
            ),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            await _get_jwks_keys()
            await _get_jwks_keys(refresh=True)

            assert mock_client_instance.get.call_count == 2

    async def test_should_return_empty_dict_on_http_error(self):
        mock_client_instance = _mock_jwks_client([])
        mock_client_instance.get.side_effect = httpx.ConnectError("Connection refused")

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(
                jwt_provider_module.httpx, "AsyncClient", return_value=mock_client_instance
            ),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert result == {}
            assert jwt_provider_module._jwks_cache is None

    async def test_should_skip_keys_without_kid(self):
        mock_client_instance = _mock_jwks_client(
            [
                {"kty": "EC", "crv": "P-256", "x": "aa", "y": "bb"},
                {"kid": "good-key", "kty": "EC", "crv": "P-256", "x": "cc", "y": "dd"},
            ]
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(
                jwt_provider_module.httpx, "AsyncClient", return_value=mock_client_instance
            ),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert list(result) == ["good-key"]


# ---------------------------------------------------------------------------
# Tests: _decode_es256
# ---------------------------------------------------------------------------


class TestDecodeEs256:
    """Tests for the ES256 validation path inside JWTAuthProvider."""

    async def test_should_return_none_when_header_has_no_kid(
        self, hs256_provider: JWTAuthProvider
    ):
        result = await hs256_provider._decode_es256(
            token="dummy.token.value",
            header={"alg": "ES256"},
        )

        assert result is None

    async def test_should_return_none_when_kid_not_found_in_jwks(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "EC"}}

            result = await hs256_provider._decode_es256(
                token="dummy.token.value",
                header={"alg": "ES256", "kid": "missing-kid"},
            )

            assert result is None
            # Initial lookup plus one forced refresh
            assert mock_get_jwks.call_count == 2

    async def test_should_refetch_jwks_and_succeed_on_key_rotation(
        self, hs256_provider: JWTAuthProvider
    ):
        fake_key_data = {"kid": "rotated-kid", "kty": "EC", "crv": "P-256"}
        fake_payload = {"sub": str(uuid4()), "email": "rotated@example.com"}

        async def fake_get_jwks(refresh: bool = False) -> dict:
            return {"rotated-kid": fake_key_data} if refresh else {}

        with (
            patch.object(jwt_provider_module, "_get_jwks_keys", side_effect=fake_get_jwks),
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module.jwt, "decode", return_value=fake_payload) as decode,
        ):
            result = await hs256_provider._decode_es256(
                token="rotated.token.value",
                header={"alg": "ES256", "kid": "rotated-kid"},
            )

            assert result == fake_payload
            mock_eckey_cls.assert_called_once_with(fake_key_data, algorithm="ES256")
            decode.assert_called_once_with(
                "rotated.token.value",
                mock_eckey_cls.return_value,
                algorithms=["ES256"],
                options={"verify_aud": False},
            )


class TestValidateTokenEs256Path:
    """validate_token delegates to _decode_es256 when the header says ES256."""

    async def test_should_build_user_from_es256_payload(self, hs256_provider: JWTAuthProvider):
        user_id = uuid4()
        fake_payload = {
            "sub": str(user_id),
            "email": "es256user@example.com",
            "user_metadata": {"name": "ES256 User"},
        }

        with (
            patch.object(
                jwt_provider_module.jwt,
                "get_unverified_header",
                return_value={"alg": "ES256", "kid": "k1"},
            ),
            patch.object(
                hs256_provider, "_decode_es256", new_callable=AsyncMock
            ) as mock_es256,
        ):
            mock_es256.return_value = fake_payload

            result = await hs256_provider.validate_token("es256.token.here")

            mock_es256.assert_called_once_with("es256.token.here", {"alg": "ES256", "kid": "k1"})
            assert result == TokenUser(id=user_id, email="es256user@example.com", name="ES256 User")

    async def test_should_return_none_when_es256_key_unknown(
        self, hs256_provider: JWTAuthProvider
    ):
        with (
            patch.object(
                jwt_provider_module.jwt,
                "get_unverified_header",
                return_value={"alg": "ES256", "kid": "k1"},
            ),
            patch.object(hs256_provider, "_decode_es256", new_callable=AsyncMock) as mock_es256,
        ):
            mock_es256.return_value = None

            assert await hs256_provider.validate_token("es256.token.here") is None
