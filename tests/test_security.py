import time

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from app.config import settings
from app.core import security
from app.core.exceptions import InvalidCredentialsException
from app.core.security import JWKSClient, decode_token, get_token_roles, is_admin_payload

KID = "test-key"


@pytest.fixture(scope="module")
def rsa_keys():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    public_jwk = jwk.construct(public_pem, algorithm="RS256").to_dict()
    public_jwk["kid"] = KID
    return private_pem, public_jwk


class StaticKeyClient:
    def __init__(self, keys):
        self.keys = keys

    def get_signing_key(self, kid):
        if kid not in self.keys:
            raise KeyError(kid)
        return self.keys[kid]


def _claims(**overrides):
    now = int(time.time())
    claims = {
        "sub": "auth0|abc",
        "aud": settings.AUTH0_AUDIENCE,
        "iss": f"https://{settings.AUTH0_DOMAIN}/",
        "iat": now,
        "exp": now + 300,
    }
    claims.update(overrides)
    return claims


def _sign(private_pem, claims, kid=KID):
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})


class TestDecodeToken:
    def test_valid_token(self, rsa_keys):
        private_pem, public_jwk = rsa_keys
        token = _sign(private_pem, _claims())

        payload = decode_token(token, client=StaticKeyClient({KID: public_jwk}))

        assert payload["sub"] == "auth0|abc"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"aud": "https://someone-else.test"},
            {"iss": "https://evil.example.com/"},
            {"exp": int(time.time()) - 60},
        ],
    )
    def test_rejects_bad_claims(self, rsa_keys, overrides):
        private_pem, public_jwk = rsa_keys
        token = _sign(private_pem, _claims(**overrides))

        with pytest.raises(InvalidCredentialsException):
            decode_token(token, client=StaticKeyClient({KID: public_jwk}))

    def test_rejects_unknown_key_id(self, rsa_keys):
        private_pem, public_jwk = rsa_keys
        token = _sign(private_pem, _claims(), kid="rotated-away")

        with pytest.raises(InvalidCredentialsException):
            decode_token(token, client=StaticKeyClient({KID: public_jwk}))

    def test_rejects_garbage(self, rsa_keys):
        _, public_jwk = rsa_keys

        with pytest.raises(InvalidCredentialsException):
            decode_token("not-a-jwt", client=StaticKeyClient({KID: public_jwk}))


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


class TestJWKSClient:
    def test_keys_are_cached(self, monkeypatch, rsa_keys):
        _, public_jwk = rsa_keys
        calls = []

        def fake_get(url, timeout):
            calls.append(url)
            return FakeResponse({"keys": [public_jwk]})

        monkeypatch.setattr(security.httpx, "get", fake_get)
        client = JWKSClient("https://tenant.test/.well-known/jwks.json", cache_seconds=600)

        assert client.get_signing_key(KID) == public_jwk
        assert client.get_signing_key(KID) == public_jwk
        assert len(calls) == 1

    def test_unknown_kid_raises_key_error(self, monkeypatch, rsa_keys):
        _, public_jwk = rsa_keys
        monkeypatch.setattr(security.httpx, "get", lambda url, timeout: FakeResponse({"keys": [public_jwk]}))
        client = JWKSClient("https://tenant.test/.well-known/jwks.json")

        with pytest.raises(KeyError):
            client.get_signing_key("missing")

    def test_fetch_failure_is_invalid_credentials(self, monkeypatch, rsa_keys):
        private_pem, _ = rsa_keys

        def failing_get(url, timeout):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(security.httpx, "get", failing_get)
        client = JWKSClient("https://tenant.test/.well-known/jwks.json")

        with pytest.raises(InvalidCredentialsException):
            decode_token(_sign(private_pem, _claims()), client=client)


def test_roles():
    claim = settings.AUTH0_ROLES_CLAIM

    assert get_token_roles({claim: "admin"}) == ["admin"]
    assert get_token_roles({}) == []
    assert is_admin_payload({claim: [settings.ADMIN_ROLE, "editor"]}) is True
    assert is_admin_payload({claim: ["editor"]}) is False
    assert is_admin_payload(None) is False
