from datetime import timedelta

import jwt
import pytest

from src.core.exceptions import SigningError
from src.domain.services.auth.token import TokenIssuer
from tests.factories.token import AUDIENCE, ISSUER, SECRET


def _decode(token: str) -> dict:
    return jwt.decode(token, SECRET, algorithms=["HS256"], audience=AUDIENCE, issuer=ISSUER)


class TestIssueAccessToken:
    def test_token_carries_identity_and_registered_claims(self, issuer, identity):
        # Act
        issued = issuer.issue_access_token(identity)

        # Assert
        claims = _decode(issued.token)
        assert claims["sub"] == str(identity.id)
        assert claims["username"] == identity.username
        assert claims["role"] == identity.role
        assert claims["jti"] == issued.jti.value
        assert claims["iss"] == ISSUER
        assert claims["aud"] == AUDIENCE
        assert claims["iat"] == claims["nbf"]
        assert claims["exp"] - claims["iat"] == 60 * 60

    def test_header_uses_configured_hmac_algorithm(self, issuer, identity):
        issued = issuer.issue_access_token(identity)

        assert jwt.get_unverified_header(issued.token)["alg"] == "HS256"

    def test_expires_in_matches_lifetime(self, identity):
        issuer = TokenIssuer(
            secret_key=SECRET,
            issuer=ISSUER,
            audience=AUDIENCE,
            access_token_ttl=timedelta(minutes=5),
        )

        issued = issuer.issue_access_token(identity)

        assert issued.expires_in == 300

    def test_every_token_gets_a_fresh_jti(self, issuer, identity):
        jtis = {issuer.issue_access_token(identity).jti.value for _ in range(50)}

        assert len(jtis) == 50
        assert all(len(jti) == 43 for jti in jtis)

    def test_missing_secret_raises_signing_error(self, identity):
        issuer = TokenIssuer(secret_key="", issuer=ISSUER, audience=AUDIENCE)

        with pytest.raises(SigningError):
            issuer.issue_access_token(identity)

    def test_unsupported_algorithm_raises_signing_error(self, identity):
        issuer = TokenIssuer(secret_key=SECRET, algorithm="HS999", issuer=ISSUER, audience=AUDIENCE)

        with pytest.raises(SigningError):
            issuer.issue_access_token(identity)


def test_refresh_tokens_are_opaque_and_unique(issuer):
    first = issuer.issue_refresh_token()
    second = issuer.issue_refresh_token()

    assert first != second
    assert "." not in first.value


def test_default_lifetime_follows_settings(monkeypatch, identity):
    from src.core.config.settings import settings

    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", 15)
    issuer = TokenIssuer(secret_key=SECRET, issuer=ISSUER, audience=AUDIENCE)

    assert issuer.issue_access_token(identity).expires_in == settings.access_token_ttl_seconds == 900
