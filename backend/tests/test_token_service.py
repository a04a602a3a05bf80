from datetime import datetime, timedelta

import pytest
from jose import JWTError

from roster.services.token_cleanup import TokenCleanupService
from roster.services.token_service import TokenService


@pytest.fixture
def tokens():
    return TokenService("testing_secret_key_for_development_only")


def test_session_token_round_trip(tokens):
    payload = tokens.decode(tokens.create_session_token("u1", "u1@example.com"), "session")
    assert payload["sub"] == "u1"
    assert payload["email"] == "u1@example.com"


def test_token_types_are_not_interchangeable(tokens):
    with pytest.raises(JWTError):
        tokens.decode(tokens.create_custom_token("u1"), "session")
    with pytest.raises(JWTError):
        tokens.decode(tokens.create_session_token("u1"), "custom")


def test_revoked_token_is_rejected(tokens):
    token = tokens.create_session_token("u1")
    tokens.revoke(token)
    with pytest.raises(JWTError):
        tokens.decode(token, "session")


def test_foreign_signature_is_rejected(tokens):
    other = TokenService("some_other_secret")
    with pytest.raises(JWTError):
        tokens.decode(other.create_session_token("u1"), "session")


def test_cleanup_forgets_expired_revocations(tokens):
    tokens.revoke(tokens.create_session_token("u1"))
    tokens.revoke(tokens.create_session_token("u2"))
    jti = next(iter(tokens._revoked))
    tokens._revoked[jti] = datetime.utcnow() - timedelta(minutes=1)

    assert tokens.cleanup_expired_tokens() == 1
    assert len(tokens._revoked) == 1


def test_secret_key_is_required():
    with pytest.raises(ValueError):
        TokenService("")


def test_cleanup_sweep_reports_removed_count(tokens):
    cleanup = TokenCleanupService(tokens)
    assert cleanup.running is False
    assert cleanup.sweep() == 0

    tokens.revoke(tokens.create_session_token("u1"))
    jti = next(iter(tokens._revoked))
    tokens._revoked[jti] = datetime.utcnow() - timedelta(seconds=1)
    assert cleanup.sweep() == 1
