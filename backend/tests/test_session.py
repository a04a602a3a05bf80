import pytest

from conftest import PATHS
from roster.services.identity import IdentityProvider
from roster.services.session import SessionProvider
from roster.services.token_service import TokenService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def tokens():
    return TokenService("testing_secret_key_for_development_only")


@pytest.fixture
def provider(tokens, store):
    return SessionProvider(IdentityProvider(tokens), store, PATHS)


async def test_anonymous_sign_in_creates_viewer_profile(provider, store):
    assert provider.is_ready is False

    await provider.start()

    user = provider.current_user
    assert provider.is_ready is True
    assert user["role"] == "Viewer"
    assert user["name"] == f"Anonymous User {user['id'][:5]}"
    assert user["email"] == f"{user['id']}@example.com"
    assert user["workingHours"] == "9 AM - 5 PM"
    assert store.writes == [("set", PATHS.users, user["id"], {k: v for k, v in user.items() if k != "id"})]


async def test_token_sign_in_resolves_existing_record(provider, tokens, store):
    await provider.start(tokens.create_custom_token("mgr-1"))

    assert provider.current_user["id"] == "mgr-1"
    assert provider.current_user["role"] == "Manager"
    assert store.writes == []
    assert provider.session_token is not None


async def test_new_identity_with_email_gets_email_as_name(provider, tokens, store):
    await provider.start(tokens.create_custom_token("fresh-uid", "fresh@example.com"))

    assert provider.current_user["name"] == "fresh@example.com"
    assert store.collections[PATHS.users]["fresh-uid"]["email"] == "fresh@example.com"


async def test_rejected_token_leaves_no_user(provider, tokens):
    # a session token is not accepted where a custom token is expected
    await provider.start(tokens.create_session_token("mgr-1"))

    assert provider.current_user is None
    assert provider.is_ready is True


async def test_profile_lookup_failure_leaves_no_user(provider, store, tokens):
    async def broken(path, doc_id):
        raise RuntimeError("store unavailable")

    store.get_document = broken
    await provider.start(tokens.create_custom_token("mgr-1"))

    assert provider.current_user is None
    assert provider.is_ready is True


async def test_restore_without_token_means_no_session(provider):
    await provider.restore(None)

    assert provider.current_user is None
    assert provider.is_ready is True


async def test_sign_out_revokes_the_session(provider, tokens, store):
    await provider.start(tokens.create_custom_token("eng-1"))
    token = provider.session_token

    await provider.sign_out()
    assert provider.current_user is None
    assert provider.session_token is None

    other = SessionProvider(IdentityProvider(tokens), store, PATHS)
    await other.restore(token)
    assert other.current_user is None
