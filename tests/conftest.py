"""Pytest fixtures for admin console tests."""

import pytest

from admin_console import create_app
from admin_console.config import SECRET_ENV, ImpersonationSettings
from tests.helpers import FakePlatformStore

SECRET = "test-impersonation-secret-0123456789-abcdef"
STARTER_BASE_URL = "https://starter.example.com"

ADMIN_USER_ID = "admin-user-1"
ADMIN_ID = "platform-admin-1"
ORG_ID = "org-1"
OWNER_USER_ID = "owner-user-1"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Tests never see the developer's real impersonation environment."""
    for name in (SECRET_ENV, "STARTER_APP_URL", "PUBLIC_STARTER_APP_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return ImpersonationSettings(secret=SECRET, starter_app_base_url=STARTER_BASE_URL)


@pytest.fixture
def store():
    """
    Store seeded with a MASTER admin and an active organization that has a
    subscription owner. No session yet; see ``signed_in``.
    """
    fake = FakePlatformStore()
    fake.add_admin(ADMIN_USER_ID, ADMIN_ID)
    fake.add_organization(ORG_ID, subscription_owner_user_id=OWNER_USER_ID)
    return fake


@pytest.fixture
def app(store, settings):
    app = create_app(
        {
            "TESTING": True,
            "PLATFORM_STORE": store,
            "IMPERSONATION_SETTINGS": settings,
            "ADMIN_APP_URL": "",
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client, store):
    """
    Put a session for ADMIN_USER_ID into the client's cookie.

    Example:
        def test_x(client, signed_in):
            signed_in()                     # the seeded MASTER
            signed_in("someone-else")       # any other user id
    """

    def sign_in(user_id: str = ADMIN_USER_ID) -> str:
        token_hash = store.add_session(user_id, raw_token=f"token-{user_id}")
        with client.session_transaction() as sess:
            sess["token_hash"] = token_hash
        return token_hash

    return sign_in
