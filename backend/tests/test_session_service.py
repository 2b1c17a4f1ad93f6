"""Tests for the auth gate session service."""
import json

from cyberwatch.constants import AUTH_STORAGE_KEY
from cyberwatch.services.session_service import SessionService, display_name_for, requires_auth
from cyberwatch.services.storage import InMemoryStorage


class TestSessionLifecycle:

    def test_starts_loading_until_init(self, storage):
        session = SessionService(storage)
        assert session.loading is True
        assert session.resolve_route("/dashboard").action == "pending"
        session.init()
        assert session.loading is False

    def test_login_derives_name_and_persists(self, session, storage):
        user = session.login("jane.doe@example.com")
        assert user.name == "jane.doe"
        assert session.is_authenticated is True
        stored = json.loads(storage.raw(AUTH_STORAGE_KEY))
        assert stored == {
            "isAuthenticated": True,
            "user": {"name": "jane.doe", "email": "jane.doe@example.com", "avatarUrl": None},
        }

    def test_login_without_local_part_uses_default_name(self):
        assert display_name_for("@example.com") == "User"

    def test_restore_from_storage(self, storage):
        SessionService(storage).init().login("sam@example.com")
        restored = SessionService(storage).init()
        assert restored.is_authenticated is True
        assert restored.user.email == "sam@example.com"

    def test_logout_clears_blob(self, session, storage):
        session.login("sam@example.com")
        session.logout()
        assert session.is_authenticated is False
        assert session.user is None
        assert storage.raw(AUTH_STORAGE_KEY) is None

    def test_teardown_resets_state(self, session):
        session.login("sam@example.com")
        session.teardown()
        assert session.user is None
        assert session.loading is True


class TestCorruptStorage:

    def test_unparseable_blob_is_discarded(self):
        storage = InMemoryStorage({AUTH_STORAGE_KEY: "{not json"})
        session = SessionService(storage).init()
        assert session.is_authenticated is False
        assert session.loading is False
        assert storage.raw(AUTH_STORAGE_KEY) is None

    def test_wrong_shape_blob_is_discarded(self):
        storage = InMemoryStorage({AUTH_STORAGE_KEY: json.dumps({"isAuthenticated": True, "user": "bob"})})
        session = SessionService(storage).init()
        assert session.is_authenticated is False
        assert storage.raw(AUTH_STORAGE_KEY) is None

    def test_flag_without_user_is_not_authenticated(self):
        storage = InMemoryStorage({AUTH_STORAGE_KEY: json.dumps({"isAuthenticated": True, "user": None})})
        assert SessionService(storage).init().is_authenticated is False


class TestRouteGate:

    def test_protected_paths(self):
        assert requires_auth("/dashboard")
        assert requires_auth("/dashboard/alerts")
        assert not requires_auth("/")
        assert not requires_auth("/login")
        assert not requires_auth("/dashboards-public")

    def test_unauthenticated_is_redirected(self, session):
        decision = session.resolve_route("/dashboard/threat-feed")
        assert decision.action == "redirect"
        assert decision.redirect_to == "/login"

    def test_public_path_renders(self, session):
        assert session.resolve_route("/signup").action == "render"

    def test_authenticated_renders(self, session):
        session.login("sam@example.com")
        assert session.resolve_route("/dashboard/settings").action == "render"
