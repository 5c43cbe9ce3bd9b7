"""Tests for AdminAuthService."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from services.auth_service import AdminAuthService, AdminCredential, AuthorizationError

TEST_PASSWORD = "s3cret-admin"
TEST_SECRET = "test-secret-key-for-testing"


class TestAdminAuthService:
    """Test cases for AdminAuthService."""

    @pytest.fixture
    def auth_service(self):
        return AdminAuthService(admin_password=TEST_PASSWORD, session_secret=TEST_SECRET)

    # ============================================
    # Password Tests
    # ============================================

    def test_verify_password(self, auth_service):
        assert auth_service.verify_password(TEST_PASSWORD) is True
        assert auth_service.verify_password("wrong") is False
        assert auth_service.verify_password("") is False
        assert auth_service.verify_password(None) is False

    def test_unset_secret_never_authorizes(self):
        """Test an unconfigured admin password rejects everything, even empty."""
        service = AdminAuthService(admin_password="", session_secret=TEST_SECRET)
        assert service.verify_password("") is False
        assert service.verify_password("anything") is False

    def test_password_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "from-env")
        service = AdminAuthService()
        assert service.verify_password("from-env") is True

    # ============================================
    # Session Token Tests
    # ============================================

    def test_create_session_token(self, auth_service):
        session = auth_service.create_session_token()

        assert session["token_type"] == "Bearer"
        assert session["expires_in"] == 12 * 3600
        payload = jwt.decode(session["token"], TEST_SECRET, algorithms=["HS256"])
        assert payload["sub"] == "admin"
        assert payload["type"] == "admin_session"

    def test_verify_session_token(self, auth_service):
        token = auth_service.create_session_token()["token"]
        auth_service.verify_session_token(token)

    def test_expired_session_token(self, auth_service):
        payload = {
            "sub": "admin",
            "type": "admin_session",
            "iat": datetime.now(UTC) - timedelta(hours=13),
            "exp": datetime.now(UTC) - timedelta(hours=1),
        }
        token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")

        with pytest.raises(AuthorizationError, match="expired"):
            auth_service.verify_session_token(token)

    def test_token_signed_with_other_secret(self, auth_service):
        other = AdminAuthService(admin_password=TEST_PASSWORD, session_secret="other")
        token = other.create_session_token()["token"]

        with pytest.raises(AuthorizationError):
            auth_service.verify_session_token(token)

    def test_wrong_token_type(self, auth_service):
        payload = {
            "sub": "admin",
            "type": "access",
            "exp": datetime.now(UTC) + timedelta(hours=1),
        }
        token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")

        with pytest.raises(AuthorizationError, match="Invalid token type"):
            auth_service.verify_session_token(token)

    # ============================================
    # authorize
    # ============================================

    def test_authorize_with_password(self, auth_service):
        auth_service.authorize(AdminCredential(password=TEST_PASSWORD))

    def test_authorize_with_token(self, auth_service):
        token = auth_service.create_session_token()["token"]
        auth_service.authorize(AdminCredential(token=token))

    def test_authorize_bad_token_falls_back_to_password(self, auth_service):
        auth_service.authorize(AdminCredential(password=TEST_PASSWORD, token="garbage"))

    @pytest.mark.parametrize(
        "credential",
        [
            None,
            AdminCredential(),
            AdminCredential(password="wrong"),
            AdminCredential(token="garbage"),
            AdminCredential(password="wrong", token="garbage"),
        ],
    )
    def test_authorize_rejects(self, auth_service, credential):
        with pytest.raises(AuthorizationError):
            auth_service.authorize(credential)

    def test_credential_truthiness(self):
        assert not AdminCredential()
        assert AdminCredential(password="x")
        assert AdminCredential(token="t")
