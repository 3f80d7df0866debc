# =============================================================================
# tests/test_auth.py - Auth route and token verification tests
# =============================================================================
# Supabase Auth calls are MagicMocks on the fake client's `auth` attribute.
# =============================================================================

from types import SimpleNamespace

import pytest

from app.modules.auth import service as auth_service
from app.modules.auth.service import AuthService, clear_auth_cache

API = "/api/v1"


def _user(user_id="user-new", email="new@example.com"):
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata={"full_name": "New User"},
        created_at="2026-01-01T00:00:00+00:00",
    )


class TestSignup:

    def test_requires_terms_agreement(self, client, fake_db):
        response = client.post(f"{API}/auth/signup", json={
            "email": "new@example.com", "password": "secret123", "full_name": "New User",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "利用規約と個人情報保護方針に同意する必要があります"
        fake_db.auth.sign_up.assert_not_called()

    def test_creates_profile_and_reports_pending_confirmation(self, client, fake_db):
        fake_db.auth.sign_up.return_value = SimpleNamespace(user=_user(), session=None)

        response = client.post(f"{API}/auth/signup", json={
            "email": "new@example.com", "password": "secret123",
            "full_name": "  New User ", "agreed_to_terms": True,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == "user-new"
        assert body["confirmation_required"] is True

        profiles = fake_db.rows("profiles")
        assert len(profiles) == 1
        assert profiles[0]["full_name"] == "New User"

        sent = fake_db.auth.sign_up.call_args[0][0]
        assert sent["options"]["data"] == {"full_name": "New User"}
        assert sent["options"]["email_redirect_to"].endswith("/auth/confirm")

    def test_existing_account_is_translated(self, client, fake_db):
        fake_db.auth.sign_up.side_effect = Exception("User already registered")

        response = client.post(f"{API}/auth/signup", json={
            "email": "new@example.com", "password": "secret123",
            "full_name": "New User", "agreed_to_terms": True,
        })

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "アカウントが既に存在します"
        assert body["title"] == "アカウントが既に存在します"
        assert body["suggestion"]

    def test_malformed_email_is_400(self, client):
        response = client.post(f"{API}/auth/signup", json={
            "email": "not-an-email", "password": "x", "full_name": "A", "agreed_to_terms": True,
        })

        assert response.status_code == 400
        assert response.json()["error"] == "リクエストの形式が正しくありません"


class TestLogin:

    def test_returns_tokens(self, client, fake_db):
        fake_db.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=_user(),
            session=SimpleNamespace(access_token="access-1", refresh_token="refresh-1"),
        )

        response = client.post(f"{API}/auth/login", json={"email": "new@example.com", "password": "pw"})

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == "access-1"
        assert body["refresh_token"] == "refresh-1"
        assert body["token_type"] == "bearer"

    def test_invalid_credentials(self, client, fake_db):
        fake_db.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        response = client.post(f"{API}/auth/login", json={"email": "new@example.com", "password": "bad"})

        assert response.status_code == 401
        body = response.json()
        assert body["title"] == "ログイン認証に失敗しました"
        assert body["message"] == "メールアドレスまたはパスワードが正しくありません。"

    def test_unconfirmed_email(self, client, fake_db):
        fake_db.auth.sign_in_with_password.side_effect = Exception("Email not confirmed")

        response = client.post(f"{API}/auth/login", json={"email": "new@example.com", "password": "pw"})

        assert response.status_code == 401
        assert response.json()["title"] == "メール確認が完了していません"

    def test_provider_rate_limit_is_429(self, client, fake_db):
        fake_db.auth.sign_in_with_password.side_effect = Exception("Request rate limit reached")

        response = client.post(f"{API}/auth/login", json={"email": "new@example.com", "password": "pw"})

        assert response.status_code == 429
        assert response.json()["title"] == "ログイン試行が多すぎます"


class TestConfirm:

    def test_missing_token(self, client, fake_db):
        response = client.post(f"{API}/auth/confirm", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "確認トークンが見つかりません"
        fake_db.auth.verify_otp.assert_not_called()

    def test_verifies_token_hash(self, client, fake_db):
        fake_db.auth.verify_otp.return_value = SimpleNamespace(user=_user(), session=None)

        response = client.post(f"{API}/auth/confirm", json={"token_hash": "#abc123"})

        assert response.status_code == 200
        assert response.json()["confirmed"] is True
        fake_db.auth.verify_otp.assert_called_once_with({"token_hash": "abc123", "type": "email"})

    def test_expired_link(self, client, fake_db):
        fake_db.auth.verify_otp.side_effect = Exception("Email link is invalid or has expired")

        response = client.post(f"{API}/auth/confirm", json={"token_hash": "abc"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email link is invalid or has expired"


class TestCurrentUser:

    def test_me_without_token_is_401(self, client):
        response = client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "ユーザーが認証されていません"}

    def test_me_with_token_creates_missing_profile(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_user())

        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer token-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "user-new"
        assert body["profile"]["full_name"] == "New User"

    def test_rejected_token_is_401(self, client, fake_db):
        fake_db.auth.get_user.side_effect = Exception("invalid JWT: token is expired")

        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer stale"})

        assert response.status_code == 401
        assert response.json()["error"] == "ユーザーが認証されていません"


class TestLogout:

    def test_signs_out_the_session(self, client, fake_db):
        response = client.post(f"{API}/auth/logout", headers={"Authorization": "Bearer token-1"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        fake_db.auth.admin.sign_out.assert_called_once_with("token-1")

    def test_provider_failure_still_succeeds(self, client, fake_db):
        fake_db.auth.admin.sign_out.side_effect = Exception("session not found")

        response = client.post(f"{API}/auth/logout", headers={"Authorization": "Bearer token-1"})

        assert response.status_code == 200

    def test_requires_token(self, client):
        response = client.post(f"{API}/auth/logout")

        assert response.status_code == 401


class TestTokenCache:

    @pytest.fixture(autouse=True)
    def _clean_cache(self):
        clear_auth_cache()
        yield
        clear_auth_cache()

    def test_same_token_hits_provider_once(self, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_user())
        service = AuthService(fake_db)

        first = service.get_current_user("token-x")
        second = service.get_current_user("token-x")

        assert first == second
        assert fake_db.auth.get_user.call_count == 1

    def test_full_cache_drops_expired_entries(self, fake_db):
        for i in range(auth_service._AUTH_CACHE_MAX_SIZE):
            auth_service._AUTH_USER_CACHE[f"stale-{i}"] = ({"id": f"old-{i}"}, 0.0)
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_user())
        service = AuthService(fake_db)

        service.get_current_user("token-z")
        service.get_current_user("token-z")

        assert fake_db.auth.get_user.call_count == 1
        assert not any(key.startswith("stale-") for key in auth_service._AUTH_USER_CACHE)

    def test_logout_evicts_cached_token(self, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_user())
        service = AuthService(fake_db)
        service.get_current_user("token-y")

        service.logout("token-y")
        service.get_current_user("token-y")

        assert fake_db.auth.get_user.call_count == 2
