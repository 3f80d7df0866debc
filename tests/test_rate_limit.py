# =============================================================================
# tests/test_rate_limit.py - slowapi limits (default and per route)
# =============================================================================
# Limits are read from settings per request, so lowering a setting takes
# effect immediately. The client fixture resets the limiter storage.
# =============================================================================

from types import SimpleNamespace

import pytest

from app.config import settings

API = "/api/v1"
TOO_MANY = {"error": "リクエストが多すぎます。しばらくしてからもう一度お試しください。"}


@pytest.fixture
def limits(monkeypatch):
    def _set(**values):
        for name, value in values.items():
            monkeypatch.setattr(settings, name, value)
    return _set


def test_default_limit_applies_to_plain_routes(client, limits):
    limits(rate_limit="2/minute")

    statuses = [client.get(f"{API}/projects").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    assert client.get(f"{API}/projects").json() == TOO_MANY


def test_health_probes_are_exempt(client, limits):
    limits(rate_limit="1/minute")

    statuses = [client.get("/health").status_code for _ in range(3)]

    assert statuses == [200, 200, 200]


def test_login_has_its_own_limit(client, limits, fake_db):
    limits(auth_rate_limit="1/minute")
    fake_db.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=SimpleNamespace(id="user-new", email="new@example.com"),
        session=SimpleNamespace(access_token="a", refresh_token="r"),
    )
    credentials = {"email": "new@example.com", "password": "pw"}

    first = client.post(f"{API}/auth/login", json=credentials)
    second = client.post(f"{API}/auth/login", json=credentials)

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json() == TOO_MANY
    assert fake_db.auth.sign_in_with_password.call_count == 1


def test_signup_has_its_own_limit(client, limits, fake_db):
    limits(auth_rate_limit="1/minute")
    body = {"email": "new@example.com", "password": "pw", "full_name": "New"}

    client.post(f"{API}/auth/signup", json=body)
    response = client.post(f"{API}/auth/signup", json=body)

    assert response.status_code == 429


def test_contact_has_its_own_limit(client, limits):
    limits(contact_rate_limit="1/minute")
    form = {"name": "山田", "email": "taro@example.com", "subject": "件名", "message": "本文"}

    first = client.post(f"{API}/contact", json=form)
    second = client.post(f"{API}/contact", json=form)

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json() == TOO_MANY
