from datetime import timedelta

from app.auth.gate import authenticate, extract_token
from app.auth.token import create_access_token
from app.core.result import AuthFailure, ErrorKind


def test_no_credential_fails_immediately(session):
    result = authenticate(session, None, None)
    assert result.kind is ErrorKind.AUTH
    assert result.error.reason is AuthFailure.MISSING


def test_cookie_credential(session, make_user):
    user = make_user("alice")
    result = authenticate(session, create_access_token(user), None)
    assert result.ok
    assert result.value.id == user.id
    assert result.value.username == "alice"


def test_header_credential(session, make_user):
    user = make_user("alice")
    assert authenticate(session, None, create_access_token(user)).value.id == user.id


def test_bad_cookie_does_not_fall_back_to_header(session, make_user):
    user = make_user("alice")
    result = authenticate(session, "garbage", create_access_token(user))
    assert result.error.reason is AuthFailure.INVALID_SIGNATURE


def test_cookie_takes_precedence():
    assert extract_token("from-cookie", "from-header") == "from-cookie"
    assert extract_token(None, "from-header") == "from-header"
    assert extract_token("", None) is None


def test_expired_credential(session, make_user):
    user = make_user("alice")
    expired = create_access_token(user, expires_delta=timedelta(minutes=-1))
    assert authenticate(session, expired, None).error.reason is AuthFailure.EXPIRED


def test_user_removed_after_issue(session, make_user):
    user = make_user("alice")
    token = create_access_token(user)
    session.delete(user)
    session.commit()

    assert authenticate(session, token, None).error.reason is AuthFailure.USER_NOT_FOUND


def test_identity_carries_no_secrets(session, make_user):
    user = make_user("alice")
    identity = authenticate(session, create_access_token(user), None).value

    fields = identity.model_dump()
    assert "password_hash" not in fields
    assert "refresh_token_fingerprint" not in fields


class TestGateOverHttp:
    def test_protected_route_without_credentials(self, client):
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_protected_route_with_bearer(self, client, make_user, auth_headers):
        user = make_user("alice")
        response = client.get("/api/users/me", headers=auth_headers(user))
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "alice"
        assert "password_hash" not in body
        assert "refresh_token_fingerprint" not in body

    def test_protected_route_with_cookie(self, client, make_user):
        user = make_user("alice")
        client.cookies.set("accessToken", create_access_token(user))
        response = client.get("/api/users/me")
        assert response.status_code == 200
        assert response.json()["id"] == user.id
