"""Forgot-password and reset-password flow."""

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from jose import jwt

from conftest import login, register, signed_in

from stockroom.models.user import User
from stockroom.utils.reset_tokens import issue_reset_token


def _token_from_mail(message):
    link = message["preview"]
    return parse_qs(urlparse(link).query)["token"][0]


def _request_token(client, mailer, email="alice@example.com"):
    response = client.post("/api/forgot-password", json={"email": email})
    assert response.status_code == 200
    return _token_from_mail(mailer.sent[-1])


class TestForgotPassword:

    def test_unknown_email(self, client, mailer):
        response = client.post("/api/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 404
        assert response.json()["message"] == "No account with that email"
        assert mailer.sent == []

    def test_sends_reset_link(self, client, mailer):
        register(client)
        response = client.post("/api/forgot-password", json={"email": "alice@example.com"})

        assert response.status_code == 200
        assert response.json()["message"] == "Password reset email sent"
        assert len(mailer.sent) == 1
        message = mailer.sent[0]
        assert message["to"] == "alice@example.com"
        assert message["subject"] == "Password Reset Request"
        assert message["preview"].startswith("http://testserver/reset-password.html?token=")
        assert message["preview"] in message["html"]

    def test_mail_failure_is_server_error(self, client, mailer):
        register(client)
        mailer.fail = True
        response = client.post("/api/forgot-password", json={"email": "alice@example.com"})
        assert response.status_code == 500
        assert response.json()["message"] == "Server error"

    def test_preview_returned_when_mail_is_only_logged(self, client):
        register(client)
        response = client.post("/api/forgot-password", json={"email": "alice@example.com"})
        assert response.status_code == 200
        assert "token=" in response.json()["preview"]


class TestResetPassword:

    def test_round_trip(self, client, mailer):
        register(client, password="old-pass")
        token = _request_token(client, mailer)

        response = client.post("/reset-password", json={"token": token, "newPassword": "new-pass"})
        assert response.status_code == 200
        assert response.json() == {"message": "Password has been reset successfully"}

        assert login(client, password="old-pass").json()["message"] == "Incorrect password"
        assert login(client, password="new-pass").status_code == 200

    def test_token_cannot_be_reused(self, client, mailer):
        register(client, password="old-pass")
        token = _request_token(client, mailer)

        assert client.post("/reset-password", json={"token": token, "newPassword": "first"}).status_code == 200
        response = client.post("/reset-password", json={"token": token, "newPassword": "second"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token"
        assert login(client, password="first").status_code == 200

    def test_missing_token(self, client):
        response = client.post("/reset-password", json={"newPassword": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "Token is required"

    def test_missing_new_password(self, client, mailer):
        register(client)
        token = _request_token(client, mailer)
        response = client.post("/reset-password", json={"token": token})
        assert response.status_code == 400
        assert response.json()["message"] == "New password is required"

    def test_expired_token(self, client, db):
        register(client, password="old-pass")
        user = db.query(User).filter(User.email == "alice@example.com").one()
        token = issue_reset_token(user.id, user.password_hash, expires_delta=timedelta(seconds=-5))

        response = client.post("/reset-password", json={"token": token, "newPassword": "new-pass"})
        assert response.status_code == 400
        assert response.json()["message"] == "Reset token has expired"
        assert login(client, password="old-pass").status_code == 200

    def test_bad_signature(self, client, db):
        register(client)
        user = db.query(User).filter(User.email == "alice@example.com").one()
        forged = jwt.encode({"sub": str(user.id), "purpose": "password_reset"}, "other-key", algorithm="HS256")

        response = client.post("/reset-password", json={"token": forged, "newPassword": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token"

    def test_garbage_token(self, client):
        response = client.post("/reset-password", json={"token": "not.a.jwt", "newPassword": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token"

    def test_user_deleted_after_issue(self, client, mailer, make_client):
        admin = make_client()
        signed_in(admin, role="Shopkeeper", email="boss@example.com")
        register(client)
        token = _request_token(client, mailer)
        victim_id = next(u["id"] for u in admin.get("/api/users").json()["users"] if u["email"] == "alice@example.com")
        assert admin.delete(f"/api/users/{victim_id}").status_code == 204

        response = client.post("/reset-password", json={"token": token, "newPassword": "x"})
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_existing_sessions_survive_reset(self, client, mailer):
        register(client, password="old-pass")
        login(client, password="old-pass")
        token = _request_token(client, mailer)

        client.post("/reset-password", json={"token": token, "newPassword": "new-pass"})
        assert client.get("/current-user").json()["success"] is True


def test_reset_link_logged_at_most_once(client, caplog):
    register(client)
    with caplog.at_level("INFO"):
        preview = client.post("/api/forgot-password", json={"email": "alice@example.com"}).json()["preview"]
    token = parse_qs(urlparse(preview).query)["token"][0]
    assert sum(token in r.getMessage() for r in caplog.records) <= 1


def test_whitespace_new_password_rejected(client, mailer):
    register(client)
    token = _request_token(client, mailer)
    response = client.post("/reset-password", json={"token": token, "newPassword": "   "})
    assert response.status_code == 400
    assert response.json()["message"] == "New password is required"
