"""Tests for registration, login and logout endpoints."""

from datetime import timedelta

import bcrypt
import jwt
from bson import ObjectId
from pymongo.errors import PyMongoError

from mflix.core.modules.user.service import UserService


def users(mongo):
    return mongo.collection("auth_db", "users")


def sessions(mongo):
    return mongo.collection("auth_db", "sessions")


class TestRegister:
    def test_register_creates_user(self, client, mongo):
        response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == 201
        assert body["message"] == "User registered"
        assert ObjectId.is_valid(body["data"]["user_id"])

        [stored] = users(mongo).docs
        assert stored["_id"] == ObjectId(body["data"]["user_id"])
        assert stored["email"] == "a@x.com"
        assert stored["role"] == "user"
        assert bcrypt.checkpw(b"p", stored["password_hash"].encode())
        assert stored["created_at"] <= stored["updated_at"]

    def test_duplicate_email_conflicts(self, client, mongo):
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "other"})

        assert response.status_code == 409
        assert response.json() == {"status": 409, "message": "User already exists"}
        assert len(users(mongo).docs) == 1

    def test_lost_race_conflicts(self, client, mongo, monkeypatch):
        """Test that the unique index turns a check-then-insert race into a conflict."""
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})

        async def nobody(self, email):
            return None

        monkeypatch.setattr(UserService, "find_user_by_email", nobody)
        response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 409
        assert len(users(mongo).docs) == 1

    def test_email_index_is_unique(self, client, mongo):
        assert {"keys": [("email", 1)], "unique": True} in users(mongo).indexes

    def test_missing_password_rejected(self, client, mongo):
        response = client.post("/api/auth/register", json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"status": 400, "message": "Missing credentials"}
        assert mongo.calls == []

    def test_empty_email_rejected(self, client):
        response = client.post("/api/auth/register", json={"email": "", "password": "p"})
        assert response.status_code == 400

    def test_non_json_body_rejected(self, client):
        response = client.post("/api/auth/register", content=b"nope", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["status"] == 400


class TestLogin:
    def test_login_returns_token(self, client, config):
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == 200
        assert body["message"] == "Login successful"
        payload = jwt.decode(body["data"]["token"], config.jwt_secret, algorithms=["HS256"])
        assert payload["email"] == "a@x.com"
        assert payload["role"] == "user"
        assert payload["exp"] - payload["iat"] == 24 * 60 * 60

    def test_login_sets_cookie(self, client):
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p"})

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"token={response.json()['data']['token']}")
        assert "HttpOnly" in cookie
        assert "Max-Age=86400" in cookie
        assert "Path=/" in cookie
        assert "SameSite=lax" in cookie
        assert "Secure" not in cookie

    def test_login_records_session(self, client, mongo):
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        user_id = users(mongo).docs[0]["_id"]
        token = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p"}).json()["data"]["token"]

        [session] = sessions(mongo).docs
        assert session["user_id"] == user_id
        assert session["token"] == token
        assert session["expires_at"] - session["created_at"] == timedelta(hours=24)

    def test_session_indexes(self, client, mongo):
        assert {"keys": [("expires_at", 1)], "expireAfterSeconds": 0} in sessions(mongo).indexes
        assert {"keys": [("token", 1)], "unique": True} in sessions(mongo).indexes

    def test_unknown_email_and_wrong_password_look_the_same(self, client, mongo):
        """Test that responses give no signal about which emails are registered."""
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})

        wrong_password = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
        unknown_email = client.post("/api/auth/login", json={"email": "b@x.com", "password": "p"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"status": 401, "message": "Invalid credentials"}
        assert sessions(mongo).docs == []

    def test_missing_credentials_rejected(self, client, mongo):
        response = client.post("/api/auth/login", json={"password": "p"})

        assert response.status_code == 400
        assert mongo.calls == []


    def test_long_password_round_trip(self, client):
        credentials = {"email": "a@x.com", "password": "p" * 80}

        assert client.post("/api/auth/register", json=credentials).status_code == 201
        assert client.post("/api/auth/login", json=credentials).status_code == 200


class TestStoreFailures:
    def test_register_store_error_is_internal_error(self, client, mongo):
        users(mongo).fail_with = PyMongoError("connection refused")

        response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 500
        assert response.json() == {"status": 500, "message": "Internal Server Error", "error": "connection refused"}

    def test_login_user_lookup_error_is_internal_error(self, client, mongo):
        users(mongo).fail_with = PyMongoError("timed out")

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 500
        assert response.json() == {"status": 500, "message": "Internal Server Error", "error": "timed out"}

    def test_login_session_insert_error_is_internal_error(self, client, mongo):
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        sessions(mongo).fail_with = PyMongoError("not primary")

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p"})

        assert response.status_code == 500
        assert response.json() == {"status": 500, "message": "Internal Server Error", "error": "not primary"}
        assert "set-cookie" not in response.headers

class TestLogout:
    def test_logout_clears_cookie(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"status": 200, "message": "Logged out successfully"}
        cookie = response.headers["set-cookie"]
        assert cookie.startswith('token=""') or cookie.startswith("token=;")
        assert "Max-Age=0" in cookie

    def test_logout_keeps_session_record(self, client, mongo, login):
        login()
        client.post("/api/auth/logout")
        assert len(sessions(mongo).docs) == 1
