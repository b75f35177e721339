"""Tests for HTTP Basic authentication."""

import base64

import pytest

from gateway.auth import BasicAuthenticator, hash_password, parse_basic_authorization, verify_password
from gateway.config import parse_auth


def basic_header(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def auth_client(make_client):
    """Client for a gateway that requires admin:s3cret."""
    return make_client(credentials=("admin", "s3cret"), cdn_enabled=True)


class TestPasswordHashing:
    """Test bcrypt helpers."""

    def test_hash_and_verify(self):
        password_hash = hash_password("s3cret")

        assert password_hash != "s3cret"
        assert verify_password("s3cret", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_overlong_password_does_not_raise(self):
        password_hash = hash_password("s3cret")

        assert not verify_password("x" * 100, password_hash)

    def test_long_password_checked_in_full(self):
        password = "p" * 80
        password_hash = hash_password(password)

        assert verify_password(password, password_hash)
        assert not verify_password("p" * 72, password_hash)
        assert not verify_password("p" * 72 + "q" * 8, password_hash)


class TestLongConfiguredPassword:
    """A configured password over 72 bytes starts the gateway and must match exactly."""

    @pytest.fixture
    def long_auth_client(self, make_client):
        return make_client(credentials=("op", "p" * 80))

    def test_exact_password_accepted(self, long_auth_client):
        assert long_auth_client.get("/", auth=("op", "p" * 80)).status_code == 200

    def test_shared_prefix_rejected(self, long_auth_client):
        assert long_auth_client.get("/", auth=("op", "p" * 72)).status_code == 401
        assert long_auth_client.get("/", auth=("op", "p" * 72 + "x" * 8)).status_code == 401


class TestParseBasicAuthorization:
    """Test Authorization header parsing."""

    def test_valid_header(self):
        header = basic_header("admin", "pa:ss")["Authorization"]

        assert parse_basic_authorization(header) == ("admin", "pa:ss")

    @pytest.mark.parametrize("header", [
        None,
        "",
        "Bearer abc",
        "Basic !!!notbase64",
        "Basic " + base64.b64encode(b"no-colon").decode(),
    ])
    def test_invalid_headers(self, header):
        assert parse_basic_authorization(header) is None


class TestParseAuthSetting:
    """Test the AUTH environment value parser."""

    def test_user_and_password(self):
        assert parse_auth("admin:s3:cret") == ("admin", "s3:cret")

    @pytest.mark.parametrize("value", [None, "", "admin", "admin:", ":s3cret"])
    def test_disabled_values(self, value):
        assert parse_auth(value) is None


class TestBasicAuthenticator:
    """Test credential checks."""

    def test_accepts_configured_credentials(self):
        authenticator = BasicAuthenticator("admin", "s3cret")

        assert authenticator.verify(basic_header("admin", "s3cret")["Authorization"])

    def test_rejects_wrong_username_or_password(self):
        authenticator = BasicAuthenticator("admin", "s3cret")

        assert not authenticator.verify(basic_header("root", "s3cret")["Authorization"])
        assert not authenticator.verify(basic_header("admin", "nope")["Authorization"])
        assert not authenticator.verify(None)


class TestAuthMiddleware:
    """Test that the gateway gates every route."""

    @pytest.mark.parametrize("method,path", [
        ("GET", "/"),
        ("GET", "/favicon.ico"),
        ("GET", "/cdn/"),
        ("GET", "/uri/a.bin"),
        ("GET", "/a.bin"),
        ("POST", "/a.bin"),
        ("DELETE", "/a.bin"),
        ("OPTIONS", "/a.bin"),
    ])
    def test_missing_credentials_rejected(self, auth_client, method, path):
        response = auth_client.request(method, path)

        assert response.status_code == 401
        assert response.text == "Unauthorized access"
        assert response.headers["www-authenticate"] == 'Basic realm="DDrive Access", charset="UTF-8"'
        assert "x-request-id" in response.headers

    def test_wrong_credentials_rejected(self, auth_client):
        response = auth_client.get("/", headers=basic_header("admin", "wrong"))

        assert response.status_code == 401

    def test_rejected_upload_stores_nothing(self, auth_client):
        auth_client.post("/a.bin", content=b"payload", follow_redirects=False)

        response = auth_client.get("/cdn/", headers=basic_header("admin", "s3cret"))

        assert response.json()["data"] == {}

    def test_valid_credentials_pass(self, auth_client):
        headers = basic_header("admin", "s3cret")

        upload = auth_client.post("/a.bin", content=b"payload", headers=headers, follow_redirects=False)
        download = auth_client.get("/a.bin", headers=headers)

        assert upload.status_code == 303
        assert download.content == b"payload"

    def test_httpx_auth_tuple(self, auth_client):
        response = auth_client.get("/", auth=("admin", "s3cret"))

        assert response.status_code == 200

    def test_auth_disabled_by_default(self, client):
        assert client.get("/").status_code == 200
