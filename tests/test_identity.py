"""Bearer token verification."""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from errors import Unauthenticated
from identity import issue_token, validate_token
from settings import get_settings


class TestValidateToken:
    def test_valid_token_yields_email_and_one_hour_lifetime(self):
        claims = validate_token(issue_token({"email": "a@x.com"}))

        assert claims.email == "a@x.com"
        assert claims.expires_at - claims.issued_at == timedelta(hours=1)

    def test_expired_token_is_rejected(self):
        token = issue_token({"email": "a@x.com"}, ttl_seconds=-10)

        with pytest.raises(Unauthenticated):
            validate_token(token)

    def test_token_signed_with_another_secret_is_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"email": "a@x.com", "iat": now, "exp": now + timedelta(hours=1)},
            "not-the-secret",
            algorithm=get_settings().TOKEN_ALGORITHM,
        )

        with pytest.raises(Unauthenticated):
            validate_token(token)

    def test_token_without_expiry_is_rejected(self):
        settings = get_settings()
        token = jwt.encode({"email": "a@x.com"}, settings.ACCESS_TOKEN_SECRET, algorithm=settings.TOKEN_ALGORITHM)

        with pytest.raises(Unauthenticated):
            validate_token(token)

    def test_garbage_is_rejected(self):
        with pytest.raises(Unauthenticated):
            validate_token("not.a.token")

    def test_token_without_email_is_rejected(self):
        with pytest.raises(Unauthenticated):
            validate_token(issue_token({"sub": "someone"}))


class TestBearerHeader:
    def test_missing_header_is_401(self, client):
        response = client.get("/users/individual/a@x.com")

        assert response.status_code == 401
        assert response.json() == {"message": "unauthorized access"}

    def test_non_bearer_scheme_is_401(self, client):
        response = client.get("/users/individual/a@x.com", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401

    def test_jwt_endpoint_issues_verifiable_token(self, client):
        response = client.post("/jwt", json={"email": "a@x.com"})

        assert response.status_code == 200
        assert validate_token(response.json()["token"]).email == "a@x.com"
