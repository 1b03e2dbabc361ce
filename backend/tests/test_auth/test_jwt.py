"""Unit tests for staff and check-in token creation and decoding."""

from datetime import timedelta

import pytest
from jose import JWTError, jwt

from app.auth.checkin_token import CHECKIN_TOKEN_TYPE, create_checkin_token, decode_checkin_token
from app.auth.jwt import create_access_token, decode_token
from app.config import settings


class TestCreateAccessToken:
    """Test staff access token creation."""

    def test_contains_type_access(self):
        token = create_access_token({"sub": "staff@x.com"})
        payload = decode_token(token)
        assert payload["type"] == "access"

    def test_contains_sub_claim(self):
        token = create_access_token({"sub": "staff@x.com"})
        payload = decode_token(token)
        assert payload["sub"] == "staff@x.com"

    def test_contains_iat_and_exp_claims(self):
        payload = decode_token(create_access_token({"sub": "staff@x.com"}))
        assert "iat" in payload
        assert "exp" in payload

    def test_custom_expiry_delta(self):
        token = create_access_token({"sub": "staff@x.com"}, expires_delta=timedelta(hours=1))
        payload = decode_token(token)
        assert payload["sub"] == "staff@x.com"


class TestDecodeToken:
    """Test token decoding and validation."""

    def test_decode_expired_token_raises(self):
        token = create_access_token({"sub": "staff@x.com"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_decode_invalid_token_raises(self):
        with pytest.raises(JWTError):
            decode_token("not.a.valid.token")

    def test_decode_empty_string_raises(self):
        with pytest.raises(JWTError):
            decode_token("")


class TestCheckInToken:
    """Check-in tokens are bound to a ref, a purpose and their own secret."""

    def test_claims(self):
        payload = decode_checkin_token(create_checkin_token("ABC123"))
        assert payload["bookingRef"] == "ABC123"
        assert payload["type"] == CHECKIN_TOKEN_TYPE

    def test_default_validity_is_weeks(self):
        payload = decode_checkin_token(create_checkin_token("ABC123"))
        assert payload["exp"] - payload["iat"] == settings.checkin_token_expire_days * 86400

    def test_expired_raises(self):
        token = create_checkin_token("ABC123", expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_checkin_token(token)

    def test_staff_secret_does_not_verify_checkin_token(self):
        with pytest.raises(JWTError):
            decode_token(create_checkin_token("ABC123"))

    def test_staff_token_is_not_a_checkin_token(self):
        with pytest.raises(JWTError):
            decode_checkin_token(create_access_token({"sub": "staff@x.com"}))

    def test_token_without_exp_rejected(self):
        token = jwt.encode(
            {"bookingRef": "ABC123", "type": CHECKIN_TOKEN_TYPE},
            settings.checkin_jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(JWTError):
            decode_checkin_token(token)
