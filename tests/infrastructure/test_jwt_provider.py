"""JWT Provider - tests for token issue, validation and type separation."""

import pytest

from plub.core.domain_types import Role, TokenType
from plub.core.errors import ErrorKind, PlubError
from plub.infrastructure.crypto import EmailCipher
from plub.infrastructure.jwt_provider import JwtProvider, resolve_bearer

KEY = "cGx1Yi10ZXN0LW9ubHktZW5jcnlwdGlvbi1rZXktMDA="


@pytest.fixture
def provider():
    return JwtProvider(
        secret_key="unit-test-secret-key-with-enough-length",
        cipher=EmailCipher(KEY),
        access_duration=60,
        refresh_duration=120,
        sign_duration=30,
    )


def test_access_token_round_trip(provider):
    token = provider.create_access_token("123@KAKAO", Role.USER)
    assert provider.email_of(token, TokenType.ACCESS) == "123@KAKAO"
    claims = provider.decode(token, TokenType.ACCESS)
    assert claims["role"] == Role.USER.value


def test_subject_is_not_plaintext(provider):
    token = provider.create_access_token("123@KAKAO", Role.USER)
    claims = provider.decode(token, TokenType.ACCESS)
    assert "123@KAKAO" not in claims["sub"]


def test_refresh_token_rejected_as_access(provider):
    token = provider.create_refresh_token("123@KAKAO")
    with pytest.raises(PlubError) as exc:
        provider.decode(token, TokenType.ACCESS)
    assert exc.value.kind is ErrorKind.FILTER_ACCESS_DENIED


def test_sign_token_failure_maps_to_signup_error(provider):
    with pytest.raises(PlubError) as exc:
        provider.decode("not-a-jwt", TokenType.SIGN)
    assert exc.value.kind is ErrorKind.SIGNUP_TOKEN_ERROR


def test_foreign_signature_rejected(provider):
    other = JwtProvider(
        secret_key="another-secret-key-with-enough-length",
        cipher=EmailCipher(KEY),
        access_duration=60, refresh_duration=120, sign_duration=30,
    )
    token = other.create_access_token("123@KAKAO", Role.USER)
    with pytest.raises(PlubError) as exc:
        provider.decode(token, TokenType.ACCESS)
    assert exc.value.kind is ErrorKind.FILTER_ACCESS_DENIED


def test_expired_token_rejected():
    expired = JwtProvider(
        secret_key="unit-test-secret-key-with-enough-length",
        cipher=EmailCipher(KEY),
        access_duration=-10, refresh_duration=120, sign_duration=30,
    )
    token = expired.create_access_token("123@KAKAO", Role.USER)
    with pytest.raises(PlubError) as exc:
        expired.decode(token, TokenType.ACCESS)
    assert exc.value.kind is ErrorKind.FILTER_ACCESS_DENIED


def test_refresh_tokens_are_unique(provider):
    assert provider.create_refresh_token("a@GOOGLE") != provider.create_refresh_token("a@GOOGLE")


@pytest.mark.parametrize("raw,expected", [
    ("Bearer abc", "abc"),
    ("Bearer ", None),
    ("Token abc", None),
    (None, None),
])
def test_resolve_bearer(raw, expected):
    assert resolve_bearer(raw) == expected
