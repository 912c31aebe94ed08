"""Social Client - tests for provider id lookup and revoke against mocked providers."""

import httpx
import pytest

from plub.core.domain_types import SocialType
from plub.core.errors import ErrorKind, PlubError
from plub.infrastructure.social_client import SocialClient


def _client(handler) -> SocialClient:
    return SocialClient(
        kakao_admin_key="kakao-admin",
        apple_client_id="app.plub",
        apple_client_secret="apple-secret",
        transport=httpx.MockTransport(handler),
    )


async def test_google_id_from_userinfo():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer google-token"
        return httpx.Response(200, json={"id": "g-1"})

    assert await _client(handler).fetch_provider_id(SocialType.GOOGLE, "google-token") == "g-1"


async def test_kakao_numeric_id_is_stringified():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": 777})

    assert await _client(handler).fetch_provider_id(SocialType.KAKAO, "t") == "777"


async def test_naver_id_nested_under_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": {"id": "n-9"}})

    assert await _client(handler).fetch_provider_id(SocialType.NAVER, "t") == "n-9"


async def test_rejected_token_is_login_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401)

    with pytest.raises(PlubError) as exc:
        await _client(handler).fetch_provider_id(SocialType.GOOGLE, "bad")
    assert exc.value.kind is ErrorKind.SOCIAL_LOGIN_ERROR


async def test_unreachable_provider_is_http_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PlubError) as exc:
        await _client(handler).fetch_provider_id(SocialType.NAVER, "t")
    assert exc.value.kind is ErrorKind.HTTP_CLIENT_ERROR


async def test_missing_id_is_login_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    with pytest.raises(PlubError) as exc:
        await _client(handler).fetch_provider_id(SocialType.KAKAO, "t")
    assert exc.value.kind is ErrorKind.SOCIAL_LOGIN_ERROR


async def test_kakao_unlink_uses_admin_key():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 777})

    assert await _client(handler).revoke(SocialType.KAKAO, "777") is True
    assert seen[0].headers["Authorization"] == "KakaoAK kakao-admin"


async def test_apple_revoke_exchanges_code_first():
    urls = []

    def handler(request: httpx.Request) -> httpx.Response:
        urls.append(str(request.url))
        if request.url.path.endswith("/token"):
            return httpx.Response(200, json={"refresh_token": "r-1"})
        return httpx.Response(200)

    ok = await _client(handler).revoke(
        SocialType.APPLE, "a-1", authorization_code="code",
    )
    assert ok is True
    assert urls[0].endswith("/auth/token")
    assert urls[1].endswith("/auth/revoke")


async def test_naver_revoke_is_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no provider call expected")

    assert await _client(handler).revoke(SocialType.NAVER, "n-9") is False
