"""Push Client - tests for retry, give-up and skip behaviour against a mock gateway."""

import httpx

from plub.core.notification import PushMessage
from plub.infrastructure.push_client import PushClient

GATEWAY = "https://push.test/send"

MESSAGE = PushMessage(account_id=1, fcm_token="fcm-1", title="Runners", body="hello")


def _client(handler, **kwargs) -> PushClient:
    return PushClient(
        gateway_url=kwargs.pop("gateway_url", GATEWAY),
        server_key="server-key",
        base_delay_ms=1,
        max_delay_ms=2,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_delivers_on_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": 1})

    assert await _client(handler).send(MESSAGE) is True
    assert len(seen) == 1
    assert seen[0].headers["Authorization"] == "key=server-key"


async def test_retries_server_errors_then_succeeds():
    statuses = iter([500, 503, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    assert await _client(handler).send(MESSAGE) is True


async def test_gives_up_after_max_retries():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    assert await _client(handler, max_retries=2).send(MESSAGE) is False
    assert len(calls) == 3


async def test_client_error_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400)

    assert await _client(handler).send(MESSAGE) is False
    assert len(calls) == 1


async def test_transport_error_is_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200)

    assert await _client(handler).send(MESSAGE) is True
    assert len(attempts) == 2


async def test_skips_without_gateway_or_token():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("gateway must not be called")

    assert await _client(handler, gateway_url="").send(MESSAGE) is False
    no_token = PushMessage(account_id=1, fcm_token=None, title="t", body="b")
    assert await _client(handler).send(no_token) is False
