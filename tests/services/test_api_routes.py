"""API Routes - envelope shape, auth gate, validation errors and a feed flow over HTTP.

Invariants:
    - Every response, success or error, is {statusCode, message, data}
    - Missing or bad bearer tokens yield 401 / 2000
    - Body validation failures yield 400 / 9010 with per-field details
"""

from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from plub.api.error_handlers import register_error_handlers
from plub.core.domain_types import ReportType
from plub.core.errors import ErrorKind


async def test_health_is_wrapped_in_envelope(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    body = res.json()
    assert body["statusCode"] == 1000
    assert body["data"]["status"] == "healthy"


async def test_readiness_uses_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["data"]["checks"]["database"] == "healthy"


async def test_missing_token_is_rejected(client):
    res = await client.get("/api/accounts/me")
    assert res.status_code == 401
    assert res.json() == {"statusCode": 2000, "message": "access denied.", "data": None}


async def test_garbage_token_is_rejected(client):
    res = await client.get("/api/accounts/me", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401
    assert res.json()["statusCode"] == 2000


async def test_me_returns_camel_case(client, member, auth_header):
    res = await client.get("/api/accounts/me", headers=auth_header(member))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["nickname"] == "member"
    assert data["socialType"] == "GOOGLE"


async def test_nickname_check(client, member, auth_header):
    res = await client.get("/api/accounts/check/nickname/member", headers=auth_header(member))
    assert res.json()["data"] == {"isAvailable": False}

    res = await client.get("/api/accounts/check/nickname/bad%20name", headers=auth_header(member))
    assert res.status_code == 400
    assert res.json()["statusCode"] == 3030


async def test_validation_error_envelope(client, plubbing, member, auth_header):
    res = await client.post(
        f"/api/plubbings/{plubbing.id}/feeds",
        json={"content": "no title"},
        headers=auth_header(member),
    )
    assert res.status_code == 400
    body = res.json()
    assert body["statusCode"] == 9010
    assert any(d["field"].endswith("title") for d in body["data"])


async def test_unknown_method_is_405(client):
    res = await client.delete("/api/health/ready")
    assert res.status_code == 405
    assert res.json()["statusCode"] == 9020


async def test_feed_flow(client, plubbing, host, member, auth_header):
    url = f"/api/plubbings/{plubbing.id}/feeds"

    created = await client.post(
        url, json={"title": "Sunday run", "content": "5k", "feedType": "LINE"},
        headers=auth_header(member),
    )
    assert created.status_code == 200
    feed_id = created.json()["data"]["feedId"]

    comment = await client.post(
        f"{url}/{feed_id}/comments", json={"content": "see you"}, headers=auth_header(host),
    )
    assert comment.json()["data"]["commentGroupId"] == comment.json()["data"]["commentId"]

    liked = await client.put(f"{url}/{feed_id}/like", headers=auth_header(host))
    assert liked.json()["data"] == {"targetId": feed_id, "isLiked": True, "likeCount": 1}

    page = await client.get(url, params={"size": 5}, headers=auth_header(host))
    data = page.json()["data"]
    assert data["totalElements"] == 1
    assert data["last"] is True
    assert data["content"][0]["commentCount"] == 1

    pinned = await client.put(f"{url}/{feed_id}/pin", headers=auth_header(member))
    assert pinned.status_code == 403
    assert pinned.json()["statusCode"] == 6030


async def test_outsider_cannot_read_feeds(client, plubbing, outsider, auth_header):
    res = await client.get(f"/api/plubbings/{plubbing.id}/feeds", headers=auth_header(outsider))
    assert res.status_code == 403
    assert res.json()["statusCode"] == 6100


async def test_report_types_listed(client, member, auth_header):
    res = await client.get("/api/reports", headers=auth_header(member))
    types = {r["reportType"] for r in res.json()["data"]["reportTypes"]}
    assert types == {t.value for t in ReportType}


async def test_calendar_year_out_of_range_is_400(client, plubbing, member, auth_header):
    for year in (0, 10000):
        res = await client.get(
            f"/api/plubbings/{plubbing.id}/timeline/year/{year}/month/5",
            headers=auth_header(member),
        )
        assert res.status_code == 400
        assert res.json()["statusCode"] == 9010


async def test_oversized_body_maps_to_file_size_exceeded():
    local = FastAPI()
    register_error_handlers(local)

    @local.post("/upload")
    async def upload():
        raise HTTPException(status_code=413)

    @local.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418)

    async with AsyncClient(transport=ASGITransport(app=local), base_url="http://test") as c:
        res = await c.post("/upload")
        assert res.status_code == ErrorKind.FILE_SIZE_EXCEEDED.http_status == 400
        assert res.json()["statusCode"] == 9050

        res = await c.get("/teapot")
        assert res.status_code == 418
        assert res.json()["statusCode"] == 9000
