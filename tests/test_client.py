import httpx
import pytest
import respx
from httpx import Response
from influxdb3_mcp.core.client import (
    InfluxHTTPClient,
    InfluxHTTPError,
    InfluxParseError,
    InfluxTransportError,
)
from influxdb3_mcp.core.endpoints import Endpoint, RequestKind

BASE = "http://influx.test:8181"


def _client(scheme: str = "Token") -> InfluxHTTPClient:
    endpoint = Endpoint(
        kind=RequestKind.DATA, base_url=BASE, credential="secret", scheme=scheme
    )
    return InfluxHTTPClient(endpoint)


@pytest.mark.asyncio
async def test_get_request_success():
    async with respx.mock:
        route = respx.get(f"{BASE}/api/v3/configure/database").mock(
            return_value=Response(200, json={"databases": ["a"]})
        )

        async with _client() as client:
            data = await client.get("/api/v3/configure/database")

        assert data == {"databases": ["a"]}
        assert route.called


@pytest.mark.asyncio
async def test_auth_header_uses_endpoint_scheme():
    async with respx.mock:
        route = respx.get(f"{BASE}/health").mock(return_value=Response(200, json={}))

        async with _client() as client:
            await client.get("/health")
        async with _client(scheme="Bearer") as client:
            await client.get("/health")

    assert route.calls[0].request.headers["Authorization"] == "Token secret"
    assert route.calls[1].request.headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_error_message_comes_from_backend_body():
    async with respx.mock:
        respx.post(f"{BASE}/api/v3/query_sql").mock(
            return_value=Response(404, json={"error": "database not found: nope"})
        )

        async with _client() as client:
            with pytest.raises(InfluxHTTPError) as exc:
                await client.post("/api/v3/query_sql", json={"db": "nope"})

    assert exc.value.status_code == 404
    assert exc.value.message == "database not found: nope"


@pytest.mark.asyncio
async def test_plain_text_error_body_is_kept():
    async with respx.mock:
        respx.post(f"{BASE}/api/v3/write_lp").mock(
            return_value=Response(400, text="parse error on line 1")
        )

        async with _client() as client:
            with pytest.raises(InfluxHTTPError) as exc:
                await client.post_text("/api/v3/write_lp", content="bad line")

    assert exc.value.message == "parse error on line 1"
    assert exc.value.response_text == "parse error on line 1"


@pytest.mark.asyncio
async def test_connect_error_raises_transport_error():
    async with respx.mock:
        respx.get(f"{BASE}/ping").mock(side_effect=httpx.ConnectError("refused"))

        async with _client() as client:
            with pytest.raises(InfluxTransportError) as exc:
                await client.request("GET", "/ping")

    assert "refused" in str(exc.value)


@pytest.mark.asyncio
async def test_server_errors_are_not_retried():
    async with respx.mock:
        route = respx.post(f"{BASE}/api/v3/write_lp").mock(
            return_value=Response(503, json={"error": "unavailable"})
        )

        async with _client() as client:
            with pytest.raises(InfluxHTTPError):
                await client.post_text("/api/v3/write_lp", content="m v=1")

    assert route.call_count == 1


@pytest.mark.asyncio
async def test_empty_response_returns_empty_dict():
    async with respx.mock:
        respx.delete(f"{BASE}/api/v3/configure/database").mock(
            return_value=Response(204)
        )
        respx.post(f"{BASE}/api/v3/configure/database").mock(
            return_value=Response(200)
        )

        async with _client() as client:
            assert await client.post("/api/v3/configure/database", json={}) == {}
            assert await client.delete("/api/v3/configure/database") is None


@pytest.mark.asyncio
async def test_non_json_response_raises_parse_error():
    async with respx.mock:
        respx.get(f"{BASE}/api/v3/configure/database").mock(
            return_value=Response(200, text="<html>Not JSON</html>")
        )

        async with _client() as client:
            with pytest.raises(InfluxParseError) as exc:
                await client.get("/api/v3/configure/database")

    assert "Expected JSON" in str(exc.value)


@pytest.mark.asyncio
async def test_post_text_sends_body_verbatim():
    payload = 'cpu,host=a usage=0.5 1\nmem,host=a used=3i 1\n'
    async with respx.mock:
        route = respx.post(f"{BASE}/api/v3/write_lp").mock(return_value=Response(204))

        async with _client() as client:
            await client.post_text(
                "/api/v3/write_lp", content=payload, params={"db": "sensors"}
            )

    request = route.calls[0].request
    assert request.content == payload.encode("utf-8")
    assert request.headers["Content-Type"].startswith("text/plain")
    assert request.url.params["db"] == "sensors"


def test_missing_credential_rejected():
    with pytest.raises(ValueError):
        InfluxHTTPClient(Endpoint(kind=RequestKind.DATA, base_url=BASE, credential=""))
