import logging
import time
from typing import Any, Dict, Optional

import httpx

from .endpoints import Endpoint


class InfluxClientError(Exception):
    """Base error for client failures."""


class InfluxTransportError(InfluxClientError):
    """Network-level failure: no response from the backend."""


class InfluxHTTPError(InfluxClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Any] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.message = message
        self.response_json = response_json
        self.response_text = response_text


class InfluxParseError(InfluxClientError):
    pass


class InfluxHTTPClient:
    """
    HTTP client bound to one resolved endpoint (data or management plane).
    - Handles auth header, base URL and timeout
    - Returns raw payloads; no retries (writes are not idempotent)
    - No business logic; services own product decisions
    """

    def __init__(
        self,
        endpoint: Endpoint,
        *,
        timeout_seconds: float = 10.0,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        if not endpoint.base_url:
            raise ValueError("endpoint base_url must be provided.")
        if not endpoint.credential:
            raise ValueError("endpoint credential must be provided.")

        self.endpoint = endpoint
        self.base_url = endpoint.base_url
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("influxdb3_mcp.core.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": endpoint.authorization,
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "InfluxHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[str | bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        tool: Optional[str] = None,
    ) -> httpx.Response:
        """
        Core request method.
        - Raises InfluxHTTPError on non-2xx HTTP responses
        - Raises InfluxTransportError on network/timeout errors
        - Returns the successful httpx.Response untouched
        """
        method = method.upper()
        start = time.perf_counter()

        try:
            resp = await self.http.request(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise InfluxTransportError(
                f"Network error calling {method} {url}: {exc}"
            ) from exc

        duration_ms = int((time.perf_counter() - start) * 1000)

        # url only; the auth header is never part of the log record
        self.log.debug(
            "influx.request",
            extra={
                "tool": tool,
                "method": method,
                "endpoint": str(resp.request.url),
                "kind": self.endpoint.kind.value,
                "status": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, method=method)

        return resp

    def json_body(self, resp: httpx.Response) -> Any:
        """Decode a JSON body; {} for empty responses."""
        # Handle empty responses (204 No Content, etc.)
        if not resp.content:
            return {}

        try:
            return resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise InfluxParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

    def _to_http_error(
        self, resp: httpx.Response, *, method: str
    ) -> InfluxHTTPError:
        url = str(resp.request.url)
        response_json: Optional[Any] = None
        response_text: Optional[str] = None
        message = resp.reason_phrase or "request failed"

        try:
            parsed = resp.json()
        except ValueError:
            response_text = (resp.text or "")[:500]
            if response_text.strip():
                message = response_text.strip()
        else:
            response_json = parsed
            message = _backend_message(parsed) or message

        return InfluxHTTPError(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        resp = await self.request("GET", url, params=params, tool=tool)
        return self.json_body(resp)

    async def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        resp = await self.request("POST", url, json=json, params=params, tool=tool)
        return self.json_body(resp)

    async def patch(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Any:
        resp = await self.request("PATCH", url, json=json, tool=tool)
        return self.json_body(resp)

    async def delete(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> None:
        await self.request("DELETE", url, params=params, tool=tool)

    async def post_text(
        self,
        url: str,
        *,
        content: str,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> None:
        """Send a raw text body verbatim; the response body is not interpreted."""
        await self.request(
            "POST",
            url,
            params=params,
            content=content.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            tool=tool,
        )


def _backend_message(parsed: Any) -> Optional[str]:
    # InfluxDB 3 reports {"error": ...}; the management API {"message": ...};
    # some proxies nest the error under "data".
    if isinstance(parsed, str):
        return parsed or None
    if not isinstance(parsed, dict):
        return None
    for key in ("error", "message", "description"):
        value = parsed.get(key)
        if isinstance(value, str) and value:
            return value
    nested = parsed.get("data")
    if isinstance(nested, dict):
        return _backend_message(nested)
    return None
