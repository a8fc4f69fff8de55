"""HTTP gateway client for the upstream comic API."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from synclub_mcp.envelope import Envelope
from synclub_mcp.errors import (
    AUTH_ERROR_CODE,
    VERIFICATION_REQUIRED_CODE,
    AuthError,
    RequestError,
    SynclubAPIError,
    VerificationRequiredError,
)

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "Trace-Id"


def classify_envelope(envelope: Envelope, trace_id: Optional[str]) -> SynclubAPIError:
    """Map a non-success envelope to the matching error type."""
    code = envelope.status_code
    if code == AUTH_ERROR_CODE:
        return AuthError(f"API Error: {envelope.message}. Trace-Id: {trace_id}", trace_id)
    if code == VERIFICATION_REQUIRED_CODE:
        return VerificationRequiredError(trace_id)
    return RequestError(
        f"API Error: {code}-{envelope.message}. Trace-Id: {trace_id}",
        code,
        trace_id,
    )


class GatewayClient:
    """Thin wrapper around one shared httpx.AsyncClient.

    Injects credentials on every request, chooses JSON or multipart
    encoding, and turns the upstream envelope into either the body or a
    classified SynclubAPIError.
    """

    def __init__(
        self,
        api_key: str,
        api_host: str,
        timeout: float = 60.0,
        stream_timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or ""
        self.api_host = api_host or ""
        self.stream_timeout = stream_timeout
        self._client = httpx.AsyncClient(
            base_url=self.api_host,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "GatewayClient":
        return cls(
            api_key=settings.api_key,
            api_host=settings.api_host,
            timeout=settings.request_timeout,
            stream_timeout=settings.stream_timeout,
            transport=transport,
        )

    def _build_headers(
        self, headers: Optional[Dict[str, str]], multipart: bool
    ) -> httpx.Headers:
        """Caller headers first; credentials and Accept always win."""
        merged = httpx.Headers(headers or {})
        if multipart:
            # httpx writes the multipart Content-Type with its boundary
            merged.pop("Content-Type", None)
        else:
            merged["Content-Type"] = "application/json"
        merged["Authorization"] = self.api_key
        merged["X-API-Key"] = self.api_key
        merged["Accept"] = "application/json"
        return merged

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        check_status: bool = True,
    ) -> Any:
        """Send one request and decode the envelope.

        Args:
            method: HTTP method
            endpoint: Path relative to the configured host
            json: JSON body (ignored when files is given)
            files: Multipart file fields; switches to multipart encoding
            data: Extra multipart form fields
            params: Query string parameters
            headers: Extra headers; credential headers override them
            check_status: Raise on non-success envelope codes

        Returns:
            The decoded body (JSON value, or text for non-JSON bodies)

        Raises:
            AuthError, VerificationRequiredError, RequestError
        """
        multipart = files is not None
        request_headers = self._build_headers(headers, multipart)
        try:
            if multipart:
                response = await self._client.request(
                    method,
                    endpoint,
                    files=files,
                    data=data,
                    params=params,
                    headers=request_headers,
                )
            else:
                response = await self._client.request(
                    method,
                    endpoint,
                    json=json,
                    params=params,
                    headers=request_headers,
                )
            return self._decode(response, check_status)
        except SynclubAPIError:
            raise
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise RequestError(f"Request failed: {e}") from e

    def _decode(self, response: httpx.Response, check_status: bool) -> Any:
        trace_id = response.headers.get(TRACE_ID_HEADER)
        try:
            body = response.json()
        except ValueError:
            body = response.text

        envelope = Envelope.from_body(body)

        if not response.is_success:
            if envelope.has_status and not envelope.is_success:
                raise classify_envelope(envelope, trace_id)
            raise RequestError(
                f"Request failed: HTTP {response.status_code} {response.reason_phrase}",
                500,
                trace_id,
            )

        if check_status and envelope.has_status and not envelope.is_success:
            logger.info(
                "Upstream returned status %s (trace %s)", envelope.status_code, trace_id
            )
            raise classify_envelope(envelope, trace_id)

        return body

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> Any:
        return await self.request("POST", endpoint, **kwargs)

    @asynccontextmanager
    async def stream(self, endpoint: str, json: Any) -> AsyncIterator[httpx.Response]:
        """Open a streaming POST; the caller reads the body line by line."""
        async with self._client.stream(
            "POST",
            endpoint,
            json=json,
            headers=self._build_headers(None, multipart=False),
            timeout=self.stream_timeout,
        ) as response:
            yield response

    async def aclose(self) -> None:
        await self._client.aclose()
