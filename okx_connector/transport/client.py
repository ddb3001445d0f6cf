"""
OKX REST Client

Sends signed GET/POST requests over httpx and turns every round-trip
into an ExchangeResponse. No retries: a failed call is reported once
and left to the caller.
"""

import asyncio
import json
import logging
from typing import Any, Mapping, Optional

import httpx

from okx_connector.auth.signer import SignedRequest, Signer
from okx_connector.core.config import ApiConfig, CredentialsConfig
from okx_connector.transport.responses import ExchangeResponse

logger = logging.getLogger(__name__)


class OkxClient:
    """
    Authenticated OKX API client.

    Each send_* call is an independent coroutine; calls can run
    concurrently since the only shared state is the immutable
    credentials held by the signer.

    Example:
        >>> async with OkxClient(config.credentials, config.api) as client:
        ...     resp = await client.send_get("/api/v5/dex/market/trades", {"limit": 10})
    """

    def __init__(
        self,
        credentials: CredentialsConfig,
        api: Optional[ApiConfig] = None,
        signer: Optional[Signer] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize client.

        Args:
            credentials: API key, secret and passphrase
            api: Endpoint and timeout settings
            signer: Pre-built signer (default: Signer(credentials))
            http_client: Pre-built httpx client (caller keeps ownership)
        """
        self.api = api or ApiConfig()
        self.signer = signer or Signer(credentials)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.api.base_url,
            timeout=self.api.timeout_sec,
        )

    async def __aenter__(self) -> "OkxClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    # ------------------------
    # Public API
    # ------------------------

    async def send_get(
        self, request_path: str, params: Optional[Mapping[str, Any]] = None
    ) -> ExchangeResponse:
        """
        Signed GET; params go on the query string.

        Raises:
            SigningError: params cannot be encoded (before any I/O)
        """
        return await self._send(self.signer.sign_request("GET", request_path, params))

    async def send_post(
        self, request_path: str, params: Optional[Mapping[str, Any]] = None
    ) -> ExchangeResponse:
        """
        Signed POST; params go in the JSON body, byte-identical to the signed text.

        Raises:
            SigningError: params are not JSON-serializable (before any I/O)
        """
        return await self._send(self.signer.sign_request("POST", request_path, params))

    def submit_get(
        self, request_path: str, params: Optional[Mapping[str, Any]] = None
    ) -> "asyncio.Task[ExchangeResponse]":
        """Schedule send_get on the running loop and return the task."""
        return asyncio.create_task(self.send_get(request_path, params))

    def submit_post(
        self, request_path: str, params: Optional[Mapping[str, Any]] = None
    ) -> "asyncio.Task[ExchangeResponse]":
        """Schedule send_post on the running loop and return the task."""
        return asyncio.create_task(self.send_post(request_path, params))

    # ------------------------
    # Internal helpers
    # ------------------------

    async def _send(self, req: SignedRequest) -> ExchangeResponse:
        headers = self.signer.auth_headers(req.envelope)
        content = req.body.encode("utf-8") if req.body is not None else None

        try:
            response = await self._http.request(
                req.method, req.target, headers=headers, content=content
            )
        except httpx.RequestError as e:
            logger.error(f"[OkxClient] Problem with {req.method} request to {req.path}: {e!r}")
            return ExchangeResponse(
                method=req.method,
                path=req.path,
                outcome="network_error",
                error=f"{type(e).__name__}: {e}",
            )

        return self._parse(req, response)

    @staticmethod
    def _parse(req: SignedRequest, response: httpx.Response) -> ExchangeResponse:
        raw = response.text
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"[OkxClient] Error parsing {req.method} response from {req.path}: {e}")
            logger.info(f"[OkxClient] Raw {req.method} response: {raw}")
            return ExchangeResponse(
                method=req.method,
                path=req.path,
                outcome="parse_error",
                status_code=response.status_code,
                raw=raw,
                error=str(e),
            )

        logger.info(f"[OkxClient] {req.method} {req.path} -> HTTP {response.status_code}")
        logger.debug(f"[OkxClient] {req.method} response: {json.dumps(data, indent=2, ensure_ascii=False)}")
        return ExchangeResponse(
            method=req.method,
            path=req.path,
            outcome="parsed",
            status_code=response.status_code,
            data=data,
            raw=raw,
        )
