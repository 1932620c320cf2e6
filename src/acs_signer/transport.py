"""HTTP transport that signs and dispatches RPC requests."""

from __future__ import annotations

import logging
from datetime import datetime
from types import TracebackType
from typing import Callable, Protocol

import httpx

from acs_signer.composer import sign_rpc_params
from acs_signer.config import StsSettings
from acs_signer.errors import TransportError
from acs_signer.rpc import CommonResponse, RpcRequest
from acs_signer.signers.base import Signer
from acs_signer.utils.time import utc_now

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def do_action(self, request: RpcRequest, signer: Signer) -> CommonResponse: ...


class HttpxTransport:
    """Sends signed RPC requests with a shared ``httpx.Client``."""

    def __init__(
        self,
        domain: str,
        *,
        region_id: str | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        client: httpx.Client | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._domain = domain
        self._region_id = region_id
        self._clock = clock
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
        )

    @classmethod
    def from_settings(
        cls,
        settings: StsSettings,
        client: httpx.Client | None = None,
    ) -> "HttpxTransport":
        return cls(
            settings.domain,
            region_id=settings.region_id,
            connect_timeout=settings.connect_timeout_seconds,
            read_timeout=settings.read_timeout_seconds,
            client=client,
        )

    def do_action(self, request: RpcRequest, signer: Signer) -> CommonResponse:
        params = sign_rpc_params(request, signer, region_id=self._region_id, clock=self._clock)
        url = f"{request.scheme}://{request.domain or self._domain}/"
        method = request.method.upper()

        try:
            if method == "POST":
                response = self._client.post(url, data=params)
            else:
                response = self._client.request(method, url, params=params)
        except httpx.HTTPError as exc:
            logger.warning(
                "%s.%s request to %s failed: %s", request.product, request.action, url, exc
            )
            raise TransportError(
                f"{request.product}.{request.action} request failed: {exc}"
            ) from exc

        logger.debug(
            "%s.%s -> HTTP %s", request.product, request.action, response.status_code
        )
        return CommonResponse(
            http_status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
