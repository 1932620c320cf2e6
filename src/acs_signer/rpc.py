"""Request/response records exchanged with the token service."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

HTTP = "http"
HTTPS = "https"


@dataclass
class RpcRequest:
    """RPC-style API call: product, version and action plus query parameters."""

    product: str
    version: str
    action: str
    scheme: str = HTTPS
    method: str = "GET"
    domain: str | None = None
    region_id: str | None = None
    accept_format: str = "JSON"
    query_params: dict[str, str] = field(default_factory=dict)

    def add_query_param(self, key: str, value: str) -> None:
        self.query_params[key] = value


@dataclass(frozen=True)
class CommonResponse:
    http_status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)
