from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from acs_signer import config
from acs_signer.credentials.models import KeyPairCredential
from acs_signer.rpc import CommonResponse, RpcRequest
from acs_signer.signers.base import Signer


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeTransport:
    """Records dispatched requests and replays queued responses or errors."""

    def __init__(self) -> None:
        self.calls: list[tuple[RpcRequest, Signer]] = []
        self._queue: list[CommonResponse | Exception] = []
        self.on_call: Callable[[], None] | None = None

    def queue(self, *items: CommonResponse | Exception) -> None:
        self._queue.extend(items)

    def do_action(self, request: RpcRequest, signer: Signer) -> CommonResponse:
        self.calls.append((request, signer))
        if self.on_call is not None:
            self.on_call()
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _session_response(access_key_id: str, secret: str) -> CommonResponse:
    body = {
        "RequestId": "req-1",
        "SessionAccessKey": {
            "SessionAccessKeyId": access_key_id,
            "SessionAccessKeySecret": secret,
            "Expiration": "2026-01-01T01:00:00Z",
        },
    }
    return CommonResponse(http_status=200, body=json.dumps(body).encode())


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def private_key_der_b64(rsa_private_key: rsa.RSAPrivateKey) -> str:
    der = rsa_private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return base64.b64encode(der).decode("ascii")


@pytest.fixture
def make_credential(private_key_pem: str) -> Callable[..., KeyPairCredential]:
    def _make(
        session_expiration: int = 0,
        public_key_id: str = "LTRSA.test-key",
    ) -> KeyPairCredential:
        return KeyPairCredential(
            public_key_id=public_key_id,
            private_key=private_key_pem,
            session_expiration=session_expiration,
        )

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session_response() -> Callable[[str, str], CommonResponse]:
    return _session_response


@pytest.fixture
def make_transport() -> Callable[[], FakeTransport]:
    return FakeTransport
