"""Signer capability interface and signature primitives."""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from acs_signer.errors import ConstructionError

_PEM_MARKER = "-----BEGIN"


@runtime_checkable
class Signer(Protocol):
    """Turns a canonical string-to-sign into a transmittable signature."""

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> str: ...

    @property
    def version(self) -> str: ...

    def get_access_key_id(self) -> str: ...

    def get_extra_param(self) -> dict[str, str]: ...

    def sign(self, string_to_sign: str, secret_suffix: str) -> str: ...

    def shutdown(self) -> None: ...


@runtime_checkable
class SnapshotSigner(Protocol):
    """Signer with rotating key material.

    ``snapshot`` returns a signer pinned to the current key, so the access
    key id and the signature of one request come from the same key.
    """

    def snapshot(self) -> Signer: ...


def sha_hmac1(source: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), source.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def load_rsa_private_key(private_key: str) -> rsa.RSAPrivateKey:
    """Load an RSA key from PEM text or a bare base64 PKCS#8 DER body."""
    text = private_key.strip()
    try:
        if text.startswith(_PEM_MARKER):
            key = serialization.load_pem_private_key(text.encode("ascii"), password=None)
        else:
            der = base64.b64decode("".join(text.split()), validate=True)
            key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError) as exc:
        raise ConstructionError(f"Invalid private key material: {exc}") from exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConstructionError("Key pair signing requires an RSA private key")
    return key


def sha256_with_rsa(source: str, private_key: rsa.RSAPrivateKey) -> str:
    signature = private_key.sign(source.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    return base64.b64encode(signature).decode("ascii")
