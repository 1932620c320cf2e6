"""RPC-style signature composition.

Completes the common RPC parameters for a request, canonicalizes them and
adds the ``Signature`` produced by the given signer.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, Mapping
from urllib.parse import quote

from acs_signer.rpc import RpcRequest
from acs_signer.signers.base import Signer, SnapshotSigner
from acs_signer.utils.time import format_iso8601, utc_now


def percent_encode(value: str) -> str:
    """RFC 3986 encoding: only unreserved characters stay literal."""
    return quote(str(value), safe="-_.~")


def canonicalize_query(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in sorted(params.items())
    )


def build_string_to_sign(method: str, params: Mapping[str, str]) -> str:
    return "&".join(
        [method.upper(), percent_encode("/"), percent_encode(canonicalize_query(params))]
    )


def _new_nonce() -> str:
    return uuid.uuid4().hex


def sign_rpc_params(
    request: RpcRequest,
    signer: Signer,
    *,
    region_id: str | None = None,
    clock: Callable[[], datetime] = utc_now,
    nonce_factory: Callable[[], str] = _new_nonce,
) -> dict[str, str]:
    """Return the full, signed query parameter set for ``request``."""
    if isinstance(signer, SnapshotSigner):
        signer = signer.snapshot()

    params = dict(request.query_params)
    params.update(
        {
            "Version": request.version,
            "Action": request.action,
            "Format": request.accept_format,
            "Timestamp": format_iso8601(clock()),
            "SignatureMethod": signer.name,
            "SignatureVersion": signer.version,
            "SignatureNonce": nonce_factory(),
            "AccessKeyId": signer.get_access_key_id(),
        }
    )
    if signer.type:
        params["SignatureType"] = signer.type

    region = request.region_id or region_id
    if region and "RegionId" not in params:
        params["RegionId"] = region

    params.update(signer.get_extra_param())

    string_to_sign = build_string_to_sign(request.method, params)
    params["Signature"] = signer.sign(string_to_sign, "&")
    return params
