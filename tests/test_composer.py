from __future__ import annotations

from datetime import datetime, timezone

import pytest

from acs_signer.composer import (
    build_string_to_sign,
    canonicalize_query,
    percent_encode,
    sign_rpc_params,
)
from acs_signer.rpc import RpcRequest
from acs_signer.signers.base import sha_hmac1


class _StaticSigner:
    def __init__(self, *, signer_type: str = "", extra: dict[str, str] | None = None) -> None:
        self._type = signer_type
        self._extra = extra or {}
        self.signed: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "HMAC-SHA1"

    @property
    def type(self) -> str:
        return self._type

    @property
    def version(self) -> str:
        return "1.0"

    def get_access_key_id(self) -> str:
        return "testid"

    def get_extra_param(self) -> dict[str, str]:
        return dict(self._extra)

    def sign(self, string_to_sign: str, secret_suffix: str) -> str:
        self.signed.append((string_to_sign, secret_suffix))
        return sha_hmac1(string_to_sign, "testsecret" + secret_suffix)

    def shutdown(self) -> None:
        return None


@pytest.mark.parametrize(
    ("raw", "encoded"),
    [
        ("a b", "a%20b"),
        ("a*b", "a%2Ab"),
        ("a~b", "a~b"),
        ("a+b", "a%2Bb"),
        ("/", "%2F"),
        ("2016-02-23T12:46:24Z", "2016-02-23T12%3A46%3A24Z"),
        ("ü", "%C3%BC"),
    ],
)
def test_percent_encode(raw: str, encoded: str) -> None:
    assert percent_encode(raw) == encoded


def test_canonicalize_query_sorts_keys() -> None:
    assert canonicalize_query({"b": "2", "a": "x y"}) == "a=x%20y&b=2"


def test_build_string_to_sign_matches_documented_example() -> None:
    params = {
        "Format": "XML",
        "AccessKeyId": "testid",
        "Action": "DescribeRegions",
        "SignatureMethod": "HMAC-SHA1",
        "SignatureNonce": "3ee8c1b8-83d3-44af-a94f-4e0ad82fd6cf",
        "SignatureVersion": "1.0",
        "Timestamp": "2016-02-23T12:46:24Z",
        "Version": "2014-05-26",
    }

    assert build_string_to_sign("get", params) == (
        "GET&%2F&AccessKeyId%3Dtestid%26Action%3DDescribeRegions%26Format%3DXML"
        "%26SignatureMethod%3DHMAC-SHA1%26SignatureNonce%3D3ee8c1b8-83d3-44af-a94f-4e0ad82fd6cf"
        "%26SignatureVersion%3D1.0%26Timestamp%3D2016-02-23T12%253A46%253A24Z"
        "%26Version%3D2014-05-26"
    )


def _request(**kwargs) -> RpcRequest:
    request = RpcRequest(
        product="Sts", version="2015-04-01", action="GenerateSessionAccessKey", **kwargs
    )
    request.add_query_param("PublicKeyId", "LTRSA.abc")
    return request


def test_sign_rpc_params_completes_common_parameters() -> None:
    signer = _StaticSigner()

    params = sign_rpc_params(
        _request(),
        signer,
        region_id="cn-hangzhou",
        clock=lambda: datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        nonce_factory=lambda: "nonce-1",
    )

    assert params["PublicKeyId"] == "LTRSA.abc"
    assert params["Version"] == "2015-04-01"
    assert params["Action"] == "GenerateSessionAccessKey"
    assert params["Format"] == "JSON"
    assert params["Timestamp"] == "2026-01-02T03:04:05Z"
    assert params["SignatureMethod"] == "HMAC-SHA1"
    assert params["SignatureVersion"] == "1.0"
    assert params["SignatureNonce"] == "nonce-1"
    assert params["AccessKeyId"] == "testid"
    assert params["RegionId"] == "cn-hangzhou"
    assert "SignatureType" not in params


def test_sign_rpc_params_signature_covers_all_other_params() -> None:
    signer = _StaticSigner(signer_type="PRIVATEKEY", extra={"SecurityToken": "tok"})

    params = sign_rpc_params(_request(region_id="cn-beijing"), signer, region_id="cn-hangzhou")

    string_to_sign, suffix = signer.signed[0]
    unsigned = {key: value for key, value in params.items() if key != "Signature"}
    assert suffix == "&"
    assert string_to_sign == build_string_to_sign("GET", unsigned)
    assert params["Signature"] == sha_hmac1(string_to_sign, "testsecret&")
    assert params["SignatureType"] == "PRIVATEKEY"
    assert params["SecurityToken"] == "tok"
    assert params["RegionId"] == "cn-beijing"


def test_sign_rpc_params_uses_fresh_nonce_per_call() -> None:
    signer = _StaticSigner()

    first = sign_rpc_params(_request(), signer)
    second = sign_rpc_params(_request(), signer)

    assert first["SignatureNonce"] != second["SignatureNonce"]
