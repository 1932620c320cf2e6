"""Raw key-pair signer used only to fetch session credentials."""

from __future__ import annotations

from acs_signer.credentials.models import KeyPairCredential
from acs_signer.signers.base import load_rsa_private_key, sha256_with_rsa


class KeyPairBootstrapSigner:
    """Signs with the long-lived private key (SHA256withRSA)."""

    def __init__(self, credential: KeyPairCredential) -> None:
        self._credential = credential
        self._private_key = load_rsa_private_key(credential.private_key)

    @property
    def name(self) -> str:
        return "SHA256withRSA"

    @property
    def type(self) -> str:
        return "PRIVATEKEY"

    @property
    def version(self) -> str:
        return "1.0"

    def get_access_key_id(self) -> str:
        return self._credential.public_key_id

    def get_extra_param(self) -> dict[str, str]:
        return {}

    def sign(self, string_to_sign: str, secret_suffix: str = "") -> str:
        # The suffix only applies to HMAC secrets.
        return sha256_with_rsa(string_to_sign, self._private_key)

    def shutdown(self) -> None:
        return None
