"""Credential records used by the key-pair signers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from acs_signer.utils.masking import mask_value
from acs_signer.utils.time import utc_now


@dataclass(frozen=True)
class KeyPairCredential:
    """Long-lived RSA key pair registered with the token service.

    ``private_key`` is either a PEM block or the bare base64 body of a
    PKCS#8 DER key, the form the console hands out.
    """

    public_key_id: str
    private_key: str = field(repr=False)
    session_expiration: int = 0

    def __repr__(self) -> str:
        return (
            f"KeyPairCredential(public_key_id={mask_value(self.public_key_id, visible=8)}, "
            f"session_expiration={self.session_expiration})"
        )


@dataclass(frozen=True)
class SessionCredential:
    """Immutable short-lived session key pair."""

    access_key_id: str
    access_key_secret: str
    expiration: datetime
    obtained_at: datetime = field(default_factory=utc_now)

    def __repr__(self) -> str:
        return (
            f"SessionCredential(access_key_id={mask_value(self.access_key_id, visible=8)}, "
            f"expiration={self.expiration.isoformat()})"
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expiration
