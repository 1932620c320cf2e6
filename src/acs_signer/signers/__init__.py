"""Signer implementations."""

from acs_signer.signers.base import Signer, SnapshotSigner, sha_hmac1, sha256_with_rsa
from acs_signer.signers.bootstrap import KeyPairBootstrapSigner
from acs_signer.signers.session_keypair import (
    DEFAULT_DURATION_SECONDS,
    SessionCredentialSigner,
    SessionKeyPairSigner,
    resolve_session_duration,
)
from acs_signer.signers.updater import CredentialUpdater

__all__ = [
    "DEFAULT_DURATION_SECONDS",
    "CredentialUpdater",
    "KeyPairBootstrapSigner",
    "SessionCredentialSigner",
    "SessionKeyPairSigner",
    "Signer",
    "SnapshotSigner",
    "resolve_session_duration",
    "sha256_with_rsa",
    "sha_hmac1",
]
