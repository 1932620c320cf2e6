"""Credential records and loaders."""

from acs_signer.credentials.loader import load_key_pair_credential
from acs_signer.credentials.models import KeyPairCredential, SessionCredential

__all__ = [
    "KeyPairCredential",
    "SessionCredential",
    "load_key_pair_credential",
]
