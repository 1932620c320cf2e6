"""Build a key-pair credential from configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from acs_signer.config import Settings
from acs_signer.credentials.models import KeyPairCredential
from acs_signer.errors import ConstructionError

logger = logging.getLogger(__name__)


def load_key_pair_credential(settings: Settings) -> KeyPairCredential:
    key_pair = settings.key_pair
    if not key_pair.public_key_id:
        raise ConstructionError("ALIBABA_CLOUD_PUBLIC_KEY_ID is required for key pair signing")
    if not key_pair.private_key_file:
        raise ConstructionError(
            "ALIBABA_CLOUD_PRIVATE_KEY_FILE is required for key pair signing"
        )

    path = Path(key_pair.private_key_file)
    try:
        private_key = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConstructionError(f"Cannot read private key file {path}: {exc}") from exc
    if not private_key:
        raise ConstructionError(f"Private key file {path} is empty")

    logger.info("Loaded key pair credential from %s", path)
    return KeyPairCredential(
        public_key_id=key_pair.public_key_id,
        private_key=private_key,
        session_expiration=key_pair.session_expiration,
    )
