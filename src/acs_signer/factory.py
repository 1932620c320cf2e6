"""Wire configuration, credential, transport and signer together."""

from __future__ import annotations

import logging
from functools import lru_cache

from acs_signer.config import Settings, load_settings
from acs_signer.credentials.loader import load_key_pair_credential
from acs_signer.signers.session_keypair import SessionKeyPairSigner
from acs_signer.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


def create_session_signer(
    settings: Settings | None = None,
    transport: Transport | None = None,
) -> SessionKeyPairSigner:
    settings = settings or load_settings()
    credential = load_key_pair_credential(settings)
    if transport is None:
        transport = HttpxTransport.from_settings(settings.sts)
    return SessionKeyPairSigner(
        credential,
        transport,
        in_advance_scale=settings.sts.refresh_in_advance_scale,
    )


@lru_cache(maxsize=1)
def get_session_signer() -> SessionKeyPairSigner:
    signer = create_session_signer()
    logger.info("Session key pair signer ready (duration=%ss)", signer.duration_seconds)
    return signer
