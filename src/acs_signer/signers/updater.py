"""Refresh policy and single-flight guard for session credentials."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from acs_signer.credentials.models import SessionCredential
from acs_signer.errors import SignerError
from acs_signer.utils.time import ensure_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_IN_ADVANCE_SCALE = 0.95


class CredentialUpdater:
    """Decides when a session credential is due and serializes refreshes.

    A credential is due once ``duration * in_advance_scale`` seconds have
    passed since it was obtained. Callers queued behind a refresh re-check
    after taking the lock, so a burst of callers triggers one exchange.
    """

    def __init__(
        self,
        duration_seconds: int,
        *,
        in_advance_scale: float = DEFAULT_IN_ADVANCE_SCALE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._duration_seconds = duration_seconds
        self._in_advance_scale = in_advance_scale or DEFAULT_IN_ADVANCE_SCALE
        self._clock = clock
        self._lock = threading.Lock()
        self.last_error: SignerError | None = None

    @property
    def refresh_after_seconds(self) -> float:
        return self._duration_seconds * self._in_advance_scale

    def needs_update(self, credential: SessionCredential | None) -> bool:
        if credential is None:
            return True
        elapsed = (ensure_utc(self._clock()) - ensure_utc(credential.obtained_at)).total_seconds()
        return elapsed >= self.refresh_after_seconds

    def update(
        self,
        current: Callable[[], SessionCredential | None],
        refresh: Callable[[], SessionCredential],
    ) -> SessionCredential:
        """Return a fresh credential, calling ``refresh`` only when still due."""
        with self._lock:
            credential = current()
            if credential is not None and not self.needs_update(credential):
                return credential

            try:
                credential = refresh()
            except SignerError as exc:
                self.last_error = exc
                logger.warning("Session credential refresh failed: %s (%s)", exc, exc.code)
                raise

            self.last_error = None
            return credential
