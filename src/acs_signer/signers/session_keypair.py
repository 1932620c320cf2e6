"""Key-pair signer backed by a rotating session access key.

The long-lived RSA key pair is never used to sign ordinary requests. It is
exchanged through STS ``GenerateSessionAccessKey`` for a session access key
id/secret, and requests are signed with HMAC-SHA1 over that secret. The
exchange itself is signed by :class:`KeyPairBootstrapSigner`, since no
session key exists yet at that point.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

import jmespath

from acs_signer.credentials.models import KeyPairCredential, SessionCredential
from acs_signer.errors import (
    ConstructionError,
    CredentialUnavailableError,
    MalformedResponseError,
    ParseError,
    ServerError,
    SignerError,
)
from acs_signer.rpc import HTTPS, CommonResponse, RpcRequest
from acs_signer.signers.base import sha_hmac1
from acs_signer.signers.bootstrap import KeyPairBootstrapSigner
from acs_signer.signers.updater import DEFAULT_IN_ADVANCE_SCALE, CredentialUpdater
from acs_signer.utils.masking import redact_sensitive_fields
from acs_signer.utils.time import utc_now

if TYPE_CHECKING:
    from acs_signer.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 3600
MIN_DURATION_SECONDS = 900
MAX_DURATION_SECONDS = 3600

STS_PRODUCT = "Sts"
STS_VERSION = "2015-04-01"
STS_ACTION = "GenerateSessionAccessKey"

_ACCESS_KEY_ID_PATH = "SessionAccessKey.SessionAccessKeyId"
_ACCESS_KEY_SECRET_PATH = "SessionAccessKey.SessionAccessKeySecret"


def resolve_session_duration(session_expiration: int) -> int:
    """Validate a requested session duration; non-positive means default."""
    if session_expiration > 0:
        if MIN_DURATION_SECONDS <= session_expiration <= MAX_DURATION_SECONDS:
            return session_expiration
        raise ConstructionError("Key Pair session duration should be in the range of 15min - 1Hr")
    return DEFAULT_DURATION_SECONDS


class SessionCredentialSigner:
    """HMAC-SHA1 signer pinned to a single session credential."""

    def __init__(self, credential: SessionCredential) -> None:
        self._credential = credential

    @property
    def name(self) -> str:
        return "HMAC-SHA1"

    @property
    def type(self) -> str:
        return ""

    @property
    def version(self) -> str:
        return "1.0"

    @property
    def credential(self) -> SessionCredential:
        return self._credential

    def get_access_key_id(self) -> str:
        return self._credential.access_key_id

    def get_extra_param(self) -> dict[str, str]:
        return {}

    def sign(self, string_to_sign: str, secret_suffix: str = "&") -> str:
        return sha_hmac1(string_to_sign, self._credential.access_key_secret + secret_suffix)

    def shutdown(self) -> None:
        return None


class SessionKeyPairSigner:
    """HMAC-SHA1 signer whose secret is a session key fetched with a key pair."""

    def __init__(
        self,
        credential: KeyPairCredential,
        transport: "Transport",
        *,
        in_advance_scale: float = DEFAULT_IN_ADVANCE_SCALE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._duration_seconds = resolve_session_duration(credential.session_expiration)
        self._credential = credential
        self._transport = transport
        self._clock = clock
        self._bootstrap = KeyPairBootstrapSigner(credential)
        self._updater = CredentialUpdater(
            self._duration_seconds,
            in_advance_scale=in_advance_scale,
            clock=clock,
        )
        self._session_credential: SessionCredential | None = None

    @property
    def name(self) -> str:
        return "HMAC-SHA1"

    @property
    def type(self) -> str:
        return ""

    @property
    def version(self) -> str:
        return "1.0"

    @property
    def duration_seconds(self) -> int:
        return self._duration_seconds

    @property
    def session_credential(self) -> SessionCredential | None:
        return self._session_credential

    @property
    def last_refresh_error(self) -> SignerError | None:
        """Error from the most recent refresh attempt, cleared on success."""
        return self._updater.last_error

    def ensure_fresh(self) -> SessionCredential:
        """Refresh the session credential if it is missing or due.

        Raises the refresh error on failure; any retained credential is left
        in place for callers that choose to fall back to it.
        """
        return self._updater.update(lambda: self._session_credential, self._refresh)

    def get_access_key_id(self) -> str:
        """Return the session access key id, refreshing it when due.

        A failed refresh is not raised while an earlier credential is still
        held: its id is returned and the error is kept in
        :attr:`last_refresh_error`. The error is raised only when no
        credential has ever been obtained.
        """
        return self._usable_credential().access_key_id

    def get_extra_param(self) -> dict[str, str]:
        return {}

    def snapshot(self) -> SessionCredentialSigner:
        """Pin the usable session credential for signing one request.

        Refresh failures are handled as in :meth:`get_access_key_id`.
        """
        return SessionCredentialSigner(self._usable_credential())

    def sign(self, string_to_sign: str, secret_suffix: str = "&") -> str:
        try:
            pinned = self.snapshot()
        except SignerError as exc:
            raise CredentialUnavailableError(
                f"No session credential available for signing: {exc}"
            ) from exc
        return pinned.sign(string_to_sign, secret_suffix)

    def build_refresh_request(self) -> RpcRequest:
        request = RpcRequest(
            product=STS_PRODUCT,
            version=STS_VERSION,
            action=STS_ACTION,
            scheme=HTTPS,
        )
        request.add_query_param("PublicKeyId", self._credential.public_key_id)
        request.add_query_param("DurationSeconds", str(self._duration_seconds))
        return request

    def refresh_api(self, request: RpcRequest) -> CommonResponse:
        return self._transport.do_action(request, self._bootstrap)

    def on_refresh_response(self, response: CommonResponse) -> SessionCredential:
        if response.http_status != 200:
            raise ServerError(
                response.http_status,
                response.content,
                "refresh session AccessKey failed",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ParseError(f"refresh session AccessKey returned invalid JSON: {exc}") from exc

        logger.debug("%s response: %s", STS_ACTION, redact_sensitive_fields(data))

        access_key_id = jmespath.search(_ACCESS_KEY_ID_PATH, data)
        access_key_secret = jmespath.search(_ACCESS_KEY_SECRET_PATH, data)
        missing = tuple(
            path
            for path, value in (
                (_ACCESS_KEY_ID_PATH, access_key_id),
                (_ACCESS_KEY_SECRET_PATH, access_key_secret),
            )
            if not isinstance(value, str) or not value
        )
        if missing:
            raise MalformedResponseError(
                f"refresh session AccessKey response is missing {', '.join(missing)}",
                missing=missing,
            )

        obtained_at = self._clock()
        credential = SessionCredential(
            access_key_id=access_key_id,
            access_key_secret=access_key_secret,
            expiration=obtained_at + timedelta(seconds=self._duration_seconds),
            obtained_at=obtained_at,
        )
        self._session_credential = credential
        logger.info("Session credential refreshed: %r", credential)
        return credential

    def shutdown(self) -> None:
        return None

    def _refresh(self) -> SessionCredential:
        request = self.build_refresh_request()
        response = self.refresh_api(request)
        return self.on_refresh_response(response)

    def _usable_credential(self) -> SessionCredential:
        try:
            return self.ensure_fresh()
        except SignerError:
            retained = self._session_credential
            if retained is None or not retained.access_key_id:
                raise
            logger.warning(
                "Reusing previous session credential after failed refresh: %r (expired=%s)",
                retained,
                retained.is_expired(self._clock()),
            )
            return retained
