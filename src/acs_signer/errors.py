"""Error taxonomy for session-credential signing."""

from __future__ import annotations


class SignerError(Exception):
    """Base class for signer failures; ``code`` is machine-readable."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class ConstructionError(SignerError):
    """Raised when a signer or credential cannot be built from its inputs."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="invalid_param")


class ServerError(SignerError):
    """Raised when the token service answers with a non-200 status."""

    def __init__(self, http_status: int, body: str, message: str) -> None:
        super().__init__(
            f"{message}: status={http_status}, body={body[:512]}",
            code="server_error",
        )
        self.http_status = http_status
        self.body = body


class ParseError(SignerError):
    """Raised when a refresh response body is not valid JSON."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="parse_error")


class MalformedResponseError(SignerError):
    """Raised when a refresh response lacks the session key fields."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message, code="malformed_response")
        self.missing = missing


class TransportError(SignerError):
    """Raised when the HTTP exchange itself fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="transport_error")


class CredentialUnavailableError(SignerError):
    """Raised when signing is requested and no session credential can be obtained."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="no_credential")
