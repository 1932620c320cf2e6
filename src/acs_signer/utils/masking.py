"""Masking for refresh payloads and credential reprs.

``redact_sensitive_fields`` prepares decoded STS responses for debug logging;
``mask_value`` keeps a short prefix of identifiers so log lines stay
correlatable without exposing them.
"""

from __future__ import annotations

# Matched against lower-cased keys with underscores removed.
_SECRET_MARKERS = ("secret", "privatekey", "password", "token", "signature")
_KEY_ID_MARKERS = ("accesskeyid", "publickeyid")

_KEY_ID_VISIBLE = 8


def mask_value(value: str | None, *, visible: int = 4, mask: str = "***") -> str:
    """Keep the first ``visible`` characters of ``value`` and mask the rest."""
    if not value:
        return ""
    if len(value) <= visible:
        return mask
    return f"{value[:visible]}{mask}"


def redact_sensitive_fields(payload: object, *, mask: str = "***") -> object:
    """Return a copy of a decoded STS payload that is safe to log.

    Secret-bearing keys such as ``SessionAccessKeySecret`` are replaced by
    ``mask``. Key ids such as ``SessionAccessKeyId`` keep an 8 character
    prefix, matching the credential reprs, so a refresh can be followed
    across log lines.
    """
    if isinstance(payload, list):
        return [redact_sensitive_fields(item, mask=mask) for item in payload]
    if not isinstance(payload, dict):
        return payload

    redacted: dict[object, object] = {}
    for key, value in payload.items():
        normalized = str(key).lower().replace("_", "")
        if any(marker in normalized for marker in _SECRET_MARKERS):
            redacted[key] = mask
        elif isinstance(value, str) and any(marker in normalized for marker in _KEY_ID_MARKERS):
            redacted[key] = mask_value(value, visible=_KEY_ID_VISIBLE, mask=mask)
        else:
            redacted[key] = redact_sensitive_fields(value, mask=mask)
    return redacted
