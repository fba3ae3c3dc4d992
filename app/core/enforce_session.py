"""Bearer Credential Parsing: extracts the opaque session token from a header value.

Invariants:
    - PURE: no IO, no async
    - Exactly two space-separated parts, scheme "Bearer", non-empty token
    - Every malformed shape collapses to None (same outward signal as an unknown token)
"""

BEARER_SCHEME = "Bearer"


def extract_bearer_token(header: str | None) -> str | None:
    """Return the token of a 'Bearer <token>' header, or None."""
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        return None
    return parts[1] or None
