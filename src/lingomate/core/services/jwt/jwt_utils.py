"""Cheap structural checks on compact JWTs before any key is touched."""

import base64
import json
import string
from dataclasses import dataclass
from typing import Any, Final

from src.lingomate.core.errors import InvalidSignature

MAX_TOKEN_CHARS: Final = 4096
MAX_HEADER_BYTES: Final = 1024

# base64url alphabet plus the segment separator; padding is not allowed
_TOKEN_ALPHABET: Final = frozenset(string.ascii_letters + string.digits + "-_.")


@dataclass(frozen=True)
class JwtPreview:
    header: dict[str, Any]

    @property
    def alg(self) -> str | None:
        return self.header.get("alg")


def _split(token: str) -> list[str]:
    if not token or len(token) > MAX_TOKEN_CHARS:
        raise InvalidSignature("Invalid token size")
    if not _TOKEN_ALPHABET.issuperset(token):
        raise InvalidSignature("Invalid token characters")

    segments = token.split(".")
    if len(segments) != 3 or "" in segments:
        raise InvalidSignature("Invalid token format")
    return segments


def _decode_header(segment: str) -> dict[str, Any]:
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except ValueError as e:
        raise InvalidSignature("Invalid base64url in token header") from e
    if len(raw) > MAX_HEADER_BYTES:
        raise InvalidSignature("Token header too large")

    try:
        value = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidSignature("Invalid JSON in token header") from e
    if not isinstance(value, dict):
        raise InvalidSignature("Token header must be a JSON object")
    return value


def preview_jwt(token: str) -> JwtPreview:
    """Check the token's shape and decode its header without verifying anything."""
    header_seg, _, _ = _split(token)
    return JwtPreview(header=_decode_header(header_seg))
