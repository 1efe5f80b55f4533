"""Opaque, per-resource-type pagination tokens.

A token carries the Duo offset for exactly one resource type. Parsing a token
for a different resource type is an error, so listings that share an endpoint
never pick up each other's offsets.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass

from duo_sync.errors import PaginationError


@dataclass(frozen=True)
class Cursor:
    resource_type: str
    offset: str = ""

    def page_offset(self) -> str:
        """Offset to request; the first page is "0"."""
        return self.offset or "0"

    def next_token(self, next_offset: str) -> str:
        """Token for the page after this one, or "" when Duo reported no more pages."""
        if not next_offset:
            return ""
        return encode_token(self.resource_type, next_offset)


def encode_token(resource_type: str, offset: str) -> str:
    raw = json.dumps({"rt": resource_type, "offset": offset}, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def parse_page_token(token: str, resource_type: str) -> Cursor:
    """Decode ``token`` for ``resource_type``; an empty token starts from the beginning."""
    if not token:
        return Cursor(resource_type=resource_type)

    try:
        data = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise PaginationError(f"malformed page token: {token!r}") from exc
    if not isinstance(data, dict):
        raise PaginationError(f"malformed page token: {token!r}")

    owner = data.get("rt")
    if owner != resource_type:
        raise PaginationError(
            f"page token belongs to resource type {owner!r}, not {resource_type!r}"
        )
    return Cursor(resource_type=resource_type, offset=str(data.get("offset") or ""))
