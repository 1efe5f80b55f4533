"""Duo Admin API request signing.

Every request carries ``Authorization: Basic base64(ikey:hexsig)`` where
``hexsig`` is an HMAC-SHA512 over a five-line canonical string:

    date
    METHOD
    host
    /uri/path
    canonical=query&string

The construction must match Duo byte for byte.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Mapping, Optional, Sequence
from urllib.parse import urlencode

QueryParams = Mapping[str, Sequence[str]]


def canon_params(params: Optional[QueryParams]) -> str:
    """Sort keys and each key's values, form-encode, and escape spaces as %20."""
    if not params:
        return ""
    pairs = [
        (key, value)
        for key in sorted(params)
        for value in sorted(params[key])
    ]
    # Duo wants %XX escaping, never '+'
    return urlencode(pairs).replace("+", "%20")


def canonicalize(
    method: str,
    host: str,
    uri: str,
    params: Optional[QueryParams],
    date: str,
) -> str:
    return "\n".join([
        date,
        method.upper(),
        host.lower(),
        uri,
        canon_params(params),
    ])


def sign(
    integration_key: str,
    secret_key: str,
    method: str,
    host: str,
    uri: str,
    date: str,
    params: Optional[QueryParams] = None,
) -> str:
    """Return the Authorization header value for one request."""
    canon = canonicalize(method, host, uri, params, date)
    sig = hmac.new(
        secret_key.encode("utf-8"),
        canon.encode("utf-8"),
        hashlib.sha512,
    ).hexdigest()
    auth = f"{integration_key}:{sig}"
    return "Basic " + base64.b64encode(auth.encode("utf-8")).decode("ascii")
