"""
Request Signer

Builds the OKX pre-signature string and signs it with HMAC-SHA256:

    message   = timestamp + METHOD + request_path + (query | body)
    signature = base64(hmac_sha256(secret_key, message))

GET params are folded in as "?" + query string, POST params as compact
JSON. The exact text that is signed is the text that goes on the wire,
so the transport must take target/body from sign_request() rather than
re-encoding params itself.
"""

import base64
import hashlib
import hmac
import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote

from okx_connector.core.config import CredentialsConfig
from okx_connector.exceptions import SigningError

SUPPORTED_METHODS = ("GET", "POST")

# Same unreserved set as Node's querystring.escape
_QUERY_SAFE = "-_.!~*'()"

# RFC 3986 path characters; httpx sends these unchanged
_PATH_RE = re.compile(r"/(?:[A-Za-z0-9\-._~!$&'()*+,;=:@/]|%[0-9A-Fa-f]{2})*")


@dataclass(frozen=True)
class SignedEnvelope:
    """Timestamp/signature pair attached to one outbound call."""

    timestamp: str  # 2024-01-01T00:00:00.000Z
    signature: str  # base64 of 32-byte digest


@dataclass(frozen=True)
class SignedRequest:
    """
    A request after signing.

    target is the path plus query string (GET) and body the JSON text
    (POST); both are the exact strings folded into the signature.
    """

    method: str
    path: str
    target: str
    body: Optional[str]
    envelope: SignedEnvelope


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a literal 'Z'."""
    if moment.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def _js_number(value: float) -> str:
    """Format a finite float the way JavaScript's Number#toString does."""
    if value == 0:
        return "0"
    _, digits, exponent = Decimal(repr(abs(value))).as_tuple()
    d = "".join(map(str, digits))
    n = exponent + len(d)  # decimal point position relative to d
    d = d.rstrip("0")
    k = len(d)
    prefix = "-" if value < 0 else ""
    if k <= n <= 21:
        return prefix + d + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + d[:n] + "." + d[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * -n + d
    e = n - 1
    mantissa = d if k == 1 else d[0] + "." + d[1:]
    return f"{prefix}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _query_value(key: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SigningError(f"param {key!r}: non-finite number {value!r}")
        return _js_number(value)
    if isinstance(value, (str, int)):
        return str(value)
    raise SigningError(f"param {key!r}: cannot encode {type(value).__name__} in a query string")


def encode_query(params: Mapping[str, Any]) -> str:
    """
    URL-encode params as key=value pairs joined by '&'.

    Pairs keep the mapping's insertion order. Lists and tuples repeat the
    key once per element. Nested mappings are rejected.
    """
    pairs = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        try:
            k = quote(str(key), safe=_QUERY_SAFE)
            for item in values:
                pairs.append(f"{k}={quote(_query_value(key, item), safe=_QUERY_SAFE)}")
        except UnicodeEncodeError as e:
            raise SigningError(f"param {key!r}: not encodable as UTF-8: {e}") from e
    return "&".join(pairs)


def serialize_body(params: Mapping[str, Any]) -> str:
    """Compact JSON in insertion order; non-ASCII text is kept as-is."""
    try:
        text = json.dumps(params, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        text.encode("utf-8")  # lone surrogates fail here, not in sign()
    except (TypeError, ValueError) as e:
        raise SigningError(f"params are not JSON-serializable: {e}") from e
    return text


def _normalize_method(method: str) -> str:
    method = method.upper()
    if method not in SUPPORTED_METHODS:
        raise SigningError(f"Unsupported method: {method} (expected GET or POST)")
    return method


def _check_path(request_path: str) -> str:
    if not _PATH_RE.fullmatch(request_path):
        raise SigningError(
            f"Invalid request path {request_path!r}: must start with '/', contain only "
            f"RFC 3986 path characters (percent-encode the rest) and no '?' or '#'"
        )
    if any(seg in (".", "..") for seg in request_path.split("/")):
        raise SigningError(f"Invalid request path {request_path!r}: dot segments are not allowed")
    return request_path


def _suffix(method: str, params: Optional[Mapping[str, Any]]) -> str:
    # None and {} both mean "no params"
    if not params:
        return ""
    if method == "GET":
        return "?" + encode_query(params)
    return serialize_body(params)


def build_message(
    timestamp: str,
    method: str,
    request_path: str,
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Build the pre-signature string.

    Args:
        timestamp: ISO-8601 timestamp (see format_timestamp)
        method: "GET" or "POST"
        request_path: API path, e.g. "/api/v5/dex/market/trades"
        params: Query params (GET) or body (POST); None for neither

    Returns:
        timestamp + method + request_path + query-or-body
    """
    method = _normalize_method(method)
    return timestamp + method + _check_path(request_path) + _suffix(method, params)


def sign(message: str, secret_key: str) -> str:
    """HMAC-SHA256 over message keyed by secret_key, base64 encoded."""
    mac = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return base64.b64encode(mac.digest()).decode("ascii")


def verify_signature(
    signature: str,
    timestamp: str,
    method: str,
    request_path: str,
    params: Optional[Mapping[str, Any]],
    secret_key: str,
) -> bool:
    """Recompute the signature the way the exchange does and compare in constant time."""
    expected = sign(build_message(timestamp, method, request_path, params), secret_key)
    return hmac.compare_digest(signature, expected)


class Signer:
    """
    Signs outbound requests with a fixed set of credentials.

    Credentials are injected once and never mutated, so a single Signer
    can be shared by any number of concurrent requests.
    """

    def __init__(
        self,
        credentials: CredentialsConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            credentials: API key, secret and passphrase
            clock: Returns the current aware datetime (default: UTC now)
        """
        self.credentials = credentials
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def timestamp(self) -> str:
        return format_timestamp(self._clock())

    def create_signature(
        self,
        method: str,
        request_path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> SignedEnvelope:
        """Sign (method, path, params) at the current instant."""
        timestamp = self.timestamp()
        message = build_message(timestamp, method, request_path, params)
        return SignedEnvelope(
            timestamp=timestamp,
            signature=sign(message, self.credentials.secret_key),
        )

    def sign_request(
        self,
        method: str,
        request_path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> SignedRequest:
        """
        Serialize params once and sign that exact text.

        Raises:
            SigningError: Unsupported method, malformed path or unserializable params
        """
        method = _normalize_method(method)
        _check_path(request_path)
        suffix = _suffix(method, params)
        timestamp = self.timestamp()
        message = timestamp + method + request_path + suffix
        envelope = SignedEnvelope(
            timestamp=timestamp,
            signature=sign(message, self.credentials.secret_key),
        )
        if method == "GET":
            return SignedRequest(method, request_path, request_path + suffix, None, envelope)
        return SignedRequest(method, request_path, request_path, suffix or None, envelope)

    def auth_headers(self, envelope: SignedEnvelope) -> Dict[str, str]:
        """OK-ACCESS-* headers for one call."""
        return {
            "OK-ACCESS-KEY": self.credentials.api_key,
            "OK-ACCESS-SIGN": envelope.signature,
            "OK-ACCESS-TIMESTAMP": envelope.timestamp,
            "OK-ACCESS-PASSPHRASE": self.credentials.passphrase,
            "Content-Type": "application/json",
        }
