"""
Response data structures (ExchangeResponse).
"""

from dataclasses import dataclass
from typing import Any, Literal, Optional


@dataclass
class ExchangeResponse:
    """
    Result of one authenticated round-trip.

    Outcomes:
    - parsed: body was JSON, available in `data`
    - parse_error: body was not JSON, `raw` holds it unmodified
    - network_error: no response (DNS, refused, TLS, timeout), see `error`
    """

    method: str
    path: str
    outcome: Literal["parsed", "parse_error", "network_error"]
    status_code: Optional[int] = None
    data: Any = None
    raw: Optional[str] = None  # Response body text as received
    error: Optional[str] = None  # Diagnostic for parse/network failures

    @property
    def ok(self) -> bool:
        """True if the body parsed and HTTP status was 2xx."""
        return (
            self.outcome == "parsed"
            and self.status_code is not None
            and 200 <= self.status_code < 300
        )

    @property
    def api_code(self) -> Optional[str]:
        """OKX envelope code ("0" = success), if present."""
        if self.outcome == "parsed" and isinstance(self.data, dict) and "code" in self.data:
            return str(self.data["code"])
        return None

    @property
    def api_error(self) -> bool:
        """True if the exchange answered with a non-zero code."""
        code = self.api_code
        return code is not None and code != "0"
