"""
Exception hierarchy for the OKX connector.

Only failures the caller must act on synchronously are exceptions.
Network and response-parse failures are reported as ExchangeResponse
values by the transport layer.
"""


class OkxConnectorError(Exception):
    """Base exception for all connector errors."""

    pass


class ConfigError(OkxConnectorError):
    """
    Raised when configuration is incomplete or invalid at startup.

    Example:
        >>> errors = config.validate()
        >>> if errors:
        ...     raise ConfigError("; ".join(errors))
    """

    pass


class SigningError(OkxConnectorError, ValueError):
    """
    Raised when a request cannot be turned into a signed message.

    Covers unsupported HTTP methods and params that cannot be
    serialized (non-JSON values in a POST body, nested mappings in a
    GET query string).
    """

    pass
