"""Transport: signed GET/POST round-trips to the OKX REST API."""

from okx_connector.transport.client import OkxClient
from okx_connector.transport.responses import ExchangeResponse

__all__ = ["OkxClient", "ExchangeResponse"]
