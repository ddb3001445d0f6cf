"""
OKX Connector

Signs and sends authenticated requests to the OKX REST API.

Components:
- Config: Credentials, endpoint, server and logging settings (YAML + env)
- Signer: OKX pre-hash message + HMAC-SHA256/base64 signature
- OkxClient: Signed GET/POST round-trips returning ExchangeResponse values
- Server: Minimal FastAPI app that issues the startup fetch
"""

__version__ = "0.1.0"

from okx_connector.auth.signer import SignedEnvelope, Signer
from okx_connector.core.config import Config, CredentialsConfig
from okx_connector.exceptions import ConfigError, OkxConnectorError, SigningError
from okx_connector.transport.client import OkxClient
from okx_connector.transport.responses import ExchangeResponse

__all__ = [
    "Config",
    "ConfigError",
    "CredentialsConfig",
    "ExchangeResponse",
    "OkxClient",
    "OkxConnectorError",
    "SignedEnvelope",
    "Signer",
    "SigningError",
]
