"""Core system components: config."""

from okx_connector.core.config import (
    ApiConfig,
    Config,
    CredentialsConfig,
    MonitoringConfig,
    ServerConfig,
    StartupFetchConfig,
)

__all__ = [
    "ApiConfig",
    "Config",
    "CredentialsConfig",
    "MonitoringConfig",
    "ServerConfig",
    "StartupFetchConfig",
]
