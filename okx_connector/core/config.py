"""
Configuration management for the OKX connector.

Supports loading from YAML/dict and environment variable overrides.
Credentials are resolved once here and handed to the signer and
transport as an immutable value.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from okx_connector.exceptions import ConfigError


@dataclass(frozen=True)
class CredentialsConfig:
    """OKX API credentials (immutable for the process lifetime)."""

    api_key: str = ""
    secret_key: str = ""
    passphrase: str = ""

    def __repr__(self) -> str:
        secret = "'***'" if self.secret_key else "''"
        passphrase = "'***'" if self.passphrase else "''"
        return (
            f"CredentialsConfig(api_key={self.api_key!r}, "
            f"secret_key={secret}, passphrase={passphrase})"
        )


@dataclass
class ApiConfig:
    """Exchange endpoint settings."""

    base_url: str = "https://web3.okx.com"
    timeout_sec: float = 10.0  # Explicit per-request timeout (connect + read)


@dataclass
class ServerConfig:
    """Local web server."""

    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class StartupFetchConfig:
    """Signed GET issued once the server is up (DEX market trades by default)."""

    enabled: bool = True
    path: str = "/api/v5/dex/market/trades"
    params: dict[str, Any] = field(default_factory=lambda: {
        "chainIndex": 8453,  # Base
        "tokenContractAddress": "0xbc45647ea894030a4e9801ec03479739fa2485f0",
        "limit": 500,
    })


@dataclass
class MonitoringConfig:
    """Logging."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str = ""  # Empty = console only


@dataclass
class Config:
    """
    Complete connector configuration.

    Load from YAML/environment variables.

    Environment variables (override config file):
    - OKX_API_KEY: API key
    - OKX_SECRET_KEY: HMAC secret
    - OKX_API_PASSPHRASE: API passphrase
    - OKX_BASE_URL: Exchange base URL
    - PORT: Web server port
    - LOG_LEVEL: Logging level
    """

    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    startup_fetch: StartupFetchConfig = field(default_factory=StartupFetchConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    _env_errors: list = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        """Load environment variable overrides."""
        # Credentials from env (frozen section, rebuild instead of mutate)
        overrides = {}
        if os.getenv("OKX_API_KEY"):
            overrides["api_key"] = os.getenv("OKX_API_KEY", "")
        if os.getenv("OKX_SECRET_KEY"):
            overrides["secret_key"] = os.getenv("OKX_SECRET_KEY", "")
        if os.getenv("OKX_API_PASSPHRASE"):
            overrides["passphrase"] = os.getenv("OKX_API_PASSPHRASE", "")
        if overrides:
            self.credentials = replace(self.credentials, **overrides)

        if os.getenv("OKX_BASE_URL"):
            self.api.base_url = os.getenv("OKX_BASE_URL", self.api.base_url)

        if os.getenv("PORT"):
            try:
                self.server.port = int(os.getenv("PORT", ""))
            except ValueError:
                self._env_errors.append(
                    f"PORT must be an integer, got {os.getenv('PORT')!r}"
                )

        if os.getenv("LOG_LEVEL"):
            self.monitoring.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        from dataclasses import is_dataclass, fields

        def build(dc_type, data):
            if not is_dataclass(dc_type):
                return data
            kwargs = {}
            for f in fields(dc_type):
                if f.name in data:
                    val = data[f.name]
                    if hasattr(f.type, "__dataclass_fields__"):
                        kwargs[f.name] = build(f.type, val)
                    else:
                        kwargs[f.name] = val
            return dc_type(**kwargs)

        return build(cls, data)

    def validate(self) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = list(self._env_errors)

        # Missing credentials would still sign, against an empty key
        if not self.credentials.api_key:
            errors.append("OKX_API_KEY environment variable required")

        if not self.credentials.secret_key:
            errors.append("OKX_SECRET_KEY environment variable required")

        if not self.credentials.passphrase:
            errors.append("OKX_API_PASSPHRASE environment variable required")

        if not self.api.base_url.startswith("https://"):
            errors.append("api.base_url must use https://")

        if self.api.timeout_sec <= 0:
            errors.append("api.timeout_sec must be > 0")

        if not (0 < self.server.port < 65536):
            errors.append("server.port must be in [1, 65535]")

        if self.startup_fetch.enabled and not self.startup_fetch.path.startswith("/"):
            errors.append("startup_fetch.path must start with '/'")

        if self.monitoring.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            errors.append("monitoring.log_level must be DEBUG, INFO, WARNING or ERROR")

        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigError listing every validation failure."""
        errors = self.validate()
        if errors:
            raise ConfigError("; ".join(errors))
