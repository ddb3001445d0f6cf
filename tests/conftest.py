"""Shared fixtures: fixed credentials and a frozen clock."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import respx

from okx_connector.auth.signer import Signer
from okx_connector.core.config import ApiConfig, CredentialsConfig

BASE_URL = "https://web3.okx.com"
FIXED_NOW = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
FIXED_TS = "2024-01-01T00:00:00.123Z"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OKX_API_KEY", "OKX_SECRET_KEY", "OKX_API_PASSPHRASE", "OKX_BASE_URL", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _isolate_respx_global_router():
    # Routes registered on the global respx router must not leak between tests.
    respx.mock.snapshot()
    yield
    respx.mock.rollback()
    respx.mock.reset()


@pytest.fixture()
def credentials() -> CredentialsConfig:
    return CredentialsConfig(api_key="test-key", secret_key="test-secret", passphrase="test-pass")


@pytest.fixture()
def signer(credentials: CredentialsConfig) -> Signer:
    return Signer(credentials, clock=lambda: FIXED_NOW)


@pytest.fixture()
def api_config() -> ApiConfig:
    return ApiConfig(base_url=BASE_URL, timeout_sec=5.0)
