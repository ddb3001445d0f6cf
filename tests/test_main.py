"""Tests for the CLI entry point."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from okx_connector import main as main_module
from okx_connector.core.config import MonitoringConfig
from okx_connector.monitoring.logs import setup_logging


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    yield
    # main() configures the package logger; undo it for later tests
    logger = logging.getLogger("okx_connector")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_exits_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    with pytest.raises(SystemExit) as exc:
        main_module.main([])

    assert exc.value.code == 1
    assert calls == []


def test_exits_on_non_integer_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OKX_API_KEY", "k")
    monkeypatch.setenv("OKX_SECRET_KEY", "s")
    monkeypatch.setenv("OKX_API_PASSPHRASE", "p")
    monkeypatch.setenv("PORT", "abc")
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    with pytest.raises(SystemExit) as exc:
        main_module.main([])

    assert exc.value.code == 1
    assert calls == []


def test_serves_with_cli_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OKX_API_KEY", "k")
    monkeypatch.setenv("OKX_SECRET_KEY", "s")
    monkeypatch.setenv("OKX_API_PASSPHRASE", "p")
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))

    main_module.main(["--port", "9000", "--host", "127.0.0.1", "--log-level", "warning", "--no-startup-fetch"])

    assert len(calls) == 1
    app, kwargs = calls[0]
    assert app.title == "OKX Connector"
    assert kwargs == {"host": "127.0.0.1", "port": 9000, "log_level": "warning"}


def test_dotenv_is_loaded(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("OKX_API_KEY=dot-key\nOKX_SECRET_KEY=dot-secret\nOKX_API_PASSPHRASE=dot-pass\n")

    try:
        config = main_module.load_config()

        assert config.credentials.api_key == "dot-key"
        assert config.validate() == []
    finally:
        # load_dotenv writes os.environ directly
        for name in ("OKX_API_KEY", "OKX_SECRET_KEY", "OKX_API_PASSPHRASE"):
            os.environ.pop(name, None)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    logger = setup_logging(MonitoringConfig(log_level="DEBUG", log_dir=str(tmp_path / "logs")), log_name="okx_test")
    logger.debug("hello file")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "hello file" in (tmp_path / "logs" / "okx_test.log").read_text()

    # Re-running setup does not stack handlers
    setup_logging(MonitoringConfig(), log_name="okx_test")
    assert len(logger.handlers) == 1
