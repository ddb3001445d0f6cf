"""
Main entry point for the OKX connector.

Loads .env and config, validates credentials, then serves the web app
(which issues the startup fetch once it is listening).
"""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from okx_connector.core.config import Config
from okx_connector.exceptions import ConfigError
from okx_connector.monitoring.logs import setup_logging
from okx_connector.server.app import create_app

logger = logging.getLogger("okx_connector.main")


def load_config(config_path: str = "") -> Config:
    """Load config (defaults + env overrides, or YAML + env overrides)."""
    # Load .env if present (before Config) to populate OKX_* variables
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    if config_path:
        return Config.from_yaml(config_path)
    return Config()


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="OKX signed-request connector")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--host", type=str, default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (overrides config and PORT)")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--no-startup-fetch", action="store_true", help="Skip the startup GET request")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.log_level:
        config.monitoring.log_level = args.log_level.upper()
    if args.no_startup_fetch:
        config.startup_fetch.enabled = False

    setup_logging(config.monitoring)

    # Validate config; refuse to sign with missing credentials
    try:
        config.ensure_valid()
    except ConfigError as e:
        logger.error("[Main] Configuration validation failed:")
        for err in str(e).split("; "):
            logger.error(f"  - {err}")
        sys.exit(1)

    logger.info(f"[Main] Listening at http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.monitoring.log_level.lower(),
    )


if __name__ == "__main__":
    main()
