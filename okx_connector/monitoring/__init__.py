"""Monitoring: logging setup."""

from okx_connector.monitoring.logs import setup_logging

__all__ = ["setup_logging"]
