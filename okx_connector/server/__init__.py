"""Web server: FastAPI app factory."""

from okx_connector.server.app import create_app

__all__ = ["create_app"]
