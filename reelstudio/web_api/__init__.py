"""HTTP API for the studio dashboard and voice routes."""

from reelstudio.web_api.main import create_app

__all__ = ["create_app"]
