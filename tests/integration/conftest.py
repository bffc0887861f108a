"""Integration-test fixtures for the HTTP API."""

from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient

from reelstudio.config import StudioConfig
from reelstudio.telemetry.logger import EventLogger
from reelstudio.web_api.main import create_app


@pytest.fixture
def log_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def api_client(
    studio_config: StudioConfig, log_sink: io.StringIO, no_sleep: list[float]
) -> TestClient:
    """Test client for an app wired to temporary storage and a captured log sink."""

    app = create_app(studio_config, logger=EventLogger(sink=log_sink))
    return TestClient(app)
