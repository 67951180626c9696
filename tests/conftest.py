"""
Pytest configuration shared by the harness tests.

Provides a local sushi server for end-to-end scenarios.
"""

import pytest

from tests.framework.http_drivers import SushiServer


@pytest.fixture(scope="session")
def sushi_server():
    """A sushi shop listening on a free local port for the whole session."""
    with SushiServer() as server:
        yield server


@pytest.fixture
def base_url(sushi_server):
    return sushi_server.base_url
