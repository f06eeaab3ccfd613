"""
Shared test fixtures and helpers for the Routemark test suite.
"""

import sys
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from routemark.bootstrap import Setup
from routemark.server.request import Request
from routemark.testing import TestClient, make_test_scope

from fixtures_app.engines import SiteTemplates

CONTROLLERS = "fixtures_app.controllers"
FILTERS = "fixtures_app.filters"
SOCKETS = "fixtures_app.sockets"


# ============================================================================
# Request Helpers
# ============================================================================


def make_request(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
    body: bytes = b"",
) -> Request:
    """Build a Request without going through the ASGI app."""
    scope = make_test_scope(method=method, path=path, query_string=query_string, headers=headers)
    return Request(scope, body)


def build_setup(engine=SiteTemplates, main_template="main.html", **kwargs) -> Setup:
    setup = Setup(**kwargs)
    setup.init(
        CONTROLLERS, FILTERS, SOCKETS,
        max_threads=4, min_threads=1, idle_timeout_ms=5000,
        template_engine=engine, main_template=main_template,
    )
    return setup


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def setup():
    setup = build_setup()
    yield setup
    setup.service.pool.shutdown()


@pytest.fixture
def client(setup):
    return TestClient(setup.service)
