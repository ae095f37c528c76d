"""Pytest configuration and fixtures."""
import logging
import os
from unittest.mock import Mock

import pytest

from tests.helpers import API_KEY, MAINNET, make_response

# Set test environment variables
os.environ["FLARE_NODES_ENV"] = "test"
os.environ["FLARE_NODES_LOG_LEVEL"] = "WARNING"
os.environ.pop("FLARE_NODES_API_KEY", None)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Every test sees settings built from its own environment."""
    from src.flare_nodes.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def session():
    """Mocked requests session; answers 200 {"ok": true} unless told otherwise."""
    mock_session = Mock()
    mock_session.request.return_value = make_response(200, {"ok": True})
    return mock_session


@pytest.fixture
def credentials():
    return {"apiKey": API_KEY, "baseUrl": MAINNET}


@pytest.fixture
def make_node(session, credentials):
    """Factory for a FlareNetworkNode wired to the mocked session."""
    from nodepacks.flare.node import FlareNetworkNode
    from src.node_sdk.basenode import NodeExecutionContext
    from src.node_sdk.http import HttpClient

    def _make(parameters, items=None, continue_on_fail=False, creds=None):
        node = FlareNetworkNode()
        node.set_context(
            NodeExecutionContext(
                parameters=parameters,
                credentials={"flareNetworkApi": credentials if creds is None else creds},
                input_data=[{"json": {}}] if items is None else items,
                continue_on_fail=continue_on_fail,
                http_client=HttpClient(timeout=5, session=session),
            )
        )
        return node

    return _make
