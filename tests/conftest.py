"""
Pytest configuration and shared fixtures for runner-mock tests.
"""

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from runner_mock.application import MockApplication  # noqa: E402
from runner_mock.config import MockServiceConfig, RegistryConfig, ServerConfig  # noqa: E402
from runner_mock.logging import ROOT_LOGGER  # noqa: E402

PAT_HEADER = "Bearer ghp_abc123"
FINE_GRAINED_HEADER = "Bearer github_pat_11ABCDEFG"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config() -> MockServiceConfig:
    """Default configuration on an ephemeral port."""
    return MockServiceConfig(server=ServerConfig(port=0, poll_interval=0.05))


@pytest.fixture
def partitioned_config() -> MockServiceConfig:
    """Configuration with per-scope runner listings."""
    return MockServiceConfig(
        server=ServerConfig(port=0, poll_interval=0.05),
        registry=RegistryConfig(partition_by_scope=True),
    )


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def application(config: MockServiceConfig) -> MockApplication:
    """Fresh application with empty state."""
    return MockApplication(config)


@pytest.fixture
def client(application: MockApplication) -> TestClient:
    """HTTP client talking to the application in-process."""
    return TestClient(application.app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header accepted by the control-plane routes."""
    return {"Authorization": PAT_HEADER}


@pytest.fixture
def registration_headers(client: TestClient, auth_headers: dict[str, str]) -> dict[str, str]:
    """Authorization header carrying a token issued by the service."""
    response = client.post(
        "/orgs/acme/actions/runners/registration-token", headers=auth_headers
    )
    return {"Authorization": f"Bearer {response.json()['token']}"}


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Drop handlers installed by configure_logging between tests."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Tests that open real sockets")
    config.addinivalue_line("markers", "property: Property-based tests")
