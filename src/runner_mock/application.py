"""Mock service application - wires all components together.

Each MockApplication owns its own ServiceState, so several instances can
run side by side in one process (for example in a test session).

    app = MockApplication(load_config())
    result = app.dispatch("GET", "/health")
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from runner_mock.api import Dispatcher, DispatchResult, create_rest_app
from runner_mock.auth import AuthValidator, check_token_source
from runner_mock.config import MockServiceConfig
from runner_mock.logging import RequestLogger
from runner_mock.registry import MockRegistry, ServiceState

logger = logging.getLogger(__name__)

SERVICE_NAME = "runner-mock"


class MockApplication:
    """Mock runner-registration service.

    Components, in initialization order:

    1. ServiceState (runners, request counter, start time)
    2. MockRegistry
    3. AuthValidator
    4. Dispatcher (route table)
    5. FastAPI app forwarding every request to the dispatcher
    """

    def __init__(self, config: MockServiceConfig | None = None):
        """Initialize application.

        Args:
            config: Service configuration (defaults to MockServiceConfig())
        """
        self.config = config or MockServiceConfig()
        self.state = ServiceState()
        self.registry = MockRegistry(self.config.registry, self.state)
        self.validator = AuthValidator(enabled=self.config.auth.enabled)
        self.dispatcher = Dispatcher(self.registry, self.validator, self.config)
        self.request_logger = RequestLogger()
        self.app: FastAPI = create_rest_app(
            self.dispatcher,
            self.request_logger,
            title=SERVICE_NAME,
        )

        if not self.config.auth.enabled:
            logger.warning("Authorization is disabled; every request is accepted")

    def check(self) -> None:
        """Verify the service can issue tokens before accepting requests.

        Raises:
            MockServiceError: TOKEN_SOURCE_UNAVAILABLE
        """
        check_token_source()

    def dispatch(
        self,
        method: str,
        path: str,
        auth_header: str | None = None,
        body: bytes | None = None,
    ) -> DispatchResult:
        """Dispatch a request without going through HTTP."""
        return self.dispatcher.dispatch(method, path, auth_header, body)
