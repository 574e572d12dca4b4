"""In-memory registry of mock runners.

Holds the mutable ServiceState of one service instance: the registered
runners in registration order, the request counter and the start time.
Every mutation goes through a single lock.
"""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from runner_mock.config.models import RegistryConfig
from runner_mock.types import RunnerStatus


def _utcnow() -> datetime:
    return datetime.now(UTC)


def split_labels(labels: str | list[str] | None) -> list[str]:
    """Split a comma-separated label string.

    Items are kept as given (no trimming); an empty or missing value yields
    no labels. A list is copied unchanged.
    """
    if labels is None:
        return []
    if isinstance(labels, list):
        return list(labels)
    if labels == "":
        return []
    return labels.split(",")


@dataclass
class RegisteredRunner:
    """Runner record returned by the listing routes.

    Attributes:
        id: Random integer from the configured range
        name: Caller-supplied name (duplicates allowed)
        os: Fixed mocked operating system
        status: Always online at creation
        labels: Labels in the order they were given
        busy: Always False at creation
        created_at: Registration time (UTC)
        scope: org or owner/repo used when partitioning is enabled
    """

    id: int
    name: str
    os: str
    labels: list[str] = field(default_factory=list)
    status: RunnerStatus = RunnerStatus.ONLINE
    busy: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    scope: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API representation."""
        return {
            "id": self.id,
            "name": self.name,
            "os": self.os,
            "status": self.status.value,
            "busy": self.busy,
            "labels": list(self.labels),
            "created_at": self.created_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }


@dataclass
class ServiceState:
    """Process-lifetime state owned by one service instance."""

    registered_runners: list[RegisteredRunner] = field(default_factory=list)
    request_count: int = 0
    start_time: datetime = field(default_factory=_utcnow)


class MockRegistry:
    """Registry of mock runners plus the request counter.

    Registrations under different orgs/repos share one list unless
    ``partition_by_scope`` is enabled in RegistryConfig.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        state: ServiceState | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            config: Registry configuration
            state: Existing state to wrap (a new one is created by default)
            rng: Random source for runner ids
        """
        self.config = config or RegistryConfig()
        self.state = state or ServiceState()
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    @property
    def start_time(self) -> datetime:
        return self.state.start_time

    @property
    def request_count(self) -> int:
        with self._lock:
            return self.state.request_count

    def count_request(self) -> int:
        """Record one inbound request and return the new count."""
        with self._lock:
            self.state.request_count += 1
            return self.state.request_count

    def register(
        self,
        name: str,
        labels_csv: str | list[str] | None = "",
        scope: str | None = None,
    ) -> RegisteredRunner:
        """Register a runner and append it to the registry.

        Args:
            name: Runner name
            labels_csv: Comma-separated labels (or an already split list)
            scope: org or owner/repo the runner registered under

        Returns:
            The new RegisteredRunner
        """
        with self._lock:
            runner = RegisteredRunner(
                id=self._rng.randint(self.config.id_min, self.config.id_max),
                name=name,
                os=self.config.runner_os,
                labels=split_labels(labels_csv),
                created_at=_utcnow(),
                scope=scope,
            )
            self.state.registered_runners.append(runner)
            return runner

    def list(self, scope: str | None = None) -> tuple[int, list[RegisteredRunner]]:
        """List runners in registration order.

        Args:
            scope: Only honored when partition_by_scope is enabled

        Returns:
            Tuple of (count, runners)
        """
        with self._lock:
            runners = list(self.state.registered_runners)

        if self.config.partition_by_scope and scope is not None:
            runners = [r for r in runners if r.scope == scope]

        return len(runners), runners

    def reset(self) -> None:
        """Clear all runners and zero the request counter."""
        with self._lock:
            self.state.registered_runners.clear()
            self.state.request_count = 0

    def uptime(self, now: datetime | None = None) -> timedelta:
        """Time elapsed since the service started."""
        return (now or _utcnow()) - self.state.start_time

    def snapshot(self) -> dict[str, int]:
        """Counter and runner total read under one lock."""
        with self._lock:
            return {
                "request_count": self.state.request_count,
                "registered_runners": len(self.state.registered_runners),
            }
