"""Mock runner registry and per-instance service state."""

from .registry import MockRegistry, RegisteredRunner, ServiceState, split_labels

__all__ = [
    "MockRegistry",
    "RegisteredRunner",
    "ServiceState",
    "split_labels",
]
