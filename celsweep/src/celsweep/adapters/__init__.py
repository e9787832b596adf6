"""Host adapter exports for celsweep."""

from .base import HostAdapter
from .registry import (
    available_adapters,
    create_adapter,
    detect_adapter,
    load_adapter_plugins,
    register_adapter,
)
from .memory import SnapshotHost

__all__ = [
    "HostAdapter",
    "SnapshotHost",
    "available_adapters",
    "create_adapter",
    "detect_adapter",
    "load_adapter_plugins",
    "register_adapter",
]
