"""Discovery of host adapters: built-in hosts and ``celsweep.adapters`` entry points."""

from __future__ import annotations

import logging
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from celsweep.adapters.base import HostAdapter
from celsweep.errors import AdapterNotFoundError

LOG = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "celsweep.adapters"

_REGISTERED_ADAPTERS: Dict[str, Type[HostAdapter]] = {}
_ENTRYPOINTS_LOADED = False


def register_adapter(adapter_cls: Type[HostAdapter]) -> Type[HostAdapter]:
    """Class decorator registering a host adapter under its lower-cased ``name``."""
    key = adapter_cls.name.lower()
    current = _REGISTERED_ADAPTERS.get(key)
    if current is not None and current is not adapter_cls:
        LOG.warning("Adapter '%s' from %s replaces %s.", key, adapter_cls.__module__, current.__module__)
    adapter_cls.name = key
    _REGISTERED_ADAPTERS[key] = adapter_cls
    return adapter_cls


def _adapter_class(target: Any) -> Optional[Type[HostAdapter]]:
    """Accept an adapter class, or a zero-argument factory returning one."""
    if not isinstance(target, type) and callable(target):
        target = target()
    if isinstance(target, type) and issubclass(target, HostAdapter):
        return target
    return None


def load_adapter_plugins(force: bool = False) -> None:
    """Register the adapters published by installed distributions, once per process."""
    global _ENTRYPOINTS_LOADED
    if _ENTRYPOINTS_LOADED and not force:
        return
    _ENTRYPOINTS_LOADED = True

    for entry in metadata.entry_points(group=ENTRYPOINT_GROUP):
        try:
            adapter_cls = _adapter_class(entry.load())
        except Exception as exc:  # third-party import failure
            LOG.warning("Skipping adapter plugin '%s': %s", entry.name, exc)
            continue
        if adapter_cls is None:
            LOG.warning("Adapter plugin '%s' is not a HostAdapter.", entry.name)
            continue
        register_adapter(adapter_cls)


def available_adapters() -> List[str]:
    """Return the registered adapter names, built-ins first."""
    load_adapter_plugins()
    return list(_REGISTERED_ADAPTERS)


def create_adapter(name: str) -> HostAdapter:
    """Instantiate the adapter registered under ``name``."""
    load_adapter_plugins()
    try:
        adapter_cls = _REGISTERED_ADAPTERS[name.lower()]
    except KeyError as exc:
        known = ", ".join(_REGISTERED_ADAPTERS) or "none"
        raise AdapterNotFoundError(f"Unknown adapter '{name}' (available: {known}).") from exc
    return adapter_cls()


def detect_adapter(scene: str | Path) -> Optional[HostAdapter]:
    """Return a fresh adapter able to open ``scene``, or None when no host claims it."""
    load_adapter_plugins()
    path = Path(scene)
    for name, adapter_cls in list(_REGISTERED_ADAPTERS.items()):
        adapter = adapter_cls()
        try:
            claimed = adapter.detect(path)
        except OSError as exc:
            LOG.debug("Adapter '%s' could not inspect %s: %s", name, path, exc)
            continue
        if claimed:
            LOG.debug("Adapter '%s' claims %s", name, path)
            return adapter
    return None


# Importing the built-in hosts registers them.
from . import memory as _memory  # noqa: E402,F401


__all__ = [
    "ENTRYPOINT_GROUP",
    "available_adapters",
    "create_adapter",
    "detect_adapter",
    "load_adapter_plugins",
    "register_adapter",
]
