"""High-level Python API for celsweep cleanups and validation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from celsweep.adapters import HostAdapter, available_adapters, create_adapter, detect_adapter
from celsweep.core.options import PruneOptions
from celsweep.core.pipeline import CleanupPipeline, CleanupResult, CleanupStatus
from celsweep.errors import AdapterNotFoundError
from celsweep.utils import write_document
from celsweep.validate import ValidationReport, validate_scene_file as _validate_scene_file


@dataclass(frozen=True)
class PruneResult:
    """Outcome of a file-based cleanup request."""

    adapter: str
    output_path: Optional[Path]
    cleanup: CleanupResult


def open_scene(scene: Path | str, *, adapter: Optional[str] = None) -> HostAdapter:
    """Open a scene file with the named adapter, or the first adapter that detects it."""
    path = Path(scene)
    host = create_adapter(adapter) if adapter else detect_adapter(path)
    if host is None:
        raise AdapterNotFoundError(
            "Could not detect a compatible adapter for the provided scene. "
            "Specify 'adapter' to select one explicitly."
        )
    return host.load(path)


def save_scene(host: HostAdapter, out: Path | str) -> Path:
    """Write the host's current scene state to ``out`` (JSON or YAML by suffix)."""
    return write_document(host.snapshot().model_dump(mode="json"), Path(out))


def remove_unexposed_cels(
    host: HostAdapter,
    selection: Optional[Iterable[str]] = None,
    *,
    skip_confirmation: Optional[bool] = None,
    options: Optional[PruneOptions] = None,
) -> CleanupResult:
    """Remove the unexposed cels of the selected drawings (default: the host selection)."""
    return CleanupPipeline(host, options).run(selection, skip_confirmation=skip_confirmation)


def plan_cleanup(
    host: HostAdapter,
    selection: Optional[Iterable[str]] = None,
    *,
    options: Optional[PruneOptions] = None,
) -> CleanupResult:
    """Return the deletions a cleanup would perform, without confirmation or mutation."""
    pipeline = CleanupPipeline(host, options)
    tracks = pipeline.selected_tracks(selection)
    if not tracks:
        return CleanupResult(status=CleanupStatus.EMPTY_SELECTION)
    return pipeline.plan(tracks)


def prune_scene(
    scene: Path | str,
    out: Optional[Path | str] = None,
    *,
    selection: Optional[Iterable[str]] = None,
    adapter: Optional[str] = None,
    options: Optional[PruneOptions] = None,
    dry_run: bool = False,
) -> PruneResult:
    """Remove unexposed cels from a scene file and write the result to ``out``.

    File-based runs are non-interactive: confirmation is always skipped. When
    ``out`` is omitted the scene file is rewritten in place.
    """
    options = (options or PruneOptions()).model_copy(update={"skip_confirmation": True})
    if dry_run:
        options = options.model_copy(update={"dry_run": True})
    host = open_scene(scene, adapter=adapter)
    cleanup = remove_unexposed_cels(host, selection, skip_confirmation=True, options=options)
    if cleanup.status is not CleanupStatus.COMPLETED:
        return PruneResult(adapter=host.name, output_path=None, cleanup=cleanup)
    target = save_scene(host, out if out is not None else scene)
    return PruneResult(adapter=host.name, output_path=target, cleanup=cleanup)


async def prune_scene_async(*args, **kwargs) -> PruneResult:
    """Asynchronous wrapper around :func:`prune_scene` using a worker thread."""

    return await asyncio.to_thread(prune_scene, *args, **kwargs)


def validate(scene: Path | str) -> ValidationReport:
    """Validate a JSON or YAML scene document and return the structured report."""

    return _validate_scene_file(Path(scene))


async def validate_async(*args, **kwargs) -> ValidationReport:
    """Asynchronous wrapper around :func:`validate` using a worker thread."""

    return await asyncio.to_thread(validate, *args, **kwargs)


def available_adapter_names() -> Iterable[str]:
    """Return the names of all discovered adapters (including plugin entry points)."""

    return tuple(available_adapters())


__all__ = [
    "AdapterNotFoundError",
    "PruneResult",
    "available_adapter_names",
    "open_scene",
    "plan_cleanup",
    "prune_scene",
    "prune_scene_async",
    "remove_unexposed_cels",
    "save_scene",
    "validate",
    "validate_async",
]
