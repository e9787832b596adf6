"""Host adapter interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from celsweep.core.model import (
    ELEMENT_COLUMN_ATTR,
    TIMING_COLUMN_ATTR,
    SceneNode,
    SceneSnapshot,
    column_attribute,
)


class HostAdapter(ABC):
    """Abstract base class for the animation host a cleanup runs against.

    Storage primitives raise :class:`~celsweep.errors.StorageMutationError` and
    column/identity lookups raise :class:`~celsweep.errors.ResolutionError`.
    """

    name: str = "host"

    @abstractmethod
    def metadata(self) -> Dict[str, Any]:
        """Return metadata describing the adapter and the host it drives."""

    # Scene graph

    @abstractmethod
    def selected_nodes(self) -> List[str]:
        """Return the handles of the currently selected nodes."""

    @abstractmethod
    def node(self, handle: str) -> Optional[SceneNode]:
        """Return the node variant registered under ``handle``, or None."""

    @abstractmethod
    def drawing_nodes(self) -> List[str]:
        """Return the handles of every drawing track in the project."""

    # Column resolution

    @abstractmethod
    def element_mode(self, track: str) -> bool:
        """Return the track's addressing mode flag (``drawing.ELEMENT_MODE``)."""

    @abstractmethod
    def linked_column(self, track: str, attribute: str) -> str:
        """Return the column linked to ``attribute`` on ``track``."""

    @abstractmethod
    def element_id(self, column: str) -> str:
        """Return the stable asset identifier behind ``column``."""

    # Column storage

    @abstractmethod
    def get_entry(self, column: str, frame: int) -> str:
        """Return the cel name exposed at ``frame``; empty string when blank."""

    @abstractmethod
    def set_entry(self, column: str, frame: int, name: str) -> None:
        """Expose ``name`` at ``frame`` without touching storage."""

    @abstractmethod
    def drawing_timings(self, column: str) -> List[str]:
        """Return every distinct cel stored for the column's element."""

    @abstractmethod
    def delete_drawing_at(self, column: str, frame: int) -> None:
        """Delete the stored cel currently exposed at ``frame`` from storage."""

    @abstractmethod
    def frame_count(self) -> int:
        """Return the number of frames in the scene timeline."""

    # Undo history and user interaction

    @abstractmethod
    def begin_undo(self, label: str) -> None:
        """Open an undo transaction accumulating every following mutation."""

    @abstractmethod
    def end_undo(self) -> None:
        """Close the undo transaction opened by :meth:`begin_undo`."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask the user a yes/no question."""

    def skip_confirmation_requested(self) -> bool:
        """Return True when the user asked to bypass confirmation (e.g. shift held)."""
        return False

    def notify(self, message: str) -> None:
        """Show an informational message to the user."""

    # File-backed hosts

    def detect(self, input_path: Path) -> bool:
        """Return True if the adapter can open the provided scene file."""
        return False

    def load(self, input_path: Path) -> "HostAdapter":
        """Open a scene file and return the adapter bound to it."""
        raise NotImplementedError(f"Adapter '{self.name}' cannot open scene files.")

    def snapshot(self) -> SceneSnapshot:
        """Return the current scene state as a snapshot."""
        raise NotImplementedError(f"Adapter '{self.name}' cannot export snapshots.")


__all__ = [
    "ELEMENT_COLUMN_ATTR",
    "HostAdapter",
    "TIMING_COLUMN_ATTR",
    "column_attribute",
]
