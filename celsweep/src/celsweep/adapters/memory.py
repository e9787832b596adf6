"""In-memory host backed by a scene snapshot document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from celsweep.adapters.base import ELEMENT_COLUMN_ATTR, TIMING_COLUMN_ATTR, HostAdapter
from celsweep.adapters.registry import register_adapter
from celsweep.core.model import EMPTY_CEL, Column, DrawingNode, SceneNode, SceneSnapshot
from celsweep.errors import ResolutionError, StorageMutationError, TransactionError
from celsweep.utils import DOCUMENT_SUFFIXES, load_document

LOG = logging.getLogger(__name__)


@register_adapter
class SnapshotHost(HostAdapter):
    """Host adapter that mutates a :class:`SceneSnapshot` held in memory.

    Deleting a cel removes it from its element's storage and blanks every frame,
    in every column of that element, that exposed it. Undo transactions keep a
    copy of the scene taken when the outermost transaction opens, so
    :meth:`undo` reverts a whole transaction in one step.
    """

    name = "snapshot"

    def __init__(
        self,
        snapshot: Optional[SceneSnapshot] = None,
        *,
        confirm_handler: Optional[Callable[[str], bool]] = None,
        skip_modifier: bool = False,
        source: Optional[Path] = None,
    ) -> None:
        self._scene = snapshot if snapshot is not None else SceneSnapshot(frame_count=1)
        self._confirm_handler = confirm_handler
        self._skip_modifier = skip_modifier
        self._undo_stack: List[SceneSnapshot] = []
        self._undo_labels: List[str] = []
        self._depth = 0
        self.source = source
        self.prompts: List[str] = []
        self.messages: List[str] = []

    def metadata(self) -> Dict[str, Any]:
        return {"name": self.name, "host": "scene snapshot", "formats": sorted(DOCUMENT_SUFFIXES)}

    def detect(self, input_path: Path) -> bool:
        path = Path(input_path)
        return path.is_file() and path.suffix.lower() in DOCUMENT_SUFFIXES

    def load(self, input_path: Path) -> "SnapshotHost":
        path = Path(input_path)
        self._scene = SceneSnapshot.model_validate(load_document(path))
        self._undo_stack.clear()
        self._undo_labels.clear()
        self._depth = 0
        self.source = path
        LOG.debug("Loaded scene '%s' from %s", self._scene.name, path)
        return self

    def snapshot(self) -> SceneSnapshot:
        return self._scene.model_copy(deep=True)

    # Scene graph

    def selected_nodes(self) -> List[str]:
        return list(self._scene.selection)

    def select(self, handles: List[str]) -> None:
        """Replace the current selection."""
        self._scene.selection = list(handles)

    def node(self, handle: str) -> Optional[SceneNode]:
        return self._scene.find_node(handle)

    def drawing_nodes(self) -> List[str]:
        return [node.path for node in self._scene.drawing_nodes()]

    # Column resolution

    def _drawing(self, track: str) -> DrawingNode:
        for node in self._scene.drawing_nodes():
            if node.path == track:
                return node
        raise ResolutionError(f"'{track}' is not a drawing node.")

    def element_mode(self, track: str) -> bool:
        return self._drawing(track).element_mode

    def linked_column(self, track: str, attribute: str) -> str:
        drawing = self._drawing(track)
        if attribute == ELEMENT_COLUMN_ATTR:
            column = drawing.element_column
        elif attribute == TIMING_COLUMN_ATTR:
            column = drawing.timing_column
        else:
            raise ResolutionError(f"Unknown drawing attribute '{attribute}'.")
        if not column:
            raise ResolutionError(f"'{track}' has no column linked to {attribute}.")
        if column not in self._scene.columns:
            raise ResolutionError(f"Column '{column}' linked to '{track}' does not exist.")
        return column

    def _column(self, column: str) -> Column:
        try:
            return self._scene.columns[column]
        except KeyError as exc:
            raise ResolutionError(f"Unknown column '{column}'.") from exc

    def element_id(self, column: str) -> str:
        return self._column(column).element_id

    # Column storage

    def get_entry(self, column: str, frame: int) -> str:
        return self._column(column).entry(frame)

    def set_entry(self, column: str, frame: int, name: str) -> None:
        if frame < 1:
            raise StorageMutationError(f"Cannot write frame {frame} of column '{column}'.")
        entries = self._column(column).entries
        if name == EMPTY_CEL:
            entries.pop(frame, None)
        else:
            entries[frame] = name

    def drawing_timings(self, column: str) -> List[str]:
        element_id = self._column(column).element_id
        return list(self._scene.elements[element_id].drawings)

    def delete_drawing_at(self, column: str, frame: int) -> None:
        name = self.get_entry(column, frame)
        if name == EMPTY_CEL:
            raise StorageMutationError(f"No cel exposed at frame {frame} of column '{column}'.")
        element_id = self._column(column).element_id
        element = self._scene.elements[element_id]
        if name not in element.drawings:
            raise StorageMutationError(f"Cel '{name}' is not stored in element '{element_id}'.")
        element.drawings = [drawing for drawing in element.drawings if drawing != name]
        for column_name in self._scene.columns_of(element_id):
            entries = self._scene.columns[column_name].entries
            for exposed_frame in [key for key, value in entries.items() if value == name]:
                del entries[exposed_frame]
        LOG.debug("Deleted cel '%s' from element '%s'", name, element_id)

    def frame_count(self) -> int:
        return self._scene.frame_count

    # Undo history and user interaction

    def begin_undo(self, label: str) -> None:
        if self._depth == 0:
            self._undo_stack.append(self._scene.model_copy(deep=True))
            self._undo_labels.append(label)
        self._depth += 1

    def end_undo(self) -> None:
        if self._depth == 0:
            raise TransactionError("No undo transaction is open.")
        self._depth -= 1

    @property
    def undo_history(self) -> List[str]:
        """Labels of the transactions that can be undone, oldest first."""
        return list(self._undo_labels)

    def undo(self) -> str:
        """Revert the most recent transaction and return its label."""
        if self._depth:
            raise TransactionError("Cannot undo while a transaction is open.")
        if not self._undo_stack:
            raise TransactionError("Nothing to undo.")
        self._scene = self._undo_stack.pop()
        return self._undo_labels.pop()

    def confirm(self, message: str) -> bool:
        self.prompts.append(message)
        if self._confirm_handler is None:
            return True
        return bool(self._confirm_handler(message))

    def skip_confirmation_requested(self) -> bool:
        return self._skip_modifier

    def notify(self, message: str) -> None:
        self.messages.append(message)
        LOG.info(message)


__all__ = ["SnapshotHost"]
