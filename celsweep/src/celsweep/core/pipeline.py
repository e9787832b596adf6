"""High-level cleanup pipeline primitives."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from rich.console import Console

from celsweep.core.options import PruneOptions
from celsweep.core.reducer import ExposureReducer, ReductionPlan
from celsweep.core.resolver import Resolution, ResolutionDiagnostic, ShareResolver
from celsweep.core.selection import expand_selection
from celsweep.errors import TransactionError

if TYPE_CHECKING:
    from celsweep.adapters.base import HostAdapter

console = Console(stderr=True)
LOG = logging.getLogger(__name__)

EMPTY_SELECTION_MESSAGE = "Please select at least one drawing node/layer before running this command."


def confirmation_message(track_count: int) -> str:
    """Return the question asked before deleting cels on ``track_count`` drawing nodes."""
    return (
        f"You are about to delete unexposed cels on {track_count} drawing nodes.\n\n"
        "Tip: hold down shift while launching the command to skip this confirmation."
    )


class CleanupStatus(str, Enum):
    """Final state of a cleanup run."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    EMPTY_SELECTION = "empty_selection"
    DRY_RUN = "dry_run"


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of a cleanup run."""

    status: CleanupStatus
    tracks: Tuple[str, ...] = ()
    plans: Tuple[ReductionPlan, ...] = ()
    deleted: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    diagnostics: Tuple[ResolutionDiagnostic, ...] = ()

    @property
    def deleted_count(self) -> int:
        return sum(len(names) for names in self.deleted.values())

    def summary(self) -> Dict[str, object]:
        """Return a JSON-friendly summary of the run."""
        return {
            "status": self.status.value,
            "tracks": list(self.tracks),
            "assets": [plan.asset_id for plan in self.plans],
            "planned": {plan.asset_id: list(plan.victims) for plan in self.plans},
            "deleted": {asset_id: list(names) for asset_id, names in self.deleted.items()},
            "skipped": [{"track": item.track, "reason": item.reason} for item in self.diagnostics],
        }


@contextmanager
def undo_transaction(host: "HostAdapter", label: str) -> Iterator[None]:
    """Bracket every mutation inside the block as a single undo step."""
    try:
        host.begin_undo(label)
    except TransactionError:
        raise
    except Exception as exc:
        raise TransactionError(f"Unable to open undo transaction '{label}': {exc}") from exc
    try:
        yield
    except BaseException:
        try:
            host.end_undo()
        except Exception as exc:
            LOG.error("Failed to close undo transaction '%s': %s", label, exc)
        raise
    host.end_undo()


class CleanupPipeline:
    """Remove unexposed cels for a selection, the way an interactive host command does."""

    def __init__(self, host: "HostAdapter", options: Optional[PruneOptions] = None) -> None:
        """Create a pipeline bound to a host adapter."""
        self._host = host
        self._options = options or PruneOptions()
        self._resolver = ShareResolver(host, dedup=self._options.dedup)
        self._reducer = ExposureReducer(host)

    @property
    def options(self) -> PruneOptions:
        return self._options

    def selected_tracks(self, selection: Optional[Iterable[str]] = None) -> List[str]:
        """Expand ``selection`` (default: the host selection) into drawing tracks."""
        handles = list(selection) if selection is not None else self._host.selected_nodes()
        return expand_selection(self._host, handles)

    def resolve(self, tracks: Sequence[str]) -> Resolution:
        return self._resolver.resolve(self._host.drawing_nodes(), tracks)

    def plan(self, tracks: Sequence[str]) -> CleanupResult:
        """Resolve and plan deletions for ``tracks`` without mutating the scene."""
        resolution = self.resolve(tracks)
        last_frame = self._host.frame_count()
        plans = tuple(self._reducer.plan(group, last_frame) for group in resolution.groups.values())
        return CleanupResult(
            status=CleanupStatus.DRY_RUN,
            tracks=tuple(tracks),
            plans=plans,
            diagnostics=resolution.diagnostics,
        )

    def _skip_confirmation(self, explicit: Optional[bool]) -> bool:
        if explicit is not None:
            return explicit
        return self._options.skip_confirmation or self._host.skip_confirmation_requested()

    def run(
        self,
        selection: Optional[Iterable[str]] = None,
        *,
        skip_confirmation: Optional[bool] = None,
    ) -> CleanupResult:
        """Confirm, then resolve shared assets and delete unexposed cels in one undo step."""
        tracks = self.selected_tracks(selection)
        if not tracks:
            self._host.notify(EMPTY_SELECTION_MESSAGE)
            return CleanupResult(status=CleanupStatus.EMPTY_SELECTION)

        if not self._skip_confirmation(skip_confirmation):
            if not self._host.confirm(confirmation_message(len(tracks))):
                LOG.info("Cleanup declined by the user.")
                return CleanupResult(status=CleanupStatus.ABORTED, tracks=tuple(tracks))

        if self._options.dry_run:
            console.log("Planning cleanup (dry run)", style="cyan")
            return self.plan(tracks)

        plans: List[ReductionPlan] = []
        deleted: Dict[str, Tuple[str, ...]] = {}
        console.log(f"Removing unexposed cels on {len(tracks)} drawing node(s)", style="green")
        with undo_transaction(self._host, self._options.undo_label):
            resolution = self.resolve(tracks)
            last_frame = self._host.frame_count()
            for group in resolution.groups.values():
                plan = self._reducer.plan(group, last_frame)
                plans.append(plan)
                deleted[group.asset_id] = self._reducer.apply(plan)
        console.log(f"Deleted {sum(len(names) for names in deleted.values())} cel(s)", style="green")
        return CleanupResult(
            status=CleanupStatus.COMPLETED,
            tracks=tuple(tracks),
            plans=tuple(plans),
            deleted=deleted,
            diagnostics=resolution.diagnostics,
        )


__all__ = [
    "EMPTY_SELECTION_MESSAGE",
    "CleanupPipeline",
    "CleanupResult",
    "CleanupStatus",
    "confirmation_message",
    "undo_transaction",
]
