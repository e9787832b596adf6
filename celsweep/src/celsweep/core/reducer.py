"""Exposure scan and deletion of unexposed cels."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, Tuple

from celsweep.core.model import EMPTY_CEL
from celsweep.core.resolver import AssetGroup

if TYPE_CHECKING:
    from celsweep.adapters.base import HostAdapter

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReductionPlan:
    """Deletions planned for one asset group."""

    asset_id: str
    column: str
    last_frame: int
    last_cel: str
    exposed: Tuple[str, ...]
    stored: Tuple[str, ...]

    @property
    def victims(self) -> Tuple[str, ...]:
        """Stored cels no frame exposes, in storage order."""
        exposed = set(self.exposed)
        return tuple(name for name in self.stored if name not in exposed)


@contextmanager
def preserved_entry(host: "HostAdapter", column: str, frame: int) -> Iterator[str]:
    """Remember the entry at ``frame`` and write it back on every exit path."""
    original = host.get_entry(column, frame)
    try:
        yield original
    finally:
        host.set_entry(column, frame, original)


class ExposureReducer:
    """Delete the cels of an asset group that no contributing track exposes.

    The host can only delete the cel currently exposed at a frame, so each
    victim is first written to the last frame of the representative column and
    deleted from there; the original last-frame entry is restored afterwards,
    including when the host fails mid-way.
    """

    def __init__(self, host: "HostAdapter") -> None:
        self._host = host

    def scan(self, group: AssetGroup, last_frame: int) -> Tuple[str, ...]:
        """Return every non-empty cel exposed by the group's columns, first-seen order."""
        exposed: Dict[str, None] = {}
        for binding in group.bindings:
            for frame in range(1, last_frame + 1):
                name = self._host.get_entry(binding.column, frame)
                if name != EMPTY_CEL:
                    exposed.setdefault(name, None)
        return tuple(exposed)

    def plan(self, group: AssetGroup, last_frame: int) -> ReductionPlan:
        """Compute the deletions for ``group`` without touching the scene."""
        column = group.representative_column
        return ReductionPlan(
            asset_id=group.asset_id,
            column=column,
            last_frame=last_frame,
            last_cel=self._host.get_entry(column, last_frame),
            exposed=self.scan(group, last_frame),
            stored=tuple(dict.fromkeys(self._host.drawing_timings(column))),
        )

    def apply(self, plan: ReductionPlan) -> Tuple[str, ...]:
        """Delete the plan's victims and return their names."""
        deleted = []
        with preserved_entry(self._host, plan.column, plan.last_frame):
            for name in plan.victims:
                self._host.set_entry(plan.column, plan.last_frame, name)
                self._host.delete_drawing_at(plan.column, plan.last_frame)
                deleted.append(name)
        if deleted:
            LOG.info("Deleted %d unexposed cel(s) from asset '%s'.", len(deleted), plan.asset_id)
        return tuple(deleted)

    def reduce(self, group: AssetGroup, last_frame: int) -> ReductionPlan:
        """Plan and apply the deletions for ``group``."""
        plan = self.plan(group, last_frame)
        self.apply(plan)
        return plan


__all__ = ["ExposureReducer", "ReductionPlan", "preserved_entry"]
