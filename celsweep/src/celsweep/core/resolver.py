"""Grouping of drawing tracks by the asset they expose."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Collection, Dict, Iterable, List, Mapping, Optional, Tuple

from celsweep.core.model import column_attribute
from celsweep.core.options import DedupStrategy
from celsweep.errors import ResolutionError

if TYPE_CHECKING:
    from celsweep.adapters.base import HostAdapter

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackBinding:
    """A drawing track together with the column it reads cels from."""

    track: str
    column: str


@dataclass(frozen=True)
class AssetGroup:
    """Tracks sharing one asset identity, in first-seen project order.

    ``bindings`` never repeat a column; bindings dropped as duplicates are kept
    in ``excluded`` for reporting only.
    """

    asset_id: str
    bindings: Tuple[TrackBinding, ...]
    excluded: Tuple[TrackBinding, ...] = ()

    @property
    def tracks(self) -> Tuple[str, ...]:
        return tuple(binding.track for binding in self.bindings + self.excluded)

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(binding.column for binding in self.bindings)

    @property
    def representative_column(self) -> str:
        """Column that receives the deletions for this asset."""
        return self.bindings[0].column

    def includes_any(self, tracks: Collection[str]) -> bool:
        return any(track in tracks for track in self.tracks)


@dataclass(frozen=True)
class ResolutionDiagnostic:
    """A track left out of resolution and the reason why."""

    track: str
    reason: str


@dataclass(frozen=True)
class Resolution:
    """Outcome of :meth:`ShareResolver.resolve`."""

    groups: Mapping[str, AssetGroup] = field(default_factory=dict)
    diagnostics: Tuple[ResolutionDiagnostic, ...] = ()


def filter_selected(groups: Mapping[str, AssetGroup], selected: Collection[str]) -> Dict[str, AssetGroup]:
    """Keep the groups exposing at least one selected track."""
    selected = set(selected)
    return {asset_id: group for asset_id, group in groups.items() if group.includes_any(selected)}


def exclude_adjacent_columns(group: AssetGroup) -> AssetGroup:
    """Exclude a binding whose column equals the column of the binding right before it."""
    kept: List[TrackBinding] = []
    excluded: List[TrackBinding] = list(group.excluded)
    previous: Optional[TrackBinding] = None
    for binding in group.bindings:
        if previous is not None and previous.column == binding.column:
            excluded.append(binding)
        else:
            kept.append(binding)
        previous = binding
    return AssetGroup(asset_id=group.asset_id, bindings=tuple(kept), excluded=tuple(excluded))


def exclude_repeated_columns(group: AssetGroup) -> AssetGroup:
    """Exclude every binding whose column already appeared earlier in the group."""
    kept: List[TrackBinding] = []
    excluded: List[TrackBinding] = list(group.excluded)
    seen = set()
    for binding in group.bindings:
        if binding.column in seen:
            excluded.append(binding)
        else:
            seen.add(binding.column)
            kept.append(binding)
    return AssetGroup(asset_id=group.asset_id, bindings=tuple(kept), excluded=tuple(excluded))


_DEDUP_STRATEGIES = {
    "adjacent": exclude_adjacent_columns,
    "full": exclude_repeated_columns,
}


class ShareResolver:
    """Group project tracks by asset identity and keep the groups touched by a selection."""

    def __init__(self, host: "HostAdapter", dedup: DedupStrategy = "full") -> None:
        if dedup not in _DEDUP_STRATEGIES:
            raise ValueError(f"Unknown dedup strategy '{dedup}'.")
        self._host = host
        self._dedup = _DEDUP_STRATEGIES[dedup]

    def bind(self, track: str) -> Tuple[str, TrackBinding]:
        """Return the asset identity and column binding of ``track``."""
        attribute = column_attribute(self._host.element_mode(track))
        column = self._host.linked_column(track, attribute)
        return self._host.element_id(column), TrackBinding(track=track, column=column)

    def collect(self, tracks: Iterable[str]) -> Tuple[Dict[str, AssetGroup], Tuple[ResolutionDiagnostic, ...]]:
        """Group ``tracks`` by asset identity, preserving first-seen order."""
        bindings: Dict[str, List[TrackBinding]] = {}
        diagnostics: List[ResolutionDiagnostic] = []
        for track in tracks:
            try:
                asset_id, binding = self.bind(track)
            except ResolutionError as exc:
                LOG.warning("Skipping '%s': unable to resolve its asset (%s).", track, exc)
                diagnostics.append(ResolutionDiagnostic(track=track, reason=str(exc)))
                continue
            bindings.setdefault(asset_id, []).append(binding)
        groups = {
            asset_id: AssetGroup(asset_id=asset_id, bindings=tuple(members))
            for asset_id, members in bindings.items()
        }
        return groups, tuple(diagnostics)

    def resolve(self, all_tracks: Iterable[str], selected_tracks: Collection[str]) -> Resolution:
        """Return the deduplicated asset groups containing at least one selected track."""
        groups, diagnostics = self.collect(all_tracks)
        relevant = filter_selected(groups, selected_tracks)
        resolved = {asset_id: self._dedup(group) for asset_id, group in relevant.items()}
        for group in resolved.values():
            for binding in group.excluded:
                LOG.debug(
                    "'%s' reads column '%s' already processed for asset '%s'.",
                    binding.track,
                    binding.column,
                    group.asset_id,
                )
        LOG.info("Resolved %d asset group(s) from %d selected track(s).", len(resolved), len(selected_tracks))
        return Resolution(groups=resolved, diagnostics=diagnostics)


__all__ = [
    "AssetGroup",
    "Resolution",
    "ResolutionDiagnostic",
    "ShareResolver",
    "TrackBinding",
    "exclude_adjacent_columns",
    "exclude_repeated_columns",
    "filter_selected",
]
