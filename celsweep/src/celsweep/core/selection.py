"""Expansion of a node selection into drawing tracks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from celsweep.adapters.base import HostAdapter

LOG = logging.getLogger(__name__)


def expand_selection(host: "HostAdapter", handles: Iterable[str]) -> List[str]:
    """Return the drawing tracks under ``handles``, groups expanded recursively.

    Tracks keep first-seen order and appear once even when a group and one of
    its children are both selected.
    """
    tracks: List[str] = []
    for handle in handles:
        node = host.node(handle)
        if node is None:
            LOG.warning("Selected node '%s' does not exist; skipping.", handle)
            continue
        tracks.extend(drawing.path for drawing in node.iter_drawings())
    return list(dict.fromkeys(tracks))


__all__ = ["expand_selection"]
