"""Core abstractions for celsweep."""

from .model import (
    Column,
    DrawingNode,
    Element,
    GroupNode,
    OtherNode,
    SceneSnapshot,
)
from .options import PruneOptions
from .pipeline import CleanupPipeline, CleanupResult, CleanupStatus
from .reducer import ExposureReducer, ReductionPlan
from .resolver import AssetGroup, ShareResolver, TrackBinding
from .selection import expand_selection

__all__ = [
    "AssetGroup",
    "CleanupPipeline",
    "CleanupResult",
    "CleanupStatus",
    "Column",
    "DrawingNode",
    "Element",
    "ExposureReducer",
    "GroupNode",
    "OtherNode",
    "PruneOptions",
    "ReductionPlan",
    "SceneSnapshot",
    "ShareResolver",
    "TrackBinding",
    "expand_selection",
]
