"""Tests for grouping tracks by shared asset identity."""

from __future__ import annotations

import logging

import pytest

from celsweep.adapters import SnapshotHost
from celsweep.core import Column, DrawingNode, Element, GroupNode, SceneSnapshot
from celsweep.core.resolver import (
    AssetGroup,
    ShareResolver,
    TrackBinding,
    exclude_adjacent_columns,
    exclude_repeated_columns,
    filter_selected,
)


def _host(*nodes: DrawingNode) -> SnapshotHost:
    scene = SceneSnapshot(
        frame_count=3,
        elements={"1": Element(drawings=["x1"]), "2": Element(drawings=["y1"])},
        columns={
            "X1": Column(element_id="1", entries={1: "x1"}),
            "X2": Column(element_id="1", entries={2: "x1"}),
            "Y": Column(element_id="2", entries={1: "y1"}),
        },
        root=GroupNode(path="Top", children=list(nodes)),
    )
    return SnapshotHost(scene)


def test_shared_asset_processed_when_one_sharing_track_is_selected() -> None:
    host = _host(
        DrawingNode(path="Top/A", element_column="X1"),
        DrawingNode(path="Top/B", element_column="X2"),
        DrawingNode(path="Top/C", element_column="Y"),
    )
    resolver = ShareResolver(host)

    only_a = resolver.resolve(host.drawing_nodes(), ["Top/A"])
    assert list(only_a.groups) == ["1"]
    assert only_a.groups["1"].bindings == (
        TrackBinding(track="Top/A", column="X1"),
        TrackBinding(track="Top/B", column="X2"),
    )

    only_c = resolver.resolve(host.drawing_nodes(), ["Top/C"])
    assert "1" not in only_c.groups
    assert list(only_c.groups) == ["2"]


def test_groups_preserve_first_seen_order() -> None:
    host = _host(
        DrawingNode(path="Top/C", element_column="Y"),
        DrawingNode(path="Top/A", element_column="X1"),
    )
    resolution = ShareResolver(host).resolve(host.drawing_nodes(), ["Top/A", "Top/C"])
    assert list(resolution.groups) == ["2", "1"]


def test_name_based_tracks_use_the_timing_column() -> None:
    host = _host(DrawingNode(path="Top/A", element_mode=False, element_column="Y", timing_column="X2"))
    asset_id, binding = ShareResolver(host).bind("Top/A")
    assert asset_id == "1"
    assert binding.column == "X2"


def test_unresolved_tracks_are_skipped_with_a_diagnostic(caplog: pytest.LogCaptureFixture) -> None:
    host = _host(
        DrawingNode(path="Top/Broken", element_mode=True, timing_column="X1"),
        DrawingNode(path="Top/Ghost", element_column="Missing"),
        DrawingNode(path="Top/A", element_column="X1"),
    )
    with caplog.at_level(logging.WARNING):
        resolution = ShareResolver(host).resolve(host.drawing_nodes(), host.drawing_nodes())

    assert [item.track for item in resolution.diagnostics] == ["Top/Broken", "Top/Ghost"]
    assert resolution.groups["1"].tracks == ("Top/A",)
    assert "Top/Broken" in caplog.text


def test_full_dedup_catches_non_adjacent_duplicates() -> None:
    host = _host(
        DrawingNode(path="Top/A", element_column="X1"),
        DrawingNode(path="Top/B", element_column="X2"),
        DrawingNode(path="Top/C", element_column="X1"),
    )
    tracks = host.drawing_nodes()

    full = ShareResolver(host, dedup="full").resolve(tracks, ["Top/A"]).groups["1"]
    assert full.columns == ("X1", "X2")
    assert [binding.track for binding in full.excluded] == ["Top/C"]

    adjacent = ShareResolver(host, dedup="adjacent").resolve(tracks, ["Top/A"]).groups["1"]
    assert adjacent.columns == ("X1", "X2", "X1")
    assert adjacent.excluded == ()


def test_adjacent_dedup_excludes_the_later_track() -> None:
    group = AssetGroup(
        asset_id="1",
        bindings=(
            TrackBinding("A", "X1"),
            TrackBinding("B", "X1"),
            TrackBinding("C", "X2"),
        ),
    )
    result = exclude_adjacent_columns(group)
    assert result.bindings == (TrackBinding("A", "X1"), TrackBinding("C", "X2"))
    assert result.excluded == (TrackBinding("B", "X1"),)
    assert group.bindings[1] == TrackBinding("B", "X1")


def test_excluded_tracks_still_count_as_selected() -> None:
    group = exclude_repeated_columns(
        AssetGroup(asset_id="1", bindings=(TrackBinding("A", "X1"), TrackBinding("B", "X1")))
    )
    assert filter_selected({"1": group}, {"B"}) == {"1": group}
    assert filter_selected({"1": group}, {"Z"}) == {}


def test_unknown_dedup_strategy_is_rejected() -> None:
    with pytest.raises(ValueError):
        ShareResolver(_host(), dedup="pairwise")  # type: ignore[arg-type]
