"""Regression tests for the CleanupPipeline."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from celsweep.adapters import SnapshotHost
from celsweep.core import (
    CleanupPipeline,
    CleanupStatus,
    Column,
    DrawingNode,
    Element,
    GroupNode,
    OtherNode,
    PruneOptions,
    SceneSnapshot,
)
from celsweep.core.pipeline import EMPTY_SELECTION_MESSAGE
from celsweep.errors import StorageMutationError, TransactionError


def _scene(selection=("Top/Ball",)) -> SceneSnapshot:
    return SceneSnapshot(
        name="shot_010",
        frame_count=5,
        elements={
            "1": Element(name="Ball", drawings=["c1", "c2", "c3"]),
            "2": Element(name="Bg", drawings=["b1", "b2"]),
        },
        columns={
            "Ball": Column(element_id="1", entries={1: "c1", 2: "c1", 3: "c2", 4: "c1", 5: "c2"}),
            "Bg": Column(element_id="2", entries={1: "b1"}),
        },
        root=GroupNode(
            path="Top",
            children=[
                DrawingNode(path="Top/Ball", element_column="Ball"),
                DrawingNode(path="Top/Bg", element_column="Bg"),
                OtherNode(path="Top/Peg"),
            ],
        ),
        selection=list(selection),
    )


def test_run_deletes_unexposed_cels_of_the_selection_only() -> None:
    host = SnapshotHost(_scene())

    result = CleanupPipeline(host).run()

    assert result.status is CleanupStatus.COMPLETED
    assert result.tracks == ("Top/Ball",)
    assert result.deleted == {"1": ("c3",)}
    assert host.drawing_timings("Ball") == ["c1", "c2"]
    assert host.drawing_timings("Bg") == ["b1", "b2"]
    assert len(host.prompts) == 1
    assert "1 drawing nodes" in host.prompts[0]


def test_second_run_deletes_nothing() -> None:
    host = SnapshotHost(_scene(selection=("Top",)))
    pipeline = CleanupPipeline(host, PruneOptions(skip_confirmation=True))

    first = pipeline.run()
    before = host.snapshot()
    second = pipeline.run()

    assert first.deleted_count == 2
    assert second.deleted_count == 0
    assert host.snapshot() == before


def test_empty_selection_notifies_without_mutation() -> None:
    host = SnapshotHost(_scene(selection=("Top/Peg",)))
    before = host.snapshot()

    result = CleanupPipeline(host).run()

    assert result.status is CleanupStatus.EMPTY_SELECTION
    assert host.messages == [EMPTY_SELECTION_MESSAGE]
    assert host.prompts == []
    assert host.snapshot() == before
    assert host.undo_history == []


def test_declined_confirmation_is_a_clean_no_op() -> None:
    host = SnapshotHost(_scene(), confirm_handler=lambda message: False)
    before = host.snapshot()

    result = CleanupPipeline(host).run()

    assert result.status is CleanupStatus.ABORTED
    assert host.snapshot() == before
    assert host.undo_history == []


def test_modifier_key_skips_confirmation() -> None:
    host = SnapshotHost(_scene(), confirm_handler=lambda message: False, skip_modifier=True)

    result = CleanupPipeline(host).run()

    assert result.status is CleanupStatus.COMPLETED
    assert host.prompts == []


def test_explicit_selection_overrides_host_selection() -> None:
    host = SnapshotHost(_scene())

    result = CleanupPipeline(host).run(["Top/Bg"], skip_confirmation=True)

    assert result.deleted == {"2": ("b2",)}
    assert host.drawing_timings("Ball") == ["c1", "c2", "c3"]


def test_run_is_undone_in_one_step() -> None:
    host = SnapshotHost(_scene(selection=("Top",)))
    before = host.snapshot()

    CleanupPipeline(host, PruneOptions(undo_label="Sweep")).run(skip_confirmation=True)

    assert host.undo_history == ["Sweep"]
    assert host.undo() == "Sweep"
    assert host.snapshot() == before


def test_dry_run_plans_without_mutation() -> None:
    host = SnapshotHost(_scene(selection=("Top",)))
    before = host.snapshot()

    result = CleanupPipeline(host, PruneOptions(dry_run=True)).run(skip_confirmation=True)

    assert result.status is CleanupStatus.DRY_RUN
    assert {plan.asset_id: plan.victims for plan in result.plans} == {"1": ("c3",), "2": ("b2",)}
    assert result.deleted == {}
    assert host.snapshot() == before
    assert host.undo_history == []


class _NoUndoHost(SnapshotHost):
    def begin_undo(self, label: str) -> None:
        raise RuntimeError("undo stack unavailable")


def test_missing_undo_boundary_aborts_before_mutation() -> None:
    host = _NoUndoHost(_scene())
    before = host.snapshot()

    with pytest.raises(TransactionError):
        CleanupPipeline(host).run(skip_confirmation=True)

    assert host.snapshot() == before


class _BrokenStorageHost(SnapshotHost):
    def delete_drawing_at(self, column: str, frame: int) -> None:
        raise StorageMutationError("storage is read-only")


def test_transaction_is_closed_when_storage_fails() -> None:
    host = _BrokenStorageHost(_scene())
    before = host.snapshot()

    with pytest.raises(StorageMutationError):
        CleanupPipeline(host).run(skip_confirmation=True)

    assert host.get_entry("Ball", 5) == "c2"
    assert host.undo() == "Remove Unexposed Cels"
    assert host.snapshot() == before


def test_options_cannot_move_the_scan_start() -> None:
    with pytest.raises(ValidationError):
        PruneOptions(first_frame=6)


class _StuckUndoHost(_BrokenStorageHost):
    def end_undo(self) -> None:
        super().end_undo()
        raise TransactionError("undo stack corrupted")


def test_storage_failure_survives_a_failing_transaction_close() -> None:
    host = _StuckUndoHost(_scene())

    with pytest.raises(StorageMutationError):
        CleanupPipeline(host).run(skip_confirmation=True)

    assert host.get_entry("Ball", 5) == "c2"


def test_transaction_close_failure_is_raised_after_success() -> None:
    class _Host(SnapshotHost):
        def end_undo(self) -> None:
            super().end_undo()
            raise TransactionError("undo stack corrupted")

    with pytest.raises(TransactionError):
        CleanupPipeline(_Host(_scene())).run(skip_confirmation=True)


def test_unresolved_tracks_are_reported() -> None:
    scene = _scene()
    scene.root.children.append(DrawingNode(path="Top/Lost", element_column="Nowhere"))
    scene.selection = ["Top/Lost", "Top/Ball"]
    host = SnapshotHost(scene)

    result = CleanupPipeline(host).run(skip_confirmation=True)

    assert result.status is CleanupStatus.COMPLETED
    assert [item.track for item in result.diagnostics] == ["Top/Lost"]
    assert result.summary()["skipped"][0]["track"] == "Top/Lost"
    assert result.deleted == {"1": ("c3",)}
