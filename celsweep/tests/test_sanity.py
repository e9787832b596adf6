"""Sanity checks for key imports."""

from pathlib import Path

from celsweep import __version__
from celsweep.adapters import SnapshotHost, available_adapters
from celsweep.core import PruneOptions
from celsweep.validate import ValidationReport


def test_version_constant() -> None:
    """Package exposes the expected version."""
    assert __version__ == "0.1.0"


def test_snapshot_adapter_is_registered() -> None:
    """The built-in snapshot host is available without plugins."""
    assert "snapshot" in available_adapters()
    assert SnapshotHost.name == "snapshot"


def test_default_options() -> None:
    options = PruneOptions()
    assert options.dedup == "full"
    assert options.undo_label == "Remove Unexposed Cels"
    assert not options.skip_confirmation


def test_validation_report_example() -> None:
    """Validation report factory returns populated items."""
    report = ValidationReport.example(scene=Path("scene.json"))
    assert report.ok
    assert report.issues
