"""Validation routines for scene snapshots."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from celsweep.core.model import SceneSnapshot, column_attribute
from celsweep.utils import load_document


class Severity(str, Enum):
    """Severity levels for validation issues."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ValidationIssue(BaseModel):
    """Single validation issue description."""

    code: str
    message: str
    path: str = Field(default="/")
    severity: Severity = Field(default=Severity.ERROR)


class ValidationReport(BaseModel):
    """Aggregate validation report with summary metadata."""

    ok: bool
    issues: List[ValidationIssue] = Field(default_factory=list)
    summary: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def example(cls, scene: Optional[Path] = None) -> "ValidationReport":
        """Create an example report for documentation/tests."""
        issues = [
            ValidationIssue(
                code="EXAMPLE",
                message="Example validation executed.",
                path=str(scene) if scene else "/",
                severity=Severity.INFO,
            )
        ]
        return cls(ok=True, issues=issues, summary={"target": str(scene) if scene else ""})


class ValidationIOError(RuntimeError):
    """Raised when validation cannot operate due to IO errors."""


def _add_issue(issues: List[ValidationIssue], code: str, message: str, path: str, severity: Severity) -> None:
    issues.append(ValidationIssue(code=code, message=message, path=path, severity=severity))


def _check_columns(snapshot: SceneSnapshot, issues: List[ValidationIssue]) -> None:
    for name, column in snapshot.columns.items():
        stored = set(snapshot.elements[column.element_id].drawings)
        for frame, cel in sorted(column.entries.items()):
            if frame > snapshot.frame_count:
                _add_issue(
                    issues,
                    "SCENE_ENTRY_OUT_OF_RANGE",
                    f"Cel '{cel}' is only exposed after the last frame; it will be treated as unexposed.",
                    f"/columns/{name}/entries/{frame}",
                    Severity.INFO,
                )
            if cel not in stored:
                _add_issue(
                    issues,
                    "SCENE_UNKNOWN_CEL",
                    f"Cel '{cel}' is not stored in element '{column.element_id}'.",
                    f"/columns/{name}/entries/{frame}",
                    Severity.WARNING,
                )


def _check_tracks(snapshot: SceneSnapshot, issues: List[ValidationIssue]) -> None:
    readers: Dict[str, List[str]] = {}
    for node in snapshot.drawing_nodes():
        column = node.element_column if node.element_mode else node.timing_column
        if not column or column not in snapshot.columns:
            _add_issue(
                issues,
                "SCENE_TRACK_UNRESOLVED",
                f"Column linked to {column_attribute(node.element_mode)} is missing; the track will be skipped.",
                node.path,
                Severity.WARNING,
            )
            continue
        readers.setdefault(column, []).append(node.path)
    for column, tracks in readers.items():
        if len(tracks) > 1:
            _add_issue(
                issues,
                "SCENE_SHARED_COLUMN",
                f"Column is read by {len(tracks)} tracks: {', '.join(tracks)}.",
                f"/columns/{column}",
                Severity.INFO,
            )


def _check_selection(snapshot: SceneSnapshot, issues: List[ValidationIssue]) -> None:
    for handle in snapshot.selection:
        if snapshot.find_node(handle) is None:
            _add_issue(
                issues,
                "SCENE_SELECTION_UNKNOWN",
                f"Selected node '{handle}' does not exist.",
                "/selection",
                Severity.ERROR,
            )


def validate_snapshot(snapshot: SceneSnapshot) -> ValidationReport:
    """Validate the consistency of a parsed scene snapshot."""
    issues: List[ValidationIssue] = []
    _check_columns(snapshot, issues)
    _check_tracks(snapshot, issues)
    _check_selection(snapshot, issues)
    summary: Dict[str, Any] = {
        "scene": snapshot.name,
        "frames": snapshot.frame_count,
        "elements": len(snapshot.elements),
        "columns": len(snapshot.columns),
        "drawings": len(snapshot.drawing_nodes()),
        "stored_cels": sum(len(element.drawings) for element in snapshot.elements.values()),
    }
    ok = not any(issue.severity == Severity.ERROR for issue in issues)
    return ValidationReport(ok=ok, issues=issues, summary=summary)


def validate_document(document: Dict[str, Any]) -> ValidationReport:
    """Validate a raw scene document against the schema, then its consistency."""
    from .core import schema_issues

    issues = schema_issues(document)
    if issues:
        return ValidationReport(ok=False, issues=issues, summary={})
    try:
        snapshot = SceneSnapshot.model_validate(document)
    except ValidationError as exc:
        for error in exc.errors():
            location = "/" + "/".join(str(part) for part in error["loc"])
            _add_issue(issues, "SCENE_MODEL_INVALID", error["msg"], location, Severity.ERROR)
        return ValidationReport(ok=False, issues=issues, summary={})
    return validate_snapshot(snapshot)


def validate_scene_file(path: Path) -> ValidationReport:
    """Load and validate a JSON or YAML scene document."""
    path = Path(path)
    try:
        document = load_document(path)
    except (OSError, ValueError) as exc:
        raise ValidationIOError(str(exc)) from exc
    report = validate_document(document)
    report.summary["target"] = str(path)
    return report


__all__ = [
    "Severity",
    "ValidationIOError",
    "ValidationIssue",
    "ValidationReport",
    "validate_document",
    "validate_scene_file",
    "validate_snapshot",
]
