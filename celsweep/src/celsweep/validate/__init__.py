"""Validation tooling for celsweep scene snapshots."""

from .validator import (
    Severity,
    ValidationIOError,
    ValidationIssue,
    ValidationReport,
    validate_document,
    validate_scene_file,
    validate_snapshot,
)
from .core import scene_schema, schema_issues

__all__ = [
    "Severity",
    "ValidationIOError",
    "ValidationIssue",
    "ValidationReport",
    "scene_schema",
    "schema_issues",
    "validate_document",
    "validate_scene_file",
    "validate_snapshot",
]
