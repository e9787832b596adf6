"""I/O helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}
DOCUMENT_SUFFIXES = JSON_SUFFIXES | YAML_SUFFIXES


def load_yaml(path: Path) -> Any:
    """Load a YAML file; an empty file loads as an empty dictionary."""
    with path.open("r", encoding="utf-8") as handle:
        try:
            return yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed YAML in {path}: {exc}") from exc


def document_format(path: Path) -> str:
    """Return ``'json'`` or ``'yaml'`` based on the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in YAML_SUFFIXES:
        return "yaml"
    raise ValueError(f"Unsupported scene document format for file: {path}")


def load_document(path: Path) -> Dict[str, Any]:
    """Load a JSON or YAML scene document with basic validation."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene document does not exist: {path}")
    if document_format(path) == "json":
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    else:
        data = load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Scene document at {path} must contain a mapping.")
    return data


def write_document(data: Dict[str, Any], path: Path) -> Path:
    """Write a document as JSON or YAML depending on the target suffix."""
    path = Path(path)
    fmt = document_format(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        if fmt == "json":
            json.dump(data, handle, indent=2)
            handle.write("\n")
        else:
            yaml.safe_dump(data, handle, sort_keys=False)
    return path


def json_compatible(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` as JSON would see it (mapping keys become strings)."""
    return json.loads(json.dumps(data))


__all__ = [
    "DOCUMENT_SUFFIXES",
    "document_format",
    "json_compatible",
    "load_document",
    "load_yaml",
    "write_document",
]
