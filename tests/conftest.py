"""Test fixtures for celsweep scene documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml


def _scene_document() -> Dict[str, Any]:
    return {
        "name": "shot_010",
        "frame_count": 5,
        "elements": {
            "1": {"name": "Ball", "drawings": ["c1", "c2", "c3", "c4"]},
            "2": {"name": "Shadow", "drawings": ["s1", "s2"]},
            "3": {"name": "Bg", "drawings": ["b1", "b2"]},
        },
        "columns": {
            "Ball": {"element_id": "1", "entries": {"1": "c1", "2": "c1", "3": "c2", "4": "c1", "5": "c2"}},
            "BallAlt": {"element_id": "1", "entries": {"3": "c3"}},
            "Shadow": {"element_id": "2", "entries": {"1": "s1"}},
            "Bg": {"element_id": "3", "entries": {"1": "b1"}},
        },
        "root": {
            "kind": "group",
            "path": "Top",
            "children": [
                {"kind": "read", "path": "Top/Ball", "element_column": "Ball"},
                {
                    "kind": "group",
                    "path": "Top/Characters",
                    "children": [
                        {"kind": "read", "path": "Top/Characters/BallEcho", "element_column": "BallAlt"},
                        {
                            "kind": "read",
                            "path": "Top/Characters/Shadow",
                            "element_mode": False,
                            "timing_column": "Shadow",
                        },
                    ],
                },
                {"kind": "read", "path": "Top/Bg", "element_column": "Bg"},
                {"kind": "other", "path": "Top/Peg", "type": "PEG"},
            ],
        },
        "selection": ["Top/Ball", "Top/Characters"],
    }


@pytest.fixture()
def scene_document() -> Dict[str, Any]:
    """Scene where Ball is shared by two columns and Bg is not selected."""
    return _scene_document()


@pytest.fixture()
def scene_json(tmp_path: Path) -> Path:
    """Write the synthetic scene as JSON."""
    path = tmp_path / "shot_010.json"
    path.write_text(json.dumps(_scene_document(), indent=2))
    return path


@pytest.fixture()
def scene_yaml(tmp_path: Path) -> Path:
    """Write the synthetic scene as YAML, with integer frame keys."""
    document = _scene_document()
    for column in document["columns"].values():
        column["entries"] = {int(frame): name for frame, name in column["entries"].items()}
    path = tmp_path / "shot_010.yaml"
    path.write_text(yaml.safe_dump(document, sort_keys=False))
    return path
