"""Run options for unexposed-cel cleanups."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from celsweep.utils.io import load_yaml

DedupStrategy = Literal["full", "adjacent"]

DEFAULT_UNDO_LABEL = "Remove Unexposed Cels"


class PruneOptions(BaseModel):
    """Options controlling how shared assets are resolved and cleaned."""

    dedup: DedupStrategy = Field(
        default="full",
        description=(
            "Duplicate column exclusion: 'full' drops every repeated column of an asset group, "
            "'adjacent' only compares consecutive tracks."
        ),
    )
    undo_label: str = Field(default=DEFAULT_UNDO_LABEL, min_length=1, description="Undo history entry name.")
    skip_confirmation: bool = Field(default=False, description="Never ask the host for confirmation.")
    dry_run: bool = Field(default=False, description="Plan deletions without mutating the scene.")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {"dedup": "full", "undo_label": "Remove Unexposed Cels", "skip_confirmation": True},
            ]
        },
    }

    @classmethod
    def from_file(cls, path: Path) -> "PruneOptions":
        """Load options from a YAML file; a top-level ``celsweep`` mapping is also accepted."""
        data = load_yaml(Path(path))
        if not isinstance(data, dict):
            raise ValueError(f"Options file {path} must contain a mapping.")
        if isinstance(data.get("celsweep"), dict):
            data = data["celsweep"]
        return cls.model_validate(data)


__all__ = ["DEFAULT_UNDO_LABEL", "DedupStrategy", "PruneOptions"]
