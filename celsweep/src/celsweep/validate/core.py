"""Schema checks for raw scene documents."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema

from celsweep.core.model import SceneSnapshot
from celsweep.utils import json_compatible

from .validator import Severity, ValidationIssue


@lru_cache(maxsize=1)
def scene_schema() -> Dict[str, Any]:
    """Return the JSON schema of scene snapshot documents."""
    schema = SceneSnapshot.model_json_schema()
    jsonschema.Draft202012Validator.check_schema(schema)
    return schema


def schema_issues(document: Dict[str, Any]) -> List[ValidationIssue]:
    """Return one issue per schema violation of ``document``."""
    validator = jsonschema.Draft202012Validator(scene_schema())
    issues: List[ValidationIssue] = []
    for error in sorted(validator.iter_errors(json_compatible(document)), key=lambda item: list(item.path)):
        location = "/" + "/".join(str(part) for part in error.path)
        issues.append(
            ValidationIssue(
                code="SCENE_SCHEMA_INVALID",
                message=error.message,
                path=location,
                severity=Severity.ERROR,
            )
        )
    return issues


__all__ = ["scene_schema", "schema_issues"]
