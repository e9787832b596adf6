"""Scene snapshot model: elements, drawing columns, and the node tree."""

from __future__ import annotations

from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

EMPTY_CEL = ""

ELEMENT_COLUMN_ATTR = "drawing.element"
TIMING_COLUMN_ATTR = "drawing.customName.timing"


def column_attribute(element_mode: bool) -> str:
    """Return the drawing attribute whose linked column holds the exposed cels."""
    return ELEMENT_COLUMN_ATTR if element_mode else TIMING_COLUMN_ATTR


class Element(BaseModel):
    """Storage unit behind an asset identity, holding the stored cel instances."""

    name: Optional[str] = Field(default=None, description="Human readable element name.")
    drawings: List[str] = Field(
        default_factory=list, description="Stored cel names in order of first appearance in storage."
    )

    model_config = {"validate_assignment": True}

    @field_validator("drawings")
    @classmethod
    def _validate_drawings(cls, value: List[str]) -> List[str]:
        if any(name == EMPTY_CEL for name in value):
            msg = "Stored cel names must be non-empty."
            raise ValueError(msg)
        if len(set(value)) != len(value):
            msg = "Stored cel names must be unique within an element."
            raise ValueError(msg)
        return value


class Column(BaseModel):
    """Drawing column mapping frame numbers to cel names."""

    element_id: str = Field(..., description="Identifier of the element this column exposes.")
    entries: Dict[int, str] = Field(
        default_factory=dict, description="Frame number to cel name; missing frames are empty."
    )

    model_config = {"validate_assignment": True}

    @field_validator("entries")
    @classmethod
    def _validate_entries(cls, value: Dict[int, str]) -> Dict[int, str]:
        invalid = sorted(frame for frame in value if frame < 1)
        if invalid:
            msg = f"Frame numbers start at 1, received: {invalid}"
            raise ValueError(msg)
        return {frame: name for frame, name in value.items() if name != EMPTY_CEL}

    def entry(self, frame: int) -> str:
        """Return the cel exposed at ``frame`` or the empty string."""
        return self.entries.get(frame, EMPTY_CEL)


class DrawingNode(BaseModel):
    """Leaf drawing track reading cels from a linked column."""

    kind: Literal["read"] = "read"
    path: str
    element_mode: bool = Field(
        default=True,
        description="Time-based addressing through the element column when true, name-based otherwise.",
    )
    element_column: Optional[str] = Field(default=None, description="Column linked to drawing.element.")
    timing_column: Optional[str] = Field(
        default=None, description="Column linked to drawing.customName.timing."
    )

    @model_validator(mode="after")
    def _validate_columns(self) -> "DrawingNode":
        if not self.element_column and not self.timing_column:
            msg = f"Drawing node '{self.path}' must link at least one column."
            raise ValueError(msg)
        return self

    def iter_drawings(self) -> Iterator["DrawingNode"]:
        yield self

    def iter_nodes(self) -> Iterator["SceneNode"]:
        yield self


class GroupNode(BaseModel):
    """Group of nested scene nodes."""

    kind: Literal["group"] = "group"
    path: str
    children: List["SceneNode"] = Field(default_factory=list)

    def iter_drawings(self) -> Iterator[DrawingNode]:
        """Yield the drawing tracks nested under this group, depth first."""
        for child in self.children:
            yield from child.iter_drawings()

    def iter_nodes(self) -> Iterator["SceneNode"]:
        yield self
        for child in self.children:
            yield from child.iter_nodes()


class OtherNode(BaseModel):
    """Any node that neither exposes drawings nor contains children (pegs, composites, ...)."""

    kind: Literal["other"] = "other"
    path: str
    type: str = "PEG"

    def iter_drawings(self) -> Iterator[DrawingNode]:
        return iter(())

    def iter_nodes(self) -> Iterator["SceneNode"]:
        yield self


SceneNode = Annotated[Union[DrawingNode, GroupNode, OtherNode], Field(discriminator="kind")]

GroupNode.model_rebuild()


class SceneSnapshot(BaseModel):
    """Complete, self-contained state of a scene's drawing storage and node tree."""

    name: str = Field(default="scene", description="Scene name.")
    frame_count: int = Field(..., ge=1, description="Number of frames in the scene timeline.")
    elements: Dict[str, Element] = Field(default_factory=dict)
    columns: Dict[str, Column] = Field(default_factory=dict)
    root: GroupNode = Field(default_factory=lambda: GroupNode(path="Top"))
    selection: List[str] = Field(default_factory=list, description="Selected node paths.")

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "shot_010",
                    "frame_count": 5,
                    "elements": {"1": {"name": "Ball", "drawings": ["c1", "c2", "c3"]}},
                    "columns": {
                        "Ball": {"element_id": "1", "entries": {"1": "c1", "2": "c1", "3": "c2"}}
                    },
                    "root": {
                        "kind": "group",
                        "path": "Top",
                        "children": [{"kind": "read", "path": "Top/Ball", "element_column": "Ball"}],
                    },
                    "selection": ["Top/Ball"],
                }
            ]
        },
    }

    @model_validator(mode="after")
    def _validate_references(self) -> "SceneSnapshot":
        undefined = {column.element_id for column in self.columns.values()} - set(self.elements)
        if undefined:
            missing = ", ".join(sorted(undefined))
            msg = f"Columns reference elements missing from the registry: {missing}"
            raise ValueError(msg)
        seen: Dict[str, int] = {}
        for node in self.root.iter_nodes():
            seen[node.path] = seen.get(node.path, 0) + 1
        duplicates = sorted(path for path, count in seen.items() if count > 1)
        if duplicates:
            msg = f"Node paths must be unique: {', '.join(duplicates)}"
            raise ValueError(msg)
        return self

    def find_node(self, path: str) -> Optional[SceneNode]:
        """Return the node registered under ``path``, if any."""
        for node in self.root.iter_nodes():
            if node.path == path:
                return node
        return None

    def drawing_nodes(self) -> List[DrawingNode]:
        """Return every drawing node of the scene in tree order."""
        return list(self.root.iter_drawings())

    def columns_of(self, element_id: str) -> List[str]:
        """Return the names of all columns linked to ``element_id``."""
        return [name for name, column in self.columns.items() if column.element_id == element_id]


__all__ = [
    "ELEMENT_COLUMN_ATTR",
    "EMPTY_CEL",
    "TIMING_COLUMN_ATTR",
    "Column",
    "DrawingNode",
    "Element",
    "GroupNode",
    "OtherNode",
    "SceneNode",
    "SceneSnapshot",
    "column_attribute",
]
