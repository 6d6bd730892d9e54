from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    PAGE = "page"
    DATABASE = "database"
    CONTAINER = "container"  # any other block that reports has_children
    BLOCK = "block"


class Node(BaseModel):
    """One unit of mirrored content (page, database row or block).

    Provider fields we do not model are kept as pydantic extras and written back
    unchanged. ``children``/``pages`` are only present once the node has been
    expanded; ``None`` means "not expanded", not "empty".
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., description="Provider node id")
    object: Optional[str] = Field(None, description="Provider object type: page, block, database")
    type: Optional[str] = Field(None, description="Block type, e.g. child_page or paragraph")
    has_children: Optional[bool] = Field(None, description="Provider hint that the block has children")
    children: Optional[List[Node]] = Field(None, description="Expanded direct descendants")
    pages: Optional[List[Node]] = Field(None, description="Expanded rows of a nested database")

    @property
    def kind(self) -> NodeKind:
        if self.type == "child_page":
            return NodeKind.PAGE
        if self.type == "child_database":
            return NodeKind.DATABASE
        if self.has_children:
            return NodeKind.CONTAINER
        return NodeKind.BLOCK

    def descendants(self) -> Iterator[Node]:
        """Yield expanded children, then database rows, in stored order."""
        for child in self.children or ():
            yield child
        for page in self.pages or ():
            yield page

    def to_dict(self) -> Dict[str, Any]:
        # exclude_unset keeps unexpanded nodes free of children/pages keys
        return self.model_dump(mode="json", exclude_unset=True)


Node.model_rebuild()

Forest = List[Node]


def forest_to_list(forest: Forest) -> List[Dict[str, Any]]:
    return [node.to_dict() for node in forest]


def forest_from_list(items: List[Dict[str, Any]]) -> Forest:
    return [Node.model_validate(item) for item in items]
