"""Node types for the folder/tag hierarchy.

Nodes live in an arena owned by ``Hierarchy`` and refer to each other by
integer id: a folder keeps the ordered ids of its children, every node keeps
the id of its parent (``None`` for the root).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TagDataType(Enum):
    """Data type of an exported tag.

    Declaration order is significant: the integer form used by older
    hierarchy files is the member's position (String=0, Integer=1, Boolean=2).
    """

    STRING = "String"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"

    @property
    def csv_name(self) -> str:
        """Lower-case type name written in the CSV ``Data Type`` column."""
        return self.value.lower()


class NodeKind(Enum):
    FOLDER = "Folder"
    TAG = "Tag"


@dataclass
class Node(ABC):
    id: int
    name: str
    parent_id: Optional[int] = None

    @property
    @abstractmethod
    def kind(self) -> NodeKind:
        ...

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER


@dataclass
class FolderNode(Node):
    children: List[int] = field(default_factory=list)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FOLDER


@dataclass
class TagNode(Node):
    data_type: TagDataType = TagDataType.STRING

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TAG


@dataclass(frozen=True)
class TagRecord:
    """One flattened tag: dotted full name plus data type."""

    full_name: str
    data_type: TagDataType


__all__ = ["TagDataType", "NodeKind", "Node", "FolderNode", "TagNode", "TagRecord"]
