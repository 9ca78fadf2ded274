"""Folder/tag hierarchy with structural editing operations.

The Hierarchy owns every node in an id-keyed arena. Folders store the
ordered ids of their children and every node stores its parent id, so
ancestry checks walk ids instead of object references.

All operations take explicit node ids. Resolving what the user has
selected in a tree view is left to the caller; ``container_for`` and
``drop_target_for`` implement the usual "a tag stands for its parent
folder" rule for callers that want it.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from kepgen.config.constants import PATH_SEPARATOR, ROOT_NAME
from kepgen.errors import InvalidTargetError, NodeNotFoundError
from kepgen.models import FolderNode, Node, TagDataType, TagNode

from .validators import names_equal, normalize_name, parse_data_type, unique_copy_name

logger = logging.getLogger(__name__)


class Hierarchy:
    """Tree of folders and tags rooted at a single, permanent root folder."""

    def __init__(self, root_name: str = ROOT_NAME):
        self._nodes: Dict[int, Node] = {}
        self._next_id = 0
        self._root_id = self._new_folder(normalize_name(root_name), None).id

    # ------------------------------------------------------------------
    # Arena helpers
    # ------------------------------------------------------------------
    def _allocate_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def _new_folder(self, name: str, parent_id: Optional[int]) -> FolderNode:
        node = FolderNode(id=self._allocate_id(), name=name, parent_id=parent_id)
        self._nodes[node.id] = node
        return node

    def _new_tag(self, name: str, data_type: TagDataType, parent_id: int) -> TagNode:
        node = TagNode(id=self._allocate_id(), name=name, parent_id=parent_id, data_type=data_type)
        self._nodes[node.id] = node
        return node

    def _folder(self, node_id: int, action: str) -> FolderNode:
        node = self.get(node_id)
        if not isinstance(node, FolderNode):
            raise InvalidTargetError(
                f"Cannot {action}: '{node.name}' is not a folder",
                details={"node_id": node_id},
            )
        return node

    def _warn_if_name_taken(self, parent: FolderNode, name: str, exclude: Optional[int] = None) -> None:
        for child_id in parent.children:
            if child_id == exclude:
                continue
            if names_equal(self._nodes[child_id].name, name):
                logger.warning(f"Duplicate name '{name}' under '{parent.name}' kept as entered")
                return

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def root_id(self) -> int:
        return self._root_id

    @property
    def root(self) -> FolderNode:
        return self._nodes[self._root_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def get(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except (KeyError, TypeError):
            raise NodeNotFoundError(f"No node with id {node_id!r}", details={"node_id": node_id}) from None

    def parent_of(self, node_id: int) -> Optional[FolderNode]:
        parent_id = self.get(node_id).parent_id
        return None if parent_id is None else self._nodes[parent_id]

    def children_of(self, node_id: int) -> List[Node]:
        node = self.get(node_id)
        if isinstance(node, FolderNode):
            return [self._nodes[c] for c in node.children]
        return []

    def is_descendant(self, candidate_id: int, ancestor_id: int) -> bool:
        """True if ``candidate_id`` lies strictly below ``ancestor_id``."""
        current = self.get(candidate_id).parent_id
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._nodes[current].parent_id
        return False

    def path_of(self, node_id: int) -> List[str]:
        """Names from the root's first child down to ``node_id`` (root excluded)."""
        parts = []
        node = self.get(node_id)
        while node.parent_id is not None:
            parts.append(node.name)
            node = self._nodes[node.parent_id]
        parts.reverse()
        return parts

    def find(self, path: Union[str, Sequence[str]]) -> int:
        """Resolve a path below the root to a node id.

        ``path`` is either a sequence of names or a string joined with
        PATH_SEPARATOR; an empty path is the root. Names are matched
        case-insensitively and the first matching sibling wins.
        """
        if isinstance(path, str):
            parts = [p.strip() for p in path.split(PATH_SEPARATOR) if p.strip()]
        else:
            parts = list(path)
        current = self.root
        for depth, part in enumerate(parts):
            match = None
            if isinstance(current, FolderNode):
                for child_id in current.children:
                    if names_equal(self._nodes[child_id].name, part):
                        match = self._nodes[child_id]
                        break
            if match is None:
                shown = PATH_SEPARATOR.join(parts[: depth + 1])
                raise NodeNotFoundError(f"No node at path '{shown}'", details={"path": shown})
            current = match
        return current.id

    def iter_preorder(self, start_id: Optional[int] = None) -> Iterator[Tuple[int, Node]]:
        """Yield ``(depth, node)`` depth-first, parents before children."""
        start = self._root_id if start_id is None else start_id
        stack = [(0, self.get(start))]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            if isinstance(node, FolderNode):
                for child_id in reversed(node.children):
                    stack.append((depth + 1, self._nodes[child_id]))

    def count_tags(self) -> int:
        return sum(1 for n in self._nodes.values() if isinstance(n, TagNode))

    def structure(self, node_id: Optional[int] = None) -> Tuple[Tuple[Any, ...], ...]:
        """Pre-order (depth, name, kind, data_type) rows for structural comparison.

        Depths are relative to ``node_id`` (the root by default). Ids are not
        part of the result, so two hierarchies built separately compare equal
        when their names, kinds, types and order match.
        """
        rows = []
        for depth, node in self.iter_preorder(node_id):
            data_type = node.data_type.value if isinstance(node, TagNode) else None
            rows.append((depth, node.name, node.kind.value, data_type))
        return tuple(rows)

    # ------------------------------------------------------------------
    # Selection helpers
    # ------------------------------------------------------------------
    def container_for(self, node_id: int) -> int:
        """Folder that receives new items when ``node_id`` is selected."""
        node = self.get(node_id)
        if isinstance(node, FolderNode):
            return node.id
        return node.parent_id

    def drop_target_for(self, node_id: int) -> int:
        """Folder that receives a dragged node dropped onto ``node_id``."""
        return self.container_for(node_id)

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------
    def add_folder(self, parent_id: int, name: str) -> int:
        parent = self._folder(parent_id, "add folder")
        name = normalize_name(name)
        self._warn_if_name_taken(parent, name)
        node = self._new_folder(name, parent.id)
        parent.children.append(node.id)
        logger.debug(f"Added folder '{name}' under '{parent.name}'")
        return node.id

    def add_tag(self, parent_id: int, name: str, data_type: Union[TagDataType, str, int]) -> int:
        parent = self._folder(parent_id, "add tag")
        name = normalize_name(name)
        data_type = parse_data_type(data_type)
        self._warn_if_name_taken(parent, name)
        node = self._new_tag(name, data_type, parent.id)
        parent.children.append(node.id)
        logger.debug(f"Added {data_type.value} tag '{name}' under '{parent.name}'")
        return node.id

    def rename(self, node_id: int, new_name: str) -> None:
        """Change the display name only; kind and data type are preserved."""
        node = self.get(node_id)
        new_name = normalize_name(new_name)
        parent = self.parent_of(node_id)
        if parent is not None:
            self._warn_if_name_taken(parent, new_name, exclude=node_id)
        logger.debug(f"Renamed '{node.name}' to '{new_name}'")
        node.name = new_name

    def remove(self, node_id: int) -> None:
        """Detach ``node_id`` and discard its whole subtree."""
        node = self.get(node_id)
        if node.parent_id is None:
            raise InvalidTargetError("The root folder cannot be removed", details={"node_id": node_id})
        doomed = [n.id for _, n in self.iter_preorder(node_id)]
        self._nodes[node.parent_id].children.remove(node_id)
        for nid in doomed:
            del self._nodes[nid]
        logger.debug(f"Removed '{node.name}' ({len(doomed)} node(s))")

    def duplicate(self, folder_id: int) -> int:
        """Deep-copy a non-root folder next to the original.

        The copy is inserted directly after the source and named
        "<name> (n)" with the first n not used by a sibling.
        """
        source = self._folder(folder_id, "duplicate")
        if source.parent_id is None:
            raise InvalidTargetError("The root folder cannot be duplicated", details={"node_id": folder_id})
        parent = self._nodes[source.parent_id]
        name = unique_copy_name(source.name, (self._nodes[c].name for c in parent.children))

        clone = self._copy_subtree(self._nodes, source, parent.id)
        clone.name = name
        parent.children.insert(parent.children.index(source.id) + 1, clone.id)
        logger.debug(f"Duplicated '{source.name}' as '{name}'")
        return clone.id

    def _copy_subtree(self, source_nodes: Dict[int, Node], source: Node, parent_id: int) -> Node:
        """Copy ``source`` and its descendants into this arena under ``parent_id``.

        ``source_nodes`` is the arena ``source`` belongs to; it may be another
        Hierarchy's. The top copy is not attached to its parent.
        """
        top = None
        stack = [(source, parent_id)]
        while stack:
            node, target_id = stack.pop()
            if isinstance(node, TagNode):
                copy = self._new_tag(node.name, node.data_type, target_id)
            else:
                copy = self._new_folder(node.name, target_id)
                for child_id in reversed(node.children):
                    stack.append((source_nodes[child_id], copy.id))
            if top is None:
                top = copy
            else:
                self._nodes[target_id].children.append(copy.id)
        return top

    def move(self, node_id: int, new_parent_id: int) -> bool:
        """Re-parent ``node_id`` as the last child of ``new_parent_id``.

        Returns False, leaving the tree unchanged, when the target is the
        node itself or one of its descendants.
        """
        node = self.get(node_id)
        if node.parent_id is None:
            raise InvalidTargetError("The root folder cannot be moved", details={"node_id": node_id})
        new_parent = self._folder(new_parent_id, "move")
        if new_parent.id == node_id or self.is_descendant(new_parent.id, node_id):
            logger.warning(f"Move of '{node.name}' into '{new_parent.name}' rejected: would create a cycle")
            return False

        self._nodes[node.parent_id].children.remove(node_id)
        new_parent.children.append(node_id)
        node.parent_id = new_parent.id
        logger.debug(f"Moved '{node.name}' into '{new_parent.name}'")
        return True

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------
    def clone(self) -> "Hierarchy":
        """Independent structural copy (ids are reassigned)."""
        copy = Hierarchy(self.root.name)
        for child_id in self.root.children:
            copy.root.children.append(copy._copy_subtree(self._nodes, self._nodes[child_id], copy.root_id).id)
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hierarchy):
            return NotImplemented
        return self.structure() == other.structure()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Hierarchy(root={self.root.name!r}, nodes={len(self._nodes)}, tags={self.count_tags()})"


__all__ = ["Hierarchy"]
