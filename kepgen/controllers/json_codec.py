"""JSON save/load of a folder/tag hierarchy.

Document shape (one object per node, nested through ``children``)::

    {
      "name": "Root",
      "isFolder": true,
      "dataType": "String",
      "children": [
        {"name": "Speed", "isFolder": false, "dataType": "Integer", "children": []}
      ]
    }

Files written by the earlier desktop tool use PascalCase keys
(``Name``, ``IsFolder``, ``DataType``, ``Children``) and store the data type
as its integer position; both forms are accepted on load.
"""

import json
import logging
from collections import OrderedDict
from typing import Any, Dict

from kepgen.config.constants import JSON_INDENT
from kepgen.errors import InvalidNameError, LoadError
from kepgen.models import FolderNode, Node, TagDataType

from .hierarchy import Hierarchy
from .validators import normalize_name, parse_data_type

logger = logging.getLogger(__name__)

# Data type written for folders, which have none of their own
FOLDER_PLACEHOLDER_TYPE = TagDataType.STRING

_KEY_ALIASES = {
    "name": ("name", "Name"),
    "isFolder": ("isFolder", "IsFolder"),
    "dataType": ("dataType", "DataType"),
    "children": ("children", "Children"),
}

_MISSING = object()


def _node_dict(node: Node) -> Dict[str, Any]:
    out = OrderedDict()
    out["name"] = node.name
    out["isFolder"] = node.is_folder
    if isinstance(node, FolderNode):
        out["dataType"] = FOLDER_PLACEHOLDER_TYPE.value
    else:
        out["dataType"] = node.data_type.value
    out["children"] = []
    return out


def hierarchy_to_dict(hierarchy: Hierarchy) -> Dict[str, Any]:
    """Serialize ``hierarchy`` to nested dicts, starting at the root."""
    root = _node_dict(hierarchy.root)
    stack = [(hierarchy.root, root)]
    while stack:
        node, out = stack.pop()
        for child in hierarchy.children_of(node.id):
            child_out = _node_dict(child)
            out["children"].append(child_out)
            stack.append((child, child_out))
    return root


def _scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def dumps_hierarchy(hierarchy: Hierarchy) -> str:
    """Pretty-printed JSON text for ``hierarchy``.

    The output matches ``json.dumps(hierarchy_to_dict(h), indent=JSON_INDENT,
    ensure_ascii=False)`` but is produced without recursion, so folder depth
    is not bounded by the interpreter's recursion limit.
    """
    lines = []
    stack = [("node", hierarchy.root, 0, True)]
    while stack:
        entry = stack.pop()
        if entry[0] == "close":
            lines.append(entry[1])
            continue
        _, node, depth, last = entry
        pad = " " * (JSON_INDENT * depth)
        inner = " " * (JSON_INDENT * (depth + 1))
        data_type = FOLDER_PLACEHOLDER_TYPE if isinstance(node, FolderNode) else node.data_type
        suffix = "" if last else ","
        lines.append(pad + "{")
        lines.append(f'{inner}"name": {_scalar(node.name)},')
        lines.append(f'{inner}"isFolder": {_scalar(node.is_folder)},')
        lines.append(f'{inner}"dataType": {_scalar(data_type.value)},')

        children = hierarchy.children_of(node.id)
        if not children:
            lines.append(f'{inner}"children": []')
            lines.append(pad + "}" + suffix)
            continue
        lines.append(f'{inner}"children": [')
        stack.append(("close", pad + "}" + suffix))
        stack.append(("close", inner + "]"))
        for i in reversed(range(len(children))):
            stack.append(("node", children[i], depth + 2, i == len(children) - 1))
    return "\n".join(lines)


def _field(node: Dict[str, Any], key: str) -> Any:
    for alias in _KEY_ALIASES[key]:
        if alias in node:
            return node[alias]
    return _MISSING


def _read_header(node: Any, path: str):
    """Validate the fields shared by folders and tags; return (name, is_folder)."""
    if not isinstance(node, dict):
        raise LoadError("Node must be a JSON object", path=path)

    name = _field(node, "name")
    if name is _MISSING:
        raise LoadError("Missing required field 'name'", path=path)
    if not isinstance(name, str):
        raise LoadError("Field 'name' must be a string", path=path)
    try:
        name = normalize_name(name)
    except InvalidNameError:
        raise LoadError("Field 'name' must not be blank", path=path) from None

    is_folder = _field(node, "isFolder")
    if is_folder is _MISSING:
        raise LoadError("Missing required field 'isFolder'", path=path)
    if not isinstance(is_folder, bool):
        raise LoadError("Field 'isFolder' must be true or false", path=path)
    return name, is_folder


def _read_children(node: Dict[str, Any], path: str) -> list:
    children = _field(node, "children")
    if children is _MISSING or children is None:
        return []
    if not isinstance(children, list):
        raise LoadError("Field 'children' must be an array", path=path)
    return children


def _read_data_type(node: Dict[str, Any], path: str) -> TagDataType:
    raw = _field(node, "dataType")
    if raw is _MISSING or raw is None:
        raise LoadError("Missing required field 'dataType'", path=path)
    try:
        return parse_data_type(raw)
    except ValueError:
        raise LoadError(f"Unknown dataType {raw!r}", path=path) from None


def hierarchy_from_dict(doc: Any) -> Hierarchy:
    """Build a new Hierarchy from a decoded JSON document.

    Raises:
        LoadError: if any node is malformed or the root is not a folder.
    """
    root_name, root_is_folder = _read_header(doc, "$")
    if not root_is_folder:
        raise LoadError("Root node must be a folder", path="$")

    hierarchy = Hierarchy(root_name)
    top = _read_children(doc, "$")
    stack = [(hierarchy.root_id, top[i], f"$.children[{i}]") for i in reversed(range(len(top)))]
    while stack:
        parent_id, node, path = stack.pop()
        name, is_folder = _read_header(node, path)
        if is_folder:
            folder_id = hierarchy.add_folder(parent_id, name)
            children = _read_children(node, path)
            for i in reversed(range(len(children))):
                stack.append((folder_id, children[i], f"{path}.children[{i}]"))
            continue
        data_type = _read_data_type(node, path)
        hierarchy.add_tag(parent_id, name, data_type)
        dropped = _read_children(node, path)
        if dropped:
            logger.warning(f"Tag '{name}' at {path} has {len(dropped)} child node(s); ignored")
    return hierarchy


def loads_hierarchy(text: str) -> Hierarchy:
    """Decode JSON text into a new Hierarchy.

    Raises:
        LoadError: on malformed JSON or an invalid document.
    """
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise LoadError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise LoadError("Document is nested too deeply") from e
    return hierarchy_from_dict(doc)


__all__ = [
    "hierarchy_to_dict",
    "hierarchy_from_dict",
    "dumps_hierarchy",
    "loads_hierarchy",
]
