"""Core AppController for managing the tag hierarchy and its files.

This module provides the main AppController class which handles:
- The single in-memory hierarchy of one editing session
- Structural edits requested by a front end (tree view, command line)
- CSV export and JSON save/load
"""

import logging
import os
from typing import List, Optional, Union

from kepgen.config.constants import (
    DEFAULT_CSV_FILENAME,
    DEFAULT_JSON_FILENAME,
    JSON_ENCODING,
    JSON_READ_ENCODING,
    ROOT_NAME,
)
from kepgen.errors import LoadError
from kepgen.models import TagDataType, TagRecord

from .hierarchy import Hierarchy
from .json_codec import dumps_hierarchy, loads_hierarchy
from .serializers import build_csv, export_tags_to_csv, flatten_tags

logger = logging.getLogger(__name__)


def _resolve_path(filepath: Optional[str], default_name: str) -> str:
    """Fill in the default file name when given nothing or a directory."""
    if not filepath:
        return default_name
    if os.path.isdir(filepath):
        return os.path.join(filepath, default_name)
    return filepath


class AppController:
    """Main application controller for the tag hierarchy.

    Holds one Hierarchy and provides methods for:
    - Adding, renaming, moving, duplicating and removing nodes
    - Exporting the Kepware CSV
    - Saving and loading the hierarchy as JSON
    """

    def __init__(self, hierarchy: Optional[Hierarchy] = None):
        """Initialize controller with an optional starting hierarchy.

        Args:
            hierarchy: Hierarchy to edit; a fresh one with an empty
                root folder is created when omitted.
        """
        self.hierarchy = hierarchy if hierarchy is not None else Hierarchy(ROOT_NAME)

    def new_hierarchy(self) -> None:
        """Discard the current hierarchy and start from an empty root."""
        self.hierarchy = Hierarchy(ROOT_NAME)

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------
    def add_folder(self, parent_id: int, name: str) -> int:
        return self.hierarchy.add_folder(parent_id, name)

    def add_tag(self, parent_id: int, name: str, data_type: Union[TagDataType, str, int]) -> int:
        return self.hierarchy.add_tag(parent_id, name, data_type)

    def rename(self, node_id: int, new_name: str) -> None:
        self.hierarchy.rename(node_id, new_name)

    def remove(self, node_id: int) -> None:
        self.hierarchy.remove(node_id)

    def duplicate(self, folder_id: int) -> int:
        return self.hierarchy.duplicate(folder_id)

    def move(self, node_id: int, new_parent_id: int) -> bool:
        return self.hierarchy.move(node_id, new_parent_id)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def tags(self) -> List[TagRecord]:
        return flatten_tags(self.hierarchy)

    def csv_text(self) -> str:
        """Kepware CSV for the current hierarchy.

        Raises:
            NoTagsError: if the hierarchy holds no tags.
        """
        return build_csv(self.tags())

    def export_csv(self, filepath: Optional[str] = None) -> str:
        """Write the Kepware CSV and return the path written.

        Args:
            filepath: Target file or directory; defaults to
                ``kepware_tags.csv`` in the working directory.
        """
        path = _resolve_path(filepath, DEFAULT_CSV_FILENAME)
        export_tags_to_csv(self.hierarchy, path)
        return path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def hierarchy_json(self) -> str:
        return dumps_hierarchy(self.hierarchy)

    def save_hierarchy(self, filepath: Optional[str] = None) -> str:
        """Write the hierarchy as JSON and return the path written."""
        path = _resolve_path(filepath, DEFAULT_JSON_FILENAME)
        text = self.hierarchy_json()
        with open(path, "w", encoding=JSON_ENCODING) as f:
            f.write(text)
        logger.info(f"Saved hierarchy ({len(self.hierarchy)} node(s)) to {path}")
        return path

    def load_hierarchy_text(self, text: str) -> Hierarchy:
        """Replace the hierarchy with one decoded from ``text``.

        The current hierarchy is kept when decoding fails.

        Raises:
            LoadError: if ``text`` is not a valid hierarchy document.
        """
        loaded = loads_hierarchy(text)
        self.hierarchy = loaded
        return loaded

    def load_hierarchy(self, filepath: str) -> Hierarchy:
        """Replace the hierarchy with the one stored in ``filepath``.

        Raises:
            OSError: if the file cannot be read.
            LoadError: if the file is not UTF-8 text or not a valid hierarchy document.
        """
        with open(filepath, "r", encoding=JSON_READ_ENCODING) as f:
            try:
                text = f.read()
            except UnicodeDecodeError as e:
                raise LoadError(f"{filepath} is not valid UTF-8 text") from e
        loaded = self.load_hierarchy_text(text)
        logger.info(f"Loaded hierarchy ({len(loaded)} node(s)) from {filepath}")
        return loaded


__all__ = ["AppController"]
