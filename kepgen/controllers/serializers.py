"""Tag flattening and Kepware CSV export.

This module turns a folder/tag hierarchy into the flat tag list consumed
by the Kepware CSV importer:
- flatten_tags: depth-first walk producing dotted tag names
- build_csv: CSV text with allocated addresses
- export_tags_to_csv: write that text to disk
"""

import csv
import io
import logging
import os
from typing import List, Sequence

from kepgen.config.constants import (
    CSV_CLIENT_ACCESS,
    CSV_EMPTY_TRAILING_COLUMNS,
    CSV_ENCODING,
    CSV_FIELD_NAMES,
    CSV_LINE_TERMINATOR,
    CSV_RESPECT_DATA_TYPE,
    CSV_SCAN_RATE,
    GROUP_SEPARATOR,
)
from kepgen.errors import NoTagsError
from kepgen.models import FolderNode, TagNode, TagRecord

from .addressing import AddressAllocator
from .hierarchy import Hierarchy

logger = logging.getLogger(__name__)


def flatten_tags(hierarchy: Hierarchy) -> List[TagRecord]:
    """Collect every tag in pre-order with its dotted full name.

    Folder names (the root excluded) form the prefix, e.g. a tag "Speed"
    in folder "Motor" inside folder "Line1" becomes "Line1.Motor.Speed".
    Folders produce no records of their own.
    """
    records: List[TagRecord] = []
    path: List[str] = []
    for depth, node in hierarchy.iter_preorder():
        if depth == 0:
            continue
        del path[depth - 1 :]
        if isinstance(node, FolderNode):
            path.append(node.name)
        elif isinstance(node, TagNode):
            full_name = GROUP_SEPARATOR.join(path + [node.name])
            records.append(TagRecord(full_name, node.data_type))
    return records


def csv_row(record: TagRecord, address: str) -> List[str]:
    """One CSV row: name, address, type, fixed settings, empty scaling columns."""
    return [
        record.full_name,
        address,
        record.data_type.csv_name,
        CSV_RESPECT_DATA_TYPE,
        CSV_CLIENT_ACCESS,
        CSV_SCAN_RATE,
    ] + [""] * CSV_EMPTY_TRAILING_COLUMNS


def build_csv(records: Sequence[TagRecord]) -> str:
    """Render tag records as Kepware CSV text.

    Addresses come from a fresh AddressAllocator, assigned in record order.

    Raises:
        NoTagsError: if ``records`` is empty.
    """
    if not records:
        raise NoTagsError()

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator=CSV_LINE_TERMINATOR)
    writer.writerow(CSV_FIELD_NAMES)
    for record, address in AddressAllocator().allocate(records):
        writer.writerow(csv_row(record, address))
    return buf.getvalue()


def export_tags_to_csv(hierarchy: Hierarchy, filepath: str) -> int:
    """Export every tag of ``hierarchy`` to a CSV file.

    The text is fully built before the file is opened, so a hierarchy
    without tags never creates a file.

    Args:
        hierarchy: Hierarchy to export
        filepath: Path where CSV will be written

    Returns:
        Number of tag rows written.

    Raises:
        NoTagsError: if the hierarchy holds no tags.
        OSError: if the file cannot be written.
    """
    records = flatten_tags(hierarchy)
    text = build_csv(records)

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding=CSV_ENCODING, newline="") as f:
        f.write(text)
    logger.info(f"Exported {len(records)} tag(s) to {filepath}")
    return len(records)


__all__ = [
    "flatten_tags",
    "csv_row",
    "build_csv",
    "export_tags_to_csv",
]
