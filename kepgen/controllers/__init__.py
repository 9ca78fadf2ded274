"""Controllers package - hierarchy management for kepgen.

This package provides:
- AppController: session controller for edits, export and save/load
- Hierarchy: folder/tag tree with structural operations
- AddressAllocator: per-type address generation
- Serialization: tag flattening, Kepware CSV and JSON codecs
- Validation utilities: name and data type normalization
"""

from .base_controller import AppController
from .hierarchy import Hierarchy
from .addressing import AddressAllocator
from .validators import (
    normalize_name,
    names_equal,
    parse_data_type,
    unique_copy_name,
)
from .serializers import (
    flatten_tags,
    csv_row,
    build_csv,
    export_tags_to_csv,
)
from .json_codec import (
    hierarchy_to_dict,
    hierarchy_from_dict,
    dumps_hierarchy,
    loads_hierarchy,
)

__all__ = [
    # Main classes
    "AppController",
    "Hierarchy",
    "AddressAllocator",
    # Validators
    "normalize_name",
    "names_equal",
    "parse_data_type",
    "unique_copy_name",
    # Serializers
    "flatten_tags",
    "csv_row",
    "build_csv",
    "export_tags_to_csv",
    # JSON
    "hierarchy_to_dict",
    "hierarchy_from_dict",
    "dumps_hierarchy",
    "loads_hierarchy",
]
