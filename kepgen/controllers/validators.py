"""Name and data type normalization for the hierarchy controllers.

This module provides helper functions for normalizing user input so that
folder and tag names, data types and generated copy names are handled the
same way by the hierarchy, the JSON loader and the command line.
"""

import re
from typing import Any, Iterable

from kepgen.config.constants import DUPLICATE_NAME_FORMAT
from kepgen.errors import InvalidNameError
from kepgen.models import TagDataType


def normalize_name(name: Any) -> str:
    """Trim a folder/tag name and reject blank input.

    Raises:
        InvalidNameError: if the name is None or blank after trimming.
    """
    if name is None:
        raise InvalidNameError()
    s = str(name).strip()
    if not s:
        raise InvalidNameError()
    return s


def names_equal(a: str, b: str) -> bool:
    """Case-insensitive name comparison used for sibling uniqueness."""
    return a.casefold() == b.casefold()


def parse_data_type(value: Any) -> TagDataType:
    """Convert user or file input to a TagDataType.

    Accepts a TagDataType, a member name or value in any case
    ("integer", "Integer", "INTEGER"), or the integer position 0/1/2.

    Raises:
        ValueError: if the value does not name one of the three types.
    """
    if isinstance(value, TagDataType):
        return value
    # bool is an int subclass; True/False are not data types
    if isinstance(value, bool):
        raise ValueError(f"Unknown data type: {value!r}")
    if isinstance(value, int):
        members = list(TagDataType)
        if 0 <= value < len(members):
            return members[value]
        raise ValueError(f"Unknown data type: {value!r}")
    if isinstance(value, str):
        s = value.strip()
        if re.fullmatch(r"\d+", s):
            return parse_data_type(int(s))
        low = s.lower()
        for member in TagDataType:
            if low in (member.value.lower(), member.name.lower()):
                return member
    raise ValueError(f"Unknown data type: {value!r}")


def unique_copy_name(base_name: str, used: Iterable[str]) -> str:
    """Return the first free "<base> (n)" name, n counting from 1.

    ``used`` are the names already present among the siblings; the check is
    case-insensitive.
    """
    taken = {u.casefold() for u in used}
    index = 1
    while True:
        candidate = DUPLICATE_NAME_FORMAT.format(name=base_name, index=index)
        if candidate.casefold() not in taken:
            return candidate
        index += 1


__all__ = [
    "normalize_name",
    "names_equal",
    "parse_data_type",
    "unique_copy_name",
]
