# -*- coding: utf-8 -*-
"""Application-wide constants.

Centralized definitions for the Kepware CSV format, address formats,
default file names and hierarchy conventions used across the project.
"""

# ============================================================================
# Hierarchy and Structure Constants
# ============================================================================

# Name given to the root folder of a fresh hierarchy
ROOT_NAME = "Root"

# Separator between folder names in an exported tag name
# (e.g., "Line1.Motor.Speed")
GROUP_SEPARATOR = "."

# Separator used to address nodes by path on the command line
# (e.g., "Line1/Motor/Speed")
PATH_SEPARATOR = "/"

# Pattern for names generated by duplicate, counter starts at 1
DUPLICATE_NAME_FORMAT = "{name} ({index})"

# ============================================================================
# Address Allocation Constants
# ============================================================================

# String tags: S001, S002, ...
STRING_ADDRESS_FORMAT = "S{index:03d}"
STRING_ADDRESS_START = 1

# Integer tags: D0000, D0001, ...
INTEGER_ADDRESS_FORMAT = "D{index:04d}"
INTEGER_ADDRESS_START = 0

# Boolean tags are packed into 16-bit words: D0000.0 .. D0000.15, D0001.0, ...
BOOLEAN_ADDRESS_FORMAT = "D{word:04d}.{bit}"
BOOLEAN_BITS_PER_WORD = 16

# ============================================================================
# CSV Export Constants
# ============================================================================

# Kepware tag import columns, in file order
CSV_FIELD_NAMES = [
    "Tag Name",
    "Address",
    "Data Type",
    "Respect Data Type",
    "Client Access",
    "Scan Rate",
    "Scaling",
    "Raw Low",
    "Raw High",
    "Scaled Low",
    "Scaled High",
    "Scaled Data Type",
    "Clamp Low",
    "Clamp High",
    "Eng Units",
    "Description",
    "Negate Value",
]

# Fixed values written for every tag
CSV_RESPECT_DATA_TYPE = "1"
CSV_CLIENT_ACCESS = "R/W"
CSV_SCAN_RATE = "100"

# Scaling .. Negate Value are always left empty
CSV_EMPTY_TRAILING_COLUMNS = len(CSV_FIELD_NAMES) - 6

CSV_LINE_TERMINATOR = "\r\n"
CSV_ENCODING = "utf-8"
DEFAULT_CSV_FILENAME = "kepware_tags.csv"

# ============================================================================
# JSON Persistence Constants
# ============================================================================

JSON_ENCODING = "utf-8"
# Reading tolerates a leading byte order mark
JSON_READ_ENCODING = "utf-8-sig"
JSON_INDENT = 2
DEFAULT_JSON_FILENAME = "kepware_hierarchy.json"

# ============================================================================
# Environment
# ============================================================================

# Log level used by the command line when --log-level is not given
LOG_LEVEL_ENV = "KEPGEN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
