"""Entry point for python -m kepgen execution.

    python -m kepgen show kepware_hierarchy.json
    python -m kepgen export kepware_hierarchy.json -o kepware_tags.csv
"""

import sys

from kepgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
