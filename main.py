#!/usr/bin/env python3
"""
Run the saved-locations CLI from the project root.

    python main.py list
    python main.py shell --env test
"""

import sys
from pathlib import Path

project_root = str(Path(__file__).parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from location_framework.main import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
