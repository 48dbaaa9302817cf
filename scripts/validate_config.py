#!/usr/bin/env python3
"""Check the fiscal year YAML files from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

# Make ``src`` importable when the package is not installed.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from immotax.backend.config.validator import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
