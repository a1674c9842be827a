"""
Put `src` on sys.path so tests run against the working tree without installation.

Keeps a bare `pytest` invocation working with the src/ layout.
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).parent.resolve()
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
