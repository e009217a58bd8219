#!/usr/bin/env python3
"""
Thin wrapper to run term discovery + subject fetching.
"""

from __future__ import annotations

import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from term_catalog.pipeline import cli  # noqa: E402


if __name__ == "__main__":
    cli()
