"""
CLI: profile a cargo binary target and render `profile.svg`.

Equivalent to `python -m devflow.flamegraph`, kept next to the other repo
scripts so it can be run from a checkout:
    python scripts/flamegraph.py <target> [--summary]
"""

from __future__ import annotations

from devflow.flamegraph.__main__ import main

if __name__ == "__main__":
    raise SystemExit(main())
