from __future__ import annotations

import subprocess
from collections.abc import Iterable
from pathlib import Path


def parse_name_list(raw: bytes) -> list[str]:
    """Split `git diff --name-only -z` output (NUL-terminated paths)."""
    return [p for p in raw.decode(errors="surrogateescape").split("\0") if p]


def list_staged_files(repo_root: Path) -> list[str]:
    """Return paths staged in the index, relative to `repo_root`, in git's order."""
    out = subprocess.check_output(["git", "diff", "--cached", "--name-only", "-z"], cwd=repo_root)
    return parse_name_list(out)


def filter_sources(paths: Iterable[str], extensions: Iterable[str]) -> list[str]:
    suffixes = tuple(extensions)
    return [p for p in paths if p.endswith(suffixes)]
