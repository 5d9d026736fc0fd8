from __future__ import annotations

import re
import subprocess
from pathlib import Path

CARGO_MANIFEST = "Cargo.toml"


def find_cargo_root(start: Path) -> Path:
    """Return the nearest directory at or above `start` holding a `Cargo.toml`."""
    start = start.resolve()
    for parent in (start, *start.parents):
        if (parent / CARGO_MANIFEST).is_file():
            return parent
    raise FileNotFoundError(f"No {CARGO_MANIFEST} found at or above: {start}")


def git_toplevel(cwd: Path) -> Path:
    out = subprocess.check_output(["git", "rev-parse", "--show-toplevel"], cwd=cwd, stderr=subprocess.DEVNULL)
    return Path(out.decode().strip()).resolve()


def git_hooks_dir(repo_root: Path) -> Path:
    """Return the hooks directory git will actually consult (honours worktrees and core.hooksPath)."""
    out = subprocess.check_output(["git", "rev-parse", "--git-path", "hooks"], cwd=repo_root, stderr=subprocess.DEVNULL)
    p = Path(out.decode().strip())
    return p if p.is_absolute() else (repo_root / p).resolve()


_TARGET_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")


def validate_target_name(target_name: str) -> None:
    """Reject names that cannot be a cargo binary target (also keeps them path-safe)."""
    if not _TARGET_RE.fullmatch(target_name):
        raise ValueError(
            f"Invalid target name '{target_name}'. Expected /^[A-Za-z0-9][A-Za-z0-9_-]{{0,127}}$/."
        )


def release_binary_path(workdir: Path, target_name: str) -> Path:
    validate_target_name(target_name)
    return workdir / "target" / "release" / target_name
