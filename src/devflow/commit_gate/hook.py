from __future__ import annotations

import shlex
import sys
from pathlib import Path

HOOK_NAME = "pre-commit"


def render_hook_script(*, python: str) -> str:
    return "\n".join(
        [
            "#!/bin/sh",
            "# Installed by devflow: run tests and clippy when Rust sources are staged.",
            f"exec {shlex.quote(python)} -m devflow.commit_gate run",
            "",
        ]
    )


def install_hook(*, hooks_dir: Path, force: bool = False, python: str | None = None) -> Path:
    """Write an executable `pre-commit` shim into `hooks_dir` and return its path.

    Raises FileExistsError rather than clobbering a hook that is already there,
    unless `force` is set.
    """
    hook_path = hooks_dir / HOOK_NAME
    if hook_path.exists() and not force:
        raise FileExistsError(f"Refusing to overwrite existing hook: {hook_path} (use --force)")

    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(render_hook_script(python=python or sys.executable))
    hook_path.chmod(0o755)
    return hook_path
