from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from .. import paths
from . import gate, hook


def _abs_path(p: str) -> Path:
    return Path(p).expanduser().resolve()


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for the pre-commit gate."""
    parser = argparse.ArgumentParser(
        prog="devflow.commit_gate",
        description="Run cargo tests and clippy before a commit when Rust sources are staged.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Evaluate the staged changes (what the git hook calls).")
    run.add_argument("--config", type=_abs_path, default=None, help="Path to devflow.json (default: <repo>/devflow.json).")

    install = sub.add_parser("install", help="Install the git pre-commit hook for this repository.")
    install.add_argument("--force", action="store_true", help="Overwrite an existing pre-commit hook.")

    return parser


def _install(*, force: bool) -> int:
    try:
        repo_root = paths.git_toplevel(Path.cwd())
        hooks_dir = paths.git_hooks_dir(repo_root)
    except (subprocess.CalledProcessError, OSError):
        print("Not inside a git repository.", file=sys.stderr)
        return 2

    try:
        hook_path = hook.install_hook(hooks_dir=hooks_dir, force=force)
    except FileExistsError as e:
        print(str(e), file=sys.stderr)
        return 2
    print(f"Installed {hook_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint. Returns process exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    if ns.cmd == "run":
        return gate.run(cwd=Path.cwd(), config_path=ns.config)
    if ns.cmd == "install":
        return _install(force=ns.force)

    raise AssertionError(f"Unhandled cmd: {ns.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
