from __future__ import annotations

import argparse
from pathlib import Path

from .. import paths
from . import workflow


def _abs_path(p: str) -> Path:
    return Path(p).expanduser().resolve()


def _default_workdir() -> Path:
    # Outside any crate, fall back to cwd and let the prereq check report the missing manifest.
    try:
        return paths.find_cargo_root(Path.cwd())
    except FileNotFoundError:
        return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for the flame-graph pipeline."""
    parser = argparse.ArgumentParser(
        prog="devflow.flamegraph",
        description="Build a cargo binary in release mode, profile it with perf, and render profile.svg.",
    )
    parser.add_argument("target", help="Cargo binary target to build and profile (cargo build --bin <target>).")
    parser.add_argument(
        "--workdir", type=_abs_path, default=None, help="Crate root to run in (default: nearest Cargo.toml above the current directory)."
    )
    parser.add_argument("--config", type=_abs_path, default=None, help="Path to devflow.json (default: <workdir>/devflow.json).")
    parser.add_argument("--frequency", type=int, default=None, help="perf sampling frequency in Hz (default: 99).")
    parser.add_argument("--summary", action="store_true", help="Also write a Markdown hot-stack summary next to the SVG.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint. Returns process exit code."""
    ns = build_parser().parse_args(argv)
    return workflow.run(
        ns.target,
        workdir=ns.workdir or _default_workdir(),
        config_path=ns.config,
        summary=ns.summary,
        frequency=ns.frequency,
    )


if __name__ == "__main__":
    raise SystemExit(main())
