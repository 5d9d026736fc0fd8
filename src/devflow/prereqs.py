from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from .config import FlamegraphSettings, GateSettings
from .model import PrerequisiteCheck
from .paths import CARGO_MANIFEST


def check_command_available(check_name: str, command: tuple[str, ...] | list[str], *, hint: str) -> PrerequisiteCheck:
    """Lightweight PATH lookup for the first word of `command` (nothing is executed)."""
    if command and shutil.which(command[0]) is not None:
        return PrerequisiteCheck(check_name=check_name, status="pass")
    exe = command[0] if command else "<empty>"
    return PrerequisiteCheck(check_name=check_name, status="fail", details=f"`{exe}` not found on PATH. {hint}")


def check_git_work_tree(repo_root: Path) -> PrerequisiteCheck:
    if shutil.which("git") is None:
        return PrerequisiteCheck(check_name="git_work_tree", status="fail", details="Install git and ensure it is on PATH.")
    try:
        out = subprocess.check_output(
            ["git", "rev-parse", "--is-inside-work-tree"], cwd=repo_root, stderr=subprocess.DEVNULL
        )
    except (subprocess.CalledProcessError, OSError) as e:
        return PrerequisiteCheck(check_name="git_work_tree", status="fail", details=f"Not a git work tree: {repo_root} ({e})")
    if out.decode().strip() != "true":
        return PrerequisiteCheck(check_name="git_work_tree", status="fail", details=f"Not a git work tree: {repo_root}")
    return PrerequisiteCheck(check_name="git_work_tree", status="pass")


def check_cargo_manifest(workdir: Path) -> PrerequisiteCheck:
    if (workdir / CARGO_MANIFEST).is_file():
        return PrerequisiteCheck(check_name="cargo_manifest", status="pass")
    return PrerequisiteCheck(
        check_name="cargo_manifest",
        status="fail",
        details=f"No {CARGO_MANIFEST} in {workdir}; run from the crate root or pass --workdir.",
    )


def check_workdir_writable(workdir: Path) -> PrerequisiteCheck:
    test = workdir / f".devflow_write_test_{os.getpid()}"
    try:
        test.write_text("ok")
        test.unlink()
    except OSError as e:
        return PrerequisiteCheck(check_name="workdir_writable", status="fail", details=str(e))
    return PrerequisiteCheck(check_name="workdir_writable", status="pass")


def gate_checks(*, repo_root: Path, settings: GateSettings) -> list[PrerequisiteCheck]:
    return [
        check_git_work_tree(repo_root),
        check_command_available("test_runner", settings.test_command, hint="Install the Rust toolchain (rustup)."),
        check_command_available("linter", settings.lint_command, hint="Run: rustup component add clippy"),
    ]


def flamegraph_checks(*, workdir: Path, settings: FlamegraphSettings) -> list[PrerequisiteCheck]:
    return [
        check_cargo_manifest(workdir),
        check_workdir_writable(workdir),
        check_command_available("builder", settings.cargo_command, hint="Install the Rust toolchain (rustup)."),
        check_command_available("sampler", settings.perf_command, hint="Install linux perf (e.g. linux-tools-common)."),
        check_command_available("stack_collapser", settings.collapse_command, hint="Run: cargo install inferno"),
        check_command_available("flamegraph_renderer", settings.render_command, hint="Run: cargo install inferno"),
    ]


def format_prereq_failures(checks: list[PrerequisiteCheck]) -> str:
    lines: list[str] = ["Missing prerequisites:"]
    for c in checks:
        if c.status != "fail":
            continue
        hint = f" - {c.details}" if c.details else ""
        lines.append(f"- {c.check_name}{hint}")
    return "\n".join(lines)
