from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from jsonschema import ValidationError

from .. import paths, prereqs
from ..config import GateSettings, load_config
from ..toolchain import Linter, TestRunner, ToolError, command_tool
from .staged import filter_sources, list_staged_files

PREFIX = "[pre-commit]"


def evaluate_commit(staged_paths: Sequence[str], *, tests: TestRunner, linter: Linter, settings: GateSettings) -> int:
    """Decide whether a commit may proceed. Returns the process exit code.

    Tests run strictly before lint; the first failure ends the gate with that
    tool's exit code.
    """
    sources = filter_sources(staged_paths, settings.source_extensions)
    if not sources:
        exts = ", ".join(settings.source_extensions)
        print(f"{PREFIX} no staged {exts} files, nothing to do")
        return 0

    print(f"{PREFIX} {len(sources)} source file(s) staged, running tests...")
    try:
        tests.run(list(settings.test_args))
    except ToolError as e:
        print(f"{PREFIX} FAIL: tests ({e})", file=sys.stderr)
        return e.returncode

    print(f"{PREFIX} tests: PASS, running lint...")
    try:
        linter.run(list(settings.lint_args))
    except ToolError as e:
        print(f"{PREFIX} FAIL: lint ({e})", file=sys.stderr)
        return e.returncode

    print(f"{PREFIX} PASS")
    return 0


def run(*, cwd: Path, config_path: Path | None = None) -> int:
    """Hook entry point: resolve the repository, query the index, run the gate."""
    try:
        repo_root = paths.git_toplevel(cwd)
    except (subprocess.CalledProcessError, OSError):
        print(f"{PREFIX} not inside a git repository: {cwd}", file=sys.stderr)
        return 2

    try:
        settings = load_config(project_root=repo_root, config_path=config_path).commit_gate
    except (OSError, ValueError, ValidationError) as e:
        print(f"{PREFIX} invalid configuration: {getattr(e, 'message', e)}", file=sys.stderr)
        return 2

    try:
        staged = list_staged_files(repo_root)
    except (subprocess.CalledProcessError, OSError) as e:
        print(f"{PREFIX} cannot list staged files: {e}", file=sys.stderr)
        return 2
    # Tools are only checked when something relevant is staged.
    if filter_sources(staged, settings.source_extensions):
        checks = prereqs.gate_checks(repo_root=repo_root, settings=settings)
        if any(c.status == "fail" for c in checks):
            print(prereqs.format_prereq_failures(checks), file=sys.stderr)
            return 2

    tests = command_tool("tests", settings.test_command, cwd=repo_root)
    linter = command_tool("lint", settings.lint_command, cwd=repo_root)
    return evaluate_commit(staged, tests=tests, linter=linter, settings=settings)
