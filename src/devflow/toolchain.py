"""
External tool invocation.

Every collaborator the pipelines shell out to (cargo, perf, the inferno
converters, git hooks' test and lint runners) is reached through the `Tool`
protocol below. The subprocess-backed `CommandTool` is what the CLIs use; unit
tests substitute fakes that record calls instead of spawning processes.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Protocol

import attrs

from .model import ToolOutput

# Shell convention for "command not found".
EXIT_NOT_FOUND = 127


class ToolError(Exception):
    """A tool exited non-zero (or could not be started)."""

    def __init__(self, tool: str, argv: list[str], returncode: int, message: str | None = None) -> None:
        self.tool = tool
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(message or f"{tool} failed with exit code {returncode}: {shlex.join(self.argv)}")


class MissingOutputError(ToolError):
    """A tool exited 0 but did not produce the file the next stage needs."""

    def __init__(self, tool: str, argv: list[str], missing: Path) -> None:
        self.missing = missing
        super().__init__(tool, argv, 1, f"{tool} did not produce expected output: {missing}")


class Tool(Protocol):
    name: str

    def run(self, args: list[str], *, input: bytes | None = None, capture: bool = False) -> ToolOutput: ...


# Role names used by the pipelines. They are all plain tools.
Builder = Tool
TestRunner = Tool
Linter = Tool
Sampler = Tool
StackCollapser = Tool
FlameGraphRenderer = Tool


@attrs.define(frozen=True, slots=True)
class CommandTool:
    """Run `prefix + args` as a child process in `cwd`.

    Without `capture` the child inherits stdout/stderr so the developer sees the
    tool's own output; with `capture` stdout is returned in `ToolOutput.stdout`.
    """

    name: str
    prefix: tuple[str, ...]
    cwd: Path | None = None

    def argv(self, args: list[str]) -> list[str]:
        return [*self.prefix, *args]

    def run(self, args: list[str], *, input: bytes | None = None, capture: bool = False) -> ToolOutput:
        argv = self.argv(args)
        try:
            proc = subprocess.run(
                argv,
                cwd=self.cwd,
                input=input,
                stdout=subprocess.PIPE if capture else None,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolError(self.name, argv, EXIT_NOT_FOUND, f"{self.name}: cannot execute {argv[0]!r} ({e.strerror})") from e

        if proc.returncode != 0:
            raise ToolError(self.name, argv, proc.returncode)
        return ToolOutput(argv=argv, returncode=proc.returncode, stdout=proc.stdout or b"")


def command_tool(name: str, command: list[str] | tuple[str, ...], *, cwd: Path | None = None) -> CommandTool:
    if not command:
        raise ValueError(f"Empty command for tool '{name}'")
    return CommandTool(name=name, prefix=tuple(command), cwd=cwd)
