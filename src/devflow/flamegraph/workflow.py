from __future__ import annotations

import sys
from pathlib import Path

import attrs
from jsonschema import ValidationError

from .. import paths, prereqs
from ..config import FlamegraphSettings, load_config
from ..toolchain import MissingOutputError, ToolError, command_tool
from . import artifacts, commands, summary
from .model import ProfileArtifacts, ProfilingTools

PREFIX = "[flamegraph]"


def profile(target_name: str, *, workdir: Path, tools: ProfilingTools, settings: FlamegraphSettings) -> ProfileArtifacts:
    """Build `target_name`, sample it, and render the flame graph into `workdir`.

    Each stage starts only after the previous one succeeded; the first failure
    raises `ToolError`. The build runs before any intermediate exists. Once
    sampling starts, the collapsed file and raw traces are removed on every
    exit path; the image and summary are never part of that cleanup.
    """
    paths.validate_target_name(target_name)
    out = artifacts.profile_artifact_paths(workdir=workdir, target_name=target_name, settings=settings)

    print(f"{PREFIX} building {target_name} (release)...")
    build = tools.builder.run(commands.build_args(target_name))
    if not out.binary_path.is_file():
        raise MissingOutputError(tools.builder.name, build.argv, out.binary_path)

    with artifacts.transient_artifacts(
        workdir=out.output_path.parent,
        folded=out.folded_path,
        trace=out.trace_path,
        trace_glob=settings.trace_glob,
        keep=[out.output_path, out.summary_path],
    ):
        print(f"{PREFIX} sampling {out.binary_path.name} at {settings.sample_frequency} Hz...")
        record = tools.sampler.run(
            commands.record_args(binary=out.binary_path, trace=out.trace_path, frequency=settings.sample_frequency)
        )
        if not out.trace_path.is_file():
            raise MissingOutputError(tools.sampler.name, record.argv, out.trace_path)

        print(f"{PREFIX} collapsing stacks...")
        trace_text = tools.sampler.run(commands.script_args(trace=out.trace_path), capture=True)
        folded = tools.collapser.run([], input=trace_text.stdout, capture=True)
        out.folded_path.write_bytes(folded.stdout)

        print(f"{PREFIX} rendering {out.output_path.name}...")
        rendered = tools.renderer.run(commands.render_args(folded=out.folded_path), capture=True)
        if not rendered.stdout.strip():
            raise MissingOutputError(tools.renderer.name, rendered.argv, out.output_path)
        out.output_path.write_bytes(rendered.stdout)

        if out.summary_path is not None:
            stacks = summary.parse_folded(folded.text)
            summary.write_summary(out.summary_path, stacks, target_name=target_name)

    return out


def subprocess_tools(*, workdir: Path, settings: FlamegraphSettings) -> ProfilingTools:
    return ProfilingTools(
        builder=command_tool("cargo", settings.cargo_command, cwd=workdir),
        sampler=command_tool("perf", settings.perf_command, cwd=workdir),
        collapser=command_tool("collapse", settings.collapse_command, cwd=workdir),
        renderer=command_tool("flamegraph", settings.render_command, cwd=workdir),
    )


def run(
    target_name: str,
    *,
    workdir: Path,
    config_path: Path | None = None,
    summary: bool = False,
    frequency: int | None = None,
) -> int:
    """CLI-level driver. Returns process exit code (the failing stage's code, 0 on success)."""
    try:
        paths.validate_target_name(target_name)
        settings = load_config(project_root=workdir, config_path=config_path).flamegraph
    except (OSError, ValueError, ValidationError) as e:
        print(f"{PREFIX} {getattr(e, 'message', e)}", file=sys.stderr)
        return 2

    overrides: dict[str, object] = {}
    if summary:
        overrides["summary"] = True
    if frequency is not None:
        overrides["sample_frequency"] = frequency
    try:
        settings = attrs.evolve(settings, **overrides)
    except ValueError as e:
        print(f"{PREFIX} {e}", file=sys.stderr)
        return 2

    checks = prereqs.flamegraph_checks(workdir=workdir, settings=settings)
    if any(c.status == "fail" for c in checks):
        print(prereqs.format_prereq_failures(checks), file=sys.stderr)
        return 2

    try:
        out = profile(target_name, workdir=workdir, tools=subprocess_tools(workdir=workdir, settings=settings), settings=settings)
    except ToolError as e:
        print(f"{PREFIX} FAIL: {e}", file=sys.stderr)
        return e.returncode
    except ValueError as e:
        print(f"{PREFIX} FAIL: {e}", file=sys.stderr)
        return 1

    print(f"{PREFIX} wrote {out.output_path}")
    if out.summary_path is not None:
        print(f"{PREFIX} wrote {out.summary_path}")
    return 0
