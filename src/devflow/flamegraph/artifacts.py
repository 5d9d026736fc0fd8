from __future__ import annotations

import contextlib
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..config import FlamegraphSettings
from ..paths import release_binary_path
from .model import ProfileArtifacts


def profile_artifact_paths(*, workdir: Path, target_name: str, settings: FlamegraphSettings) -> ProfileArtifacts:
    workdir = workdir.resolve()
    output = workdir / settings.output
    return ProfileArtifacts(
        binary_path=release_binary_path(workdir, target_name),
        trace_path=workdir / settings.trace,
        folded_path=workdir / settings.folded,
        output_path=output,
        summary_path=output.with_suffix(".md") if settings.summary else None,
    )


def remove_intermediates(
    *, workdir: Path, folded: Path, trace: Path, trace_glob: str, keep: Iterable[Path | None] = ()
) -> list[Path]:
    """Delete the collapsed-stack file and raw trace files. Returns what was removed.

    `trace` and its `.old` rotation are removed even when they fall outside
    `trace_glob`; paths in `keep` are never removed.
    """
    protected = {p.resolve() for p in keep if p is not None}
    candidates = [folded, trace, trace.with_name(trace.name + ".old"), *sorted(workdir.glob(trace_glob))]
    removed: list[Path] = []
    for p in candidates:
        if p.resolve() in protected:
            continue
        if p.is_file():
            p.unlink()
            removed.append(p)
    return removed


@contextlib.contextmanager
def transient_artifacts(
    *, workdir: Path, folded: Path, trace: Path, trace_glob: str, keep: Iterable[Path | None] = ()
) -> Iterator[None]:
    """Scope for files that must not outlive the pipeline.

    Cleanup runs on every exit path, including tool failures and Ctrl-C.
    """
    keep = list(keep)
    try:
        yield
    finally:
        remove_intermediates(workdir=workdir, folded=folded, trace=trace, trace_glob=trace_glob, keep=keep)
