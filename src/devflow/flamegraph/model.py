from __future__ import annotations

from pathlib import Path
from typing import Any

import attrs

from ..toolchain import Builder, FlameGraphRenderer, Sampler, StackCollapser


@attrs.define(frozen=True, slots=True)
class ProfilingTools:
    builder: Builder
    sampler: Sampler
    collapser: StackCollapser
    renderer: FlameGraphRenderer


@attrs.define(frozen=True, slots=True)
class ProfileArtifacts:
    binary_path: Path
    trace_path: Path
    folded_path: Path
    output_path: Path
    summary_path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "binary_path": str(self.binary_path),
            "trace_path": str(self.trace_path),
            "folded_path": str(self.folded_path),
            "output_path": str(self.output_path),
            "summary_path": str(self.summary_path) if self.summary_path is not None else None,
        }


@attrs.define(frozen=True, slots=True)
class FoldedStack:
    frames: tuple[str, ...]
    count: int

    @property
    def leaf(self) -> str:
        return self.frames[-1] if self.frames else ""
