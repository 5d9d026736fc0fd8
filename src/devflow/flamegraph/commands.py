from __future__ import annotations

from pathlib import Path


def build_args(target_name: str) -> list[str]:
    return ["build", "--release", "--bin", target_name]


def record_args(*, binary: Path, trace: Path, frequency: int) -> list[str]:
    # -g records call graphs; -F fixes the sampling rate for the whole run.
    return ["record", "-F", str(frequency), "-g", "-o", str(trace), "--", str(binary)]


def script_args(*, trace: Path) -> list[str]:
    return ["script", "-i", str(trace)]


def render_args(*, folded: Path) -> list[str]:
    return [str(folded)]
