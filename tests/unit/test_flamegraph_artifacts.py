from __future__ import annotations

from pathlib import Path

import pytest

from devflow.config import FlamegraphSettings
from devflow.flamegraph import artifacts


def test_profile_artifact_paths_layout(tmp_path: Path) -> None:
    a = artifacts.profile_artifact_paths(workdir=tmp_path, target_name="clock", settings=FlamegraphSettings())
    root = tmp_path.resolve()
    assert a.binary_path == root / "target" / "release" / "clock"
    assert a.trace_path == root / "perf.data"
    assert a.folded_path == root / "stacks.folded"
    assert a.output_path == root / "profile.svg"
    assert a.summary_path is None
    assert a.to_dict()["summary_path"] is None


def test_profile_artifact_paths_summary_next_to_output(tmp_path: Path) -> None:
    settings = FlamegraphSettings(output="clock.svg", summary=True)
    a = artifacts.profile_artifact_paths(workdir=tmp_path, target_name="clock", settings=settings)
    assert a.summary_path == tmp_path.resolve() / "clock.md"


def test_remove_intermediates_only_touches_known_names(tmp_path: Path) -> None:
    for name in ["stacks.folded", "perf.data", "perf.data.old", "profile.svg", "Cargo.toml"]:
        (tmp_path / name).write_text("x")

    removed = artifacts.remove_intermediates(
        workdir=tmp_path, folded=tmp_path / "stacks.folded", trace=tmp_path / "perf.data", trace_glob="perf.*"
    )

    assert sorted(p.name for p in removed) == ["perf.data", "perf.data.old", "stacks.folded"]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Cargo.toml", "profile.svg"]


def test_transient_artifacts_cleans_up_on_exception(tmp_path: Path) -> None:
    folded = tmp_path / "stacks.folded"
    with pytest.raises(RuntimeError):
        with artifacts.transient_artifacts(workdir=tmp_path, folded=folded, trace=tmp_path / "perf.data", trace_glob="perf.*"):
            folded.write_text("main 1\n")
            (tmp_path / "perf.data").write_text("x")
            raise RuntimeError("boom")

    assert list(tmp_path.iterdir()) == []


def test_transient_artifacts_tolerates_nothing_to_remove(tmp_path: Path) -> None:
    with artifacts.transient_artifacts(
        workdir=tmp_path, folded=tmp_path / "stacks.folded", trace=tmp_path / "perf.data", trace_glob="perf.*"
    ):
        pass
    assert list(tmp_path.iterdir()) == []


def test_remove_intermediates_deletes_trace_outside_glob(tmp_path: Path) -> None:
    for name in ["samples.data", "samples.data.old", "stacks.folded", "profile.svg"]:
        (tmp_path / name).write_text("x")

    artifacts.remove_intermediates(
        workdir=tmp_path, folded=tmp_path / "stacks.folded", trace=tmp_path / "samples.data", trace_glob="perf.*"
    )

    assert sorted(p.name for p in tmp_path.iterdir()) == ["profile.svg"]


def test_remove_intermediates_spares_kept_paths(tmp_path: Path) -> None:
    for name in ["perf.data", "perf.svg", "perf.md"]:
        (tmp_path / name).write_text("x")

    removed = artifacts.remove_intermediates(
        workdir=tmp_path,
        folded=tmp_path / "stacks.folded",
        trace=tmp_path / "perf.data",
        trace_glob="perf.*",
        keep=[tmp_path / "perf.svg", tmp_path / "perf.md", None],
    )

    assert [p.name for p in removed] == ["perf.data"]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["perf.md", "perf.svg"]
