from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from devflow.flamegraph import workflow

FAKE_CARGO = """\
import sys
from pathlib import Path

args = sys.argv[1:]
if "cargo --fail" in Path("mode").read_text():
    sys.exit(101)
exe = Path("target") / "release" / args[-1]
exe.parent.mkdir(parents=True, exist_ok=True)
exe.write_text("bin")
"""

FAKE_PERF = """\
import sys
from pathlib import Path

args = sys.argv[1:]
if args[0] == "record":
    Path(args[args.index("-o") + 1]).write_text("samples")
elif args[0] == "script":
    sys.stdout.write("main 1\\n")
"""

FAKE_COLLAPSE = """\
import sys

sys.stdin.read()
sys.stdout.write("main;World::render 3\\nmain 1\\n")
"""

FAKE_RENDER = """\
import sys
from pathlib import Path

if "render --fail" in Path("mode").read_text():
    sys.exit(3)
Path(sys.argv[1]).read_text()
sys.stdout.write("<svg/>\\n")
"""


def _crate(tmp_path: Path, *, mode: str = "") -> Path:
    (tmp_path / "Cargo.toml").write_text("[package]\nname = 'raytracer'\n")
    (tmp_path / "mode").write_text(mode)
    tools = tmp_path / "fake_tools"
    tools.mkdir()
    scripts = {"cargo": FAKE_CARGO, "perf": FAKE_PERF, "collapse": FAKE_COLLAPSE, "render": FAKE_RENDER}
    for name, body in scripts.items():
        (tools / f"{name}.py").write_text(body)
    config = {
        "flamegraph": {
            "cargo_command": [sys.executable, str(tools / "cargo.py")],
            "perf_command": [sys.executable, str(tools / "perf.py")],
            "collapse_command": [sys.executable, str(tools / "collapse.py")],
            "render_command": [sys.executable, str(tools / "render.py")],
        }
    }
    (tmp_path / "devflow.json").write_text(json.dumps(config))
    return tmp_path


def _leftovers(workdir: Path) -> list[str]:
    return sorted(p.name for p in workdir.iterdir() if p.name == "stacks.folded" or p.name.startswith("perf."))


def test_run_end_to_end_with_subprocess_tools(tmp_path: Path) -> None:
    crate = _crate(tmp_path)

    assert workflow.run("server", workdir=crate) == 0
    assert (crate / "profile.svg").read_text() == "<svg/>\n"
    assert _leftovers(crate) == []

    # Second run must not trip over anything the first one left.
    assert workflow.run("server", workdir=crate, summary=True, frequency=997) == 0
    assert (crate / "profile.svg").exists()
    assert "World::render" in (crate / "profile.md").read_text()
    assert _leftovers(crate) == []


def test_run_build_failure_returns_build_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    crate = _crate(tmp_path, mode="cargo --fail")

    assert workflow.run("server", workdir=crate) == 101
    assert not (crate / "perf.data").exists()
    assert not (crate / "profile.svg").exists()
    assert "FAIL" in capsys.readouterr().err


def test_run_invalid_target_name(tmp_path: Path) -> None:
    assert workflow.run("no/slashes", workdir=_crate(tmp_path)) == 2


def test_run_invalid_frequency(tmp_path: Path) -> None:
    assert workflow.run("server", workdir=_crate(tmp_path), frequency=0) == 2


def test_run_missing_prerequisites(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert workflow.run("server", workdir=tmp_path) == 2
    assert "cargo_manifest" in capsys.readouterr().err


def test_run_render_failure_cleans_intermediates(tmp_path: Path) -> None:
    crate = _crate(tmp_path, mode="render --fail")

    assert workflow.run("server", workdir=crate) == 3
    assert not (crate / "profile.svg").exists()
    assert _leftovers(crate) == []
    assert (crate / "target" / "release" / "server").exists()
