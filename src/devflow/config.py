from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import attrs
from jsonschema import Draft202012Validator

CONFIG_FILE_NAME = "devflow.json"


def _tuple(v: Any) -> tuple[str, ...]:
    return tuple(str(x) for x in v)


@attrs.define(frozen=True, slots=True)
class GateSettings:
    source_extensions: tuple[str, ...] = attrs.field(default=(".rs",), converter=_tuple)
    test_command: tuple[str, ...] = attrs.field(default=("cargo", "test"), converter=_tuple)
    test_args: tuple[str, ...] = attrs.field(default=(), converter=_tuple)
    lint_command: tuple[str, ...] = attrs.field(default=("cargo", "clippy"), converter=_tuple)
    # Everything after `--` goes to clippy itself; `-D warnings` promotes warnings to errors.
    lint_args: tuple[str, ...] = attrs.field(default=("--", "-D", "warnings"), converter=_tuple)


@attrs.define(frozen=True, slots=True)
class FlamegraphSettings:
    cargo_command: tuple[str, ...] = attrs.field(default=("cargo",), converter=_tuple)
    perf_command: tuple[str, ...] = attrs.field(default=("perf",), converter=_tuple)
    collapse_command: tuple[str, ...] = attrs.field(default=("inferno-collapse-perf",), converter=_tuple)
    render_command: tuple[str, ...] = attrs.field(default=("inferno-flamegraph",), converter=_tuple)
    sample_frequency: int = attrs.field(default=99, validator=attrs.validators.gt(0))
    output: str = "profile.svg"
    folded: str = "stacks.folded"
    trace: str = "perf.data"
    trace_glob: str = "perf.*"
    summary: bool = False


@attrs.define(frozen=True, slots=True)
class DevflowConfig:
    commit_gate: GateSettings = attrs.field(factory=GateSettings)
    flamegraph: FlamegraphSettings = attrs.field(factory=FlamegraphSettings)


def default_schema_path() -> Path:
    return Path(__file__).with_name("config.schema.json")


def validate_config(data: dict[str, Any], *, schema_path: Path | None = None) -> None:
    """Raise `jsonschema.ValidationError` if `data` is not a valid config document."""
    schema = json.loads((schema_path or default_schema_path()).read_text())
    Draft202012Validator(schema).validate(data)


def config_from_dict(data: dict[str, Any]) -> DevflowConfig:
    validate_config(data)
    return DevflowConfig(
        commit_gate=GateSettings(**data.get("commit_gate", {})),
        flamegraph=FlamegraphSettings(**data.get("flamegraph", {})),
    )


def load_config(*, project_root: Path, config_path: Path | None = None) -> DevflowConfig:
    """Load `devflow.json`.

    An explicit `config_path` must exist. Without one, `<project_root>/devflow.json`
    is used when present and built-in defaults otherwise.
    """
    if config_path is None:
        candidate = project_root / CONFIG_FILE_NAME
        if not candidate.is_file():
            return DevflowConfig()
        config_path = candidate
    elif not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = json.loads(config_path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {config_path}")
    return config_from_dict(data)
