from __future__ import annotations

from typing import Any, Literal

import attrs

CheckStatus = Literal["pass", "fail"]


@attrs.define(frozen=True, slots=True)
class PrerequisiteCheck:
    check_name: str
    status: CheckStatus
    details: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"check_name": self.check_name, "status": self.status, "details": self.details}


@attrs.define(frozen=True, slots=True)
class ToolOutput:
    argv: list[str]
    returncode: int
    stdout: bytes = b""

    @property
    def text(self) -> str:
        return self.stdout.decode(errors="replace")
