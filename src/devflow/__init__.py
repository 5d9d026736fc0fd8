"""Local developer-workflow helpers for a cargo project.

Two independent pipelines live here:

- `devflow.commit_gate`: a git pre-commit gate that runs `cargo test` and
  `cargo clippy` only when Rust sources are staged.
- `devflow.flamegraph`: builds a release binary, samples it under `perf`, and
  renders the collapsed stacks into `profile.svg`.

Both shell out to external tools through the `Tool` protocol in
`devflow.toolchain`, so the pipeline logic can be exercised with fakes.
"""

from __future__ import annotations

__version__ = "0.1.0"
