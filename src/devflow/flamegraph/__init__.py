"""Flame-graph profiling pipeline.

`cargo build --release` -> `perf record` -> `perf script | inferno-collapse-perf`
-> `inferno-flamegraph`, leaving only `profile.svg` (and, on request, a
Markdown hot-stack summary) in the working directory.
"""
