"""Git pre-commit gate.

Runs the test suite and then clippy (warnings as errors) when, and only when,
Rust sources are staged for commit.
"""
