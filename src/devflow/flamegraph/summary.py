"""
Hot-stack summary for a collapsed (folded) stack file.

The folded format is one line per unique stack: frames joined by `;`, a space,
then the sample count. This module reads that text and writes a short Markdown
report (via mdutils) listing the frames and stacks with the most samples, as a
quick textual companion to the SVG.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from mdutils.mdutils import MdUtils  # type: ignore[import-untyped]

from .model import FoldedStack


def parse_folded(text: str) -> list[FoldedStack]:
    """Parse folded stack lines, merging duplicate stacks.

    Blank lines are skipped. A line without a trailing integer count raises
    ValueError, since the collapser never emits one.
    """
    counts: dict[tuple[str, ...], int] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        stack, sep, count_s = line.rpartition(" ")
        if not sep or not stack:
            raise ValueError(f"Malformed folded line {lineno}: {raw!r}")
        try:
            count = int(count_s)
        except ValueError:
            raise ValueError(f"Malformed sample count on folded line {lineno}: {raw!r}") from None
        frames = tuple(stack.split(";"))
        counts[frames] = counts.get(frames, 0) + count
    return [FoldedStack(frames=f, count=c) for f, c in counts.items()]


def total_samples(stacks: list[FoldedStack]) -> int:
    return sum(s.count for s in stacks)


def top_stacks(stacks: list[FoldedStack], limit: int) -> list[FoldedStack]:
    return sorted(stacks, key=lambda s: (-s.count, s.frames))[:limit]


def hottest_frames(stacks: list[FoldedStack], limit: int) -> list[tuple[str, int]]:
    """Return (frame, self samples) for the leaf frames with the most samples."""
    self_counts: Counter[str] = Counter()
    for s in stacks:
        self_counts[s.leaf] += s.count
    return sorted(self_counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]


def _pct(n: int, total: int) -> str:
    if total == 0:
        return "NA"
    return f"{100.0 * n / total:.1f}%"


def write_summary(path: Path, stacks: list[FoldedStack], *, target_name: str, limit: int = 10) -> Path:
    total = total_samples(stacks)

    # MdUtils appends ".md" to file_name itself.
    md = MdUtils(file_name=str(path.with_suffix("")), title=f"Profile: {target_name}")
    md.new_paragraph(f"Total samples: {total} across {len(stacks)} unique stacks.")
    if not stacks:
        md.new_paragraph("No samples were recorded.")
        md.create_md_file()
        return path.with_suffix(".md")

    md.new_header(level=1, title="Hottest frames (self samples)")
    frames = hottest_frames(stacks, limit)
    cells = ["frame", "samples", "share"]
    for name, n in frames:
        cells += [f"`{name}`", str(n), _pct(n, total)]
    md.new_table(columns=3, rows=len(frames) + 1, text=cells, text_align="left")

    md.new_header(level=1, title="Hottest stacks")
    md.new_list([f"{s.count} ({_pct(s.count, total)}): `{' > '.join(s.frames)}`" for s in top_stacks(stacks, limit)])

    md.create_md_file()
    return path.with_suffix(".md")
