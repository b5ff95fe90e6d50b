from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from hintpick_core.models import Span


def _rank(span: Span) -> tuple[int, int, int, int]:
    """Strongest first: higher priority, then earlier start, then longer span."""
    return (-span.priority, span.line, span.start_col, -span.length)


def resolve_overlaps(candidates: Iterable[Span]) -> list[Span]:
    """
    Reduce candidates to a sorted, pairwise-disjoint span list.

    Candidates are taken strongest first (higher priority, then earlier
    start, then longer span) and each one is kept unless it overlaps a span
    already kept. A dropped span is dropped whole, never trimmed, and never
    takes down a span it only overlaps through another loser.
    """
    kept_by_line: dict[int, list[Span]] = defaultdict(list)
    for span in sorted(candidates, key=_rank):
        on_line = kept_by_line[span.line]
        if any(other.overlaps(span) for other in on_line):
            continue
        on_line.append(span)
    kept = [span for spans in kept_by_line.values() for span in spans]
    return sorted(kept, key=lambda s: (s.line, s.start_col))
