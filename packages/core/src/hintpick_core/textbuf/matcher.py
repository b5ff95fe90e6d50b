from __future__ import annotations

import logging
from collections.abc import Sequence

from hintpick_core.models import Span
from hintpick_core.textbuf.patterns import Pattern

logger = logging.getLogger(__name__)


def find_candidates(lines: Sequence[str], patterns: Sequence[Pattern]) -> list[Span]:
    """
    Scan every line with every pattern and return raw candidate spans.

    Matches of one pattern are leftmost and non-overlapping (``finditer``);
    matches of different patterns may overlap and are left to the resolver.
    When the pattern's first capture group participated in the match, the
    span covers the group only.
    """
    candidates: list[Span] = []
    for pattern in patterns:
        has_group = pattern.regex.groups > 0
        for line_index, line in enumerate(lines):
            for m in pattern.regex.finditer(line):
                start, end = m.span()
                if has_group and m.start(1) != -1:
                    start, end = m.span(1)
                if start == end:
                    continue
                candidates.append(
                    Span(
                        id=len(candidates),
                        line=line_index,
                        start_col=start,
                        end_col=end,
                        text=line[start:end],
                        pattern_id=pattern.name,
                        priority=pattern.priority,
                    )
                )
    logger.debug("found %d candidate spans over %d lines", len(candidates), len(lines))
    return candidates
