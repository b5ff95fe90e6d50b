from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from hintpick_core.config import PickerConfig
from hintpick_core.models import Span
from hintpick_core.textbuf.hints import Labeling, assign_hints
from hintpick_core.textbuf.matcher import find_candidates
from hintpick_core.textbuf.patterns import EXCLUDE_PATTERNS, build_pattern_set
from hintpick_core.textbuf.resolver import resolve_overlaps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickModel:
    """Everything computed once per capture: lines, resolved spans, labels."""

    lines: tuple[str, ...]
    spans: tuple[Span, ...]
    labeling: Labeling
    reverse: bool = False

    def span(self, span_id: int) -> Span:
        return self.spans[span_id]


def find_spans(lines: Sequence[str], config: PickerConfig) -> list[Span]:
    """Match, resolve overlaps and renumber spans in document order."""
    patterns = build_pattern_set(
        config.named_patterns,
        config.custom_patterns,
        all_patterns=config.all_patterns,
    )
    candidates = find_candidates(lines, patterns)
    resolved = [s for s in resolve_overlaps(candidates) if s.pattern_id not in EXCLUDE_PATTERNS]
    logger.debug("kept %d of %d candidates", len(resolved), len(candidates))
    return [dataclasses.replace(span, id=index) for index, span in enumerate(resolved)]


def build_model(lines: Sequence[str], config: PickerConfig) -> PickModel:
    spans = find_spans(lines, config)
    labeling = assign_hints(
        spans,
        config.letters,
        unique_hint=config.unique_hint,
        reverse=config.reverse,
    )
    return PickModel(
        lines=tuple(lines),
        spans=tuple(spans),
        labeling=labeling,
        reverse=config.reverse,
    )
