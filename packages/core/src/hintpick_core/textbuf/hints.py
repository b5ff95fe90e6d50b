"""Hint labels: a minimal-length prefix-free code over the alphabet.

The algorithm works on labels of at most two characters::

    need 6 labels from "abcd"

    lead letters       | a  b  c  d
    need more: pick d  | a  b  c  (d) da db dc
                                        ^^^^^^^^ two-char labels from prefix d

One-character labels are issued first, in alphabet order. When more labels
are needed than there are letters, letters are taken from the end of the
alphabet and turned into prefixes of two-character labels; such a letter is
then no longer a label on its own, which keeps the code prefix-free.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from hintpick_core.models import Span

logger = logging.getLogger(__name__)


def hint_capacity(k: int) -> int:
    """Largest number of prefix-free labels of length <= 2 over `k` letters."""
    if k <= 1:
        return k
    return k * k


def make_hints(letters: str, n: int) -> list[str | None]:
    """
    Return `n` labels in assignment order; groups past capacity get `None`.

    >>> make_hints("abcd", 6)
    ['a', 'b', 'c', 'da', 'db', 'dc']
    """
    k = len(letters)
    if n <= k:
        return list(letters[:n])

    capacity = hint_capacity(k)
    labelled = min(n, capacity)
    if k > 1:
        # Smallest number of prefixes p such that (k - p) + p * k >= labelled.
        prefixes = -(-(labelled - k) // (k - 1))
    else:
        prefixes = 0
    lead = list(letters[: k - prefixes])

    pairs_needed = labelled - len(lead)
    pairs: list[str] = []
    prefix_letters = letters[k - prefixes :]
    # Only the first prefix may be partially used.
    first_count = pairs_needed - (prefixes - 1) * k
    for index, prefix in enumerate(prefix_letters):
        count = first_count if index == 0 else k
        pairs.extend(prefix + c for c in letters[:count])

    hints: list[str | None] = [*lead, *pairs]
    if n > capacity:
        logger.debug("%d groups exceed hint capacity %d; left unlabeled", n - capacity, capacity)
        hints.extend([None] * (n - capacity))
    return hints


def check_prefix_free(labels: Sequence[str]) -> None:
    """Raise `ValueError` if a label is a proper prefix of another (or repeated)."""
    ordered = sorted(labels)
    for a, b in zip(ordered, ordered[1:]):
        if b.startswith(a):
            raise ValueError(f"Hint labels are not prefix-free: {a!r} / {b!r}")


@dataclass(frozen=True)
class HintGroup:
    label: str | None
    span_ids: tuple[int, ...]
    text: str


@dataclass(frozen=True)
class Labeling:
    """Labels of all groups, with lookups used by the interaction loop."""

    groups: tuple[HintGroup, ...]
    _by_span: dict[int, HintGroup] = field(init=False, repr=False, compare=False)
    _by_label: dict[str, HintGroup] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_span = {span_id: g for g in self.groups for span_id in g.span_ids}
        by_label = {g.label: g for g in self.groups if g.label is not None}
        object.__setattr__(self, "_by_span", by_span)
        object.__setattr__(self, "_by_label", by_label)

    @property
    def labels(self) -> list[str]:
        return [g.label for g in self.groups if g.label is not None]

    def label_for(self, span_id: int) -> str | None:
        group = self._by_span.get(span_id)
        return group.label if group else None

    def group_for_span(self, span_id: int) -> HintGroup | None:
        return self._by_span.get(span_id)

    def group_for_label(self, label: str) -> HintGroup | None:
        return self._by_label.get(label)

    def has_prefix(self, prefix: str) -> bool:
        return any(label.startswith(prefix) for label in self._by_label)


def assign_hints(
    spans: Sequence[Span],
    letters: str,
    *,
    unique_hint: bool = False,
    reverse: bool = False,
) -> Labeling:
    """
    Label spans given in document order.

    With `unique_hint`, spans with identical text form one group sharing one
    label. Assignment order is document order, or its reverse with `reverse`,
    so the shortest labels land where the user starts reading.
    """
    ordered = list(reversed(spans)) if reverse else list(spans)

    members: dict[object, list[int]] = {}
    texts: dict[object, str] = {}
    for span in ordered:
        key: object = span.text if unique_hint else span.id
        members.setdefault(key, []).append(span.id)
        texts.setdefault(key, span.text)

    keys = list(members)
    hints = make_hints(letters, len(keys))
    groups = tuple(
        HintGroup(label=hint, span_ids=tuple(sorted(members[key])), text=texts[key])
        for key, hint in zip(keys, hints)
    )
    labeling = Labeling(groups=groups)
    check_prefix_free(labeling.labels)
    return labeling
