# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Aggregation — the numbers behind the dashboard.

Frequency tables (emotions, colors) and the energy time-series, computed
from a dream collection on demand. Nothing here is cached or stored;
every view is recomputed from whatever collection the caller hands in.

The journal keeps dreams newest-first. The energy trend walks them in the
opposite direction so the chart reads left-to-right, oldest to newest.
"""

import logging
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from journal.schemas import Dream, DreamFragment, StatEntry, EnergyPoint

logger = logging.getLogger("dreamweaver.aggregation")

TOP_EMOTIONS = 5


def _iter_fragments(dreams: Iterable[Dream]) -> Iterable[DreamFragment]:
    for dream in dreams:
        yield from dream.fragments


def _frequency(
    dreams: Sequence[Dream],
    tags: Callable[[DreamFragment], List[str]],
    limit: Optional[int] = None,
) -> List[StatEntry]:
    """Count tag occurrences, most common first, ties in first-seen order."""
    counts: Counter = Counter()
    for frag in _iter_fragments(dreams):
        counts.update(tags(frag))

    # sorted() is stable, so equal counts keep Counter's insertion order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [StatEntry(name=name, value=value) for name, value in ranked]


def emotion_frequency(dreams: Sequence[Dream], limit: int = TOP_EMOTIONS) -> List[StatEntry]:
    """Top emotions across every fragment of every dream."""
    return _frequency(dreams, lambda f: f.emotions, limit=limit)


def color_frequency(dreams: Sequence[Dream]) -> List[StatEntry]:
    """Full color distribution, no truncation."""
    return _frequency(dreams, lambda f: f.colors)


def average_energy(dream: Dream) -> int:
    """
    Mean fragment energy rounded half-up. A dream with no fragments is 0.

    Integer arithmetic: floor(total/n + 1/2) == (2*total + n) // (2*n).
    """
    n = len(dream.fragments)
    if n == 0:
        return 0
    total = sum(f.energy_score for f in dream.fragments)
    return (2 * total + n) // (2 * n)


def energy_trend(dreams: Sequence[Dream]) -> List[EnergyPoint]:
    """One point per dream, oldest first, labelled Day 1..N."""
    return [
        EnergyPoint(index=i, name=f"Day {i}", energy=average_energy(dream))
        for i, dream in enumerate(reversed(list(dreams)), start=1)
    ]


def fragment_total(dreams: Sequence[Dream]) -> int:
    return sum(len(d.fragments) for d in dreams)


def dashboard(dreams: Sequence[Dream]) -> Dict:
    """Everything the dashboard screen draws, in one pass over the views."""
    summary = {
        "dream_count": len(dreams),
        "fragment_count": fragment_total(dreams),
        "emotions": [s.model_dump() for s in emotion_frequency(dreams)],
        "colors": [s.model_dump() for s in color_frequency(dreams)],
        "energy": [p.model_dump() for p in energy_trend(dreams)],
    }
    logger.debug(
        "Dashboard: %d dreams, %d fragments",
        summary["dream_count"], summary["fragment_count"],
    )
    return summary
