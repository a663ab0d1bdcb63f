# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Badges — achievements over the whole dream history.

The catalog is data; the unlock rules are named functions in a registry
keyed by BadgeKind. Unlock state is recomputed from the collection every
time it's asked for and never written anywhere.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Sequence, Union

from journal.schemas import (
    Dream, BadgeDefinition, BadgeStatus, DreamweaverNotFoundError,
)

logger = logging.getLogger("dreamweaver.badges")

STORYTELLER_DREAMS = 5
EXPLORER_FRAGMENTS = 20
INTENSE_ENERGY = 90

# Any emotion containing one of these counts as fear ("怕" afraid, "恐" dread).
# Substring match: "害怕", "恐懼", "可怕" all qualify.
FEAR_MARKERS = ("怕", "恐")


class BadgeKind(str, Enum):
    BEGINNER = "beginner"
    STORYTELLER = "storyteller"
    EXPLORER = "explorer"
    INTENSE = "intense"
    NIGHTMARE = "nightmare"


BADGE_CATALOG = (
    BadgeDefinition(id=BadgeKind.BEGINNER.value, name="初次入夢",
                    description="記錄第一個夢境", icon="🌙"),
    BadgeDefinition(id=BadgeKind.STORYTELLER.value, name="夢語者",
                    description="累積 5 個夢境", icon="📜"),
    BadgeDefinition(id=BadgeKind.EXPLORER.value, name="潛意識探險家",
                    description="收集超過 20 個夢境碎片", icon="🧩"),
    BadgeDefinition(id=BadgeKind.INTENSE.value, name="高能量釋放",
                    description="記錄一個能量分數 90 以上的夢", icon="🔥"),
    BadgeDefinition(id=BadgeKind.NIGHTMARE.value, name="面對恐懼",
                    description="面對包含「害怕」或「恐懼」的夢境", icon="👁️"),
)


# ============================================================================
# Rules — total, side-effect free, False on an empty collection
# ============================================================================

def _has_first_dream(dreams: Sequence[Dream]) -> bool:
    return len(dreams) >= 1


def _has_five_dreams(dreams: Sequence[Dream]) -> bool:
    return len(dreams) >= STORYTELLER_DREAMS


def _has_twenty_fragments(dreams: Sequence[Dream]) -> bool:
    return sum(len(d.fragments) for d in dreams) >= EXPLORER_FRAGMENTS


def _has_intense_fragment(dreams: Sequence[Dream]) -> bool:
    return any(f.energy_score >= INTENSE_ENERGY for d in dreams for f in d.fragments)


def _is_fearful(emotion: str) -> bool:
    return any(marker in emotion for marker in FEAR_MARKERS)


def _has_faced_fear(dreams: Sequence[Dream]) -> bool:
    return any(
        _is_fearful(e)
        for d in dreams for f in d.fragments for e in f.emotions
    )


_RULES: Dict[BadgeKind, Callable[[Sequence[Dream]], bool]] = {
    BadgeKind.BEGINNER: _has_first_dream,
    BadgeKind.STORYTELLER: _has_five_dreams,
    BadgeKind.EXPLORER: _has_twenty_fragments,
    BadgeKind.INTENSE: _has_intense_fragment,
    BadgeKind.NIGHTMARE: _has_faced_fear,
}


def _kind(badge: Union[BadgeKind, str]) -> BadgeKind:
    try:
        return BadgeKind(badge)
    except ValueError:
        raise DreamweaverNotFoundError(f"Unknown badge: {badge}")


def is_unlocked(badge: Union[BadgeKind, str], dreams: Sequence[Dream]) -> bool:
    """Single dispatch point for every badge rule."""
    return _RULES[_kind(badge)](dreams)


def get_badge(badge: Union[BadgeKind, str]) -> BadgeDefinition:
    kind = _kind(badge)
    for definition in BADGE_CATALOG:
        if definition.id == kind.value:
            return definition
    raise DreamweaverNotFoundError(f"Badge not in catalog: {badge}")


def evaluate_badges(dreams: Sequence[Dream]) -> List[BadgeStatus]:
    """Every catalog badge with its unlock state, in catalog order."""
    statuses = [
        BadgeStatus(**definition.model_dump(), unlocked=is_unlocked(definition.id, dreams))
        for definition in BADGE_CATALOG
    ]
    logger.debug(
        "Badges: %d/%d unlocked", sum(s.unlocked for s in statuses), len(statuses),
    )
    return statuses


def unlocked_badges(dreams: Sequence[Dream]) -> List[BadgeStatus]:
    return [s for s in evaluate_badges(dreams) if s.unlocked]
