# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Badge catalog and unlock rules."""

import pytest

from journal.badges import (
    BADGE_CATALOG, BadgeKind, evaluate_badges, unlocked_badges, is_unlocked, get_badge,
)
from journal.schemas import DreamweaverNotFoundError


def _unlocked(dreams):
    return {b.id: b.unlocked for b in evaluate_badges(dreams)}


class TestCatalog:

    def test_fixed_ids_in_order(self):
        assert [b.id for b in BADGE_CATALOG] == [
            "beginner", "storyteller", "explorer", "intense", "nightmare",
        ]

    def test_every_kind_has_a_definition(self):
        for kind in BadgeKind:
            assert get_badge(kind).id == kind.value

    def test_unknown_badge(self):
        with pytest.raises(DreamweaverNotFoundError):
            is_unlocked("insomniac", [])
        with pytest.raises(DreamweaverNotFoundError):
            get_badge("insomniac")


class TestEmptyCollection:

    @pytest.mark.parametrize("kind", list(BadgeKind))
    def test_all_locked(self, kind):
        assert is_unlocked(kind, []) is False

    def test_evaluate_returns_full_catalog(self):
        statuses = evaluate_badges([])
        assert len(statuses) == len(BADGE_CATALOG)
        assert not any(s.unlocked for s in statuses)
        assert unlocked_badges([]) == []


class TestThresholds:

    def test_beginner_after_one_dream(self, dream_factory):
        assert is_unlocked("beginner", [dream_factory()]) is True

    def test_storyteller_flips_at_fifth_dream(self, dream_factory):
        dreams = [dream_factory() for _ in range(5)]
        assert is_unlocked(BadgeKind.STORYTELLER, dreams[:4]) is False
        assert is_unlocked(BadgeKind.STORYTELLER, dreams) is True

    def test_explorer_at_twenty_fragments(self, dream_factory, fragment_factory):
        nineteen = [dream_factory([fragment_factory() for _ in range(19)])]
        assert is_unlocked(BadgeKind.EXPLORER, nineteen) is False
        twenty = nineteen + [dream_factory([fragment_factory()])]
        assert is_unlocked(BadgeKind.EXPLORER, twenty) is True

    def test_explorer_counts_across_dreams(self, dream_factory, fragment_factory):
        dreams = [dream_factory([fragment_factory() for _ in range(4)]) for _ in range(5)]
        assert is_unlocked(BadgeKind.EXPLORER, dreams) is True

    def test_intense_at_ninety(self, dream_factory, fragment_factory):
        assert is_unlocked("intense", [dream_factory([fragment_factory(energy_score=89)])]) is False
        assert is_unlocked("intense", [dream_factory([fragment_factory(energy_score=90)])]) is True

    def test_dream_without_fragments(self, dream_factory):
        dreams = [dream_factory(fragments=[])]
        assert _unlocked(dreams) == {
            "beginner": True, "storyteller": False, "explorer": False,
            "intense": False, "nightmare": False,
        }


class TestNightmare:

    @pytest.mark.parametrize("emotion", ["害怕", "恐懼", "可怕", "驚恐"])
    def test_fear_lexemes(self, dream_factory, fragment_factory, emotion):
        dreams = [dream_factory([fragment_factory(emotions=["平靜", emotion])])]
        assert is_unlocked(BadgeKind.NIGHTMARE, dreams) is True

    def test_no_fear(self, dream_factory, fragment_factory):
        dreams = [dream_factory([fragment_factory(emotions=["快樂", "fear"])])]
        assert is_unlocked(BadgeKind.NIGHTMARE, dreams) is False


def test_scenario_single_intense_fearful_fragment(dream_factory, fragment_factory):
    dreams = [dream_factory([fragment_factory(energy_score=90, emotions=["害怕"])])]
    result = _unlocked(dreams)
    assert result["intense"] is True
    assert result["nightmare"] is True
    assert result["beginner"] is True
    assert result["storyteller"] is False
    assert [b.id for b in unlocked_badges(dreams)] == ["beginner", "intense", "nightmare"]


def test_status_carries_catalog_fields(dream_factory):
    status = evaluate_badges([dream_factory()])[0]
    assert status.name == "初次入夢"
    assert status.icon == "🌙"
    assert status.unlocked is True
