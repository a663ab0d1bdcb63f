# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Journal — the dream collection and the submission flow.

The journal owns the collection. It's an immutable tuple, newest dream
first; every change builds a new tuple and swaps the reference, then
persists the whole thing. Views (dashboard, badges, graph) are derived
from whatever tuple is current when they're asked for.

Submission:
    draft -> validate -> compose text -> analysis (one in flight) ->
    new Dream prepended -> saved

A failed analysis leaves the collection untouched.
"""

import logging
import threading
import uuid
from datetime import date, datetime, time, timezone
from typing import Callable, Dict, List, Optional, Tuple

from interface.storage import DreamStore, get_store
from journal import aggregation, badges, graph
from journal.analysis import analyze_dream_text
from journal.draft import DreamDraft, compose_dream_text, validate_draft
from journal.schemas import (
    Dream, DreamFragment, BadgeStatus, DreamGraph,
    AnalysisError, AnalysisInProgressError,
    DreamweaverNotFoundError, DreamweaverValidationError,
)

logger = logging.getLogger("dreamweaver.journal")

ANALYSIS_FAILED_MESSAGE = "解析失敗，請稍後再試。"
BUSY_MESSAGE = "夢境解析進行中，請稍候。"

Analyzer = Callable[[str, Optional[str], Optional[str]], List[DreamFragment]]


def dream_timestamp(day: str) -> str:
    """YYYY-MM-DD -> ISO 8601 timestamp at UTC midnight."""
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        raise DreamweaverValidationError(f"Invalid date '{day}'. Use YYYY-MM-DD.")
    return datetime.combine(parsed, time(), tzinfo=timezone.utc).isoformat()


class DreamJournal:
    """Single owner of the dream collection."""

    def __init__(self, store: DreamStore, analyzer: Analyzer = analyze_dream_text):
        self._store = store
        self._analyze = analyzer
        self._dreams: Tuple[Dream, ...] = tuple(store.load())
        self._lock = threading.Lock()        # guards collection swaps
        self._in_flight = threading.Lock()   # at most one analysis at a time

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------
    @property
    def dreams(self) -> Tuple[Dream, ...]:
        return self._dreams

    @property
    def analyzing(self) -> bool:
        return self._in_flight.locked()

    def get(self, dream_id: str) -> Dream:
        for dream in self._dreams:
            if dream.id == dream_id:
                return dream
        raise DreamweaverNotFoundError(f"Dream '{dream_id}' not found")

    def reload(self) -> Tuple[Dream, ...]:
        """Re-read the store, replacing the in-memory collection."""
        dreams = tuple(self._store.load())
        with self._lock:
            self._dreams = dreams
        return dreams

    def _replace(self, dreams: Tuple[Dream, ...]) -> None:
        self._dreams = dreams
        self._store.save(dreams)

    def add(self, dream: Dream) -> Dream:
        """Prepend a finished dream and persist."""
        with self._lock:
            # Other processes may have written since we last read
            current = tuple(self._store.load())
            self._replace((dream,) + current)
        logger.info("Dream %s recorded (%d fragments)", dream.id, len(dream.fragments))
        return dream

    def delete(self, dream_id: str) -> Dream:
        with self._lock:
            self._dreams = tuple(self._store.load())
            target = self.get(dream_id)
            self._replace(tuple(d for d in self._dreams if d.id != dream_id))
        logger.info("Dream %s deleted", dream_id)
        return target

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def submit(self, draft: DreamDraft) -> Dream:
        """
        Analyze a draft and record the result as a new dream.

        Raises:
            DreamweaverValidationError: empty draft or bad date (no remote call made)
            AnalysisInProgressError: another submission is still being analyzed
            AnalysisError: the analysis failed; nothing was recorded
        """
        validate_draft(draft)
        timestamp = dream_timestamp(draft.date)
        raw_text = compose_dream_text(draft)

        if not self._in_flight.acquire(blocking=False):
            raise AnalysisInProgressError(BUSY_MESSAGE)
        try:
            try:
                fragments = self._analyze(
                    raw_text, draft.context or None, draft.reentry_record or None,
                )
            except Exception as e:
                logger.exception("Dream analysis failed")
                raise AnalysisError(ANALYSIS_FAILED_MESSAGE) from e
        finally:
            self._in_flight.release()

        dream = Dream(
            id=str(uuid.uuid4()),
            raw_text=raw_text,
            context=draft.context,
            reentry_record=draft.reentry_record,
            date=timestamp,
            fragments=fragments,
        )
        return self.add(dream)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    def dashboard(self) -> Dict:
        return aggregation.dashboard(self._dreams)

    def badges(self) -> List[BadgeStatus]:
        return badges.evaluate_badges(self._dreams)

    def badge(self, badge_id: str) -> BadgeStatus:
        """One badge with its unlock state (DreamweaverNotFoundError if unknown)."""
        definition = badges.get_badge(badge_id)
        return BadgeStatus(
            **definition.model_dump(),
            unlocked=badges.is_unlocked(definition.id, self._dreams),
        )

    def unlocked_badges(self) -> List[BadgeStatus]:
        return badges.unlocked_badges(self._dreams)

    def graph(self) -> DreamGraph:
        return graph.project_graph(self._dreams)


_journal: Optional[DreamJournal] = None
_journal_lock = threading.Lock()


def get_journal() -> DreamJournal:
    """Journal over the configured store (lazy-init, one per process)."""
    global _journal
    with _journal_lock:
        store = get_store()
        if _journal is None or _journal._store is not store:
            _journal = DreamJournal(store)
        return _journal


def reset_journal() -> None:
    global _journal
    with _journal_lock:
        _journal = None
