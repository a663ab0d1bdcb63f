# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Test configuration — paths isolation and dream factories."""

import itertools

import pytest

from core.paths import configure, reset
from interface.storage import reset_store
from journal.journal import reset_journal
from journal.schemas import Dream, DreamFragment

_ids = itertools.count(1)


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path, monkeypatch):
    """Route all Dreamweaver data to a temp directory for test isolation."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    paths = configure(tmp_path)
    paths.ensure_dirs()
    reset_store()
    reset_journal()
    yield paths
    reset_journal()
    reset_store()
    reset()


def make_fragment(**overrides) -> DreamFragment:
    fields = {
        "id": f"frag-{next(_ids)}",
        "text": "在一間沒有窗戶的房間裡奔跑",
        "characters": [],
        "locations": [],
        "emotions": [],
        "colors": [],
        "actions": [],
        "energy_score": 50,
        "interpretation": "逃避某個尚未面對的課題。",
    }
    fields.update(overrides)
    return DreamFragment(**fields)


def make_dream(fragments=None, **overrides) -> Dream:
    fields = {
        "id": f"dream-{next(_ids)}",
        "raw_text": "我夢見自己在奔跑",
        "date": "2026-01-01T00:00:00+00:00",
        "fragments": fragments if fragments is not None else [make_fragment()],
    }
    fields.update(overrides)
    return Dream(**fields)


@pytest.fixture
def fragment_factory():
    return make_fragment


@pytest.fixture
def dream_factory():
    return make_dream
