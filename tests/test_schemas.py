# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Schema tests — dream model invariants, aliases, and save/load helpers."""

import json
import pytest
from pydantic import ValidationError

from journal.schemas import (
    # Models
    Dream, DreamFragment, AnalysisConfig, BadgeDefinition,
    # Functions
    load_validated, save_validated, load_validated_list, save_validated_list,
    atomic_write_json,
    # Exceptions
    DreamweaverNotFoundError, DreamweaverValidationError,
    AnalysisError, AnalysisInProgressError,
)

NOW = "2026-01-01T00:00:00+00:00"

FRAGMENT = {
    "id": "f1",
    "text": "我站在雨中的月台",
    "characters": ["陌生人"],
    "locations": ["車站"],
    "emotions": ["孤單"],
    "colors": ["灰"],
    "actions": ["等待"],
    "energy_score": 35,
    "interpretation": "等待一個遲遲未來的改變。",
}


# ============================================================================
# DreamFragment
# ============================================================================

class TestFragment:

    @pytest.mark.parametrize("raw,expected", [
        (-20, 0), (0, 0), (55, 55), (100, 100), (140, 100), (72.6, 73), ("88", 88),
    ])
    def test_energy_clamped(self, raw, expected):
        frag = DreamFragment.model_validate({**FRAGMENT, "energy_score": raw})
        assert frag.energy_score == expected

    def test_energy_must_be_numeric(self):
        with pytest.raises(ValidationError):
            DreamFragment.model_validate({**FRAGMENT, "energy_score": "very"})
        with pytest.raises(ValidationError):
            DreamFragment.model_validate({**FRAGMENT, "energy_score": None})

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan"), "1e999"])
    def test_energy_non_finite_is_validation_error(self, raw):
        with pytest.raises(ValidationError):
            DreamFragment.model_validate({**FRAGMENT, "energy_score": raw})

    @pytest.mark.parametrize("field", ["text", "interpretation"])
    def test_required_text_not_empty(self, field):
        with pytest.raises(ValidationError):
            DreamFragment.model_validate({**FRAGMENT, field: ""})

    def test_tag_lists_default_empty(self):
        frag = DreamFragment(id="f2", text="飛", interpretation="自由")
        assert frag.characters == []
        assert frag.colors == []

    def test_frozen(self):
        frag = DreamFragment.model_validate(FRAGMENT)
        with pytest.raises(ValidationError):
            frag.energy_score = 99


# ============================================================================
# Dream
# ============================================================================

class TestDream:

    def test_accepts_camel_case_layout(self):
        dream = Dream.model_validate({
            "id": "d1", "rawText": "夢", "context": "搬家",
            "reentryRecord": "對話", "date": NOW, "fragments": [FRAGMENT],
        })
        assert dream.raw_text == "夢"
        assert dream.reentry_record == "對話"
        assert dream.fragments[0].id == "f1"

    def test_dumps_by_alias(self):
        dream = Dream(id="d1", raw_text="夢", date=NOW)
        dumped = dream.model_dump(by_alias=True)
        assert set(dumped) == {"id", "rawText", "context", "reentryRecord", "date", "fragments"}

    def test_optional_fields(self):
        dream = Dream(id="d1", raw_text="夢", date=NOW)
        assert dream.context is None
        assert dream.reentry_record is None
        assert dream.fragment_count == 0

    def test_preview(self):
        long = Dream(id="d1", raw_text="長" * 200, date=NOW)
        assert long.preview() == "長" * 150 + "..."
        short = Dream(id="d2", raw_text="短", date=NOW)
        assert short.preview() == "短"

    def test_extra_fields_allowed(self):
        dream = Dream.model_validate({"id": "d1", "rawText": "夢", "date": NOW, "mood": "calm"})
        assert dream.model_dump()["mood"] == "calm"


# ============================================================================
# Load / save
# ============================================================================

def test_config_defaults_when_missing(tmp_path):
    config = load_validated(tmp_path / "missing.json", AnalysisConfig)
    assert config.model == "gemini-2.5-flash"
    assert config.api_key_env == "GEMINI_API_KEY"


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.json"
    save_validated(path, AnalysisConfig(model="gemini-2.5-pro", timeout=10))
    loaded = load_validated(path, AnalysisConfig)
    assert loaded.model == "gemini-2.5-pro"
    assert loaded.timeout == 10


def test_config_corrupt_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{{{ nope")
    assert load_validated(path, AnalysisConfig) == AnalysisConfig()


def test_list_roundtrip_keeps_layout(tmp_path):
    dreams = [
        Dream(id="d2", raw_text="第二個夢", date=NOW, fragments=[DreamFragment.model_validate(FRAGMENT)]),
        Dream(id="d1", raw_text="第一個夢", date=NOW),
    ]
    path = tmp_path / "dreams.json"
    save_validated_list(path, dreams)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw[0]["rawText"] == "第二個夢"
    assert "raw_text" not in raw[0]

    loaded = load_validated_list(path, Dream)
    assert [d.id for d in loaded] == ["d2", "d1"]
    assert loaded[0] == dreams[0]


def test_list_load_missing(tmp_path):
    assert load_validated_list(tmp_path / "missing.json", Dream) == []


def test_list_load_corrupt_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("not json at all {{{")
    with pytest.raises(ValueError):
        load_validated_list(path, Dream)


def test_list_load_not_a_list_raises(tmp_path):
    path = tmp_path / "obj.json"
    path.write_text('{"id": "d1"}')
    with pytest.raises(ValueError):
        load_validated_list(path, Dream)


# ============================================================================
# Atomic write
# ============================================================================

def test_atomic_write_json(tmp_path):
    data = {"key": "夢", "nested": {"a": 1}}
    path = tmp_path / "atomic.json"
    atomic_write_json(path, data)
    assert json.loads(path.read_text(encoding="utf-8")) == data


def test_atomic_write_no_tmp_leftover(tmp_path):
    path = tmp_path / "clean.json"
    atomic_write_json(path, {"x": 1})
    assert not path.with_suffix(".json.tmp").exists()


def test_atomic_write_creates_parent_dirs(tmp_path):
    path = tmp_path / "deep" / "nested" / "file.json"
    atomic_write_json(path, {"ok": True})
    assert json.loads(path.read_text()) == {"ok": True}


# ============================================================================
# Exceptions
# ============================================================================

def test_exceptions_inherit_from_exception():
    for exc in (DreamweaverNotFoundError, DreamweaverValidationError,
                AnalysisError, AnalysisInProgressError):
        assert issubclass(exc, Exception)


def test_badge_definition_has_no_rule():
    badge = BadgeDefinition(id="x", name="X", description="d", icon="*")
    assert set(badge.model_dump()) == {"id", "name", "description", "icon"}
