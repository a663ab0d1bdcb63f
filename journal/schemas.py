# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Schema Registry — Pydantic models for all JSON structures.

Single source of truth for every JSON structure Dreamweaver reads/writes:
the persisted journal, the analysis config, and the derived views handed to
the dashboard, badge wall, and relationship graph.

Usage:
    from journal.schemas import Dream, DreamFragment

    # Validate on load
    dream = Dream.model_validate(data)

    # Serialize on save (by alias: rawText, reentryRecord)
    dream.model_dump(by_alias=True)

All models use extra="allow" so existing data with unknown fields
won't break — we just won't validate those extra fields.
"""

import json
import os
from pathlib import Path
from typing import List, NamedTuple, Optional, Any, Type, TypeVar
from pydantic import BaseModel, Field, field_validator

ENERGY_MIN = 0
ENERGY_MAX = 100


# ============================================================================
# Base config — all models inherit this
# ============================================================================

class DreamweaverModel(BaseModel):
    """Base for all Dreamweaver schemas. Allows extra fields for forward compat."""
    model_config = {"extra": "allow", "populate_by_name": True}


class FrozenModel(DreamweaverModel):
    """Journal records are append-only: never mutated after creation."""
    model_config = {"extra": "allow", "populate_by_name": True, "frozen": True}


# ============================================================================
# Custom exceptions — standardized error handling across the journal layer
# ============================================================================

class DreamweaverNotFoundError(Exception):
    """Raised when a requested item (dream, badge) doesn't exist."""

class DreamweaverValidationError(Exception):
    """Raised when input fails validation (empty draft, unknown tag category)."""

class AnalysisError(Exception):
    """Raised when the remote analysis call fails or returns nothing usable."""

class AnalysisInProgressError(Exception):
    """Raised when a submission arrives while another analysis is outstanding."""


# ============================================================================
# DREAMS
# ============================================================================

class DreamFragment(FrozenModel):
    """A discrete scene/thought unit extracted from one dream."""
    id: str
    text: str = Field(min_length=1)
    characters: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    emotions: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)
    energy_score: int = 0
    interpretation: str = Field(min_length=1)

    @field_validator("energy_score", mode="before")
    @classmethod
    def _clamp_energy(cls, v: Any) -> int:
        try:
            score = v if isinstance(v, int) else int(round(float(v)))
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"energy_score must be a number, got {v!r}")
        return max(ENERGY_MIN, min(ENERGY_MAX, score))


class Dream(FrozenModel):
    """One journaled dream: ~/.dreamweaver/dream-weaver-dreams.json (list)."""
    id: str
    raw_text: str = Field(alias="rawText")
    context: Optional[str] = None
    reentry_record: Optional[str] = Field(None, alias="reentryRecord")
    date: str
    fragments: List[DreamFragment] = Field(default_factory=list)

    @property
    def fragment_count(self) -> int:
        return len(self.fragments)

    def preview(self, limit: int = 150) -> str:
        """Raw text trimmed for journal listings."""
        if len(self.raw_text) > limit:
            return self.raw_text[:limit] + "..."
        return self.raw_text


# ============================================================================
# BADGES
# ============================================================================

class BadgeDefinition(FrozenModel):
    """Catalog entry. The unlock rule lives in journal.badges, not here."""
    id: str
    name: str
    description: str
    icon: str


class BadgeStatus(BadgeDefinition):
    """Catalog entry plus its unlock state for one dream collection."""
    unlocked: bool = False


# ============================================================================
# DASHBOARD
# ============================================================================

class StatEntry(DreamweaverModel):
    """One bar/slice of a frequency chart."""
    name: str
    value: int


class EnergyPoint(DreamweaverModel):
    """One point of the energy trend line (oldest dream is index 1)."""
    index: int
    name: str
    energy: int


# ============================================================================
# GRAPH
# ============================================================================

class NodeKey(NamedTuple):
    """Composite node identity: (category, value). Never string-concatenated."""
    group: str
    value: str

    def render_id(self) -> str:
        """Collision-free string form for renderers that want string ids."""
        return json.dumps([self.group, self.value], ensure_ascii=False)


class GraphNode(DreamweaverModel):
    """Node handed to the force-layout renderer."""
    key: NodeKey
    name: str
    val: int

    @property
    def group(self) -> str:
        return self.key.group


class GraphEdge(DreamweaverModel):
    """Undirected fragment-to-entity link."""
    source: NodeKey
    target: NodeKey


class DreamGraph(DreamweaverModel):
    """Node set (insertion ordered) and edge list (discovery ordered)."""
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    def to_render_dict(self) -> dict:
        """{nodes, links} in the shape d3-style force layouts consume."""
        return {
            "nodes": [
                {"id": n.key.render_id(), "group": n.key.group, "name": n.name, "val": n.val}
                for n in self.nodes
            ],
            "links": [
                {"source": e.source.render_id(), "target": e.target.render_id()}
                for e in self.edges
            ],
        }


# ============================================================================
# CONFIG
# ============================================================================

class AnalysisConfig(DreamweaverModel):
    """Analysis client config: ~/.dreamweaver/dreamweaver-config.json"""
    model: str = "gemini-2.5-flash"
    api_url: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "GEMINI_API_KEY"
    timeout: float = 60.0
    temperature: Optional[float] = None


# ============================================================================
# UTILITY — validated load/save helpers
# ============================================================================

T = TypeVar("T", bound=DreamweaverModel)


def load_validated(path: Path, schema: Type[T], default: Any = None) -> T:
    """
    Load JSON from file and validate against schema.

    Args:
        path: Path to JSON file
        schema: Pydantic model class to validate against
        default: Default value if file doesn't exist or is invalid.
                 If None, returns schema() with all defaults.
    """
    if not path.exists():
        if default is not None:
            return schema.model_validate(default)
        return schema()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return schema.model_validate(data)
    except (json.JSONDecodeError, Exception):
        if default is not None:
            return schema.model_validate(default)
        return schema()


def _atomic_rename(tmp: Path, dest: Path):
    """Flush, fsync, then rename — crash-safe atomic write."""
    fd = os.open(str(tmp), os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
    os.replace(str(tmp), str(dest))


def save_validated(path: Path, model: DreamweaverModel, atomic: bool = True):
    """
    Save a validated model to JSON file.

    Args:
        path: Destination path
        model: Pydantic model instance
        atomic: If True, write to .tmp then rename (default: True)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = model.model_dump_json(indent=2, by_alias=True)

    if atomic:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(content, encoding="utf-8")
        _atomic_rename(tmp, path)
    else:
        path.write_text(content, encoding="utf-8")


def load_validated_list(path: Path, schema: Type[T]) -> List[T]:
    """Load a JSON array and validate each item. Raises on bad data."""
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path.name}: expected a JSON array, got {type(data).__name__}")
    return [schema.model_validate(item) for item in data]


def save_validated_list(path: Path, items: List[DreamweaverModel], atomic: bool = True):
    """Save a list of validated models to JSON array."""
    data = [item.model_dump(mode="json", by_alias=True) for item in items]

    if atomic:
        atomic_write_json(path, data)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def atomic_write_json(path: Path, data: Any, indent: int = 2):
    """Atomically write a dict/list as JSON (write .tmp, then rename).

    For raw dicts that don't have matching Pydantic schemas.
    For schema-validated data, use save_validated() instead.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=indent, ensure_ascii=False), encoding="utf-8")
    _atomic_rename(tmp, path)
