# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Draft — the dream entry form as an immutable value.

A DreamDraft holds what the user has typed and tagged so far. Every edit
returns a new draft (draft + action -> next draft); nothing is mutated in
place. compose_dream_text() turns a draft into the narrative that gets
sent for analysis and stored as the dream's raw text.
"""

from datetime import date as date_type
from typing import List, Optional, Tuple

from pydantic import Field

from journal.schemas import FrozenModel, DreamweaverValidationError

CHARACTERS = "characters"
LOCATIONS = "locations"
EMOTIONS = "emotions"
TAG_CATEGORIES = (CHARACTERS, LOCATIONS, EMOTIONS)

DEFAULT_CHARACTERS = ("家人", "朋友", "伴侶", "陌生人", "狗", "貓", "逝者", "名人", "同事", "鬼怪", "小孩", "老師")
DEFAULT_LOCATIONS = ("家裡", "學校", "辦公室", "老家", "森林", "海邊", "城市", "未知房間", "樓梯", "山", "交通工具", "天空", "廁所", "電梯")
DEFAULT_EMOTIONS = ("害怕", "焦慮", "快樂", "困惑", "悲傷", "生氣", "平靜", "興奮", "愧疚", "羞恥", "愛", "孤單", "無助")

DEFAULT_TAGS = {
    CHARACTERS: DEFAULT_CHARACTERS,
    LOCATIONS: DEFAULT_LOCATIONS,
    EMOTIONS: DEFAULT_EMOTIONS,
}

# Labels used in the composed narrative
TAG_LABELS = {
    CHARACTERS: "出現人物",
    LOCATIONS: "場景",
    EMOTIONS: "感受到的情緒",
}
TAG_SUPPLEMENT_HEADER = "[使用者補充標籤資訊]"
TAGS_ONLY_HEADER = "夢境包含以下元素："

EMPTY_DRAFT_MESSAGE = "請輸入夢境內容或選擇至少一個相關標籤（人物、場景或情緒）。"


def _today() -> str:
    return date_type.today().isoformat()


def _check_category(category: str) -> str:
    if category not in TAG_CATEGORIES:
        raise DreamweaverValidationError(
            f"Unknown tag category '{category}'. Use: {', '.join(TAG_CATEGORIES)}"
        )
    return category


class DreamDraft(FrozenModel):
    """Unsaved dream entry. Dates are plain YYYY-MM-DD, like a date picker."""
    date: str = Field(default_factory=_today)
    text: str = ""
    context: str = ""
    reentry_record: str = ""
    characters: Tuple[str, ...] = ()
    locations: Tuple[str, ...] = ()
    emotions: Tuple[str, ...] = ()

    def tags(self, category: str) -> Tuple[str, ...]:
        return getattr(self, _check_category(category))

    @property
    def has_tags(self) -> bool:
        return any(self.tags(c) for c in TAG_CATEGORIES)

    def toggle_tag(self, category: str, tag: str) -> "DreamDraft":
        """Select an unselected tag or deselect a selected one."""
        selected = self.tags(category)
        if tag in selected:
            updated = tuple(t for t in selected if t != tag)
        else:
            updated = selected + (tag,)
        return self.model_copy(update={category: updated})

    def add_custom_tag(self, category: str, tag: str) -> "DreamDraft":
        """Add a user-typed tag. Blank or already-selected tags are ignored."""
        tag = tag.strip()
        selected = self.tags(category)
        if not tag or tag in selected:
            return self
        return self.model_copy(update={category: selected + (tag,)})

    def cleared(self) -> "DreamDraft":
        """Blank form after a successful submission (date back to today)."""
        return DreamDraft()


def tag_options(category: str, selected: Optional[Tuple[str, ...]] = None) -> List[str]:
    """Preset options plus any custom selections, presets first, no duplicates."""
    options = list(DEFAULT_TAGS[_check_category(category)])
    for tag in selected or ():
        if tag not in options:
            options.append(tag)
    return options


def validate_draft(draft: DreamDraft) -> None:
    """A draft needs either some narrative or at least one tag."""
    if not draft.text.strip() and not draft.has_tags:
        raise DreamweaverValidationError(EMPTY_DRAFT_MESSAGE)


def compose_dream_text(draft: DreamDraft) -> str:
    """
    Build the narrative sent for analysis.

    Selected tags are appended as a supplement block; a draft with tags but
    no narrative uses the tag lines as the whole story.
    """
    story = draft.text.strip()
    meta = [
        f"{TAG_LABELS[c]}: {', '.join(draft.tags(c))}"
        for c in TAG_CATEGORIES if draft.tags(c)
    ]

    if not meta:
        return story
    if not story:
        return TAGS_ONLY_HEADER + "\n" + "\n".join(meta)
    return f"{story}\n\n{TAG_SUPPLEMENT_HEADER}\n" + "\n".join(meta)
