# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Dream journal tools — record, browse, and reflect on dreams.

4 tools: dreamweaver_record, dreamweaver_journal, dreamweaver_insights,
dreamweaver_analysis_status.
"""

import json

from dreamweaver_mcp._app import tool
from journal import analysis
from journal.draft import DreamDraft, TAG_CATEGORIES
from journal.journal import get_journal
from journal.schemas import (
    AnalysisError, AnalysisInProgressError,
    DreamweaverNotFoundError, DreamweaverValidationError,
)


def _split_tags(raw: str) -> tuple:
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def _format_dream(dream) -> str:
    day = dream.date[:10]
    lines = [f"[Dream {dream.id}] {day} — {dream.fragment_count} fragments", ""]
    lines.append(dream.raw_text)
    if dream.context:
        lines.append(f"\nContext: {dream.context}")
    for i, frag in enumerate(dream.fragments, start=1):
        lines.append(f"\n{i}. {frag.text}  (energy {frag.energy_score})")
        tags = []
        if frag.characters:
            tags.append(f"characters: {', '.join(frag.characters)}")
        if frag.locations:
            tags.append(f"locations: {', '.join(frag.locations)}")
        if frag.emotions:
            tags.append(f"emotions: {', '.join(frag.emotions)}")
        if frag.colors:
            tags.append(f"colors: {', '.join(frag.colors)}")
        if tags:
            lines.append("   " + " | ".join(tags))
        lines.append(f"   → {frag.interpretation}")
    return "\n".join(lines)


@tool()
def dreamweaver_record(
    text: str = "",
    characters: str = "",
    locations: str = "",
    emotions: str = "",
    context: str = "",
    reentry_record: str = "",
    date: str = "",
) -> str:
    """
    Record a dream. The dream is analyzed into fragments and saved.

    Args:
        text: The dream narrative (may be empty if tags are given)
        characters: Comma-separated people/creatures in the dream
        locations: Comma-separated places
        emotions: Comma-separated feelings
        context: Recent life events or mood (optional)
        reentry_record: Active imagination / re-entry dialogue (optional)
        date: YYYY-MM-DD, defaults to today

    Returns:
        The analyzed dream, or the reason it wasn't recorded
    """
    fields = {
        "text": text,
        "context": context,
        "reentry_record": reentry_record,
        "characters": _split_tags(characters),
        "locations": _split_tags(locations),
        "emotions": _split_tags(emotions),
    }
    if date:
        fields["date"] = date
    draft = DreamDraft(**fields)

    try:
        dream = get_journal().submit(draft)
    except (DreamweaverValidationError, AnalysisInProgressError, AnalysisError) as e:
        return f"Not recorded: {e}"
    return _format_dream(dream)


@tool()
def dreamweaver_journal(action: str = "list", dream_id: str = "", n: int = 10) -> str:
    """
    Browse or edit the dream journal.

    Args:
        action: "list" (recent dreams), "show" (one dream, needs dream_id),
                "delete" (remove a dream, needs dream_id)
        dream_id: Dream id for show/delete
        n: How many dreams to list

    Returns:
        Journal listing or dream detail
    """
    journal = get_journal()

    if action == "list":
        dreams = journal.dreams[:n]
        if not dreams:
            return "No dreams recorded yet."
        lines = [f"{len(journal.dreams)} dreams (showing {len(dreams)}):"]
        for d in dreams:
            lines.append(f"  {d.date[:10]}  {d.id}  [{d.fragment_count}]  {d.preview(60)}")
        return "\n".join(lines)

    if action in ("show", "delete"):
        if not dream_id:
            return f"Error: 'dream_id' required for {action} action"
        try:
            if action == "show":
                return _format_dream(journal.get(dream_id))
            journal.delete(dream_id)
            return f"Deleted dream {dream_id}."
        except DreamweaverNotFoundError as e:
            return f"Error: {e}"

    return f"Unknown action: {action}. Use: list, show, delete"


@tool()
def dreamweaver_insights(view: str = "dashboard", badge_id: str = "") -> str:
    """
    Derived views over the whole journal.

    Args:
        view: "dashboard" (emotion/color frequencies, energy trend),
              "badges" (achievement wall), "graph" (fragment-entity graph JSON)
        badge_id: With view="badges", show just this badge
                  (beginner, storyteller, explorer, intense, nightmare)

    Returns:
        The requested view
    """
    journal = get_journal()

    if view == "dashboard":
        data = journal.dashboard()
        if not data["dream_count"]:
            return "No dreams recorded yet. Start dreaming!"
        lines = [f"{data['dream_count']} dreams, {data['fragment_count']} fragments", ""]
        lines.append("Top emotions: " + (
            ", ".join(f"{e['name']} ×{e['value']}" for e in data["emotions"]) or "none"))
        lines.append("Colors: " + (
            ", ".join(f"{c['name']} ×{c['value']}" for c in data["colors"]) or "none"))
        lines.append("Energy: " + " → ".join(str(p["energy"]) for p in data["energy"]))
        earned = journal.unlocked_badges()
        lines.append(f"Badges: {len(earned)}/{len(journal.badges())} "
                     + " ".join(b.icon for b in earned))
        return "\n".join(lines)

    if view == "badges":
        if badge_id:
            try:
                statuses = [journal.badge(badge_id)]
            except DreamweaverNotFoundError as e:
                return f"Error: {e}"
        else:
            statuses = journal.badges()
        lines = []
        for b in statuses:
            mark = b.icon if b.unlocked else "🔒"
            lines.append(f"{mark} {b.name} — {b.description}")
        return "\n".join(lines)

    if view == "graph":
        return json.dumps(journal.graph().to_render_dict(), indent=2, ensure_ascii=False)

    return f"Unknown view: {view}. Use: dashboard, badges, graph"


@tool()
def dreamweaver_analysis_status() -> str:
    """Analysis client config: model, endpoint, whether an API key is set."""
    info = analysis.status()
    info["analyzing"] = get_journal().analyzing
    info["tag_categories"] = list(TAG_CATEGORIES)
    return json.dumps(info, indent=2)
