"""Keyword-based activity classification."""

from __future__ import annotations

from typing import Optional

OTHER = "Other"

# Evaluated in declaration order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Meeting", ("meeting", "sync", "standup", "call", "catchup", "check-in", "1:1", "planning")),
    ("Presentation", ("deck", "slide", "presentation", "demo", "showcase")),
    ("Development", ("code", "script", "pipeline", "etl", "debug", "fix", "implement", "deploy", "pr review")),
    ("Analysis", ("analysis", "investigate", "insight", "research", "audit", "explore")),
    ("Documentation", ("doc", "documentation", "spec", "wiki", "readme", "guide")),
    ("Internal", ("follow up", "alignment", "admin", "email", "slack", "chat", "prep")),
)

CATEGORIES = tuple(category for category, _ in CATEGORY_KEYWORDS) + (OTHER,)

STRATEGIC_CATEGORIES = frozenset({"Development", "Analysis", "Documentation", "Presentation"})

UNPLANNED_KEYWORDS = ("ad-hoc", "urgent", "broken", "incident", "fire", "quick fix")


def classify_activity(description: Optional[str]) -> str:
    """Map a free-text description to one of the fixed categories."""

    text = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER


def is_strategic(category: str) -> bool:
    return category in STRATEGIC_CATEGORIES


def is_planned(description: Optional[str], project: Optional[str]) -> bool:
    """Reactive work (urgent keywords or support projects) counts as unplanned."""

    text = (description or "").lower()
    if any(keyword in text for keyword in UNPLANNED_KEYWORDS):
        return False
    return "support" not in (project or "").lower()
