"""Keyword-based request classification.

Maps request text to the capability categories a request plausibly needs.
Classification is deterministic and local: whole-word, case-insensitive
keyword matching against a fixed rule table. The rule table order is the
priority order used to pick the primary category.
"""

import re
from dataclasses import dataclass

from agent_console.orchestrator.types import Category


@dataclass(frozen=True)
class CategoryRule:
    """Keywords that select a category."""

    category: Category
    keywords: tuple[str, ...]

    def pattern(self) -> re.Pattern[str]:
        alternatives = "|".join(re.escape(k).replace(r"\ ", r"\s+") for k in self.keywords)
        return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


EMAIL = Category(id="email", label="Communication")
WEB = Category(id="web", label="Research")
DOCS = Category(id="docs", label="Documents")
CALENDAR = Category(id="calendar", label="Scheduling")

# Highest priority first.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        EMAIL,
        ("email", "emails", "e-mail", "gmail", "inbox", "mail", "send", "reply", "forward"),
    ),
    CategoryRule(
        WEB,
        ("search", "look up", "google", "browse", "website", "online", "news", "web"),
    ),
    CategoryRule(
        DOCS,
        ("document", "documents", "docs", "draft", "notes", "spreadsheet", "write up"),
    ),
    CategoryRule(
        CALENDAR,
        ("schedule", "meeting", "calendar", "appointment", "remind", "reminder"),
    ),
)

_COMPILED: tuple[tuple[Category, re.Pattern[str]], ...] = tuple(
    (rule.category, rule.pattern()) for rule in CATEGORY_RULES
)
_PRIORITY: dict[str, int] = {rule.category.id: i for i, rule in enumerate(CATEGORY_RULES)}


def categorize(text: str) -> list[Category]:
    """Return every category whose keywords appear in ``text``.

    Args:
        text: Raw request text.

    Returns:
        Matching categories in priority order. Empty when no keyword matches,
        which means no tool is needed.
    """
    if not text:
        return []
    return [category for category, pattern in _COMPILED if pattern.search(text)]


def primary(categories: list[Category]) -> Category | None:
    """Pick the category that drives the tool branch.

    Unknown category ids rank below every declared one, in input order.
    """
    if not categories:
        return None
    return min(
        enumerate(categories),
        key=lambda item: (_PRIORITY.get(item[1].id, len(_PRIORITY)), item[0]),
    )[1]
