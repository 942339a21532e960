"""Section classifier: section identifier -> SectionCategory.

Section ids are free-form strings chosen by content authors
("overview", "intro_video", "tools_demo_2", "discussion", "task_final").
The category is decided by an ordered rule table; the first rule whose
predicate matches wins.  Matching is case-sensitive and works on the raw
identifier, with no normalization.

Rule order matters:

  1. overview     equals / starts with "overview" or "intro"
  2. task         starts with "task" or "assignment"
  3. tools_demo   contains "tools_demo" or "tools_intermediaries"
  4. tools        contains "tools"
  5. discussion   contains "discussion"
  6. task         contains "task" or "assignment"
  7. other        fallback

Rule 2 keeps an identifier such as "task_tools_review" in the task
category instead of letting the "tools" substring claim it.
"""

from __future__ import annotations

from collections.abc import Callable

from coursetrack.models.progress import SectionCategory

Predicate = Callable[[str], bool]


def _starts_with(*prefixes: str) -> Predicate:
    return lambda section_id: section_id.startswith(prefixes)


def _contains(*needles: str) -> Predicate:
    return lambda section_id: any(n in section_id for n in needles)


SECTION_RULES: tuple[tuple[Predicate, SectionCategory], ...] = (
    (_starts_with("overview", "intro"), SectionCategory.OVERVIEW),
    (_starts_with("task", "assignment"), SectionCategory.TASK),
    (_contains("tools_demo", "tools_intermediaries"), SectionCategory.TOOLS_DEMO),
    (_contains("tools"), SectionCategory.TOOLS_GENERIC),
    (_contains("discussion"), SectionCategory.DISCUSSION),
    (_contains("task", "assignment"), SectionCategory.TASK),
)


def classify_section(section_id: str) -> SectionCategory:
    for predicate, category in SECTION_RULES:
        if predicate(section_id):
            return category
    return SectionCategory.OTHER


# Section id prefixes that belong to course content.  Sections outside
# this list (leftovers from retired page templates, test ids) are hidden
# from the admin drill-down.
TRACKED_SECTION_PREFIXES: tuple[str, ...] = (
    "overview",
    "intro",
    "tools",
    "discussion",
    "task",
    "assignment",
    "help_tools",
    "help-tools",
    "inspiration",
    "image-generators",
    "image-editing",
    "designs",
    "3d",
)


def is_tracked_section(section_id: str) -> bool:
    return section_id.startswith(TRACKED_SECTION_PREFIXES)
