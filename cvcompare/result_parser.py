"""Recover an ``AnalysisResult`` from the analysis service's free-text reply.

The service writes something close to markdown::

    **Match Percentage:** 72%
    **Strengths:**
    1. Good fit
    **Areas for Improvement:**
    1. No tests

Nothing about that layout is guaranteed, so every matcher here falls back
to an empty value instead of raising.  Each pattern exposes one named group
(``score`` or ``body``) and the helpers below only ever read that group.
"""

import re
from typing import Dict, List, Pattern

from .schemas import AnalysisResult

SCORE_PATTERN = re.compile(
    r"Match Percentage(?::\s*(?:\*\*)?|\*\*:)\s*(?P<score>[0-9]+)\s*%", re.IGNORECASE
)

# Field name on AnalysisResult -> heading label in the reply.
SECTION_LABELS: Dict[str, str] = {
    "strengths": "Strengths",
    "weaknesses": "Areas for Improvement",
    "recommendations": "Recommendations",
}

_NUMBERING = re.compile(r"^[0-9]+\.\s+")
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_TRAILING_COLON = re.compile(r":\s*$")


def section_pattern(label: str) -> Pattern[str]:
    # Accepts "**Label:**" and the "**Label**:" variant.  The body stops at
    # the next line opening with "**" or at the end of the text.
    return re.compile(
        r"\*\*" + re.escape(label) + r"(?::\*\*|\*\*:)[ \t]*"
        r"(?P<body>.*?)(?=\n\*\*|\Z)",
        re.IGNORECASE | re.DOTALL,
    )


_SECTION_PATTERNS: Dict[str, Pattern[str]] = {
    label.lower(): section_pattern(label) for label in SECTION_LABELS.values()
}


def extract_score(text: str) -> int:
    match = SCORE_PATTERN.search(text)
    if not match:
        return 0
    try:
        return int(match.group("score"))
    except ValueError:
        return 0


def extract_section(text: str, label: str) -> str:
    """Return the raw body under ``**label:**`` or ``""`` when it is absent."""
    pattern = _SECTION_PATTERNS.get(label.lower()) or section_pattern(label)
    match = pattern.search(text)
    return match.group("body").strip() if match else ""


def extract_list_items(section: str) -> List[str]:
    items = []
    for line in section.splitlines():
        item = _NUMBERING.sub("", line)
        item = _BOLD.sub(r"\1", item)
        item = _TRAILING_COLON.sub("", item)
        item = item.strip()
        if item:
            items.append(item)
    return items


def parse_analysis(text: str) -> AnalysisResult:
    """Parse the reply text into an ``AnalysisResult``.  Never raises."""
    if not isinstance(text, str) or not text:
        return AnalysisResult()
    sections = {
        field: extract_list_items(extract_section(text, label))
        for field, label in SECTION_LABELS.items()
    }
    return AnalysisResult(score=extract_score(text), **sections)
