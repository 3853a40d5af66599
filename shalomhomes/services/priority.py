"""Rule-based priority suggestions for maintenance requests.

Keyword matching only: high-priority keywords are checked first, then
low-priority ones, and anything else is ``medium``.
"""

import logging
from typing import Tuple

logger = logging.getLogger(__name__)

HIGH_PRIORITY_KEYWORDS: Tuple[str, ...] = (
    "emergency", "urgent", "immediately", "critical", "danger", "safety",
    "hazard", "fire", "flood", "leak", "gas", "smoke", "burning",
    "electrical", "shock", "not working", "broken", "outage", "no water",
    "no electricity", "no heat", "no cooling", "security", "breach",
    "exposure", "injury", "damage", "severe", "failed", "collapsed",
)

LOW_PRIORITY_KEYWORDS: Tuple[str, ...] = (
    "minor", "cosmetic", "small", "eventually", "when possible", "sometime",
    "update", "replace", "upgrade", "improvement", "enhance", "convenience",
    "paint", "touch up", "aesthetic", "appearance", "not urgent", "can wait",
    "would like", "prefer", "consider", "suggest", "recommend", "nice to have",
)

MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95


def suggest_priority(description: str) -> str:
    if not description:
        return "medium"

    lowered = description.lower()
    for keyword in HIGH_PRIORITY_KEYWORDS:
        if keyword in lowered:
            logger.debug("Suggested high priority due to keyword %r", keyword)
            return "high"
    for keyword in LOW_PRIORITY_KEYWORDS:
        if keyword in lowered:
            logger.debug("Suggested low priority due to keyword %r", keyword)
            return "low"
    return "medium"


def get_priority_confidence(description: str) -> float:
    """Grows with description length, from 0.6 up to the 0.95 cap."""
    if not description or len(description) < 10:
        return MIN_CONFIDENCE
    length_factor = min(len(description) / 100, 1)
    return min(0.6 + length_factor * 0.3, MAX_CONFIDENCE)


def describe_suggestion(description: str) -> Tuple[str, float, str]:
    priority = suggest_priority(description)
    confidence = get_priority_confidence(description)
    message = f"Suggested {priority} priority ({round(confidence * 100)}% confidence)."
    return priority, confidence, message
