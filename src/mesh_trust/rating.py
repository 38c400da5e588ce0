# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Presentation helpers that classify a trust score for display.

These are pure lookups with no effect on stored state.
"""

from __future__ import annotations

# (lower bound, rating, indicator), checked from the highest band down.
_BANDS: tuple[tuple[float, str, str], ...] = (
    (0.8, "Very High", "✅"),
    (0.6, "High", "👍"),
    (0.4, "Medium", "⚠️"),
    (0.2, "Low", "⚡"),
)

_LOWEST_RATING = "Very Low"
_LOWEST_INDICATOR = "❌"

HIGH_TRUST_THRESHOLD: float = 0.6
LOW_TRUST_THRESHOLD: float = 0.4


def trust_rating(score: float) -> str:
    """Return one of Very Low, Low, Medium, High, Very High for *score*."""
    for lower_bound, rating, _ in _BANDS:
        if score >= lower_bound:
            return rating
    return _LOWEST_RATING


def trust_indicator(score: float) -> str:
    """Return the single-glyph indicator matching :func:`trust_rating`."""
    for lower_bound, _, indicator in _BANDS:
        if score >= lower_bound:
            return indicator
    return _LOWEST_INDICATOR


def is_high_trust(score: float) -> bool:
    """Return True if a message with *score* should be shown prominently."""
    return score >= HIGH_TRUST_THRESHOLD


def is_low_trust(score: float) -> bool:
    """Return True if a message with *score* should be treated with caution."""
    return score < LOW_TRUST_THRESHOLD
