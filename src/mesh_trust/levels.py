# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Contact trust level definitions for mesh message authentication.

The four levels classify how well the local user knows another party in the
mesh. Levels are integers [0, 3] so they compare numerically, and each maps
to a continuous trust factor in [0.0, 1.0] used by the scorer.
"""

from __future__ import annotations

from enum import IntEnum


class TrustLevel(IntEnum):
    """
    Four-level trust scale for mesh contacts.

    Higher levels give a contact's own messages and their verification votes
    more weight. Absence of any recorded level is equivalent to UNKNOWN.
    """

    UNKNOWN = 0
    """No contact relationship."""

    KNOWN_CONTACT = 1
    """Present in the user's address book or messenger contacts."""

    FRIEND = 2
    """Manually promoted by the user."""

    CLOSE_FAMILY = 3
    """Manually set; highest trust."""


# Rounded thirds, so the steps are not exactly equal (0.33, 0.34, 0.33).
TRUST_FACTORS: dict[TrustLevel, float] = {
    TrustLevel.UNKNOWN: 0.0,
    TrustLevel.KNOWN_CONTACT: 0.33,
    TrustLevel.FRIEND: 0.67,
    TrustLevel.CLOSE_FAMILY: 1.0,
}

TRUST_LEVEL_DESCRIPTIONS: dict[TrustLevel, str] = {
    TrustLevel.UNKNOWN: "Unknown",
    TrustLevel.KNOWN_CONTACT: "Known Contact",
    TrustLevel.FRIEND: "Friend",
    TrustLevel.CLOSE_FAMILY: "Close/Family",
}

#: Lowest trust level; the implicit level of every unrecorded contact.
TRUST_LEVEL_MIN: TrustLevel = TrustLevel.UNKNOWN

#: Highest trust level.
TRUST_LEVEL_MAX: TrustLevel = TrustLevel.CLOSE_FAMILY

#: Total number of distinct trust levels.
TRUST_LEVEL_COUNT: int = 4


def is_valid_trust_level(value: object) -> bool:
    """Return True if *value* is an integer trust level in [0, 3]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return TRUST_LEVEL_MIN <= value <= TRUST_LEVEL_MAX


def trust_factor(level: int) -> float:
    """
    Return the normalised trust factor for *level*.

    Raises:
        ValueError: If *level* is out of the valid range [0, 3].
    """
    if not is_valid_trust_level(level):
        raise ValueError(
            f"Trust level {level!r} is out of range "
            f"[{int(TRUST_LEVEL_MIN)}, {int(TRUST_LEVEL_MAX)}]."
        )
    return TRUST_FACTORS[TrustLevel(level)]


def trust_level_description(level: int) -> str:
    """
    Return the human-readable description for a numeric trust level.

    Raises:
        ValueError: If *level* is out of the valid range [0, 3].
    """
    if not is_valid_trust_level(level):
        raise ValueError(
            f"Trust level {level!r} is out of range "
            f"[{int(TRUST_LEVEL_MIN)}, {int(TRUST_LEVEL_MAX)}]."
        )
    return TRUST_LEVEL_DESCRIPTIONS[TrustLevel(level)]
