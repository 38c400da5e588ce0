# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Core type definitions for the mesh-trust package.

All runtime data models are Pydantic v2 models for validation and
serialisation. Stored entities are frozen: the stores hand these objects to
callers directly because no caller can mutate them.

Field aliases carry the camelCase names of the persisted JSON layout, so a
model dumped with ``by_alias=True`` is exactly one element of the stored
array.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mesh_trust.levels import TRUST_FACTORS, TrustLevel
from mesh_trust.rating import is_high_trust, is_low_trust, trust_indicator, trust_rating


# ---------------------------------------------------------------------------
# VerificationOutcome: result of add_verification()
# ---------------------------------------------------------------------------


class VerificationOutcome(str):
    """Possible outcomes of registering a verification vote."""

    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"


# ---------------------------------------------------------------------------
# ContactTrust: one contact's stored trust level
# ---------------------------------------------------------------------------


class ContactTrust(BaseModel, frozen=True, populate_by_name=True):
    """
    The trust level recorded for a single contact.

    A contact with no stored entry behaves exactly like
    ``ContactTrust(contact_id=..., level=TrustLevel.UNKNOWN, manually_set=False)``.
    Constructing with a level outside [0, 3] raises ``ValidationError``.
    """

    contact_id: str = Field(
        ..., alias="contactId", description="Opaque, stable contact identifier."
    )
    level: TrustLevel = Field(
        default=TrustLevel.UNKNOWN,
        alias="trustLevel",
        description="Trust level integer [0, 3].",
    )
    last_updated: int = Field(
        default=0,
        alias="lastUpdated",
        description="Wall-clock timestamp (ms since Unix epoch) of the last write.",
    )
    manually_set: bool = Field(
        default=False,
        alias="isManuallySet",
        description="True for an explicit user choice, False for automatic imports.",
    )

    @property
    def trust_factor(self) -> float:
        """Normalised trust factor in [0.0, 1.0] for this contact's level."""
        return TRUST_FACTORS[self.level]


# ---------------------------------------------------------------------------
# VerificationRecord: one contact's vote on one message
# ---------------------------------------------------------------------------


class VerificationRecord(BaseModel, frozen=True, populate_by_name=True):
    """A single confirm or reject vote by one contact on one message."""

    message_id: str = Field(..., alias="messageId")
    verifier_id: str = Field(..., alias="verifierId")
    confirmed: bool = Field(
        ...,
        alias="isConfirmed",
        description="True when the verifier confirms the message, False when rejecting.",
    )
    timestamp: int = Field(
        ..., description="Wall-clock timestamp (ms since Unix epoch) of the vote."
    )
    comment: str = Field(default="", description="Optional free-text remark.")


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class VerificationStats(BaseModel, frozen=True):
    """Vote counts for a single message."""

    message_id: str
    total_verifications: int = Field(default=0, ge=0)
    confirmations: int = Field(default=0, ge=0)
    rejections: int = Field(default=0, ge=0)

    @property
    def net_score(self) -> int:
        """Confirmations minus rejections."""
        return self.confirmations - self.rejections

    @property
    def has_positive_consensus(self) -> bool:
        """True if confirmations outnumber rejections."""
        return self.confirmations > self.rejections


def _empty_level_counts() -> dict[TrustLevel, int]:
    return {level: 0 for level in TrustLevel}


class TrustStatistics(BaseModel, frozen=True):
    """
    Contact counts per trust level.

    ``by_level`` always holds an entry for every TrustLevel, so lookups never
    need a default.
    """

    total_contacts: int = Field(default=0, ge=0)
    by_level: dict[TrustLevel, int] = Field(default_factory=_empty_level_counts)

    @property
    def unknown_count(self) -> int:
        return self.by_level[TrustLevel.UNKNOWN]

    @property
    def known_contact_count(self) -> int:
        return self.by_level[TrustLevel.KNOWN_CONTACT]

    @property
    def friend_count(self) -> int:
        return self.by_level[TrustLevel.FRIEND]

    @property
    def close_family_count(self) -> int:
        return self.by_level[TrustLevel.CLOSE_FAMILY]


# ---------------------------------------------------------------------------
# TrustEvaluation: computed, never stored
# ---------------------------------------------------------------------------


class TrustEvaluation(BaseModel, frozen=True):
    """
    Point-in-time trust assessment of a received message.

    Recomputed on demand; the same message can evaluate differently later as
    votes arrive or contact levels change. The confirmation and rejection
    counts are unweighted and informational only.
    """

    message_id: str
    original_sender_id: str
    sender_trust_level: TrustLevel = Field(
        ..., description="The sender's level at evaluation time."
    )
    hop_count: int = Field(..., ge=0)
    confirmations: int = Field(default=0, ge=0)
    rejections: int = Field(default=0, ge=0)
    overall_trust_score: float = Field(..., ge=0.0, le=1.0)
    timestamp: int = Field(
        ..., description="Wall-clock timestamp (ms since Unix epoch) of the evaluation."
    )

    @property
    def is_high_trust(self) -> bool:
        """True if the message should be displayed prominently (score >= 0.6)."""
        return is_high_trust(self.overall_trust_score)

    @property
    def is_low_trust(self) -> bool:
        """True if the message should be treated with caution (score < 0.4)."""
        return is_low_trust(self.overall_trust_score)

    @property
    def rating(self) -> str:
        """Human-readable rating of the overall score."""
        return trust_rating(self.overall_trust_score)

    @property
    def indicator(self) -> str:
        """Single-glyph indicator of the overall score."""
        return trust_indicator(self.overall_trust_score)
