# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Plain-text summaries of evaluations and contact statistics for display.

Read-only: nothing here touches the stores.
"""

from __future__ import annotations

from mesh_trust.levels import TrustLevel, trust_level_description
from mesh_trust.types import TrustEvaluation, TrustStatistics

# Plural/short forms used in the statistics listing.
_STATISTICS_LABELS: dict[TrustLevel, str] = {
    TrustLevel.UNKNOWN: "Unknown",
    TrustLevel.KNOWN_CONTACT: "Known",
    TrustLevel.FRIEND: "Friends",
    TrustLevel.CLOSE_FAMILY: "Close/Family",
}


def evaluation_summary(evaluation: TrustEvaluation) -> str:
    """
    Render a multi-line summary of one evaluation.

    Example output::

        ✅ Trust: Very High
        Sender: Close/Family
        Hops: 0
        Score: 0.90
    """
    lines = [
        f"{evaluation.indicator} Trust: {evaluation.rating}",
        f"Sender: {trust_level_description(evaluation.sender_trust_level)}",
        f"Hops: {evaluation.hop_count}",
        f"Score: {evaluation.overall_trust_score:.2f}",
    ]
    if evaluation.confirmations > 0 or evaluation.rejections > 0:
        lines.append(
            f"Verifications: ✓{evaluation.confirmations} ✗{evaluation.rejections}"
        )
    return "\n".join(lines)


def statistics_summary(stats: TrustStatistics) -> str:
    """Render contact counts per trust level, one per line."""
    lines = [
        "Trust Statistics:",
        f"Total Contacts: {stats.total_contacts}",
    ]
    for level in TrustLevel:
        lines.append(f"{_STATISTICS_LABELS[level]}: {stats.by_level[level]}")
    return "\n".join(lines)
