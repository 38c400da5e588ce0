# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Trust scoring for messages relayed over the mesh.

The score combines four signals into a value in [0.0, 1.0]:

1. The original sender's trust factor (weight 0.5).
2. The hop count, penalised 0.1 per hop and capped at a 50% reduction
   (weight 0.3).
3. Path security: +0.1 when every hop was secure, -0.1 otherwise.
4. Peer verifications, weighted by each voter's trust factor and bounded
   to +/-0.15. Voters at UNKNOWN carry no weight at all.

Without verifications the best possible score is 0.90 (direct, secure,
CLOSE_FAMILY sender); the remaining headroom is reachable only through
corroboration.

This is a heuristic confidence score, not cryptographic authentication.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from mesh_trust.trust_store import TrustStore
from mesh_trust.types import ContactTrust, TrustEvaluation, VerificationRecord
from mesh_trust.verification_store import VerificationStore

logger = logging.getLogger("mesh_trust.scorer")

SENDER_TRUST_WEIGHT: float = 0.5
HOP_COUNT_WEIGHT: float = 0.3
CONNECTION_SECURITY_WEIGHT: float = 0.1
INSECURE_CONNECTION_PENALTY: float = -0.1

HOP_PENALTY_FACTOR: float = 0.1
MAX_HOP_PENALTY: float = 0.5

VERIFICATION_WEIGHT: float = 0.15


def _now_ms() -> int:
    """Return the current wall-clock time in milliseconds since Unix epoch."""
    return int(time.time() * 1000)


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class TrustScorer:
    """
    Computes :class:`~mesh_trust.types.TrustEvaluation` results from store state.

    Scoring is stateless: each call reads the current trust levels (and, when
    no explicit verifications are passed, the current votes) and nothing is
    cached. Unknown sender or verifier ids resolve to UNKNOWN and never
    raise.

    Example::

        scorer = TrustScorer(trust_store, verification_store)
        evaluation = scorer.evaluate_message("msg-1", "mom", hop_count=0)
        assert evaluation.overall_trust_score == pytest.approx(0.9)
    """

    def __init__(
        self,
        trust_store: TrustStore,
        verification_store: VerificationStore | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._trust_store = trust_store
        self._verification_store = verification_store
        self._clock = clock or _now_ms

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score(
        self,
        original_sender_id: str,
        hop_count: int,
        verifications: list[VerificationRecord] | None = None,
        has_insecure_hop: bool = False,
    ) -> float:
        """
        Return the trust score in [0.0, 1.0] for a message.

        Args:
            original_sender_id: Contact id of the message's origin, not the
                last relay.
            hop_count: Relays crossed before arrival (0 = direct). Negative
                values are treated as 0.
            verifications: Votes on the message; None or empty for none.
            has_insecure_hop: True if any relay used an unauthenticated or
                unencrypted link.
        """
        sender = self._trust_store.get_trust_level(original_sender_id)
        return self._score(sender, hop_count, verifications or [], has_insecure_hop)

    def _score(
        self,
        sender: ContactTrust,
        hop_count: int,
        verifications: list[VerificationRecord],
        has_insecure_hop: bool,
    ) -> float:
        hops = max(hop_count, 0)

        sender_component = sender.trust_factor * SENDER_TRUST_WEIGHT
        hop_penalty = min(hops * HOP_PENALTY_FACTOR, MAX_HOP_PENALTY)
        hop_component = max(0.0, 1.0 - hop_penalty) * HOP_COUNT_WEIGHT
        security_component = (
            INSECURE_CONNECTION_PENALTY if has_insecure_hop else CONNECTION_SECURITY_WEIGHT
        )
        base_score = sender_component + hop_component + security_component

        adjustment = self.verification_adjustment(verifications)
        final_score = _clamp(base_score + adjustment, 0.0, 1.0)

        logger.debug(
            "Trust score calculated: sender=%d, hops=%d, secure=%s, base=%.2f, "
            "verifications=%d, final=%.2f",
            int(sender.level),
            hops,
            not has_insecure_hop,
            base_score,
            len(verifications),
            final_score,
        )
        return final_score

    def verification_adjustment(self, verifications: list[VerificationRecord]) -> float:
        """
        Return the score adjustment in [-0.15, 0.15] contributed by votes.

        Each vote counts with its voter's trust factor; confirmations add and
        rejections subtract. The signed sum is normalised by the total weight,
        so only the trusted consensus matters, not the number of voters.
        Voters with factor 0 are excluded from both sum and denominator.
        """
        signed_sum = 0.0
        total_weight = 0.0
        for verification in verifications:
            weight = self._trust_store.get_trust_level(verification.verifier_id).trust_factor
            if weight <= 0.0:
                continue
            signed_sum += weight if verification.confirmed else -weight
            total_weight += weight

        if total_weight <= 0.0:
            return 0.0
        return _clamp(
            signed_sum / total_weight * VERIFICATION_WEIGHT,
            -VERIFICATION_WEIGHT,
            VERIFICATION_WEIGHT,
        )

    def evaluate_message(
        self,
        message_id: str,
        original_sender_id: str,
        hop_count: int,
        verifications: list[VerificationRecord] | None = None,
        has_insecure_hop: bool = False,
    ) -> TrustEvaluation:
        """
        Build a full evaluation for a message.

        When *verifications* is None and a VerificationStore is attached, the
        message's stored votes are used. The returned confirmation and
        rejection counts are plain tallies; only the score is weighted. The
        sender's level is read once and used for both the score and
        ``sender_trust_level``.
        """
        if verifications is None:
            verifications = (
                self._verification_store.get_verifications(message_id)
                if self._verification_store is not None
                else []
            )

        sender = self._trust_store.get_trust_level(original_sender_id)
        trust_score = self._score(sender, hop_count, verifications, has_insecure_hop)
        confirmations = sum(1 for verification in verifications if verification.confirmed)

        return TrustEvaluation(
            message_id=message_id,
            original_sender_id=original_sender_id,
            sender_trust_level=sender.level,
            hop_count=max(hop_count, 0),
            confirmations=confirmations,
            rejections=len(verifications) - confirmations,
            overall_trust_score=trust_score,
            timestamp=self._clock(),
        )


# ---------------------------------------------------------------------------
# Pure helpers over collections of evaluations
# ---------------------------------------------------------------------------


def compare_trust(first: TrustEvaluation, second: TrustEvaluation) -> int:
    """
    Compare two evaluations by score.

    Returns:
        1 if *first* is more trustworthy, -1 if *second* is, 0 if equal.
    """
    if first.overall_trust_score > second.overall_trust_score:
        return 1
    if first.overall_trust_score < second.overall_trust_score:
        return -1
    return 0


def filter_by_min_trust(
    evaluations: list[TrustEvaluation],
    min_trust_score: float,
) -> list[TrustEvaluation]:
    """Return the evaluations scoring at least *min_trust_score*, order kept."""
    return [
        evaluation
        for evaluation in evaluations
        if evaluation.overall_trust_score >= min_trust_score
    ]


def sort_by_trust(evaluations: list[TrustEvaluation]) -> list[TrustEvaluation]:
    """Return evaluations most trustworthy first; equal scores keep input order."""
    return sorted(evaluations, key=lambda evaluation: evaluation.overall_trust_score, reverse=True)
