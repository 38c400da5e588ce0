# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from pathlib import Path
from typing import Callable

from pydantic import BaseModel, Field

from mesh_trust.config import MeshTrustConfig
from mesh_trust.report import evaluation_summary, statistics_summary
from mesh_trust.scorer import TrustScorer
from mesh_trust.storage.file import FileKeyValueStore
from mesh_trust.storage.interface import KeyValueStore
from mesh_trust.storage.memory import MemoryKeyValueStore
from mesh_trust.trust_store import TrustStore
from mesh_trust.types import TrustEvaluation
from mesh_trust.verification_store import VerificationStore


class InboundMessage(BaseModel, frozen=True):
    """
    What the mesh transport reports about a received message.

    Attributes:
        message_id: Stable identifier of the message.
        original_sender_id: Contact id of the message's origin, not the
            immediate relay.
        hop_count: Number of relays crossed before arrival (0 = direct).
        has_insecure_hop: True if any relay on the path used an
            unauthenticated or unencrypted link.
    """

    message_id: str
    original_sender_id: str
    hop_count: int = Field(default=0, ge=0)
    has_insecure_hop: bool = False


class MessageTrustEngine:
    """
    Composes TrustStore, VerificationStore and TrustScorer behind one object.

    Each engine owns its own stores; there is no process-wide instance.
    Create one per application (or per test) and pass it to whatever needs
    to evaluate or vote on messages.

    Example::

        engine = MessageTrustEngine()
        engine.trust.import_known_contacts(["alice", "bob"])
        engine.trust.set_trust_level("mom", TrustLevel.CLOSE_FAMILY)

        message = InboundMessage(message_id="m-1", original_sender_id="mom")
        evaluation = engine.evaluate(message)
        print(evaluation.rating)  # "Very High"
    """

    def __init__(
        self,
        config: MeshTrustConfig | None = None,
        trust_storage: KeyValueStore | None = None,
        verification_storage: KeyValueStore | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        cfg = config or MeshTrustConfig()
        self._config = cfg
        self.trust = TrustStore(
            storage=trust_storage or MemoryKeyValueStore(cfg.storage.trust_namespace),
            config=cfg.storage,
            clock=clock,
        )
        self.verifications = VerificationStore(
            storage=verification_storage
            or MemoryKeyValueStore(cfg.storage.verification_namespace),
            config=cfg.verification,
            storage_config=cfg.storage,
            clock=clock,
        )
        self.scorer = TrustScorer(self.trust, self.verifications, clock=clock)

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        config: MeshTrustConfig | None = None,
        clock: Callable[[], int] | None = None,
    ) -> MessageTrustEngine:
        """Build an engine whose stores persist under *directory*."""
        cfg = config or MeshTrustConfig()
        root = Path(directory).expanduser()
        return cls(
            config=cfg,
            trust_storage=FileKeyValueStore(root, cfg.storage.trust_namespace),
            verification_storage=FileKeyValueStore(
                root, cfg.storage.verification_namespace
            ),
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, message: InboundMessage) -> TrustEvaluation:
        """Evaluate a received message against current trust levels and votes."""
        return self.scorer.evaluate_message(
            message_id=message.message_id,
            original_sender_id=message.original_sender_id,
            hop_count=message.hop_count,
            has_insecure_hop=message.has_insecure_hop,
        )

    def high_trust_messages(
        self,
        messages: list[InboundMessage],
    ) -> list[tuple[InboundMessage, TrustEvaluation]]:
        """Return only the messages whose evaluation is high trust, order kept."""
        evaluated = [(message, self.evaluate(message)) for message in messages]
        return [pair for pair in evaluated if pair[1].is_high_trust]

    def sort_messages_by_trust(
        self,
        messages: list[InboundMessage],
    ) -> list[tuple[InboundMessage, TrustEvaluation]]:
        """Return messages paired with evaluations, most trustworthy first."""
        evaluated = [(message, self.evaluate(message)) for message in messages]
        return sorted(evaluated, key=lambda pair: pair[1].overall_trust_score, reverse=True)

    def summary(self, message: InboundMessage) -> str:
        """Return a human-readable trust summary for a message."""
        return evaluation_summary(self.evaluate(message))

    def statistics_summary(self) -> str:
        """Return a human-readable summary of contact trust levels."""
        return statistics_summary(self.trust.get_trust_statistics())

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    def confirm_message(self, message_id: str, user_id: str, comment: str = "") -> str:
        """Record that *user_id* confirms the message. Returns the outcome."""
        return self.verifications.add_verification(
            message_id, user_id, confirmed=True, comment=comment
        )

    def reject_message(self, message_id: str, user_id: str, comment: str = "") -> str:
        """Record that *user_id* rejects the message. Returns the outcome."""
        return self.verifications.add_verification(
            message_id, user_id, confirmed=False, comment=comment
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def run_maintenance(self) -> int:
        """
        Enforce the verification retention cap.

        Call this from a periodic maintenance tick, never from a hot path.

        Returns:
            The number of messages whose votes were evicted.
        """
        return self.verifications.cleanup_old_verifications()
