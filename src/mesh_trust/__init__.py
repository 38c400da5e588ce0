# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
mesh-trust: trust-weighted authentication for messages relayed over a mesh.

Scores how far a received message can be trusted without any cryptographic
chain of custody, from the original sender's trust level, the number of
relays it crossed, whether any relay was insecure, and confirm/reject votes
cast by other contacts afterwards.

Quick start::

    from mesh_trust import InboundMessage, MessageTrustEngine, TrustLevel

    engine = MessageTrustEngine.from_directory("~/.mesh-trust")
    engine.trust.import_known_contacts(["alice", "bob"])
    engine.trust.set_trust_level("mom", TrustLevel.CLOSE_FAMILY)

    evaluation = engine.evaluate(InboundMessage(
        message_id="alert-17",
        original_sender_id="mom",
        hop_count=2,
    ))
    print(evaluation.overall_trust_score, evaluation.rating)
"""
from __future__ import annotations

from mesh_trust.codec import (
    DecodeResult,
    decode_contact_trusts,
    decode_verifications,
    encode_contact_trusts,
    encode_verifications,
)
from mesh_trust.config import MeshTrustConfig, StorageConfig, VerificationConfig
from mesh_trust.engine import InboundMessage, MessageTrustEngine
from mesh_trust.errors import MeshTrustError, StorageError
from mesh_trust.levels import (
    TRUST_FACTORS,
    TRUST_LEVEL_COUNT,
    TRUST_LEVEL_MAX,
    TRUST_LEVEL_MIN,
    TrustLevel,
    is_valid_trust_level,
    trust_factor,
    trust_level_description,
)
from mesh_trust.rating import is_high_trust, is_low_trust, trust_indicator, trust_rating
from mesh_trust.report import evaluation_summary, statistics_summary
from mesh_trust.scorer import (
    TrustScorer,
    compare_trust,
    filter_by_min_trust,
    sort_by_trust,
)
from mesh_trust.storage import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from mesh_trust.trust_store import TrustStore
from mesh_trust.types import (
    ContactTrust,
    TrustEvaluation,
    TrustStatistics,
    VerificationOutcome,
    VerificationRecord,
    VerificationStats,
)
from mesh_trust.verification_store import VerificationStore

__version__ = "0.1.0"

__all__ = [
    # Levels
    "TrustLevel",
    "TRUST_FACTORS",
    "TRUST_LEVEL_MIN",
    "TRUST_LEVEL_MAX",
    "TRUST_LEVEL_COUNT",
    "is_valid_trust_level",
    "trust_factor",
    "trust_level_description",
    # Types
    "ContactTrust",
    "VerificationRecord",
    "VerificationOutcome",
    "VerificationStats",
    "TrustStatistics",
    "TrustEvaluation",
    # Configuration
    "MeshTrustConfig",
    "StorageConfig",
    "VerificationConfig",
    # Stores
    "TrustStore",
    "VerificationStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    # Codec
    "DecodeResult",
    "encode_contact_trusts",
    "decode_contact_trusts",
    "encode_verifications",
    "decode_verifications",
    # Scoring
    "TrustScorer",
    "compare_trust",
    "filter_by_min_trust",
    "sort_by_trust",
    # Presentation
    "trust_rating",
    "trust_indicator",
    "is_high_trust",
    "is_low_trust",
    "evaluation_summary",
    "statistics_summary",
    # Engine
    "MessageTrustEngine",
    "InboundMessage",
    # Errors
    "MeshTrustError",
    "StorageError",
    "__version__",
]
