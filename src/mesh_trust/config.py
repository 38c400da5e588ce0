# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field


class StorageConfig(BaseModel, frozen=True):
    """
    Names used in the backing key-value store.

    Each store owns one namespace holding exactly one key whose value is the
    full JSON array of its records.

    Attributes:
        trust_namespace: Namespace for contact trust levels.
        trust_key: Key holding the contact trust array.
        verification_namespace: Namespace for message verifications.
        verification_key: Key holding the verification array.
    """

    trust_namespace: Annotated[str, Field(min_length=1)] = "trust_manager_prefs"
    trust_key: Annotated[str, Field(min_length=1)] = "contact_trust_levels"
    verification_namespace: Annotated[str, Field(min_length=1)] = (
        "message_verification_prefs"
    )
    verification_key: Annotated[str, Field(min_length=1)] = "message_verifications"


class VerificationConfig(BaseModel, frozen=True):
    """
    Retention settings for the VerificationStore.

    Attributes:
        max_stored_verifications: Total record count above which
            ``cleanup_old_verifications`` starts evicting whole messages.
        cleanup_target_ratio: Eviction stops once the total count is at or
            below ``max_stored_verifications * cleanup_target_ratio``.
    """

    max_stored_verifications: Annotated[int, Field(gt=0)] = 1000
    cleanup_target_ratio: Annotated[float, Field(gt=0.0, le=1.0)] = 0.8

    @property
    def cleanup_target(self) -> int:
        """Record count eviction reduces the store to."""
        return int(self.max_stored_verifications * self.cleanup_target_ratio)


class MeshTrustConfig(BaseModel, frozen=True):
    """
    Top-level configuration for the MessageTrustEngine.

    Example::

        config = MeshTrustConfig(
            verification=VerificationConfig(max_stored_verifications=5000),
        )
        engine = MessageTrustEngine(config=config)
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
