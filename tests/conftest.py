# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for mesh-trust tests."""

from __future__ import annotations

import pytest

from mesh_trust.engine import MessageTrustEngine
from mesh_trust.scorer import TrustScorer
from mesh_trust.storage.memory import MemoryKeyValueStore
from mesh_trust.trust_store import TrustStore
from mesh_trust.verification_store import VerificationStore


class FakeClock:
    """Millisecond clock that advances by ``step`` on every read."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def trust_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore("trust_manager_prefs")


@pytest.fixture
def verification_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore("message_verification_prefs")


@pytest.fixture
def trust_store(trust_kv: MemoryKeyValueStore, clock: FakeClock) -> TrustStore:
    return TrustStore(trust_kv, clock=clock)


@pytest.fixture
def verification_store(
    verification_kv: MemoryKeyValueStore, clock: FakeClock
) -> VerificationStore:
    return VerificationStore(verification_kv, clock=clock)


@pytest.fixture
def scorer(
    trust_store: TrustStore, verification_store: VerificationStore, clock: FakeClock
) -> TrustScorer:
    return TrustScorer(trust_store, verification_store, clock=clock)


@pytest.fixture
def engine(clock: FakeClock) -> MessageTrustEngine:
    """A fresh in-memory engine with a deterministic clock."""
    return MessageTrustEngine(clock=clock)
