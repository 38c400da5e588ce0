# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for VerificationStore: voting, indices, eviction and concurrency."""

from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor

from mesh_trust.config import VerificationConfig
from mesh_trust.storage.memory import MemoryKeyValueStore
from mesh_trust.types import VerificationOutcome
from mesh_trust.verification_store import VerificationStore

from conftest import FakeClock


class TestAddVerification:
    def test_first_vote_is_accepted(self, verification_store: VerificationStore) -> None:
        outcome = verification_store.add_verification("msg-1", "alice", True, "seen it")
        assert outcome == VerificationOutcome.ACCEPTED

        [record] = verification_store.get_verifications("msg-1")
        assert record.verifier_id == "alice"
        assert record.confirmed is True
        assert record.comment == "seen it"

    def test_second_vote_by_same_contact_is_duplicate(
        self, verification_store: VerificationStore
    ) -> None:
        first = verification_store.add_verification("msg-1", "alice", True)
        second = verification_store.add_verification("msg-1", "alice", False)

        assert first == VerificationOutcome.ACCEPTED
        assert second == VerificationOutcome.DUPLICATE
        records = verification_store.get_verifications("msg-1")
        assert len(records) == 1
        assert records[0].confirmed is True

    def test_same_contact_may_vote_on_different_messages(
        self, verification_store: VerificationStore
    ) -> None:
        assert verification_store.add_verification("msg-1", "alice", True) == "accepted"
        assert verification_store.add_verification("msg-2", "alice", False) == "accepted"

    def test_comment_defaults_to_empty(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", False)
        assert verification_store.get_verifications("msg-1")[0].comment == ""

    def test_timestamp_comes_from_clock(
        self, verification_store: VerificationStore, clock: FakeClock
    ) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        assert verification_store.get_verifications("msg-1")[0].timestamp == clock.now


class TestQueries:
    def test_unknown_message_has_no_verifications(
        self, verification_store: VerificationStore
    ) -> None:
        assert verification_store.get_verifications("nope") == []

    def test_returned_list_is_a_copy(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.get_verifications("msg-1").clear()
        assert len(verification_store.get_verifications("msg-1")) == 1

    def test_verifications_by_user_span_messages(
        self, verification_store: VerificationStore
    ) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.add_verification("msg-1", "bob", False)
        verification_store.add_verification("msg-2", "alice", False)

        records = verification_store.get_verifications_by_user("alice")
        assert [record.message_id for record in records] == ["msg-1", "msg-2"]
        assert verification_store.get_verifications_by_user("carol") == []

    def test_has_user_verified(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        assert verification_store.has_user_verified("msg-1", "alice") is True
        assert verification_store.has_user_verified("msg-1", "bob") is False
        assert verification_store.has_user_verified("msg-2", "alice") is False

    def test_stats(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.add_verification("msg-1", "bob", True)
        verification_store.add_verification("msg-1", "carol", False)

        stats = verification_store.get_verification_stats("msg-1")
        assert stats.total_verifications == 3
        assert stats.confirmations == 2
        assert stats.rejections == 1
        assert stats.net_score == 1
        assert stats.has_positive_consensus is True

    def test_stats_for_unknown_message_are_zero(
        self, verification_store: VerificationStore
    ) -> None:
        stats = verification_store.get_verification_stats("nope")
        assert stats.message_id == "nope"
        assert (stats.total_verifications, stats.confirmations, stats.rejections) == (0, 0, 0)

    def test_total_count(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.add_verification("msg-1", "bob", True)
        verification_store.add_verification("msg-2", "alice", True)
        assert verification_store.get_total_verification_count() == 3


class TestRemoval:
    def test_remove_message_clears_both_indices(
        self, verification_store: VerificationStore
    ) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.add_verification("msg-2", "alice", True)

        assert verification_store.remove_message_verifications("msg-1") is True
        assert verification_store.get_verifications("msg-1") == []
        assert verification_store.has_user_verified("msg-1", "alice") is False
        assert [r.message_id for r in verification_store.get_verifications_by_user("alice")] == [
            "msg-2"
        ]
        # The contact may vote again once the message's votes are gone.
        assert verification_store.add_verification("msg-1", "alice", False) == "accepted"

    def test_remove_unknown_message_returns_false(
        self, verification_store: VerificationStore
    ) -> None:
        assert verification_store.remove_message_verifications("nope") is False

    def test_clear_all(self, verification_store: VerificationStore) -> None:
        verification_store.add_verification("msg-1", "alice", True)
        verification_store.clear_all_verifications()
        assert verification_store.get_total_verification_count() == 0
        assert verification_store.has_user_verified("msg-1", "alice") is False


class TestCleanupOldVerifications:
    def test_no_eviction_at_or_below_cap(self) -> None:
        store = VerificationStore(
            config=VerificationConfig(max_stored_verifications=3), clock=FakeClock()
        )
        for voter in ("a", "b", "c"):
            store.add_verification("msg-1", voter, True)
        assert store.cleanup_old_verifications() == 0
        assert store.get_total_verification_count() == 3

    def test_eviction_reaches_target_oldest_first(self) -> None:
        store = VerificationStore(clock=FakeClock())
        for index in range(110):
            for voter in range(10):
                store.add_verification(f"msg-{index:03d}", f"voter-{voter}", True)
        assert store.get_total_verification_count() == 1100

        evicted = store.cleanup_old_verifications()

        assert evicted == 30
        assert store.get_total_verification_count() == 800
        for index in range(30):
            assert store.get_verifications(f"msg-{index:03d}") == []
        for index in range(30, 110):
            assert len(store.get_verifications(f"msg-{index:03d}")) == 10

    def test_age_is_the_oldest_vote_of_each_message(self) -> None:
        store = VerificationStore(
            config=VerificationConfig(max_stored_verifications=9, cleanup_target_ratio=0.5),
            clock=FakeClock(),
        )
        store.add_verification("old-then-busy", "voter-0", True)
        store.add_verification("single-newer", "voter-0", True)
        for voter in range(1, 10):
            store.add_verification("old-then-busy", f"voter-{voter}", True)

        assert store.cleanup_old_verifications() == 1
        assert store.get_verifications("old-then-busy") == []
        assert len(store.get_verifications("single-newer")) == 1

    def test_ties_are_broken_by_message_id(self) -> None:
        store = VerificationStore(
            config=VerificationConfig(max_stored_verifications=3, cleanup_target_ratio=0.67),
            clock=lambda: 1_000,
        )
        for message_id in ("msg-b", "msg-a"):
            store.add_verification(message_id, "alice", True)
            store.add_verification(message_id, "bob", True)

        assert store.cleanup_old_verifications() == 1
        assert store.get_verifications("msg-a") == []
        assert len(store.get_verifications("msg-b")) == 2

    def test_eviction_is_persisted(self, verification_kv: MemoryKeyValueStore) -> None:
        store = VerificationStore(
            verification_kv,
            config=VerificationConfig(max_stored_verifications=2, cleanup_target_ratio=0.5),
            clock=FakeClock(),
        )
        store.add_verification("msg-1", "alice", True)
        store.add_verification("msg-2", "alice", True)
        store.add_verification("msg-3", "alice", True)
        store.cleanup_old_verifications()

        stored = json.loads(verification_kv.get("message_verifications") or "[]")
        assert [entry["messageId"] for entry in stored] == ["msg-3"]

    def test_writes_never_evict_on_their_own(self) -> None:
        store = VerificationStore(
            config=VerificationConfig(max_stored_verifications=2), clock=FakeClock()
        )
        for voter in ("a", "b", "c", "d"):
            store.add_verification("msg-1", voter, True)
        assert store.get_total_verification_count() == 4


class TestPersistence:
    def test_stored_layout(
        self, verification_store: VerificationStore, verification_kv: MemoryKeyValueStore
    ) -> None:
        verification_store.add_verification("msg-1", "alice", False, "fake")
        [entry] = json.loads(verification_kv.get("message_verifications") or "[]")
        assert set(entry) == {"messageId", "verifierId", "isConfirmed", "timestamp", "comment"}
        assert entry["isConfirmed"] is False
        assert entry["comment"] == "fake"

    def test_reload_restores_duplicate_index(
        self, verification_store: VerificationStore, verification_kv: MemoryKeyValueStore
    ) -> None:
        verification_store.add_verification("msg-1", "alice", True)

        reloaded = VerificationStore(verification_kv)
        assert reloaded.has_user_verified("msg-1", "alice") is True
        assert reloaded.add_verification("msg-1", "alice", False) == "duplicate"

    def test_missing_comment_defaults_on_load(self) -> None:
        kv = MemoryKeyValueStore("message_verification_prefs")
        kv.put(
            "message_verifications",
            json.dumps(
                [{"messageId": "m", "verifierId": "v", "isConfirmed": True, "timestamp": 7}]
            ),
        )
        [record] = VerificationStore(kv).get_verifications("m")
        assert record.comment == ""
        assert record.timestamp == 7


class TestConcurrency:
    def test_concurrent_duplicate_votes_store_exactly_one(self) -> None:
        store = VerificationStore()
        workers = 16
        barrier = threading.Barrier(workers)

        def vote(index: int) -> str:
            barrier.wait()
            return store.add_verification("msg-1", "alice", index % 2 == 0)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(vote, range(workers)))

        assert outcomes.count(VerificationOutcome.ACCEPTED) == 1
        assert outcomes.count(VerificationOutcome.DUPLICATE) == workers - 1
        assert len(store.get_verifications("msg-1")) == 1

    def test_concurrent_distinct_votes_are_all_kept(self) -> None:
        store = VerificationStore()

        def vote(index: int) -> str:
            return store.add_verification(f"msg-{index % 4}", f"voter-{index}", True)

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(vote, range(64)))

        assert all(outcome == VerificationOutcome.ACCEPTED for outcome in outcomes)
        assert store.get_total_verification_count() == 64
