# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Durable storage of confirm/reject votes on relayed messages.

Two indices are kept in step under a single lock: the primary
message id -> records list, and a verifier id -> message id set used to
enforce one vote per contact per message. Every insert and removal updates
both before the lock is released.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from mesh_trust.codec import decode_verifications, encode_verifications
from mesh_trust.config import StorageConfig, VerificationConfig
from mesh_trust.errors import StorageError
from mesh_trust.storage.interface import KeyValueStore
from mesh_trust.storage.memory import MemoryKeyValueStore
from mesh_trust.types import VerificationOutcome, VerificationRecord, VerificationStats

logger = logging.getLogger("mesh_trust.verification_store")


def _now_ms() -> int:
    """Return the current wall-clock time in milliseconds since Unix epoch."""
    return int(time.time() * 1000)


class VerificationStore:
    """
    Holds every :class:`~mesh_trust.types.VerificationRecord`, grouped by message.

    Storage is bounded by :meth:`cleanup_old_verifications`, which callers run
    periodically; writes never trigger eviction themselves.

    Example::

        store = VerificationStore(MemoryKeyValueStore("verifications"))
        store.add_verification("msg-1", "alice", confirmed=True)
        assert store.add_verification("msg-1", "alice", confirmed=False) == (
            VerificationOutcome.DUPLICATE
        )
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        config: VerificationConfig | None = None,
        storage_config: StorageConfig | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._config = config or VerificationConfig()
        self._storage_config = storage_config or StorageConfig()
        self._storage = storage or MemoryKeyValueStore(
            self._storage_config.verification_namespace
        )
        self._clock = clock or _now_ms
        self._lock = threading.RLock()
        self._by_message: dict[str, list[VerificationRecord]] = {}
        self._by_verifier: dict[str, set[str]] = {}
        self._load()
        logger.debug(
            "VerificationStore initialised with %d verifications",
            self.get_total_verification_count(),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_verification(
        self,
        message_id: str,
        verifier_id: str,
        confirmed: bool,
        comment: str = "",
    ) -> str:
        """
        Register a contact's vote on a message.

        Args:
            message_id: The message being judged.
            verifier_id: The contact casting the vote.
            confirmed: True to confirm the message, False to reject it.
            comment: Optional free-text remark.

        Returns:
            :attr:`VerificationOutcome.ACCEPTED` when stored, or
            :attr:`VerificationOutcome.DUPLICATE` when this contact already
            voted on this message (nothing is changed in that case).

        Raises:
            StorageError: If the accepted vote could not be persisted.
        """
        with self._lock:
            if self._has_verified(message_id, verifier_id):
                logger.warning(
                    "User %s already verified message %s", verifier_id, message_id
                )
                return VerificationOutcome.DUPLICATE

            record = VerificationRecord(
                message_id=message_id,
                verifier_id=verifier_id,
                confirmed=confirmed,
                timestamp=self._clock(),
                comment=comment,
            )
            self._index(record)
            self._persist()

        logger.debug(
            "Message %s %s by %s",
            message_id,
            "confirmed" if confirmed else "rejected",
            verifier_id,
        )
        return VerificationOutcome.ACCEPTED

    def get_verifications(self, message_id: str) -> list[VerificationRecord]:
        """Return the votes on one message, oldest first; empty if none."""
        with self._lock:
            return list(self._by_message.get(message_id, []))

    def get_verifications_by_user(self, verifier_id: str) -> list[VerificationRecord]:
        """Return every vote cast by one contact, oldest first."""
        with self._lock:
            message_ids = self._by_verifier.get(verifier_id, set())
            records = [
                record
                for message_id in message_ids
                for record in self._by_message.get(message_id, [])
                if record.verifier_id == verifier_id
            ]
        return sorted(records, key=lambda record: (record.timestamp, record.message_id))

    def has_user_verified(self, message_id: str, verifier_id: str) -> bool:
        """Return True if *verifier_id* has already voted on *message_id*."""
        with self._lock:
            return self._has_verified(message_id, verifier_id)

    def get_verification_stats(self, message_id: str) -> VerificationStats:
        """Return unweighted vote counts for a message; zeros if none."""
        records = self.get_verifications(message_id)
        confirmations = sum(1 for record in records if record.confirmed)
        return VerificationStats(
            message_id=message_id,
            total_verifications=len(records),
            confirmations=confirmations,
            rejections=len(records) - confirmations,
        )

    def remove_message_verifications(self, message_id: str) -> bool:
        """
        Delete every vote on a message, e.g. when the message expires.

        Returns:
            True if any records were removed.
        """
        with self._lock:
            removed = self._unindex(message_id)
            if removed == 0:
                return False
            self._persist()

        logger.debug("Removed %d verifications for message %s", removed, message_id)
        return True

    def clear_all_verifications(self) -> None:
        """Remove every stored vote."""
        with self._lock:
            self._by_message.clear()
            self._by_verifier.clear()
            self._persist()
        logger.info("All verifications cleared")

    def get_total_verification_count(self) -> int:
        """Return the number of votes stored across all messages."""
        with self._lock:
            return sum(len(records) for records in self._by_message.values())

    def cleanup_old_verifications(self) -> int:
        """
        Evict whole messages, oldest first, once the store is over capacity.

        Runs only when the total exceeds ``max_stored_verifications`` and
        then removes messages until the total is at or below the cleanup
        target. A message's age is the timestamp of its oldest vote; ties
        are broken by message id. The result is persisted once at the end.

        Returns:
            The number of messages evicted.
        """
        limit = self._config.max_stored_verifications
        target = self._config.cleanup_target

        with self._lock:
            total = sum(len(records) for records in self._by_message.values())
            if total <= limit:
                return 0

            by_age = sorted(
                self._by_message.items(),
                key=lambda item: (min(record.timestamp for record in item[1]), item[0]),
            )
            evicted = 0
            for message_id, _ in by_age:
                if total <= target:
                    break
                total -= self._unindex(message_id)
                evicted += 1
            self._persist()

        logger.info(
            "Cleaned up verifications for %d old messages (%d remaining)", evicted, total
        )
        return evicted

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _has_verified(self, message_id: str, verifier_id: str) -> bool:
        return message_id in self._by_verifier.get(verifier_id, set())

    def _index(self, record: VerificationRecord) -> None:
        self._by_message.setdefault(record.message_id, []).append(record)
        self._by_verifier.setdefault(record.verifier_id, set()).add(record.message_id)

    def _unindex(self, message_id: str) -> int:
        """Drop a message from both indices; returns the record count removed."""
        removed = self._by_message.pop(message_id, [])
        for record in removed:
            message_ids = self._by_verifier.get(record.verifier_id)
            if message_ids is None:
                continue
            message_ids.discard(message_id)
            if not message_ids:
                del self._by_verifier[record.verifier_id]
        return len(removed)

    def _load(self) -> None:
        key = self._storage_config.verification_key
        try:
            raw = self._storage.get(key)
        except StorageError as exc:
            logger.warning("Verifications unavailable, starting empty: %s", exc)
            return

        result = decode_verifications(raw)
        if not result.ok:
            logger.warning(
                "Stored verifications are malformed, starting empty: %s", result.error
            )
            return

        for record in result.records:
            if self._has_verified(record.message_id, record.verifier_id):
                logger.warning(
                    "Skipping duplicate stored verification of %s by %s",
                    record.message_id,
                    record.verifier_id,
                )
                continue
            self._index(record)
        if result.records:
            logger.debug(
                "Loaded %d verifications from storage",
                sum(len(records) for records in self._by_message.values()),
            )

    def _persist(self) -> None:
        records = [
            record for records in self._by_message.values() for record in records
        ]
        self._storage.put(
            self._storage_config.verification_key, encode_verifications(records)
        )
        logger.debug("Saved %d verifications to storage", len(records))
