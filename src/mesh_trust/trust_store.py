# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Durable storage of contact trust levels.

Trust levels are set explicitly by the user or imported in bulk from the
contact list. Unknown contacts are never an error: they read back as
level UNKNOWN, not manually set.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from mesh_trust.codec import decode_contact_trusts, encode_contact_trusts
from mesh_trust.config import StorageConfig
from mesh_trust.errors import StorageError
from mesh_trust.levels import TrustLevel, is_valid_trust_level, trust_level_description
from mesh_trust.storage.interface import KeyValueStore
from mesh_trust.storage.memory import MemoryKeyValueStore
from mesh_trust.types import ContactTrust, TrustStatistics

logger = logging.getLogger("mesh_trust.trust_store")


def _now_ms() -> int:
    """Return the current wall-clock time in milliseconds since Unix epoch."""
    return int(time.time() * 1000)


class TrustStore:
    """
    Maps contact identifiers to their :class:`~mesh_trust.types.ContactTrust`.

    Every mutating call rewrites the full persisted array before returning.
    If that write fails the in-memory change is kept and
    :class:`~mesh_trust.errors.StorageError` is raised.

    Thread-safety: all map access happens under one re-entrant lock, and the
    persisted snapshot is written inside the same critical section.

    Example::

        store = TrustStore(MemoryKeyValueStore("trust"))
        store.import_known_contacts(["alice", "bob"])
        store.set_trust_level("mom", TrustLevel.CLOSE_FAMILY)
        assert store.get_trust_level("alice").level == TrustLevel.KNOWN_CONTACT
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        config: StorageConfig | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._config = config or StorageConfig()
        self._storage = storage or MemoryKeyValueStore(self._config.trust_namespace)
        self._clock = clock or _now_ms
        self._lock = threading.RLock()
        self._levels: dict[str, ContactTrust] = {}
        self._load()
        logger.debug("TrustStore initialised with %d contacts", len(self._levels))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_trust_level(self, contact_id: str) -> ContactTrust:
        """
        Return the stored trust level for a contact.

        Never fails: a contact without an entry yields a synthetic
        UNKNOWN, non-manual record that is not stored.
        """
        with self._lock:
            stored = self._levels.get(contact_id)
        if stored is not None:
            return stored
        return ContactTrust(
            contact_id=contact_id,
            level=TrustLevel.UNKNOWN,
            last_updated=0,
            manually_set=False,
        )

    def set_trust_level(
        self,
        contact_id: str,
        level: int,
        manually_set: bool = True,
    ) -> bool:
        """
        Insert or overwrite the trust level for a contact.

        Args:
            contact_id: Opaque contact identifier.
            level: Trust level integer in [0, 3].
            manually_set: False when the level comes from an automatic source.

        Returns:
            True if the level was stored, False if *level* was rejected as
            invalid (nothing is changed in that case).

        Raises:
            StorageError: If the change could not be persisted.
        """
        if not is_valid_trust_level(level):
            logger.warning("Invalid trust level %r for contact %s", level, contact_id)
            return False

        record = ContactTrust(
            contact_id=contact_id,
            level=TrustLevel(level),
            last_updated=self._clock(),
            manually_set=manually_set,
        )
        with self._lock:
            self._levels[contact_id] = record
            self._persist()

        logger.debug(
            "Trust level set for %s: %s (manual: %s)",
            contact_id,
            trust_level_description(level),
            manually_set,
        )
        return True

    def set_contact_trust(self, record: ContactTrust) -> bool:
        """
        Store an already validated record as-is.

        Used when restoring a value the caller built earlier; ``last_updated``
        and ``manually_set`` are taken from *record* unchanged.

        Raises:
            StorageError: If the change could not be persisted.
        """
        with self._lock:
            self._levels[record.contact_id] = record
            self._persist()

        logger.debug(
            "Trust level restored for %s: %s",
            record.contact_id,
            trust_level_description(record.level),
        )
        return True

    def remove_trust_level(self, contact_id: str) -> bool:
        """
        Delete a contact's entry so it reverts to UNKNOWN.

        Returns:
            True if an entry was removed, False if none existed.
        """
        with self._lock:
            if self._levels.pop(contact_id, None) is None:
                return False
            self._persist()

        logger.debug("Trust level removed for %s", contact_id)
        return True

    def get_all_trust_levels(self) -> dict[str, ContactTrust]:
        """Return a snapshot of every stored entry keyed by contact id."""
        with self._lock:
            return dict(self._levels)

    def get_contacts_by_trust_level(self, level: int) -> list[ContactTrust]:
        """Return all stored entries whose level equals *level* exactly."""
        with self._lock:
            return [record for record in self._levels.values() if record.level == level]

    def import_known_contacts(self, contact_ids: list[str]) -> int:
        """
        Add address-book contacts at KNOWN_CONTACT, not manually set.

        Contacts that already have an entry, at any level and whether manual
        or not, are left untouched so an import never overrides an existing
        decision.

        Returns:
            The number of contacts added.
        """
        imported = 0
        with self._lock:
            now = self._clock()
            for contact_id in contact_ids:
                if contact_id in self._levels:
                    continue
                self._levels[contact_id] = ContactTrust(
                    contact_id=contact_id,
                    level=TrustLevel.KNOWN_CONTACT,
                    last_updated=now,
                    manually_set=False,
                )
                imported += 1
            if imported > 0:
                self._persist()

        if imported > 0:
            logger.info("Imported %d known contacts", imported)
        return imported

    def clear_all_trust_levels(self) -> None:
        """Remove every stored entry."""
        with self._lock:
            self._levels.clear()
            self._persist()
        logger.info("All trust levels cleared")

    def get_trust_statistics(self) -> TrustStatistics:
        """Return the number of stored contacts in total and per level."""
        counts = {level: 0 for level in TrustLevel}
        with self._lock:
            for record in self._levels.values():
                counts[record.level] += 1
            total = len(self._levels)
        return TrustStatistics(total_contacts=total, by_level=counts)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _load(self) -> None:
        try:
            raw = self._storage.get(self._config.trust_key)
        except StorageError as exc:
            logger.warning("Trust levels unavailable, starting empty: %s", exc)
            return

        result = decode_contact_trusts(raw)
        if not result.ok:
            logger.warning("Stored trust levels are malformed, starting empty: %s", result.error)
            return

        for record in result.records:
            self._levels[record.contact_id] = record
        if result.records:
            logger.debug("Loaded %d trust levels from storage", len(self._levels))

    def _persist(self) -> None:
        payload = encode_contact_trusts(list(self._levels.values()))
        self._storage.put(self._config.trust_key, payload)
        logger.debug("Saved %d trust levels to storage", len(self._levels))
