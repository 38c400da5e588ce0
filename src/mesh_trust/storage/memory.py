# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import threading

from mesh_trust.storage.interface import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process memory store, suitable for tests and ephemeral sessions.

    All state is lost when the process exits. For durability across restarts,
    use :class:`~mesh_trust.storage.file.FileKeyValueStore` or provide another
    KeyValueStore implementation.
    """

    def __init__(self, namespace: str = "default") -> None:
        self._namespace = namespace
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def namespace(self) -> str:
        return self._namespace

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._values.pop(key, None) is not None
