# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Abstract base class that every key-value backend must implement.

A backend instance represents one application-scoped namespace of string
values. The trust and verification stores each own a separate instance and
keep a single key in it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Minimal persistence contract for the mesh-trust stores.

    Implementors may back this with a file, SQLite, a platform preference
    store, or anything else that durably holds string blobs. ``put`` must not
    return until the value is durable; failures in either direction are
    reported as :class:`~mesh_trust.errors.StorageError`.
    """

    @property
    @abstractmethod
    def namespace(self) -> str:
        """Name of the namespace this instance is scoped to."""
        ...

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Durably store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if it existed."""
        ...
