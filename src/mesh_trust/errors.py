# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations


class MeshTrustError(Exception):
    """Base class for all mesh-trust errors."""

    def __init__(self, message: str, code: str = "MESH_TRUST_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class StorageError(MeshTrustError):
    """
    Raised when the backing key-value store cannot be read or written.

    On load the stores catch this and start empty. On write it propagates to
    the caller after the in-memory state has already been updated, so the
    running process stays consistent while the caller learns that durability
    was lost.

    Attributes:
        operation: ``"read"`` or ``"write"``.
        namespace: The key-value namespace involved.
        key: The key involved, when known.
    """

    def __init__(
        self,
        operation: str,
        namespace: str,
        detail: str,
        key: str | None = None,
    ) -> None:
        key_text = f" key '{key}'" if key else ""
        super().__init__(
            f"Storage {operation} failed for namespace '{namespace}'{key_text}: {detail}",
            code="STORAGE_ERROR",
        )
        self.operation = operation
        self.namespace = namespace
        self.key = key
