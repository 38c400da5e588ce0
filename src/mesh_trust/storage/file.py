# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
File-backed key-value storage.

Each namespace is one JSON object file, ``<directory>/<namespace>.json``,
mapping keys to string values. Every write rewrites the whole file through a
temporary file in the same directory, flushed and fsynced before an atomic
``os.replace``; the directory is then fsynced so the rename itself is
durable. A crash mid-write leaves the previous contents intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from mesh_trust.errors import StorageError
from mesh_trust.storage.interface import KeyValueStore

logger = logging.getLogger("mesh_trust.storage")


class FileKeyValueStore(KeyValueStore):
    """
    Durable key-value namespace stored as a single JSON file.

    Parameters
    ----------
    directory:
        Directory holding namespace files. Created on first write.
    namespace:
        Namespace name; also the file stem.
    """

    def __init__(self, directory: str | Path, namespace: str) -> None:
        if not namespace:
            raise ValueError("namespace must be a non-empty string.")
        self._directory = Path(directory)
        self._namespace = namespace
        self._lock = threading.Lock()

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def path(self) -> Path:
        """Location of the namespace file."""
        return self._directory / f"{self._namespace}.json"

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            try:
                values = self._read_all()
            except StorageError:
                logger.warning(
                    "Discarding unreadable namespace file %s before write", self.path
                )
                values = {}
            values[key] = value
            self._write_all(values, key)

    def delete(self, key: str) -> bool:
        with self._lock:
            values = self._read_all()
            if key not in values:
                return False
            del values[key]
            self._write_all(values, key)
            return True

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError("read", self._namespace, str(exc)) from exc

        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            raise StorageError(
                "read", self._namespace, "namespace file is not a JSON object of strings"
            )
        return data

    def _write_all(self, values: dict[str, str], key: str) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self._directory,
                prefix=f".{self._namespace}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as file_handle:
                    json.dump(values, file_handle)
                    file_handle.flush()
                    os.fsync(file_handle.fileno())
                os.replace(temp_path, self.path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
            self._fsync_directory()
        except OSError as exc:
            raise StorageError("write", self._namespace, str(exc), key=key) from exc

    def _fsync_directory(self) -> None:
        dir_fd = os.open(self._directory, os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
