# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from mesh_trust.storage.file import FileKeyValueStore
from mesh_trust.storage.interface import KeyValueStore
from mesh_trust.storage.memory import MemoryKeyValueStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "FileKeyValueStore"]
