# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Serialisation of the two persisted record arrays.

Trust levels are stored as a JSON array of
``{contactId, trustLevel, lastUpdated, isManuallySet}`` objects and
verifications as a JSON array of
``{messageId, verifierId, isConfirmed, timestamp, comment}`` objects. Both
arrays are always rewritten in full.

Decoding never raises. A missing blob decodes to an empty result; a
malformed blob, or one containing any invalid element, decodes to an empty
result that carries the error text so the caller can log it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from mesh_trust.types import ContactTrust, VerificationRecord

T = TypeVar("T")

_CONTACT_TRUST_LIST = TypeAdapter(list[ContactTrust])
_VERIFICATION_LIST = TypeAdapter(list[VerificationRecord])


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Records decoded from a stored blob, or an empty list plus the reason."""

    records: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def encode_contact_trusts(records: list[ContactTrust]) -> str:
    """Serialise contact trust levels to the persisted JSON array."""
    return _CONTACT_TRUST_LIST.dump_json(records, by_alias=True).decode("utf-8")


def decode_contact_trusts(raw: str | None) -> DecodeResult[ContactTrust]:
    """Parse the persisted contact trust array."""
    if raw is None:
        return DecodeResult()
    try:
        return DecodeResult(records=_CONTACT_TRUST_LIST.validate_json(raw))
    except ValidationError as exc:
        return DecodeResult(error=_summarise(exc))


def encode_verifications(records: list[VerificationRecord]) -> str:
    """Serialise verification records to the persisted JSON array."""
    return _VERIFICATION_LIST.dump_json(records, by_alias=True).decode("utf-8")


def decode_verifications(raw: str | None) -> DecodeResult[VerificationRecord]:
    """Parse the persisted verification array."""
    if raw is None:
        return DecodeResult()
    try:
        return DecodeResult(records=_VERIFICATION_LIST.validate_json(raw))
    except ValidationError as exc:
        return DecodeResult(error=_summarise(exc))


def _summarise(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{exc.error_count()} validation error(s); first at {location}: {first['msg']}"
