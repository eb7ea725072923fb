"""
PlotNFT Result Types

Tagged results returned by every mutating registry operation, together with
the numeric reason codes carried by failures.

A failure is a value, not an exception: callers inspect ``result.ok`` and read
the ``ErrorCode`` from ``result.value``. Exceptions are reserved for callers
that explicitly ask for one via ``Result.unwrap()``.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Registry failure reasons (numeric codes are stable)."""
    NOT_AUTHORIZED = 100
    INVALID_LOCATION = 101
    INVALID_TREE_COUNT = 102
    INVALID_PLANT_DATE = 103
    TOKEN_NOT_FOUND = 105
    AUTHORITY_NOT_VERIFIED = 111
    INVALID_COORDINATES = 113
    INVALID_SPECIES = 114
    INVALID_CARBON_ESTIMATE = 115
    INVALID_PARTNER_ID = 116
    MAX_TOKENS_EXCEEDED = 117
    OWNER_ONLY = 119
    INVALID_MAX_TOKENS = 120
    INVALID_MINT_FEE = 121


class RegistryError(Exception):
    """Raised when a failed result is unwrapped."""

    def __init__(self, code: ErrorCode, message: str = ""):
        self.code = code
        super().__init__(message or f"{code.name} ({int(code)})")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a registry operation.

    ``value`` is the success payload when ``ok`` is true and the
    ``ErrorCode`` otherwise.
    """
    ok: bool
    value: Any

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode) -> "Result[T]":
        return cls(ok=False, value=ErrorCode(code))

    @property
    def error(self) -> Optional[ErrorCode]:
        """The failure code, or None for a success."""
        return None if self.ok else self.value

    def unwrap(self) -> T:
        """Return the payload or raise RegistryError."""
        if not self.ok:
            raise RegistryError(self.value)
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "value": int(self.value), "error": self.value.name}
