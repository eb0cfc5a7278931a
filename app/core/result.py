"""
Typed outcome of a fail-soft lookup.

Lookups against the settings/holiday tables never raise into request flows.
Instead they return a `Lookup` carrying either the real value or a safe
default, with `defaulted` set when the default was substituted because the
data source failed. "Legitimately absent" (no row) is a normal, non-defaulted
result with an empty value.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Lookup(Generic[T]):
    value: T
    defaulted: bool = False
    error: Optional[str] = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, error: Exception) -> "Lookup[T]":
        return cls(value=value, defaulted=True, error=f"{type(error).__name__}: {error}")
