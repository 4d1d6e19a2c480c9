# src/cotask/core/signals.py

"""
Suspension signals and task results.

- Poll:       what one `advance` returns (Ready(value) or Pending)
- TaskResult: what a finished task produced (Success(value) or Failure(kind))

All values are immutable and created fresh per poll.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar, Union

T = TypeVar("T")


class _PendingType:
    __slots__ = ()

    _instance: _PendingType | None = None

    def __new__(cls) -> _PendingType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Pending"


Pending: Final = _PendingType()


@dataclass(slots=True, frozen=True)
class Ready(Generic[T]):
    value: T


Poll = Union[Ready[T], _PendingType]


def is_ready(signal: Any) -> bool:
    return isinstance(signal, Ready)


def is_pending(signal: Any) -> bool:
    return signal is Pending


@dataclass(slots=True, frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Failure:
    """
    A failed outcome carried as data.

    kind is short and machine-readable ("http_status", "timeout", ...);
    detail is for humans and is compared too.
    """

    kind: str
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}" if self.detail else self.kind


TaskResult = Union[Success[Any], Failure]
