"""Typed payloads exchanged with the patch engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class Dialect(str, Enum):
    """Source language of a generated AppDelegate."""

    SWIFT = "swift"
    OBJC = "objc"
    OBJCPP = "objcpp"


SUPPORTED_DIALECT = Dialect.SWIFT


class PatchReason(str, Enum):
    """Path taken by a single engine invocation."""

    ALREADY_PRESENT = "already-present"
    PARTIALLY_PRESENT = "partially-present"
    UNSUPPORTED_DIALECT = "unsupported-dialect"
    NO_ANCHOR_FOUND = "no-anchor-found"
    APPLIED_VIA_STRATEGY_1 = "applied-via-strategy-1"
    APPLIED_VIA_STRATEGY_2 = "applied-via-strategy-2"
    APPLIED_VIA_STRATEGY_3 = "applied-via-strategy-3"

    @classmethod
    def applied_via(cls, index: int) -> "PatchReason":
        return cls(f"applied-via-strategy-{index}")


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Human-readable message describing an engine decision."""

    level: Literal["info", "warning"]
    message: str

    @classmethod
    def info(cls, message: str) -> "Diagnostic":
        return cls(level="info", message=message)

    @classmethod
    def warning(cls, message: str) -> "Diagnostic":
        return cls(level="warning", message=message)


@dataclass(frozen=True, slots=True)
class PatchRequest:
    """Input to a single engine invocation."""

    dialect: Dialect
    source_text: str

    def __post_init__(self) -> None:
        if not isinstance(self.dialect, Dialect):
            object.__setattr__(self, "dialect", Dialect(self.dialect))


@dataclass(frozen=True, slots=True)
class MarkerState:
    """Which of the two lifecycle callbacks already exist in a source file."""

    background: bool
    termination: bool

    @property
    def complete(self) -> bool:
        return self.background and self.termination

    @property
    def partial(self) -> bool:
        return self.background != self.termination


@dataclass(slots=True)
class PatchResult:
    """Outcome of running the engine against one source text."""

    source_text: str
    applied: bool
    reason: PatchReason
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    strategy: int | None = None

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.level == "warning")
