"""Anchor strategies that locate an insertion point inside the AppDelegate class.

Each strategy pairs a pattern for a Swift landmark with a splice rule: the
named group ``close`` marks the class-closing brace, and the injection block
is inserted at the start of that group.  Strategies know nothing about each
other; :func:`build_strategies` returns them in priority order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable

from .config import PatcherConfig

__all__ = [
    "AnchorProbe",
    "AnchorStrategy",
    "build_strategies",
    "class_boundary_pattern",
    "class_boundary_strategy",
    "generic_trailing_method_strategy",
    "named_last_method_strategy",
]

Guard = Callable[[str, Match[str]], "str | None"]

_CLASS_MODIFIERS = r"(?:(?:@\w+(?:\([^)\n]*\))?|public|open|internal|final|private|fileprivate)\s+)*"
_CLASS_DECLARATION = re.compile(r"\bclass\s")
_TOP_LEVEL_CLASS = re.compile(rf"^{_CLASS_MODIFIERS}class\s+\w+", re.MULTILINE)

_NAMED_LAST_METHOD = re.compile(r"continue userActivity: NSUserActivity,[\s\S]*?return[^}]*\}\s*\n(?P<close>\})")
_GENERIC_TRAILING_METHOD = re.compile(r"\}\s*\n(?P<close>\})\s*(?:\n|$)")


@dataclass(frozen=True, slots=True)
class AnchorProbe:
    """Result of running one strategy against a source text."""

    strategy: "AnchorStrategy"
    offset: int | None = None
    rejection: str | None = None

    @property
    def found(self) -> bool:
        return self.offset is not None


@dataclass(frozen=True, slots=True)
class AnchorStrategy:
    """Pattern plus splice rule for one landmark in generated boilerplate."""

    index: int
    name: str
    pattern: Pattern[str]
    guard: Guard | None = None
    insert_group: str = "close"
    first_match_only: bool = True

    def probe(self, source_text: str) -> AnchorProbe:
        """Return the first acceptable anchor.

        With ``first_match_only`` a rejected first match ends the search;
        otherwise later matches are tried until one passes the guard.
        """
        rejection: str | None = None
        for match in self.pattern.finditer(source_text):
            if self.guard is not None:
                rejection = self.guard(source_text, match)
                if rejection:
                    if self.first_match_only:
                        break
                    continue
            return AnchorProbe(strategy=self, offset=match.start(self.insert_group))
        return AnchorProbe(strategy=self, rejection=rejection)


def class_boundary_pattern(auxiliary_class_pattern: str = r"\w+") -> Pattern[str]:
    """Compile the class-boundary pattern; raises ``re.error`` for a bad auxiliary pattern."""
    return re.compile(
        r"\n(?P<close>\})[ \t]*\r?\n\s*"
        rf"(?P<auxiliary>{_CLASS_MODIFIERS}class\s+(?:{auxiliary_class_pattern})\b)"
    )


def _closes_a_class(source_text: str, match: Match[str]) -> str | None:
    # The top-level block ending at ``close`` starts after the previous column-zero brace.
    close = match.start("close")
    block_start = source_text.rfind("\n}", 0, close - 1)
    block_start = 0 if block_start < 0 else block_start + 2
    if _TOP_LEVEL_CLASS.search(source_text, block_start, close):
        return None
    return "closing brace does not end a class declaration"


def class_boundary_strategy(auxiliary_class_pattern: str = r"\w+") -> AnchorStrategy:
    """End of the primary class directly followed by an auxiliary class.

    Top-level types before the primary class (extensions, structs) also end
    in a column-zero brace; those boundaries are skipped.
    """
    return AnchorStrategy(
        index=1,
        name="class-boundary",
        pattern=class_boundary_pattern(auxiliary_class_pattern),
        guard=_closes_a_class,
        first_match_only=False,
    )


def named_last_method_strategy() -> AnchorStrategy:
    """``application(_:continue:restorationHandler:)``, the last generated method."""
    return AnchorStrategy(index=2, name="named-last-method", pattern=_NAMED_LAST_METHOD)


def generic_trailing_method_strategy(lookahead_window: int) -> AnchorStrategy:
    """First method-closing brace followed by a column-zero class-closing brace.

    The match only counts when no ``class`` declaration starts within
    ``lookahead_window`` characters after it; otherwise the closing brace most
    likely belongs to a nested type.  Files with anonymous or nested types
    right before the end of the class can still fool this check.
    """

    def _guard(source_text: str, match: Match[str]) -> str | None:
        following = _CLASS_DECLARATION.search(source_text, match.end())
        if following is None:
            return None
        distance = following.start() - match.end()
        if distance > lookahead_window:
            return None
        return (
            f"class declaration starts {distance} character(s) after the trailing brace "
            f"(window {lookahead_window}); not treating it as the class end"
        )

    return AnchorStrategy(
        index=3,
        name="generic-trailing-method",
        pattern=_GENERIC_TRAILING_METHOD,
        guard=_guard,
    )


def build_strategies(config: PatcherConfig | None = None) -> tuple[AnchorStrategy, ...]:
    """Return the enabled strategies in priority order."""
    settings = config or PatcherConfig()
    strategies = [
        class_boundary_strategy(settings.auxiliary_class_pattern),
        named_last_method_strategy(),
    ]
    if settings.enable_generic_strategy:
        strategies.append(generic_trailing_method_strategy(settings.lookahead_window))
    return tuple(strategies)
