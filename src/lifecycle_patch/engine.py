"""Idempotent patch engine for generated AppDelegate sources.

The engine is a pure function of ``(dialect, source_text, config)``.  It
never raises for unexpected text and never writes anywhere; every outcome is
reported through :class:`~lifecycle_patch.schema.PatchResult`, including the
diagnostics the caller may forward to its own logging.
"""

from __future__ import annotations

from typing import Sequence

from .config import PatcherConfig
from .schema import (
    SUPPORTED_DIALECT,
    Diagnostic,
    Dialect,
    PatchReason,
    PatchRequest,
    PatchResult,
)
from .strategies import AnchorStrategy, build_strategies
from .template import (
    BACKGROUND_MARKER,
    INJECTION_BLOCK,
    TERMINATION_MARKER,
    injection_block_for,
    scan_markers,
)

__all__ = ["patch_source", "patch_source_text", "splice"]


def patch_source(
    request: PatchRequest,
    config: PatcherConfig | None = None,
    *,
    strategies: Sequence[AnchorStrategy] | None = None,
) -> PatchResult:
    """Insert the lifecycle callbacks into ``request.source_text`` when safe."""
    text = request.source_text

    if request.dialect is not SUPPORTED_DIALECT:
        return PatchResult(
            source_text=text,
            applied=False,
            reason=PatchReason.UNSUPPORTED_DIALECT,
            diagnostics=(
                Diagnostic.warning(
                    f"Expected a {SUPPORTED_DIALECT.value} AppDelegate, found: {request.dialect.value}"
                ),
                Diagnostic.warning(
                    f"Skipping modification; {request.dialect.value} AppDelegate files are not handled."
                ),
            ),
        )

    markers = scan_markers(text)
    if markers.complete:
        return PatchResult(
            source_text=text,
            applied=False,
            reason=PatchReason.ALREADY_PRESENT,
            diagnostics=(
                Diagnostic.info(f"{BACKGROUND_MARKER} and {TERMINATION_MARKER} already exist, skipping"),
            ),
        )
    if markers.partial:
        present, missing = (
            (BACKGROUND_MARKER, TERMINATION_MARKER)
            if markers.background
            else (TERMINATION_MARKER, BACKGROUND_MARKER)
        )
        return PatchResult(
            source_text=text,
            applied=False,
            reason=PatchReason.PARTIALLY_PRESENT,
            diagnostics=(
                Diagnostic.warning(f"{present} already exists but {missing} is missing"),
                Diagnostic.warning(
                    f"Not completing the pair automatically; add {missing} by hand "
                    "to avoid duplicate or conflicting definitions."
                ),
            ),
        )

    chain = tuple(strategies) if strategies is not None else build_strategies(config)
    diagnostics: list[Diagnostic] = []
    for strategy in chain:
        probe = strategy.probe(text)
        if probe.rejection:
            diagnostics.append(
                Diagnostic.info(f"Strategy {strategy.index} ({strategy.name}) declined: {probe.rejection}")
            )
        if probe.offset is None:
            continue
        diagnostics.append(
            Diagnostic.info(
                f"Added lifecycle callbacks to AppDelegate via strategy {strategy.index} ({strategy.name})"
            )
        )
        return PatchResult(
            source_text=splice(text, probe.offset, injection_block_for(text)),
            applied=True,
            reason=PatchReason.applied_via(strategy.index),
            diagnostics=tuple(diagnostics),
            strategy=strategy.index,
        )

    diagnostics.append(Diagnostic.warning("Could not find a suitable insertion point in AppDelegate"))
    diagnostics.append(
        Diagnostic.warning(
            f"Please add {BACKGROUND_MARKER} and {TERMINATION_MARKER} to your AppDelegate manually"
        )
    )
    return PatchResult(
        source_text=text,
        applied=False,
        reason=PatchReason.NO_ANCHOR_FOUND,
        diagnostics=tuple(diagnostics),
    )


def patch_source_text(
    dialect: Dialect | str,
    source_text: str,
    config: PatcherConfig | None = None,
) -> PatchResult:
    """Convenience wrapper building the :class:`PatchRequest` in place."""
    return patch_source(PatchRequest(dialect=dialect, source_text=source_text), config)


def splice(source_text: str, offset: int, block: str = INJECTION_BLOCK) -> str:
    """Return ``source_text`` with ``block`` inserted at ``offset``."""
    if not 0 <= offset <= len(source_text):
        raise ValueError(f"Splice offset {offset} outside text of length {len(source_text)}")
    return source_text[:offset] + block + source_text[offset:]
