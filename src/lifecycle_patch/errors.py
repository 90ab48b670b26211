"""Exceptions raised by the file-facing layers of the lifecycle patcher."""

from __future__ import annotations

from typing import Any, Mapping


class LifecyclePatchError(RuntimeError):
    """Raised when a target cannot be located, read, or configured."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})
