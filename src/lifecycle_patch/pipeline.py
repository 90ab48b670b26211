"""File-level driver: locate, read, patch and persist an AppDelegate."""

from __future__ import annotations

import difflib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from .config import PatcherConfig, ProjectSettings
from .engine import patch_source
from .errors import LifecyclePatchError
from .schema import Dialect, PatchRequest, PatchResult

__all__ = [
    "FileReport",
    "dialect_for_path",
    "find_app_delegate",
    "inspect_file",
    "patch_file",
    "render_diff",
    "resolve_target",
]

LOGGER = logging.getLogger(__name__)
TELEMETRY_LOGGER = logging.getLogger("lifecycle_patch.telemetry")
LOG_PREFIX = "[lifecycle-patch]"

_DIALECT_BY_SUFFIX: Mapping[str, Dialect] = {
    ".swift": Dialect.SWIFT,
    ".m": Dialect.OBJC,
    ".mm": Dialect.OBJCPP,
}


@dataclass(slots=True)
class FileReport:
    """Outcome of patching a single file on disk."""

    path: Path
    dialect: Dialect
    result: PatchResult
    original: str
    diff: str = ""
    written: bool = False

    @property
    def inserted_bytes(self) -> int:
        return len(self.result.source_text.encode("utf-8")) - len(self.original.encode("utf-8"))


def dialect_for_path(path: Path | str) -> Dialect:
    """Map an AppDelegate file extension to its dialect tag."""
    suffix = Path(path).suffix.lower()
    try:
        return _DIALECT_BY_SUFFIX[suffix]
    except KeyError:
        raise LifecyclePatchError(
            f"Unrecognised AppDelegate extension '{suffix or Path(path).name}'",
            details={"path": Path(path).as_posix()},
        ) from None


def find_app_delegate(project_root: Path | str, *, ios_dir: str = "ios") -> Path:
    """Return the single ``ios/<target>/AppDelegate.*`` below ``project_root``."""
    ios_root = Path(project_root) / ios_dir
    if not ios_root.is_dir():
        raise LifecyclePatchError(
            f"No iOS project directory at {ios_root}; run prebuild first",
            details={"ios_root": ios_root.as_posix()},
        )
    candidates = sorted(
        path
        for path in ios_root.glob("*/AppDelegate.*")
        if path.is_file() and path.suffix.lower() in _DIALECT_BY_SUFFIX
    )
    if not candidates:
        raise LifecyclePatchError(
            f"Could not locate AppDelegate under {ios_root}",
            details={"ios_root": ios_root.as_posix()},
        )
    if len(candidates) > 1:
        raise LifecyclePatchError(
            "Found more than one AppDelegate; pass the file path explicitly",
            details={"candidates": [path.as_posix() for path in candidates]},
        )
    return candidates[0]


def resolve_target(target: Path | str, settings: ProjectSettings | None = None) -> Path:
    """Accept either an AppDelegate file or a project root."""
    path = Path(target)
    if path.is_file():
        return path
    if path.is_dir():
        project = settings or ProjectSettings()
        return find_app_delegate(path, ios_dir=project.ios_dir)
    raise LifecyclePatchError(f"Target does not exist: {path}", details={"path": path.as_posix()})


def render_diff(path: Path, original: str, updated: str) -> str:
    """Render a git-style unified diff between two versions of ``path``."""
    rel_posix = path.as_posix()
    diff_lines = list(
        difflib.unified_diff(
            original.splitlines(),
            updated.splitlines(),
            fromfile=f"a/{rel_posix}",
            tofile=f"b/{rel_posix}",
            lineterm="",
        )
    )
    if not diff_lines:
        return ""
    header = f"diff --git a/{rel_posix} b/{rel_posix}"
    return "\n".join([header, *diff_lines]) + "\n"


def inspect_file(path: Path | str, config: PatcherConfig | None = None) -> FileReport:
    """Run the engine against ``path`` without writing, logging or telemetry."""
    target = Path(path)
    dialect = dialect_for_path(target)
    original = _read_source(target)

    result = patch_source(PatchRequest(dialect=dialect, source_text=original), config)
    report = FileReport(path=target, dialect=dialect, result=result, original=original)
    if result.applied:
        report.diff = render_diff(target, original, result.source_text)
    return report


def patch_file(
    path: Path | str,
    config: PatcherConfig | None = None,
    *,
    dry_run: bool = False,
) -> FileReport:
    """Run the engine against ``path`` and persist the result when it changed.

    The file is read and written as raw UTF-8 bytes so line endings survive
    untouched.  With ``dry_run`` the report carries the diff but nothing is
    written.
    """
    report = inspect_file(path, config)
    result = report.result
    if result.applied and not dry_run:
        _write_source(report.path, result.source_text)
        report.written = True

    _log_diagnostics(report)
    _emit_patch_event(
        "lifecycle_patch.file",
        path=report.path,
        dialect=report.dialect.value,
        reason=result.reason.value,
        applied=result.applied,
        strategy=result.strategy,
        written=report.written,
        inserted_bytes=report.inserted_bytes,
    )
    return report


def _read_source(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as error:
        raise LifecyclePatchError(f"Failed to read {path}: {error}", details={"path": path.as_posix()}) from error
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as error:
        raise LifecyclePatchError(f"{path} is not valid UTF-8", details={"path": path.as_posix()}) from error


def _write_source(path: Path, content: str) -> None:
    try:
        path.write_bytes(content.encode("utf-8"))
    except OSError as error:
        raise LifecyclePatchError(f"Failed to write {path}: {error}", details={"path": path.as_posix()}) from error


def _log_diagnostics(report: FileReport) -> None:
    for diagnostic in report.result.diagnostics:
        level = logging.WARNING if diagnostic.level == "warning" else logging.INFO
        LOGGER.log(level, "%s %s: %s", LOG_PREFIX, report.path.name, diagnostic.message)


def _serialise_event_value(value: Any) -> Any:
    """Convert telemetry payload values into JSON-friendly representations."""
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (list, tuple, set)):
        return [_serialise_event_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _serialise_event_value(child) for key, child in value.items()}
    return str(value)


def _emit_patch_event(event: str, **fields: Any) -> None:
    """Log one structured JSON telemetry event."""
    payload = {"event": event, "timestamp": datetime.now(timezone.utc).isoformat()}
    for key, value in fields.items():
        payload[key] = _serialise_event_value(value)
    TELEMETRY_LOGGER.info(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))
