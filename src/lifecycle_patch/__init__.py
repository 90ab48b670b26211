"""Idempotent injection of lifecycle callbacks into generated AppDelegate sources."""

from .config import LifecyclePatchConfig, PatcherConfig, load_config
from .engine import patch_source, patch_source_text
from .errors import LifecyclePatchError
from .pipeline import FileReport, find_app_delegate, inspect_file, patch_file
from .schema import Diagnostic, Dialect, PatchReason, PatchRequest, PatchResult
from .template import INJECTION_BLOCK, TEMPLATE_VERSION

__all__ = [
    "Diagnostic",
    "Dialect",
    "FileReport",
    "INJECTION_BLOCK",
    "LifecyclePatchConfig",
    "LifecyclePatchError",
    "PatchReason",
    "PatchRequest",
    "PatchResult",
    "PatcherConfig",
    "TEMPLATE_VERSION",
    "find_app_delegate",
    "inspect_file",
    "load_config",
    "patch_file",
    "patch_source",
    "patch_source_text",
]
