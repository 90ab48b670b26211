"""YAML configuration for the lifecycle patcher."""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import LifecyclePatchError

DEFAULT_CONFIG_NAME = "lifecycle-patch.yaml"
DEFAULT_LOOKAHEAD_WINDOW = 50


class SettingsModel(BaseModel):
    """Base Pydantic model with strict field handling."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class PatcherConfig(SettingsModel):
    """Tunables for the anchor strategy chain."""

    lookahead_window: int = Field(default=DEFAULT_LOOKAHEAD_WINDOW, ge=0)
    enable_generic_strategy: bool = True
    auxiliary_class_pattern: str = r"\w+"

    @field_validator("auxiliary_class_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        from .strategies import class_boundary_pattern

        if not value.strip():
            raise ValueError("auxiliary_class_pattern must not be empty")
        # Compiled inside the class-boundary pattern so clashing group names fail here.
        try:
            class_boundary_pattern(value)
        except re.error as error:
            raise ValueError(f"invalid regular expression: {error}") from error
        return value


class ProjectSettings(SettingsModel):
    """Where to look for the generated native project."""

    ios_dir: str = "ios"


class LifecyclePatchConfig(SettingsModel):
    patcher: PatcherConfig = Field(default_factory=PatcherConfig)
    project: ProjectSettings = Field(default_factory=ProjectSettings)


def load_config(config_path: Path | str | None = None) -> LifecyclePatchConfig:
    """Load YAML configuration from disk.

    ``None`` looks for ``lifecycle-patch.yaml`` in the working directory and
    falls back to defaults when it does not exist.  An explicit path must
    exist.
    """
    if config_path is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        if not candidate.exists():
            return LifecyclePatchConfig()
    else:
        candidate = Path(config_path)
        if not candidate.exists():
            raise LifecyclePatchError(
                f"Config file not found: {candidate}",
                details={"path": candidate.as_posix()},
            )

    try:
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise LifecyclePatchError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise LifecyclePatchError("Configuration must be a mapping at the top level.")

    try:
        return LifecyclePatchConfig.model_validate(data)
    except ValidationError as error:
        raise LifecyclePatchError(
            f"Invalid configuration in {candidate}: {error}",
            details={"path": candidate.as_posix(), "errors": error.errors()},
        ) from error
