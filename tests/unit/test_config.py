from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from lifecycle_patch.config import (
    DEFAULT_LOOKAHEAD_WINDOW,
    LifecyclePatchConfig,
    PatcherConfig,
    load_config,
)
from lifecycle_patch.errors import LifecyclePatchError


def _write(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_missing_default_config_yields_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config == LifecyclePatchConfig()
    assert config.patcher.lookahead_window == DEFAULT_LOOKAHEAD_WINDOW
    assert config.patcher.enable_generic_strategy is True
    assert config.project.ios_dir == "ios"


def test_default_config_is_picked_up_from_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(
        tmp_path / "lifecycle-patch.yaml",
        """
        patcher:
          lookahead_window: 120
        """,
    )
    monkeypatch.chdir(tmp_path)

    assert load_config().patcher.lookahead_window == 120


def test_explicit_config_overrides_sections(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "custom.yaml",
        """
        patcher:
          enable_generic_strategy: false
          auxiliary_class_pattern: ReactNativeDelegate
        project:
          ios_dir: native/ios
        """,
    )

    config = load_config(config_path)

    assert config.patcher.enable_generic_strategy is False
    assert config.patcher.auxiliary_class_pattern == "ReactNativeDelegate"
    assert config.patcher.lookahead_window == DEFAULT_LOOKAHEAD_WINDOW
    assert config.project.ios_dir == "native/ios"


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_config(config_path) == LifecyclePatchConfig()


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(LifecyclePatchError, match="Config file not found"):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "body",
    [
        "patcher:\n  lookahead_window: -1\n",
        "patcher:\n  unknown_key: true\n",
        "patcher:\n  auxiliary_class_pattern: '(unclosed'\n",
        "patcher:\n  auxiliary_class_pattern: '(?P<close>X)'\n",
        "patcher:\n  auxiliary_class_pattern: '(?P<auxiliary>X)'\n",
        "- just\n- a list\n",
        "patcher: [unbalanced\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, body: str) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(LifecyclePatchError):
        load_config(config_path)


def test_auxiliary_pattern_clashing_with_strategy_groups_is_rejected() -> None:
    with pytest.raises(ValidationError, match="redefinition of group name"):
        PatcherConfig(auxiliary_class_pattern="(?P<close>X)")
