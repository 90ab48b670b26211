from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from app_delegates import (  # noqa: E402
    EXPO_APP_DELEGATE,
    MARKED_APP_DELEGATE,
    MINIMAL_APP_DELEGATE,
    ExpoProject,
)


@pytest.fixture()
def expo_app_delegate() -> str:
    return EXPO_APP_DELEGATE


@pytest.fixture()
def marked_app_delegate() -> str:
    return MARKED_APP_DELEGATE


@pytest.fixture()
def minimal_app_delegate() -> str:
    return MINIMAL_APP_DELEGATE


@pytest.fixture()
def expo_project(tmp_path: Path) -> ExpoProject:
    """Create ``ios/<target>/AppDelegate.swift`` below a temporary project root."""

    project_root = tmp_path / "my-app"
    target_dir = project_root / "ios" / "myapp"
    target_dir.mkdir(parents=True)
    app_delegate = target_dir / "AppDelegate.swift"
    app_delegate.write_text(EXPO_APP_DELEGATE, encoding="utf-8")
    (target_dir / "Info.plist").write_text("<plist/>\n", encoding="utf-8")
    return ExpoProject(root=project_root, app_delegate=app_delegate)
