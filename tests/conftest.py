"""Shared pytest fixtures for pbxgraph tests."""

from pathlib import Path

import pytest

from pbxgraph.project import Project

PROJECT_ID = "E4A1B2C3D4E5F6A7B8C90001"
MAIN_GROUP_ID = "E4A1B2C3D4E5F6A7B8C90002"
APP_GROUP_ID = "E4A1B2C3D4E5F6A7B8C90004"
RESOURCES_GROUP_ID = "E4A1B2C3D4E5F6A7B8C90007"
TARGET_ID = "E4A1B2C3D4E5F6A7B8C90010"
SOURCES_PHASE_ID = "E4A1B2C3D4E5F6A7B8C90020"
FRAMEWORKS_PHASE_ID = "E4A1B2C3D4E5F6A7B8C90021"
RESOURCES_PHASE_ID = "E4A1B2C3D4E5F6A7B8C90022"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def basic_text(fixtures_dir: Path) -> str:
    """Return the text of the sample application project."""
    return (fixtures_dir / "basic.pbxproj").read_text(encoding="utf-8")


@pytest.fixture
def project(basic_text: str) -> Project:
    """Return the sample application project, parsed."""
    return Project.from_string(basic_text)


@pytest.fixture
def project_path(tmp_path: Path, basic_text: str) -> Path:
    """Return a writable copy of the sample project file."""
    path = tmp_path / "project.pbxproj"
    path.write_text(basic_text, encoding="utf-8")
    return path
