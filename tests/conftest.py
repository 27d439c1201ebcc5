"""Pytest configuration and fixtures."""

import json

import pytest


def write_package_json(path, dependencies=None, dev_dependencies=None, **extra):
    """Write a package.json file and return its path."""
    data = dict(extra)
    data["dependencies"] = dependencies or {}
    data["devDependencies"] = dev_dependencies or {}
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """
{
  "name": "test-project",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  },
  "devDependencies": {
    "jest": "^29.0.0"
  }
}
"""


@pytest.fixture
def tool_manifest(tmp_path):
    """Manifest of the CLI, pinning react."""
    directory = tmp_path / "tool"
    directory.mkdir()
    return write_package_json(
        directory / "package.json",
        dependencies={"react": "16.2.0", "chalk": "2.3.0"},
    )


@pytest.fixture
def template_manifest(tmp_path):
    """Manifest bundled with new projects."""
    directory = tmp_path / "template"
    directory.mkdir()
    return write_package_json(
        directory / "package.json",
        dependencies={"react": "16.2.0", "redux": "^3.7.0"},
        dev_dependencies={"jest": "^21.0.0"},
    )


@pytest.fixture
def project_dir(tmp_path):
    """Project directory with an outdated package.json."""
    directory = tmp_path / "project"
    directory.mkdir()
    write_package_json(
        directory / "package.json",
        dependencies={"redux": "^3.7.2", "react": "15.6.0", "axios": "0.17.0"},
        dev_dependencies={"jest": "^20.0.0", "eslint": "^4.0.0"},
        name="my-app",
    )
    return directory


@pytest.fixture
def aligned_project_dir(tmp_path):
    """Project directory whose package.json already matches."""
    directory = tmp_path / "aligned"
    directory.mkdir()
    write_package_json(
        directory / "package.json",
        dependencies={"react": "16.2.0", "redux": "^3.7.2"},
        dev_dependencies={"jest": "^21.2.1"},
    )
    return directory


@pytest.fixture
def make_package_json():
    """Factory fixture for writing package.json files."""
    return write_package_json
