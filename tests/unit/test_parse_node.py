"""Tests for package.json loading and writing."""

import json
import os
import stat

import pytest

from core.errors import ManifestParseError, ManifestReadError, ManifestWriteError
from core.models import Manifest
from core.parse_node import (
    ManifestCache,
    dump_manifest,
    load_manifest,
    parse_package_json,
    read_manifest,
    write_manifest,
)


class TestParsePackageJson:
    """Test parsing of package.json content."""

    def test_parse_dependencies(self, sample_package_json):
        """Should expose both dependency sections."""
        manifest = parse_package_json(sample_package_json)

        assert manifest.dependencies == {"express": "^4.18.0", "lodash": "~4.17.21"}
        assert manifest.dev_dependencies == {"jest": "^29.0.0"}
        assert manifest.data["name"] == "test-project"
        assert manifest.raw == sample_package_json

    def test_missing_sections_are_empty(self):
        manifest = parse_package_json('{"name": "bare"}')
        assert manifest.dependencies == {}
        assert manifest.dev_dependencies == {}

    def test_invalid_json(self):
        with pytest.raises(ManifestParseError):
            parse_package_json("{not json")

    def test_top_level_must_be_object(self):
        with pytest.raises(ManifestParseError):
            parse_package_json('["react"]')

    def test_section_must_be_object(self):
        """Should reject a dependency section that is not a mapping."""
        with pytest.raises(ManifestParseError) as excinfo:
            parse_package_json('{"devDependencies": ["jest"]}', "package.json")
        assert "devDependencies" in str(excinfo.value)
        assert excinfo.value.path.name == "package.json"

    def test_version_must_be_string(self):
        with pytest.raises(ManifestParseError):
            parse_package_json('{"dependencies": {"react": 16}}')


class TestLoadManifest:
    """Test reading manifests from disk."""

    def test_missing_file(self, tmp_path):
        """Should raise a read error for a missing file."""
        with pytest.raises(ManifestReadError) as excinfo:
            read_manifest(tmp_path / "package.json")
        assert "not found" in str(excinfo.value)

    def test_unreadable_path(self, tmp_path):
        """A directory in place of the file cannot be read."""
        (tmp_path / "package.json").mkdir()
        with pytest.raises(ManifestReadError):
            load_manifest(tmp_path / "package.json")

    def test_load_records_path(self, tmp_path, sample_package_json):
        path = tmp_path / "package.json"
        path.write_text(sample_package_json, encoding="utf-8")

        manifest = load_manifest(path)

        assert manifest.path == path
        assert "express" in manifest.dependencies

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ManifestParseError):
            load_manifest(path)


class TestManifestCache:
    """Test load-once caching."""

    def test_loads_once(self, tmp_path, make_package_json):
        """Should return the cached manifest even after the file changes."""
        path = make_package_json(tmp_path / "package.json", {"react": "16.2.0"})
        cache = ManifestCache()

        first = cache.load(path)
        make_package_json(path, {"react": "15.0.0"})
        second = cache.load(path)

        assert second is first
        assert second.dependencies["react"] == "16.2.0"
        assert path in cache

    def test_clear(self, tmp_path, make_package_json):
        path = make_package_json(tmp_path / "package.json", {"react": "16.2.0"})
        cache = ManifestCache()
        cache.load(path)

        make_package_json(path, {"react": "15.0.0"})
        cache.clear()

        assert path not in cache
        assert cache.load(path).dependencies["react"] == "15.0.0"


class TestWriteManifest:
    """Test persisting manifests."""

    def test_dump_two_space_indent(self):
        manifest = Manifest(data={"name": "app", "dependencies": {"a": "1.0.0"}})
        assert dump_manifest(manifest) == (
            '{\n  "name": "app",\n  "dependencies": {\n    "a": "1.0.0"\n  }\n}\n'
        )

    def test_dump_keeps_unicode(self):
        manifest = Manifest(data={"description": "café"})
        assert "café" in dump_manifest(manifest)

    def test_write_replaces_file(self, tmp_path, make_package_json):
        path = make_package_json(tmp_path / "package.json", {"a": "1.0.0"})
        manifest = Manifest(data={"dependencies": {"a": "2.0.0"}, "devDependencies": {}})

        write_manifest(path, manifest)

        assert json.loads(path.read_text(encoding="utf-8"))["dependencies"] == {"a": "2.0.0"}
        assert [p.name for p in tmp_path.iterdir()] == ["package.json"]

    def test_write_keeps_file_mode(self, tmp_path, make_package_json):
        """Should leave the permissions of the replaced file unchanged."""
        path = make_package_json(tmp_path / "package.json", {"a": "1.0.0"})
        os.chmod(path, 0o644)

        write_manifest(path, Manifest(data={"dependencies": {"a": "2.0.0"}}))

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o644

    def test_write_missing_directory(self, tmp_path):
        with pytest.raises(ManifestWriteError):
            write_manifest(tmp_path / "missing" / "package.json", Manifest(data={}))
