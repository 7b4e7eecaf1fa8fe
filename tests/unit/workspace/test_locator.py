"""
Unit tests for configuration root lookup.
"""

import os
from pathlib import Path

import pytest

from cmakecargo.generator.configuration import ConfigurationError
from cmakecargo.workspace.locator import ConfigurationLocator, scoped_working_directory
from cmakecargo.workspace.metadata import Workspace, WorkspaceError


def make_root(path, marker="config"):
    (path / ".cargo").mkdir(parents=True)
    (path / ".cargo" / marker).write_text('[build]\ntarget-dir = "target"\n')
    return path


class RecordingQuery:
    """Metadata query that records the working directory it ran in."""

    def __init__(self, error=None):
        self.cwds = []
        self.error = error

    def __call__(self):
        cwd = Path.cwd()
        self.cwds.append(cwd)
        if self.error is not None:
            raise self.error
        return Workspace(workspace_root="/ws", target_directory=str(cwd / "target"))


class TestScopedWorkingDirectory:
    """Test suite for scoped_working_directory."""

    def test_enters_and_restores(self, tmp_path):
        before = Path.cwd()

        with scoped_working_directory(tmp_path) as inside:
            assert Path.cwd() == tmp_path.resolve()
            assert inside == Path.cwd()

        assert Path.cwd() == before

    def test_restores_on_error(self, tmp_path):
        before = Path.cwd()

        with pytest.raises(RuntimeError):
            with scoped_working_directory(tmp_path):
                raise RuntimeError("query failed")

        assert Path.cwd() == before


class TestConfigurationLocator:
    """Test suite for ConfigurationLocator."""

    def test_locate(self, tmp_path):
        root = make_root(tmp_path / "build")
        query = RecordingQuery()
        locator = ConfigurationLocator(query, target_triple="x86_64-unknown-linux-gnu")

        artifact_dir = locator.locate(root, "Release")

        assert query.cwds == [root.resolve()]
        assert artifact_dir == root.resolve() / "target" / "x86_64-unknown-linux-gnu" / "release"

    def test_locate_without_label(self, tmp_path):
        root = make_root(tmp_path / "build")
        locator = ConfigurationLocator(RecordingQuery(), target_triple="x86_64-unknown-linux-gnu")

        assert locator.locate(root, None).name == "debug"

    def test_locate_custom_profile(self, tmp_path):
        root = make_root(tmp_path / "build")
        locator = ConfigurationLocator(RecordingQuery(), target_triple=None, cargo_profile="dist")

        assert locator.locate(root, "Debug") == root.resolve() / "target" / "dist"

    def test_config_toml_marker(self, tmp_path):
        root = make_root(tmp_path / "build", marker="config.toml")
        locator = ConfigurationLocator(RecordingQuery(), target_triple=None)

        assert locator.locate(root, "Debug").name == "debug"

    def test_missing_marker(self, tmp_path):
        root = tmp_path / "Debug"
        root.mkdir()
        query = RecordingQuery()
        locator = ConfigurationLocator(query, target_triple=None)

        with pytest.raises(ConfigurationError, match="must contain a '.cargo/config'"):
            locator.locate(root, "Debug")

        assert query.cwds == []

    def test_unknown_label(self, tmp_path):
        root = make_root(tmp_path / "build")
        locator = ConfigurationLocator(RecordingQuery(), target_triple=None)

        with pytest.raises(ConfigurationError, match="Unknown configuration type"):
            locator.locate(root, "Profile")

    def test_failing_query_restores_working_directory(self, tmp_path):
        """Test the working directory survives a failing metadata re-query."""
        root = make_root(tmp_path / "build")
        before = os.getcwd()
        query = RecordingQuery(error=WorkspaceError("cargo metadata failed"))
        locator = ConfigurationLocator(query, target_triple=None)

        with pytest.raises(WorkspaceError):
            locator.locate(root, "Debug")

        assert query.cwds == [root.resolve()]
        assert os.getcwd() == before
