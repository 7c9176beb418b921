"""Tests for context_builder module."""

import hashlib
from unittest.mock import patch

import pytest

from release_packaging.scripts import config
from release_packaging.scripts.context_builder import (
    artifact_checksum,
    build_context,
    overlay,
    project_layer,
    require_keys,
)
from release_packaging.scripts.errors import ConfigurationError, DeliveryError, TemplateError
from release_packaging.scripts.model import Artifact, GitService, Project


class TestOverlay:
    """Tests for overlay function."""

    def test_later_layer_wins(self):
        assert overlay({"x": 1}, {"x": 2})["x"] == 2

    def test_reversed_order_reverses_winner(self):
        assert overlay({"x": 2}, {"x": 1})["x"] == 1

    def test_keys_from_all_layers_are_kept(self):
        result = overlay({"a": "1"}, {"b": True}, {"c": 1.5})

        assert result == {"a": "1", "b": True, "c": 1.5}

    def test_preserves_insertion_order(self):
        result = overlay({"a": 1, "b": 2}, {"c": 3, "a": 4})

        assert list(result) == ["a", "b", "c"]

    def test_inputs_not_modified(self):
        first = {"x": 1}
        second = {"x": 2}

        overlay(first, second)

        assert first == {"x": 1}
        assert second == {"x": 2}

    @pytest.mark.parametrize("value", [{"nested": 1}, ["a"], None])
    def test_non_scalar_value_rejected(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            overlay({"x": value})

        assert "'x'" in str(exc_info.value)


class TestProjectLayer:
    """Tests for project facts."""

    def test_release_version(self, project):
        layer = project_layer(project)

        assert layer[config.KEY_PROJECT_NAME] == "app"
        assert layer[config.KEY_PROJECT_NAME_CAPITALIZED] == "App"
        assert layer[config.KEY_PROJECT_VERSION] == "2.3.0"
        assert layer[config.KEY_PROJECT_EFFECTIVE_VERSION] == "2.3.0"
        assert layer[config.KEY_PROJECT_SNAPSHOT] is False
        assert layer[config.KEY_PROJECT_AUTHORS] == "Jane Doe John Roe"

    def test_snapshot_effective_version(self):
        layer = project_layer(Project(name="app", version="2.4.0-SNAPSHOT"))

        assert layer[config.KEY_PROJECT_VERSION] == "2.4.0-SNAPSHOT"
        assert layer[config.KEY_PROJECT_EFFECTIVE_VERSION] == "early-access"
        assert layer[config.KEY_PROJECT_SNAPSHOT] is True


class TestBuildContext:
    """Tests for build_context function."""

    def test_release_keys(self, project, release):
        context = build_context(project, release)

        assert context[config.KEY_TAG_NAME] == "v2.3.0"
        assert context[config.KEY_REPO_URL] == "https://github.com/acme/app"
        assert context[config.KEY_REPO_CLONE_URL] == "https://github.com/acme/app.git"
        assert context[config.KEY_RELEASE_NOTES_URL] == (
            "https://github.com/acme/app/releases/tag/v2.3.0"
        )

    def test_no_artifact_keys_without_artifact(self, project, release):
        context = build_context(project, release)

        assert config.KEY_ARTIFACT_FILE not in context

    def test_artifact_keys(self, project, release, distribution):
        artifact = distribution.artifact_for(".zip")

        context = build_context(project, release, distribution, artifact)

        assert context[config.KEY_ARTIFACT_FILE] == "app-2.3.0.zip"
        assert context[config.KEY_ARTIFACT_FILE_NAME] == "app-2.3.0"
        assert context[config.KEY_ARTIFACT_CHECKSUM] == "bbb222"
        assert context[config.KEY_DISTRIBUTION_EXECUTABLE] == "app"
        assert context[config.KEY_DISTRIBUTION_URL] == (
            "https://github.com/acme/app/releases/download/v2.3.0/app-2.3.0.zip"
        )

    def test_target_layer_applied_last(self, project, release):
        context = build_context(
            project, release,
            target_properties={config.KEY_PROJECT_NAME: "override", "extra": "x"},
        )

        assert context[config.KEY_PROJECT_NAME] == "override"
        assert context["extra"] == "x"

    def test_custom_tag_template(self, project):
        release = GitService(owner="acme", name="app", tag_name="release-{{projectVersion}}")

        context = build_context(project, release)

        assert context[config.KEY_TAG_NAME] == "release-2.3.0"

    def test_literal_tag_name_left_alone(self, project):
        release = GitService(owner="acme", name="app", tag_name="latest")

        assert build_context(project, release)[config.KEY_TAG_NAME] == "latest"

    def test_unknown_key_in_tag_template_fails(self, project):
        release = GitService(owner="acme", name="app", tag_name="v{{noSuchKey}}")

        with pytest.raises(TemplateError) as exc_info:
            build_context(project, release)

        assert exc_info.value.field == "release.tagName"

    def test_deterministic(self, project, release, distribution):
        artifact = distribution.artifact_for(".zip")

        first = build_context(project, release, distribution, artifact)
        second = build_context(project, release, distribution, artifact)

        assert first == second
        assert first is not second


class TestArtifactChecksum:
    """Tests for artifact_checksum function."""

    def test_configured_checksum(self):
        assert artifact_checksum(Artifact(path="missing.zip", checksum="abc")) == "abc"

    def test_computed_from_file(self, tmp_path):
        path = tmp_path / "app-1.0.0.zip"
        path.write_bytes(b"archive")

        assert artifact_checksum(Artifact(path=str(path))) == (
            hashlib.sha256(b"archive").hexdigest()
        )

    def test_missing_file_without_checksum(self):
        assert artifact_checksum(Artifact(path="does/not/exist.zip")) == ""

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "app-1.0.0.zip"
        path.write_bytes(b"archive")

        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(DeliveryError) as exc_info:
                artifact_checksum(Artifact(path=str(path)))

        assert "app-1.0.0.zip" in str(exc_info.value)


class TestRequireKeys:
    """Tests for require_keys function."""

    def test_all_present(self):
        require_keys({"a": "1", "b": False}, ["a", "b"], "scoop:app")

    def test_missing_and_blank_keys_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            require_keys({"a": "", "c": "x"}, ["a", "b", "c"], "scoop:app")

        error = exc_info.value
        assert error.target == "scoop:app"
        assert "a, b" in error.message
        assert "[scoop:app]" in str(error)
