"""
Unit tests for the scoop packager.

These tests cover the scoop-specific context keys, the placeholder
rewrite of the self-updating manifest fields, output file naming and
file delivery.
"""

import json

import pytest

from release_packaging.scripts import config
from release_packaging.scripts.errors import ConfigurationError, DeliveryError, TemplateError
from release_packaging.scripts.model import Artifact, Bucket, Distribution, Project
from release_packaging.scripts.scoop_processor import ScoopProcessor
from release_packaging.scripts.target import RenderedFile


@pytest.fixture
def processor(model, distribution, tmp_path):
    return ScoopProcessor(model, distribution, tmp_path / "out")


class TestToolProperties:
    """Tests for the scoop context layer."""

    def test_bucket_urls_default_to_release_owner(self, processor):
        context = processor.build_context()

        assert context[config.KEY_SCOOP_BUCKET_REPO_URL] == "https://github.com/acme/scoop-bucket"
        assert context[config.KEY_SCOOP_BUCKET_REPO_CLONE_URL] == (
            "https://github.com/acme/scoop-bucket.git"
        )

    def test_custom_bucket(self, model, distribution, tmp_path):
        model.scoop.bucket = Bucket(owner="acme-tools", name="bucket")

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context[config.KEY_SCOOP_BUCKET_REPO_URL] == "https://github.com/acme-tools/bucket"

    def test_package_name_defaults_to_distribution(self, processor):
        assert processor.build_context()[config.KEY_SCOOP_PACKAGE_NAME] == "app"

    def test_package_name_from_config(self, model, distribution, tmp_path):
        model.scoop.package_name = "acme-app"

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context[config.KEY_SCOOP_PACKAGE_NAME] == "acme-app"

    def test_checkver_url_keeps_concrete_context(self, processor):
        context = processor.build_context()

        assert context[config.KEY_SCOOP_CHECKVER_URL] == (
            "https://api.github.com/repos/acme/app/releases/latest"
        )

    def test_default_autoupdate_url_uses_placeholder(self, processor):
        context = processor.build_context()

        assert context[config.KEY_SCOOP_AUTOUPDATE_URL] == (
            "https://github.com/acme/app/releases/download/v$version/app-$version.zip"
        )

    def test_custom_autoupdate_template(self, model, distribution, tmp_path):
        """Autoupdate template with projectVersion renders to the placeholder URL."""
        model.scoop.autoupdate_url = "https://host/app-{{projectVersion}}.zip"

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context[config.KEY_SCOOP_AUTOUPDATE_URL] == "https://host/app-$version.zip"

    def test_literal_autoupdate_url_rewritten(self, model, distribution, tmp_path):
        model.scoop.autoupdate_url = "https://host/app-2.3.0.zip"

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context[config.KEY_SCOOP_AUTOUPDATE_URL] == "https://host/app-$version.zip"

    def test_autoupdate_extract_dir(self, processor):
        context = processor.build_context()

        assert context[config.KEY_SCOOP_AUTOUPDATE_EXTRACT_DIR] == "app-$version"

    def test_concrete_keys_untouched_by_rewrite(self, processor):
        """The placeholder only appears in the self-updating keys."""
        context = processor.build_context()

        assert context[config.KEY_PROJECT_VERSION] == "2.3.0"
        assert context[config.KEY_TAG_NAME] == "v2.3.0"
        assert context[config.KEY_ARTIFACT_FILE] == "app-2.3.0.zip"

    def test_snapshot_extract_dir_uses_effective_version(self, model, tmp_path):
        model.project = Project(name="app", version="2.4.0-SNAPSHOT")
        distribution = Distribution(
            name="app",
            artifacts=[Artifact(path="app-early-access.zip", checksum="c")],
        )

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context[config.KEY_SCOOP_AUTOUPDATE_EXTRACT_DIR] == "app-$version"

    def test_extra_properties_prefixed(self, model, distribution, tmp_path):
        model.scoop.extra_properties = {"shortcut": "App"}

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context["scoopShortcut"] == "App"

    def test_extra_property_key_coerced_to_string(self, model, distribution, tmp_path):
        model.scoop.extra_properties = {1: "x"}

        context = ScoopProcessor(model, distribution, tmp_path).build_context()

        assert context["scoop1"] == "x"

    def test_missing_zip_artifact(self, model, tmp_path):
        distribution = Distribution(name="cli")

        with pytest.raises(ConfigurationError) as exc_info:
            ScoopProcessor(model, distribution, tmp_path).build_context()

        assert exc_info.value.target == "scoop:cli"

    def test_unknown_key_in_checkver_url(self, model, distribution, tmp_path):
        model.scoop.checkver_url = "https://host/{{missing}}"

        with pytest.raises(TemplateError) as exc_info:
            ScoopProcessor(model, distribution, tmp_path).build_context()

        assert exc_info.value.target == "scoop:app"
        assert exc_info.value.field == "checkverUrl"


class TestRender:
    """Tests for manifest rendering and output paths."""

    def test_manifest_written_to_bucket_named_after_package(self, model, distribution, tmp_path):
        model.scoop.package_name = "acme-app"
        processor = ScoopProcessor(model, distribution, tmp_path)

        outputs = processor.render(processor.build_context())

        paths = {o.path for o in outputs}
        assert tmp_path / "app" / "scoop" / "bucket" / "acme-app.json" in paths
        assert tmp_path / "app" / "scoop" / "README.md" in paths

    def test_manifest_is_valid_json(self, processor):
        outputs = processor.render(processor.build_context())
        manifest = next(o for o in outputs if o.path.suffix == ".json")

        data = json.loads(manifest.content)

        assert data["version"] == "2.3.0"
        assert data["url"] == "https://github.com/acme/app/releases/download/v2.3.0/app-2.3.0.zip"
        assert data["hash"] == "sha256:bbb222"
        assert data["extract_dir"] == "app-2.3.0"
        assert data["bin"] == "bin\\app.cmd"
        assert data["checkver"]["re"] == "v([\\d.]+).zip"
        assert data["autoupdate"]["url"] == (
            "https://github.com/acme/app/releases/download/v$version/app-$version.zip"
        )
        assert data["autoupdate"]["extract_dir"] == "app-$version"
        assert data["autoupdate"]["hash"]["url"] == "$url.sha256"

    def test_custom_template_directory(self, model, distribution, tmp_path):
        templates = tmp_path / "templates"
        (templates / "scoop").mkdir(parents=True)
        (templates / "scoop" / "notes.txt.tpl").write_text("{{scoopPackageName}} {{tagName}}")
        processor = ScoopProcessor(model, distribution, tmp_path / "out", template_dir=templates)

        outputs = processor.render(processor.build_context())

        assert outputs == [RenderedFile(tmp_path / "out" / "app" / "scoop" / "notes.txt", "app v2.3.0")]

    def test_template_with_unknown_key(self, model, distribution, tmp_path):
        templates = tmp_path / "templates"
        (templates / "scoop").mkdir(parents=True)
        (templates / "scoop" / "manifest.json.tpl").write_text("{{noSuchKey}}")
        processor = ScoopProcessor(model, distribution, tmp_path, template_dir=templates)

        with pytest.raises(TemplateError) as exc_info:
            processor.render(processor.build_context())

        assert exc_info.value.field == "manifest.json.tpl"

    def test_no_templates(self, model, distribution, tmp_path):
        processor = ScoopProcessor(model, distribution, tmp_path, template_dir=tmp_path / "empty")

        with pytest.raises(ConfigurationError):
            processor.render(processor.build_context())

    def test_non_utf8_template(self, model, distribution, tmp_path):
        templates = tmp_path / "templates"
        (templates / "scoop").mkdir(parents=True)
        (templates / "scoop" / "manifest.json.tpl").write_bytes(b"\xff\xfe{{projectVersion}}")
        processor = ScoopProcessor(model, distribution, tmp_path, template_dir=templates)

        with pytest.raises(ConfigurationError) as exc_info:
            processor.render(processor.build_context())

        assert "manifest.json.tpl" in str(exc_info.value)


class TestDeliver:
    """Tests for writing rendered files."""

    def test_writes_files(self, processor, tmp_path):
        outputs = processor.render(processor.build_context())

        processor.deliver(outputs)

        manifest = tmp_path / "out" / "app" / "scoop" / "bucket" / "app.json"
        assert manifest.exists()
        assert json.loads(manifest.read_text())["version"] == "2.3.0"

    def test_dry_run_writes_nothing(self, processor, tmp_path):
        outputs = processor.render(processor.build_context())

        processor.deliver(outputs, dry_run=True)

        assert not (tmp_path / "out").exists()

    def test_write_failure_is_delivery_error(self, processor, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        outputs = [RenderedFile(blocker / "sub" / "file.json", "{}")]

        with pytest.raises(DeliveryError) as exc_info:
            processor.deliver(outputs)

        assert exc_info.value.target == "scoop:app"

    def test_unencodable_content_is_delivery_error(self, processor, tmp_path):
        outputs = [RenderedFile(tmp_path / "out" / "notes.txt", "bad \udcff")]

        with pytest.raises(DeliveryError) as exc_info:
            processor.deliver(outputs)

        assert exc_info.value.target == "scoop:app"

    def test_writes_utf8(self, processor, tmp_path):
        path = tmp_path / "out" / "README.md"

        processor.deliver([RenderedFile(path, "Café")])

        assert path.read_bytes() == "Café".encode("utf-8")


def test_disabled_by_default(model, distribution, tmp_path):
    model.scoop.enabled = False

    assert not ScoopProcessor(model, distribution, tmp_path).is_enabled()
