"""
Scoop packager.

Renders the scoop templates of a distribution into a bucket manifest.
The manifest's checkver and autoupdate sections must keep working for
releases that come after the one generating it, so the autoupdate URL
and extract directory carry the scoop "$version" placeholder instead of
the concrete version.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .context_builder import build_context, overlay, require_keys
from .errors import ConfigurationError, DeliveryError
from .model import Distribution, ReleaseModel
from .target import RenderedFile, RenderedOutput, Target
from .template_renderer import TemplateLoader, render_field, render_text, trim_tpl_extension
from .version_rewriter import replace_version, resolve_self_updating_field

logger = logging.getLogger(__name__)


class ScoopProcessor(Target):
    """Packages one distribution as a scoop manifest."""

    kind = config.KIND_PACKAGER
    tool_name = "scoop"

    ARTIFACT_EXTENSION = ".zip"

    REQUIRED_KEYS = (
        config.KEY_PROJECT_VERSION,
        config.KEY_ARTIFACT_FILE,
        config.KEY_DISTRIBUTION_URL,
        config.KEY_SCOOP_PACKAGE_NAME,
        config.KEY_SCOOP_CHECKVER_URL,
        config.KEY_SCOOP_AUTOUPDATE_URL,
    )

    def __init__(
        self,
        model: ReleaseModel,
        distribution: Distribution,
        output_dir: Path,
        template_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the processor.

        Args:
            model: Release model
            distribution: Distribution to package
            output_dir: Output root; files land under <root>/<distribution>/scoop
            template_dir: Template root overriding the bundled templates
            environ: Environment used for credential lookups
        """
        super().__init__(model, environ)
        self.tool = model.scoop
        self.distribution = distribution
        self.output_dir = Path(output_dir)
        if self.tool.template_directory:
            template_dir = Path(self.tool.template_directory)
        self.loader = TemplateLoader(self.tool_name, template_dir)

    @property
    def name(self) -> str:
        return f"{self.tool_name}:{self.distribution.name}"

    @property
    def package_name(self) -> str:
        return self.tool.package_name or self.distribution.name

    @property
    def package_directory(self) -> Path:
        return self.output_dir / self.distribution.name / self.tool_name

    def is_enabled(self) -> bool:
        return self.tool.enabled

    def tool_properties(self, context: Mapping[str, Any]) -> Dict[str, Any]:
        """Scoop-specific layer, derived from the concrete context."""
        release = self.model.release
        project = self.model.project
        bucket_owner = self.tool.bucket.owner or release.owner

        props: Dict[str, Any] = {
            config.KEY_SCOOP_BUCKET_REPO_URL: release.resolved_repo_url(
                bucket_owner, self.tool.bucket.name
            ),
            config.KEY_SCOOP_BUCKET_REPO_CLONE_URL: release.resolved_repo_clone_url(
                bucket_owner, self.tool.bucket.name
            ),
            config.KEY_SCOOP_PACKAGE_NAME: self.package_name,
        }
        for key, value in self.tool.extra_properties.items():
            key = str(key)
            props[f"{self.tool_name}{key[:1].upper()}{key[1:]}"] = value

        concrete = overlay(context, props)
        props[config.KEY_SCOOP_CHECKVER_URL] = render_field(
            self.tool.checkver_url, concrete, target=self.name, field="checkverUrl"
        )
        props[config.KEY_SCOOP_AUTOUPDATE_URL] = resolve_self_updating_field(
            self.tool.autoupdate_url,
            concrete,
            project.version,
            target=self.name,
            field="autoupdateUrl",
        )
        props[config.KEY_SCOOP_AUTOUPDATE_EXTRACT_DIR] = replace_version(
            context.get(config.KEY_ARTIFACT_FILE_NAME, ""),
            project.effective_version,
        )
        return props

    def build_context(self) -> Dict[str, Any]:
        artifact = self.distribution.artifact_for(self.ARTIFACT_EXTENSION)
        if artifact is None:
            raise ConfigurationError(
                f"Distribution '{self.distribution.name}' has no "
                f"{self.ARTIFACT_EXTENSION} artifact",
                target=self.name,
            )

        logger.debug(f"{self.name} release settings: {self.model.release.as_dict(self.environ)}")
        context = build_context(
            self.model.project,
            self.model.release,
            distribution=self.distribution,
            artifact=artifact,
        )
        context = overlay(context, self.tool_properties(context))
        require_keys(context, self.REQUIRED_KEYS, self.name)
        return context

    def output_path(self, template_name: str, context: Mapping[str, Any]) -> Path:
        """
        Compute where a rendered template is written.

        The manifest is named after the package and nested in the bucket
        directory; other templates keep their name minus the suffix.
        """
        file_name = trim_tpl_extension(template_name)
        if file_name == config.SCOOP_MANIFEST_TEMPLATE:
            package_name = context[config.KEY_SCOOP_PACKAGE_NAME]
            return self.package_directory / config.SCOOP_BUCKET_DIR / f"{package_name}.json"
        return self.package_directory / file_name

    def render(self, context: Mapping[str, Any]) -> List[RenderedOutput]:
        try:
            templates = self.loader.load_all()
        except FileNotFoundError as e:
            raise ConfigurationError(str(e), target=self.name) from e

        outputs: List[RenderedOutput] = []
        for template_name, text in templates.items():
            content = render_text(text, context, target=self.name, field=template_name)
            outputs.append(RenderedFile(self.output_path(template_name, context), content))
        return outputs

    def deliver(self, outputs: List[RenderedOutput], dry_run: bool = False) -> None:
        for output in outputs:
            if not isinstance(output, RenderedFile):
                continue
            if dry_run:
                logger.info(f"[dry-run] {self.name}: would write {output.path}")
                continue
            try:
                output.path.parent.mkdir(parents=True, exist_ok=True)
                output.path.write_text(output.content, encoding="utf-8")
            except (OSError, UnicodeError) as e:
                raise DeliveryError(
                    f"Failed to write {output.path}: {e}", target=self.name
                ) from e
            logger.info(f"{self.name}: wrote {output.path}")
