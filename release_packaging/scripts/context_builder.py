"""
Context builder for release packaging.

Provides build_context(), the single entry point for constructing the
flat key/value context used by packager and announcer templates.

The context is assembled from layers in a fixed order:

    project -> release -> artifact -> target

Each layer is a flat mapping of well-known keys (see config.KEY_*) to
scalar values. Layers are overlaid left to right; a key in a later layer
replaces the earlier value outright. A fresh dict is returned on every
call so targets never share a context.
"""

import hashlib
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from . import config
from .errors import ConfigurationError, DeliveryError
from .model import Artifact, Distribution, GitService, Project
from .template_renderer import render_field

SCALAR_TYPES = (str, bool, int, float)


def overlay(*layers: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Overlay flat layers left to right; later layers win by key.

    Raises:
        ConfigurationError: If a layer holds a non-scalar value
    """
    context: Dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if not isinstance(value, SCALAR_TYPES):
                raise ConfigurationError(
                    f"Context value for '{key}' must be a scalar, "
                    f"got {type(value).__name__}"
                )
            context[key] = value
    return context


def project_layer(project: Project) -> Dict[str, Any]:
    """Project facts: name, version and effective version."""
    return {
        config.KEY_PROJECT_NAME: project.name,
        config.KEY_PROJECT_NAME_CAPITALIZED: project.name_capitalized,
        config.KEY_PROJECT_VERSION: project.version,
        config.KEY_PROJECT_EFFECTIVE_VERSION: project.effective_version,
        config.KEY_PROJECT_SNAPSHOT: project.is_snapshot,
        config.KEY_PROJECT_DESCRIPTION: project.description,
        config.KEY_PROJECT_WEBSITE: project.website,
        config.KEY_PROJECT_LICENSE: project.license,
        config.KEY_PROJECT_AUTHORS: " ".join(project.authors),
    }


def release_layer(release: GitService, context: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Release facts: repository, tag name and release notes.

    The tag name is rendered against the project layer, the release notes
    URL against the project layer plus repository keys and tag name.
    """
    layer: Dict[str, Any] = {
        config.KEY_REPO_HOST: release.host,
        config.KEY_REPO_OWNER: release.owner,
        config.KEY_REPO_NAME: release.name,
        config.KEY_REPO_URL: release.resolved_repo_url(),
        config.KEY_REPO_CLONE_URL: release.resolved_repo_clone_url(),
        config.KEY_CHANGELOG: release.changelog,
    }
    partial = overlay(context, layer)
    layer[config.KEY_TAG_NAME] = render_field(
        release.tag_name, partial, field="release.tagName"
    )
    partial[config.KEY_TAG_NAME] = layer[config.KEY_TAG_NAME]
    layer[config.KEY_RELEASE_NOTES_URL] = render_field(
        release.release_notes_url, partial, field="release.releaseNotesUrl"
    )
    return layer


def artifact_checksum(artifact: Artifact) -> str:
    """Return the configured checksum, or the sha256 of the file when it exists."""
    if artifact.checksum:
        return artifact.checksum

    path = Path(artifact.path)
    if not path.is_file():
        return ""

    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                digest.update(chunk)
    except OSError as e:
        raise DeliveryError(f"Failed to read artifact {path}: {e}") from e
    return digest.hexdigest()


def artifact_layer(
    release: GitService,
    distribution: Distribution,
    artifact: Artifact,
    context: Mapping[str, Any],
) -> Dict[str, Any]:
    """Artifact facts: file name, path, checksum and download URL."""
    layer: Dict[str, Any] = {
        config.KEY_DISTRIBUTION_NAME: distribution.name,
        config.KEY_DISTRIBUTION_EXECUTABLE: distribution.executable or distribution.name,
        config.KEY_ARTIFACT_FILE: artifact.file_name,
        config.KEY_ARTIFACT_FILE_NAME: artifact.file_name_without_extension,
        config.KEY_ARTIFACT_PATH: artifact.path,
        config.KEY_ARTIFACT_PLATFORM: artifact.platform,
        config.KEY_ARTIFACT_CHECKSUM: artifact_checksum(artifact),
    }
    layer[config.KEY_DISTRIBUTION_URL] = render_field(
        release.download_url, overlay(context, layer), field="release.downloadUrl"
    )
    return layer


def build_context(
    project: Project,
    release: GitService,
    distribution: Optional[Distribution] = None,
    artifact: Optional[Artifact] = None,
    target_properties: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Construct the context for one target.

    Args:
        project: Project facts
        release: Git release facts
        distribution: Distribution being packaged (packagers only)
        artifact: Artifact being packaged (packagers only)
        target_properties: Target-specific layer, applied last

    Returns:
        New dict with all layers overlaid in order
    """
    context = project_layer(project)
    context = overlay(context, release_layer(release, context))
    if distribution is not None and artifact is not None:
        context = overlay(context, artifact_layer(release, distribution, artifact, context))
    if target_properties:
        context = overlay(context, target_properties)
    return context


def require_keys(context: Mapping[str, Any], keys: Iterable[str], target: str) -> None:
    """
    Check that a target's required keys are present and non-blank.

    Raises:
        ConfigurationError: Naming the target and every missing key
    """
    missing = [
        key for key in keys
        if key not in context or context[key] is None or context[key] == ""
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required context keys: {', '.join(missing)}", target=target
        )
