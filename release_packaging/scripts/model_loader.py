"""
Loads the release model from release.yml.

Example:

    project:
      name: app
      version: 2.3.0
    release:
      github:
        owner: acme
        name: app
    distributions:
      app:
        artifacts:
          - path: build/distributions/app-2.3.0.zip
    packagers:
      scoop:
        enabled: true
    announce:
      zulip:
        enabled: true
        account: release-bot@acme.zulipchat.com
        apiHost: https://acme.zulipchat.com/api/v1
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from . import config
from .errors import ConfigurationError
from .model import (
    Artifact,
    Bucket,
    Distribution,
    GitService,
    Project,
    ReleaseModel,
    ScoopConfig,
    SdkmanConfig,
    ZulipConfig,
)


def _section(data: Dict[str, Any], key: str, field_path: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{field_path}' must be a mapping")
    return value


def _required(data: Dict[str, Any], key: str, field_path: str) -> str:
    value = data.get(key)
    if value is None or str(value).strip() == "":
        raise ConfigurationError(f"Missing required field '{field_path}'")
    return str(value)


def _parse_project(data: Dict[str, Any]) -> Project:
    project = _section(data, "project", "project")
    return Project(
        name=_required(project, "name", "project.name"),
        version=_required(project, "version", "project.version"),
        description=project.get("description", ""),
        website=project.get("website", ""),
        license=project.get("license", ""),
        authors=list(project.get("authors", [])),
        snapshot_label=project.get("snapshotLabel", config.DEFAULT_SNAPSHOT_LABEL),
    )


def _parse_release(data: Dict[str, Any]) -> GitService:
    release = _section(data, "release", "release")
    github = _section(release, "github", "release.github")
    return GitService(
        owner=_required(github, "owner", "release.github.owner"),
        name=_required(github, "name", "release.github.name"),
        host=github.get("host", "github.com"),
        tag_name=github.get("tagName", config.DEFAULT_TAG_NAME),
        release_notes_url=github.get("releaseNotesUrl", config.DEFAULT_RELEASE_NOTES_URL),
        download_url=github.get("downloadUrl", config.DEFAULT_DOWNLOAD_URL),
        changelog=github.get("changelog", ""),
        token=github.get("token"),
    )


def _parse_distributions(data: Dict[str, Any]) -> List[Distribution]:
    distributions = []
    for name, dist in _section(data, "distributions", "distributions").items():
        dist = dist or {}
        artifacts = []
        for index, item in enumerate(dist.get("artifacts", [])):
            field_path = f"distributions.{name}.artifacts[{index}].path"
            artifacts.append(Artifact(
                path=_required(item or {}, "path", field_path),
                platform=(item or {}).get("platform", ""),
                checksum=(item or {}).get("checksum", ""),
            ))
        distributions.append(Distribution(
            name=str(name),
            executable=dist.get("executable", ""),
            artifacts=artifacts,
        ))
    return distributions


def _parse_scoop(packagers: Dict[str, Any]) -> ScoopConfig:
    scoop = _section(packagers, "scoop", "packagers.scoop")
    bucket = _section(scoop, "bucket", "packagers.scoop.bucket")
    extra_properties = _section(scoop, "extraProperties", "packagers.scoop.extraProperties")
    for key in extra_properties:
        if not isinstance(key, str) or not key:
            raise ConfigurationError(
                f"'packagers.scoop.extraProperties' keys must be non-empty strings, got {key!r}"
            )
    return ScoopConfig(
        enabled=bool(scoop.get("enabled", False)),
        package_name=scoop.get("packageName", ""),
        bucket=Bucket(
            owner=bucket.get("owner", ""),
            name=bucket.get("name", config.DEFAULT_SCOOP_BUCKET_NAME),
        ),
        checkver_url=scoop.get("checkverUrl", config.DEFAULT_SCOOP_CHECKVER_URL),
        autoupdate_url=scoop.get("autoupdateUrl", config.DEFAULT_SCOOP_AUTOUPDATE_URL),
        template_directory=scoop.get("templateDirectory", ""),
        extra_properties=dict(extra_properties),
    )


def _parse_zulip(announce: Dict[str, Any]) -> ZulipConfig:
    zulip = _section(announce, "zulip", "announce.zulip")
    return ZulipConfig(
        enabled=bool(zulip.get("enabled", False)),
        account=zulip.get("account", ""),
        api_key=zulip.get("apiKey"),
        api_host=zulip.get("apiHost", ""),
        channel=zulip.get("channel", "announce"),
        subject=zulip.get("subject", config.DEFAULT_ZULIP_SUBJECT),
        message=zulip.get("message", config.DEFAULT_ZULIP_MESSAGE),
    )


def _parse_sdkman(announce: Dict[str, Any]) -> SdkmanConfig:
    sdkman = _section(announce, "sdkman", "announce.sdkman")
    return SdkmanConfig(
        enabled=bool(sdkman.get("enabled", False)),
        consumer_key=sdkman.get("consumerKey"),
        consumer_token=sdkman.get("consumerToken"),
        candidate=sdkman.get("candidate", ""),
        major=bool(sdkman.get("major", True)),
        download_url=sdkman.get("downloadUrl", config.DEFAULT_SDKMAN_DOWNLOAD_URL),
        release_notes_url=sdkman.get("releaseNotesUrl", "{{releaseNotesUrl}}"),
        api_host=sdkman.get("apiHost", config.DEFAULT_SDKMAN_API_HOST),
    )


def parse_model(data: Optional[Dict[str, Any]]) -> ReleaseModel:
    """
    Build a ReleaseModel from parsed YAML data.

    Raises:
        ConfigurationError: If a required field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Release configuration must be a mapping")

    packagers = _section(data, "packagers", "packagers")
    announce = _section(data, "announce", "announce")
    return ReleaseModel(
        project=_parse_project(data),
        release=_parse_release(data),
        distributions=_parse_distributions(data),
        scoop=_parse_scoop(packagers),
        zulip=_parse_zulip(announce),
        sdkman=_parse_sdkman(announce),
    )


def load_model(path: Union[str, Path]) -> ReleaseModel:
    """
    Load the release model from a YAML file.

    Raises:
        ConfigurationError: If the file is missing, malformed or incomplete
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Release configuration not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    try:
        return parse_model(data)
    except ConfigurationError as e:
        raise ConfigurationError(f"{path}: {e.message}") from e
