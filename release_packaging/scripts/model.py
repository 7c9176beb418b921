"""
Release model for the packaging pipeline.

Plain dataclasses describing the project, its git release, the
distributions produced by the build, and the configured packagers and
announcers. The model is created once from configuration and treated as
read-only while targets are processed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .credentials import Secret, resolve_secret


@dataclass
class Project:
    """Project facts shared by every target."""
    name: str
    version: str
    description: str = ""
    website: str = ""
    license: str = ""
    authors: List[str] = field(default_factory=list)
    snapshot_label: str = config.DEFAULT_SNAPSHOT_LABEL

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(config.SNAPSHOT_SUFFIX)

    @property
    def effective_version(self) -> str:
        """Version used for resolution; snapshots resolve to the snapshot label."""
        if self.is_snapshot:
            return self.snapshot_label
        return self.version

    @property
    def name_capitalized(self) -> str:
        return self.name[:1].upper() + self.name[1:]


@dataclass
class GitService:
    """
    Git hosting facts for the release.

    tag_name, release_notes_url and download_url are Mustache templates
    resolved against the context while it is assembled.
    """
    owner: str
    name: str
    host: str = "github.com"
    tag_name: str = config.DEFAULT_TAG_NAME
    release_notes_url: str = config.DEFAULT_RELEASE_NOTES_URL
    download_url: str = config.DEFAULT_DOWNLOAD_URL
    changelog: str = ""
    token: Optional[str] = None

    def resolved_repo_url(self, owner: Optional[str] = None, name: Optional[str] = None) -> str:
        return f"https://{self.host}/{owner or self.owner}/{name or self.name}"

    def resolved_repo_clone_url(self, owner: Optional[str] = None, name: Optional[str] = None) -> str:
        return f"{self.resolved_repo_url(owner, name)}.git"

    def resolved_token(self, environ: Optional[Mapping[str, str]] = None) -> Secret:
        return resolve_secret(self.token, config.ENV_GITHUB_TOKEN, environ)

    def as_dict(self, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        return {
            "host": self.host,
            "owner": self.owner,
            "name": self.name,
            "tagName": self.tag_name,
            "token": self.resolved_token(environ).masked(),
        }


@dataclass
class Artifact:
    """A single file produced by the build."""
    path: str
    platform: str = ""
    checksum: str = ""

    @property
    def file_name(self) -> str:
        return Path(self.path).name

    @property
    def file_name_without_extension(self) -> str:
        name = self.file_name
        for extension in config.ARCHIVE_EXTENSIONS:
            if name.endswith(extension):
                return name[: -len(extension)]
        return name

    def has_extension(self, extension: str) -> bool:
        return self.file_name.endswith(extension)


@dataclass
class Distribution:
    """A named set of artifacts with a launcher executable."""
    name: str
    executable: str = ""
    artifacts: List[Artifact] = field(default_factory=list)

    def artifact_for(self, extension: str) -> Optional[Artifact]:
        """Return the first artifact with the given file extension, if any."""
        for artifact in self.artifacts:
            if artifact.has_extension(extension):
                return artifact
        return None


@dataclass
class Bucket:
    """Repository that hosts scoop manifests."""
    owner: str = ""
    name: str = config.DEFAULT_SCOOP_BUCKET_NAME


@dataclass
class ScoopConfig:
    """Configuration of the scoop packager."""
    enabled: bool = False
    package_name: str = ""
    bucket: Bucket = field(default_factory=Bucket)
    checkver_url: str = config.DEFAULT_SCOOP_CHECKVER_URL
    autoupdate_url: str = config.DEFAULT_SCOOP_AUTOUPDATE_URL
    template_directory: str = ""
    extra_properties: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "packageName": self.package_name,
            "bucket": {"owner": self.bucket.owner, "name": self.bucket.name},
            "checkverUrl": self.checkver_url,
            "autoupdateUrl": self.autoupdate_url,
            "templateDirectory": self.template_directory,
            "extraProperties": dict(self.extra_properties),
        }


@dataclass
class ZulipConfig:
    """Configuration of the Zulip announcer."""
    enabled: bool = False
    account: str = ""
    api_key: Optional[str] = None
    api_host: str = ""
    channel: str = "announce"
    subject: str = config.DEFAULT_ZULIP_SUBJECT
    message: str = config.DEFAULT_ZULIP_MESSAGE

    def resolved_api_key(self, environ: Optional[Mapping[str, str]] = None) -> Secret:
        return resolve_secret(self.api_key, config.ENV_ZULIP_API_KEY, environ)

    def as_dict(self, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "account": self.account,
            "apiKey": self.resolved_api_key(environ).masked(),
            "apiHost": self.api_host,
            "channel": self.channel,
            "subject": self.subject,
            "message": self.message,
        }


@dataclass
class SdkmanConfig:
    """Configuration of the SDKMAN announcer."""
    enabled: bool = False
    consumer_key: Optional[str] = None
    consumer_token: Optional[str] = None
    candidate: str = ""
    major: bool = True
    download_url: str = config.DEFAULT_SDKMAN_DOWNLOAD_URL
    release_notes_url: str = "{{releaseNotesUrl}}"
    api_host: str = config.DEFAULT_SDKMAN_API_HOST

    def resolved_consumer_key(self, environ: Optional[Mapping[str, str]] = None) -> Secret:
        return resolve_secret(self.consumer_key, config.ENV_SDKMAN_CONSUMER_KEY, environ)

    def resolved_consumer_token(self, environ: Optional[Mapping[str, str]] = None) -> Secret:
        return resolve_secret(self.consumer_token, config.ENV_SDKMAN_CONSUMER_TOKEN, environ)

    def as_dict(self, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "consumerKey": self.resolved_consumer_key(environ).masked(),
            "consumerToken": self.resolved_consumer_token(environ).masked(),
            "candidate": self.candidate,
            "major": self.major,
            "downloadUrl": self.download_url,
            "releaseNotesUrl": self.release_notes_url,
            "apiHost": self.api_host,
        }


@dataclass
class ReleaseModel:
    """Everything a release run needs to process its targets."""
    project: Project
    release: GitService
    distributions: List[Distribution] = field(default_factory=list)
    scoop: ScoopConfig = field(default_factory=ScoopConfig)
    zulip: ZulipConfig = field(default_factory=ZulipConfig)
    sdkman: SdkmanConfig = field(default_factory=SdkmanConfig)
