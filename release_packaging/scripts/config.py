"""
Central configuration for release packaging scripts.
"""

# File paths
RELEASE_CONFIG_FILE = "release.yml"
DEFAULT_OUTPUT_DIR = "out/packaging"
TEMPLATE_SUFFIX = ".tpl"
SCOOP_MANIFEST_TEMPLATE = "manifest.json"
SCOOP_BUCKET_DIR = "bucket"

# Placeholder understood by self-updating manifests (scoop checkver/autoupdate)
VERSION_PLACEHOLDER = "$version"

# Snapshot handling
SNAPSHOT_SUFFIX = "-SNAPSHOT"
DEFAULT_SNAPSHOT_LABEL = "early-access"

# Credential environment variables
ENV_SDKMAN_CONSUMER_KEY = "SDKMAN_CONSUMER_KEY"
ENV_SDKMAN_CONSUMER_TOKEN = "SDKMAN_CONSUMER_TOKEN"
ENV_ZULIP_API_KEY = "ZULIP_API_KEY"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"

# Diagnostic markers for secrets
MASKED_VALUE = "************"
UNSET_VALUE = "**unset**"

# Context keys: project layer
KEY_PROJECT_NAME = "projectName"
KEY_PROJECT_NAME_CAPITALIZED = "projectNameCapitalized"
KEY_PROJECT_VERSION = "projectVersion"
KEY_PROJECT_EFFECTIVE_VERSION = "projectEffectiveVersion"
KEY_PROJECT_SNAPSHOT = "projectSnapshot"
KEY_PROJECT_DESCRIPTION = "projectDescription"
KEY_PROJECT_WEBSITE = "projectWebsite"
KEY_PROJECT_LICENSE = "projectLicense"
KEY_PROJECT_AUTHORS = "projectAuthorsBySpace"

# Context keys: release layer
KEY_REPO_HOST = "repoHost"
KEY_REPO_OWNER = "repoOwner"
KEY_REPO_NAME = "repoName"
KEY_REPO_URL = "repoUrl"
KEY_REPO_CLONE_URL = "repoCloneUrl"
KEY_TAG_NAME = "tagName"
KEY_RELEASE_NOTES_URL = "releaseNotesUrl"
KEY_CHANGELOG = "changelog"

# Context keys: artifact layer
KEY_DISTRIBUTION_NAME = "distributionName"
KEY_DISTRIBUTION_EXECUTABLE = "distributionExecutable"
KEY_ARTIFACT_FILE = "artifactFile"
KEY_ARTIFACT_FILE_NAME = "artifactFileName"
KEY_ARTIFACT_PATH = "artifactPath"
KEY_ARTIFACT_PLATFORM = "artifactPlatform"
KEY_ARTIFACT_CHECKSUM = "artifactChecksumSha256"
KEY_DISTRIBUTION_URL = "distributionUrl"

# Context keys: scoop layer
KEY_SCOOP_BUCKET_REPO_URL = "scoopBucketRepoUrl"
KEY_SCOOP_BUCKET_REPO_CLONE_URL = "scoopBucketRepoCloneUrl"
KEY_SCOOP_PACKAGE_NAME = "scoopPackageName"
KEY_SCOOP_CHECKVER_URL = "scoopCheckverUrl"
KEY_SCOOP_AUTOUPDATE_URL = "scoopAutoupdateUrl"
KEY_SCOOP_AUTOUPDATE_EXTRACT_DIR = "scoopAutoupdateExtractDir"

# Keys whose values carry the concrete version in self-updating fields
VERSION_BEARING_KEYS = (
    KEY_ARTIFACT_FILE,
    KEY_ARTIFACT_FILE_NAME,
    KEY_TAG_NAME,
)

# Default templates (Mustache)
DEFAULT_TAG_NAME = "v{{projectVersion}}"
DEFAULT_RELEASE_NOTES_URL = "{{repoUrl}}/releases/tag/{{tagName}}"
DEFAULT_DOWNLOAD_URL = "{{repoUrl}}/releases/download/{{tagName}}/{{artifactFile}}"
DEFAULT_SCOOP_CHECKVER_URL = (
    "https://api.{{repoHost}}/repos/{{repoOwner}}/{{repoName}}/releases/latest"
)
DEFAULT_SCOOP_AUTOUPDATE_URL = DEFAULT_DOWNLOAD_URL
DEFAULT_SCOOP_BUCKET_NAME = "scoop-bucket"
DEFAULT_ZULIP_SUBJECT = "{{projectNameCapitalized}} {{projectVersion}}"
DEFAULT_ZULIP_MESSAGE = (
    "\U0001F680 {{projectNameCapitalized}} {{projectVersion}} has been released! "
    "{{releaseNotesUrl}}"
)
DEFAULT_SDKMAN_API_HOST = "https://vendors.sdkman.io"
DEFAULT_SDKMAN_DOWNLOAD_URL = (
    "{{repoUrl}}/releases/download/{{tagName}}/{{projectName}}-{{projectVersion}}.zip"
)

# Artifact extensions, longest first so ".tar.gz" wins over ".gz"
ARCHIVE_EXTENSIONS = (".tar.gz", ".tar.xz", ".tgz", ".tar", ".zip", ".jar")

# Target kinds
KIND_PACKAGER = "packager"
KIND_ANNOUNCER = "announcer"

# HTTP
HTTP_TIMEOUT_SECONDS = 30.0
