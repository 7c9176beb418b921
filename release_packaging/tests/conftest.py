"""Shared fixtures for release packaging tests."""

import pytest

from release_packaging.scripts.model import (
    Artifact,
    Distribution,
    GitService,
    Project,
    ReleaseModel,
    ScoopConfig,
    SdkmanConfig,
    ZulipConfig,
)


@pytest.fixture
def project():
    return Project(
        name="app",
        version="2.3.0",
        description="Sample application",
        website="https://acme.org/app",
        license="Apache-2.0",
        authors=["Jane Doe", "John Roe"],
    )


@pytest.fixture
def release():
    return GitService(owner="acme", name="app")


@pytest.fixture
def distribution():
    return Distribution(
        name="app",
        executable="app",
        artifacts=[
            Artifact(path="build/distributions/app-2.3.0.tar.gz", checksum="aaa111"),
            Artifact(path="build/distributions/app-2.3.0.zip", checksum="bbb222"),
        ],
    )


@pytest.fixture
def model(project, release, distribution):
    """Model with every target enabled and explicit credentials."""
    return ReleaseModel(
        project=project,
        release=release,
        distributions=[distribution],
        scoop=ScoopConfig(enabled=True),
        zulip=ZulipConfig(
            enabled=True,
            account="release-bot@acme.zulipchat.com",
            api_key="zulip-secret",
            api_host="https://acme.zulipchat.com/api/v1",
            channel="announce",
        ),
        sdkman=SdkmanConfig(
            enabled=True,
            consumer_key="sdk-key",
            consumer_token="sdk-token",
            candidate="app",
        ),
    )
