"""
SDKMAN announcer.

Publishes the release as a new SDKMAN candidate version. Major releases
also become the candidate's default version.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import config
from .context_builder import build_context
from .errors import ConfigurationError
from .model import ReleaseModel
from .sdkman_client import SdkmanClient
from .target import RenderedMessage, RenderedOutput, Target
from .template_renderer import render_field

logger = logging.getLogger(__name__)


class SdkmanAnnouncer(Target):
    """Announces a release to SDKMAN."""

    kind = config.KIND_ANNOUNCER
    tool_name = "sdkman"

    def __init__(
        self,
        model: ReleaseModel,
        client_factory: Optional[Callable[..., SdkmanClient]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(model, environ)
        self.announcer = model.sdkman
        self.client_factory = client_factory or SdkmanClient

    def is_enabled(self) -> bool:
        return self.announcer.enabled

    def validate(self) -> None:
        missing = []
        if not self.announcer.candidate:
            missing.append("candidate")
        if not self.announcer.resolved_consumer_key(self.environ).is_set():
            missing.append(f"consumerKey (or {config.ENV_SDKMAN_CONSUMER_KEY})")
        if not self.announcer.resolved_consumer_token(self.environ).is_set():
            missing.append(f"consumerToken (or {config.ENV_SDKMAN_CONSUMER_TOKEN})")
        if missing:
            raise ConfigurationError(
                f"Missing SDKMAN settings: {', '.join(missing)}", target=self.name
            )

    def build_context(self) -> Dict[str, Any]:
        self.validate()
        logger.debug(f"{self.name} settings: {self.announcer.as_dict(self.environ)}")
        return build_context(self.model.project, self.model.release)

    def render(self, context: Mapping[str, Any]) -> List[RenderedOutput]:
        release_notes_url = render_field(
            self.announcer.release_notes_url, context,
            target=self.name, field="releaseNotesUrl",
        )
        download_url = render_field(
            self.announcer.download_url, context,
            target=self.name, field="downloadUrl",
        )
        return [RenderedMessage(
            channel=self.announcer.candidate,
            subject=context[config.KEY_PROJECT_VERSION],
            body=release_notes_url,
            link=download_url,
        )]

    def deliver(self, outputs: List[RenderedOutput], dry_run: bool = False) -> None:
        for output in outputs:
            if not isinstance(output, RenderedMessage):
                continue
            kind = "major" if self.announcer.major else "minor"
            logger.info(
                f"Announcing {kind} release {output.channel} {output.subject} on SDKMAN"
            )
            if dry_run:
                logger.info(f"[dry-run] {self.name}: announcement not sent")
                continue

            client = self.client_factory(
                self.announcer.resolved_consumer_key(self.environ),
                self.announcer.resolved_consumer_token(self.environ),
                self.announcer.api_host,
            )
            client.publish(
                output.channel,
                output.subject,
                download_url=output.link,
                release_notes_url=output.body,
                major=self.announcer.major,
            )
