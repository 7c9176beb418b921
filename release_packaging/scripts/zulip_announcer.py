"""
Zulip announcer.

Renders the configured subject and message against the release context
and posts them to a Zulip stream.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import config
from .context_builder import build_context
from .errors import ConfigurationError
from .model import ReleaseModel
from .target import RenderedMessage, RenderedOutput, Target
from .template_renderer import render_field
from .zulip_client import ZulipClient, ZulipMessage

logger = logging.getLogger(__name__)


class ZulipAnnouncer(Target):
    """Announces a release on a Zulip stream."""

    kind = config.KIND_ANNOUNCER
    tool_name = "zulip"

    def __init__(
        self,
        model: ReleaseModel,
        client_factory: Optional[Callable[..., ZulipClient]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(model, environ)
        self.announcer = model.zulip
        self.client_factory = client_factory or ZulipClient

    def is_enabled(self) -> bool:
        return self.announcer.enabled

    def validate(self) -> None:
        """
        Check settings needed before any network use.

        Raises:
            ConfigurationError: Listing every missing setting
        """
        missing = []
        if not self.announcer.account:
            missing.append("account")
        if not self.announcer.api_host:
            missing.append("apiHost")
        if not self.announcer.channel:
            missing.append("channel")
        if not self.announcer.resolved_api_key(self.environ).is_set():
            missing.append(f"apiKey (or {config.ENV_ZULIP_API_KEY})")
        if missing:
            raise ConfigurationError(
                f"Missing Zulip settings: {', '.join(missing)}", target=self.name
            )

    def build_context(self) -> Dict[str, Any]:
        self.validate()
        logger.debug(f"{self.name} settings: {self.announcer.as_dict(self.environ)}")
        return build_context(self.model.project, self.model.release)

    def render(self, context: Mapping[str, Any]) -> List[RenderedOutput]:
        subject = render_field(self.announcer.subject, context, target=self.name, field="subject")
        body = render_field(self.announcer.message, context, target=self.name, field="message")
        return [RenderedMessage(channel=self.announcer.channel, subject=subject, body=body)]

    def deliver(self, outputs: List[RenderedOutput], dry_run: bool = False) -> None:
        for output in outputs:
            if not isinstance(output, RenderedMessage):
                continue
            logger.info(f"Announcing on Zulip: {output.subject}\n{output.body}")
            if dry_run:
                logger.info(f"[dry-run] {self.name}: message not sent")
                continue

            client = self.client_factory(
                self.announcer.account,
                self.announcer.resolved_api_key(self.environ),
                self.announcer.api_host,
            )
            client.send(ZulipMessage(output.channel, output.subject, output.body))
