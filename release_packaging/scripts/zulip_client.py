"""
Zulip API client for release announcements.

Posts a stream message through the Zulip REST API using basic
authentication (bot account email + API key).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from . import config
from .credentials import Secret
from .errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass
class ZulipMessage:
    """A stream message to post."""
    channel: str
    subject: str
    content: str


class ZulipClientError(DeliveryError):
    """Raised when Zulip rejects a message or cannot be reached."""
    pass


class ZulipClient:
    """
    Minimal Zulip client.

    Example usage:
        client = ZulipClient("bot@example.zulipchat.com", api_key,
                             "https://example.zulipchat.com/api/v1")
        client.send(ZulipMessage("announce", "app 1.0.0", "Released!"))
    """

    def __init__(
        self,
        account: str,
        api_key: Secret,
        api_host: str,
        timeout: float = config.HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the Zulip client.

        Args:
            account: Bot account email
            api_key: Resolved API key
            api_host: API base URL, e.g. "https://example.zulipchat.com/api/v1"
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.account = account
        self.api_key = api_key
        self.api_host = api_host.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def send(self, message: ZulipMessage) -> Dict[str, Any]:
        """
        Post a stream message.

        Returns:
            Decoded JSON response

        Raises:
            ZulipClientError: On transport failure or non-2xx response
        """
        url = f"{self.api_host}/messages"
        data = {
            "type": "stream",
            "to": message.channel,
            "subject": message.subject,
            "content": message.content,
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(
                    url,
                    data=data,
                    auth=(self.account, self.api_key.reveal() or ""),
                )
        except httpx.HTTPError as e:
            raise ZulipClientError(f"Zulip request failed: {e}") from e

        if resp.is_error:
            raise ZulipClientError(
                f"Zulip rejected message: HTTP {resp.status_code}",
                status_code=resp.status_code,
                response=resp.text,
            )

        logger.debug(f"Zulip accepted message for stream {message.channel}")
        return resp.json() if resp.content else {}
