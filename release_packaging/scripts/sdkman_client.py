"""
SDKMAN vendor API client.

Publishes a candidate version, optionally marks it as the default, and
announces it. Authentication uses the vendor consumer key/token headers.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from . import config
from .credentials import Secret
from .errors import DeliveryError

logger = logging.getLogger(__name__)


class SdkmanClientError(DeliveryError):
    """Raised when the SDKMAN vendor API rejects a call or cannot be reached."""
    pass


class SdkmanClient:
    """
    SDKMAN vendor API client.

    A major release calls release, default and announce; a minor release
    skips the default switch.
    """

    def __init__(
        self,
        consumer_key: Secret,
        consumer_token: Secret,
        api_host: str = config.DEFAULT_SDKMAN_API_HOST,
        timeout: float = config.HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.consumer_key = consumer_key
        self.consumer_token = consumer_token
        self.api_host = api_host.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Consumer-Key": self.consumer_key.reveal() or "",
            "Consumer-Token": self.consumer_token.reveal() or "",
            "Accept": "application/json",
        }

    def _call(self, client: httpx.Client, method: str, path: str, payload: Dict[str, Any]) -> None:
        try:
            resp = client.request(
                method,
                f"{self.api_host}{path}",
                json=payload,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise SdkmanClientError(f"SDKMAN {path} request failed: {e}") from e

        if resp.is_error:
            raise SdkmanClientError(
                f"SDKMAN {path} failed: HTTP {resp.status_code}",
                status_code=resp.status_code,
                response=resp.text,
            )
        logger.debug(f"SDKMAN {method} {path} -> {resp.status_code}")

    def publish(
        self,
        candidate: str,
        version: str,
        download_url: str,
        release_notes_url: str,
        major: bool = True,
    ) -> None:
        """
        Release and announce a candidate version.

        Args:
            candidate: SDKMAN candidate name
            version: Version being released
            download_url: URL of the candidate archive
            release_notes_url: URL included in the announcement
            major: Whether to make this version the default

        Raises:
            SdkmanClientError: On the first failing call
        """
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            self._call(client, "POST", "/release", {
                "candidate": candidate,
                "version": version,
                "url": download_url,
            })
            if major:
                self._call(client, "PUT", "/default", {
                    "candidate": candidate,
                    "version": version,
                })
            self._call(client, "POST", "/announce/struct", {
                "candidate": candidate,
                "version": version,
                "url": release_notes_url,
            })
