"""Invidious REST backed implementation of :class:`~tubeport.core.protocols.ChannelInfoProvider`.

This module is the **only** place in the codebase that talks HTTP.
All ``requests`` exceptions are caught here and re-raised as
:class:`~tubeport.exceptions.ResolutionError` — nothing raw escapes the
infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

from tubeport.exceptions import EnvironmentError, ResolutionError
from tubeport.version import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"tubeport/{__version__}"


class InvidiousChannelProvider:
    """Concrete :class:`ChannelInfoProvider` backed by an Invidious instance.

    Usage::

        provider = InvidiousChannelProvider("https://yewtu.be")
        info = provider.fetch_channel_info("UCxxxxxxxxxxxxxxxxxxxxxx")

    Parameters
    ----------
    instance:
        Base URL of the Invidious instance, without trailing slash.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional pre-built ``requests.Session``; one is created lazily
        otherwise.
    """

    def __init__(
        self,
        instance: str,
        *,
        timeout: float = 10.0,
        session: Any | None = None,
    ) -> None:
        self._instance: str = instance.rstrip("/")
        self._timeout: float = timeout
        self._session: Any | None = session

    @property
    def instance(self) -> str:
        return self._instance

    def _get_session(self) -> Any:
        if self._session is None:
            try:
                import requests
            except ModuleNotFoundError as exc:
                raise EnvironmentError(
                    "requests is not installed. Install with: pip install requests",
                ) from exc
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
            self._session = session
        return self._session

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def fetch_channel_info(self, channel_id: str) -> dict[str, Any]:
        """Query ``/api/v1/channels/<id>`` and normalise the answer.

        Raises
        ------
        ResolutionError
            On network failure, a non-2xx response or an unexpected body.
        """
        try:
            import requests
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "requests is not installed. Install with: pip install requests",
            ) from exc

        url = f"{self._instance}/api/v1/channels/{channel_id}"
        logger.debug("GET %s", url)

        try:
            response = self._get_session().get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ResolutionError(
                f"Request to {self._instance} failed: {exc}",
                hint="Check your network or choose another Invidious instance.",
            ) from exc

        if not response.ok:
            raise ResolutionError(
                f"{self._instance} answered HTTP {response.status_code}: {response.text.strip()}",
            )

        try:
            body: Any = response.json()
        except ValueError as exc:
            raise ResolutionError(
                f"{self._instance} returned a non-JSON response.",
            ) from exc

        if not isinstance(body, dict):
            raise ResolutionError(f"{self._instance} returned an unexpected payload.")
        if "error" in body:
            raise ResolutionError(str(body["error"]))

        return {
            "author": body.get("author"),
            "thumbnails": [
                {"url": self._absolute_url(thumb["url"])}
                for thumb in body.get("authorThumbnails") or []
                if isinstance(thumb, dict) and isinstance(thumb.get("url"), str)
            ],
        }

    @staticmethod
    def _absolute_url(url: str) -> str:
        """Invidious returns protocol-relative thumbnail URLs."""
        if url.startswith("//"):
            return f"https:{url}"
        return url
