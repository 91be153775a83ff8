"""Channel resolver — turns a bare channel id into display metadata.

Two interchangeable backends can answer the question.  The preferred
one is asked first; when it fails and fallback is enabled the other one
is asked exactly once.  Failures are reported through the
:class:`~tubeport.core.protocols.Notifier` and never raised: the worst
outcome of :meth:`ChannelResolver.resolve` is an empty
:class:`~tubeport.core.models.ChannelInfo`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from tubeport.core.models import Backend, ChannelInfo
from tubeport.core.protocols import ChannelInfoProvider, Notifier
from tubeport.exceptions import ResolutionError

logger = logging.getLogger(__name__)

ERROR_NOTICE_MS: int = 10_000
"""How long backend error notices stay visible."""


class ChannelResolver:
    """Resolve channel ids through a preferred backend with optional fallback.

    Parameters
    ----------
    providers:
        One provider per :class:`Backend`.  A backend without a provider
        is treated as failing.
    preferred:
        Backend asked first.
    fallback:
        Whether the other backend is asked when the preferred one fails.
    notifier:
        Receives error and fallback notices.
    """

    def __init__(
        self,
        providers: Mapping[Backend, ChannelInfoProvider],
        *,
        preferred: Backend,
        fallback: bool,
        notifier: Notifier,
    ) -> None:
        self._providers: dict[Backend, ChannelInfoProvider] = dict(providers)
        self._preferred: Backend = preferred
        self._fallback: bool = fallback
        self._notifier: Notifier = notifier

    @property
    def preferred(self) -> Backend:
        return self._preferred

    @property
    def fallback(self) -> bool:
        return self._fallback

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, channel_id: str) -> ChannelInfo:
        """Return display metadata for *channel_id*; never raises for backend errors."""
        visited: set[Backend] = set()
        backend: Backend | None = self._preferred

        while backend is not None and backend not in visited:
            visited.add(backend)
            try:
                payload = await self._fetch(backend, channel_id)
                return self._to_channel_info(payload)
            except ResolutionError as exc:
                self._report_failure(backend, exc)

            if not self._fallback or len(visited) > 1:
                break
            backend = backend.other
            logger.debug("Resolving %s via %s after failure", channel_id, backend.value)
            self._notifier.notify(f"Falling back to the {backend.label}")

        return ChannelInfo.empty()

    # ------------------------------------------------------------------
    # Backend delegation (safe boundary)
    # ------------------------------------------------------------------

    async def _fetch(self, backend: Backend, channel_id: str) -> dict[str, Any]:
        """Call *backend* off the event loop; only ResolutionError escapes."""
        provider = self._providers.get(backend)
        if provider is None:
            raise ResolutionError(f"No provider configured for the {backend.label}.")
        try:
            return await asyncio.to_thread(provider.fetch_channel_info, channel_id)
        except ResolutionError:
            raise
        except Exception as exc:
            raise ResolutionError(f"Unexpected backend error: {exc}") from exc

    def _report_failure(self, backend: Backend, exc: ResolutionError) -> None:
        logger.warning("%s failed: %s", backend.label, exc)
        self._notifier.notify(
            f"{backend.label} error: {exc}",
            duration_ms=ERROR_NOTICE_MS,
            copy_text=str(exc),
        )

    # ------------------------------------------------------------------
    # Raw payload → domain value (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _to_channel_info(payload: Any) -> ChannelInfo:
        """Map a backend payload to :class:`ChannelInfo`.

        The second thumbnail is the avatar size the application displays;
        with fewer than two the last available one is used.
        """
        if not isinstance(payload, Mapping) or "author" not in payload:
            raise ResolutionError("Backend returned a malformed channel payload.")

        thumbnails = payload.get("thumbnails")
        urls: list[str] = []
        if isinstance(thumbnails, list):
            urls = [
                thumb["url"]
                for thumb in thumbnails
                if isinstance(thumb, Mapping) and isinstance(thumb.get("url"), str)
            ]

        thumbnail_url: str | None = None
        if len(urls) > 1:
            thumbnail_url = urls[1]
        elif urls:
            thumbnail_url = urls[-1]

        author = payload["author"]
        return ChannelInfo(
            author_name=str(author) if author is not None else None,
            thumbnail_url=thumbnail_url,
        )
