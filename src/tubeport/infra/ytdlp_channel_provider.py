"""yt-dlp backed implementation of :class:`~tubeport.core.protocols.ChannelInfoProvider`.

This module is the **only** place in the codebase that imports ``yt_dlp``.
It scrapes the channel page directly, without any third-party API in
between.  All yt-dlp exceptions are caught here and re-raised as
:class:`~tubeport.exceptions.ResolutionError`.
"""

from __future__ import annotations

from typing import Any

from tubeport.exceptions import EnvironmentError, ResolutionError

CHANNEL_URL = "https://www.youtube.com/channel/{channel_id}"


class YtDlpChannelProvider:
    """Concrete :class:`ChannelInfoProvider` backed by the yt-dlp Python API.

    This class satisfies the :class:`~tubeport.core.protocols.ChannelInfoProvider`
    protocol structurally — no explicit inheritance required.
    """

    @staticmethod
    def _build_opts() -> dict[str, Any]:
        """Return yt-dlp options for channel-page metadata only."""
        return {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "skip_download": True,
            # Only the channel header is needed, not its uploads.
            "extract_flat": "in_playlist",
            "playlistend": 1,
        }

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def fetch_channel_info(self, channel_id: str) -> dict[str, Any]:
        """Extract channel name and avatars for *channel_id*.

        Raises
        ------
        ResolutionError
            For any extraction failure.
        """
        try:
            import yt_dlp
            import yt_dlp.utils
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
            ) from exc

        url = CHANNEL_URL.format(channel_id=channel_id)
        try:
            with yt_dlp.YoutubeDL(self._build_opts()) as ydl:
                info: Any = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as exc:
            raise ResolutionError(
                str(exc),
                hint="The channel may have been removed or renamed.",
            ) from exc
        except Exception as exc:
            raise ResolutionError(f"Unexpected yt-dlp error: {exc}") from exc

        if not isinstance(info, dict):
            raise ResolutionError("yt-dlp returned no channel metadata.")

        author = info.get("channel") or info.get("uploader") or info.get("title")
        if not author:
            raise ResolutionError(f"No channel name found for {channel_id}.")

        return {"author": author, "thumbnails": self._avatars(info.get("thumbnails"))}

    @staticmethod
    def _avatars(raw: object) -> list[dict[str, str]]:
        """Keep avatar images (banners excluded) in yt-dlp's order."""
        if not isinstance(raw, list):
            return []
        thumbs = [t for t in raw if isinstance(t, dict) and isinstance(t.get("url"), str)]
        avatars = [t for t in thumbs if "avatar" in str(t.get("id", ""))]
        return [{"url": t["url"]} for t in (avatars or thumbs)]
