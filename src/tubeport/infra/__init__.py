"""Infrastructure layer — external system integration.

This layer wraps all interaction with Invidious, yt-dlp and the local
filesystem.  Every raw third-party exception must be caught here and
re-raised as a :class:`~tubeport.exceptions.TubeportError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from tubeport.infra.file_gateway import LocalFileGateway
from tubeport.infra.invidious_provider import InvidiousChannelProvider
from tubeport.infra.jsonl_store import JsonLinesHistoryStore, JsonLinesProfileStore
from tubeport.infra.ytdlp_channel_provider import YtDlpChannelProvider

__all__: list[str] = [
    "InvidiousChannelProvider",
    "JsonLinesHistoryStore",
    "JsonLinesProfileStore",
    "LocalFileGateway",
    "YtDlpChannelProvider",
]
