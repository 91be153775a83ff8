"""tubeport — subscription and watch-history import/export.

Converts profiles, channel subscriptions and watch history between the
native line-delimited database format, OPML feed lists and NewPipe
subscription exports.
"""

from tubeport.version import __version__

__all__: list[str] = ["__version__"]
