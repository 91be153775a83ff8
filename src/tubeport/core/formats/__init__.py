"""Format codecs — one decode/encode pair per interchange format.

Every function here is a **pure** transformation between bytes and
domain values.  Container-level problems raise
:class:`~tubeport.exceptions.FormatError`; per-record problems are left
to the caller.
"""

from tubeport.core.formats.native import decode_lines, encode_lines
from tubeport.core.formats.newpipe import decode_newpipe, encode_newpipe
from tubeport.core.formats.opml import decode_opml, encode_opml

__all__: list[str] = [
    "decode_lines",
    "decode_newpipe",
    "decode_opml",
    "encode_lines",
    "encode_newpipe",
    "encode_opml",
]
