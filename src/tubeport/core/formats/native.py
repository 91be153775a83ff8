"""Native line-delimited JSON format.

The application's own database files hold one JSON document per line,
each line terminated by ``\\n``.  The same bytes are the export artifact,
so native exports are byte copies of the store file and never pass
through :func:`encode_lines`.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from tubeport.exceptions import FormatError


def decode_lines(data: bytes) -> list[Any]:
    """Parse every non-blank line of *data* as JSON.

    Raises
    ------
    FormatError
        If *data* is not UTF-8 or any line is not valid JSON.  No
        partial result is returned.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(
            f"Invalid database file: not UTF-8 encoded ({exc.reason})",
        ) from exc

    records: list[Any] = []
    for number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise FormatError(
                f"Invalid database file: line {number} is not valid JSON ({exc.msg})",
                hint="The file may be truncated or not a database export.",
            ) from exc
    return records


def encode_lines(records: Iterable[Mapping[str, Any]]) -> bytes:
    """Serialize *records* one compact JSON object per line."""
    return b"".join(
        json.dumps(record, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        + b"\n"
        for record in records
    )
