"""End-to-end CLI runs against real files in ``tmp_path``.

Only the channel backends are patched; stores, codecs, the orchestrator
and the terminal adapters run for real.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from factories import history_record

from tubeport.cli import exit_codes
from tubeport.cli.app import main
from tubeport.core.formats import encode_lines
from tubeport.exceptions import ResolutionError

_YTDLP_FETCH = "tubeport.infra.ytdlp_channel_provider.YtDlpChannelProvider.fetch_channel_info"
_INVIDIOUS_FETCH = "tubeport.infra.invidious_provider.InvidiousChannelProvider.fetch_channel_info"


def _fake_lookup(channel_id: str) -> dict[str, Any]:
    return {
        "author": f"Resolved {channel_id}",
        "thumbnails": [{"url": f"https://t/{channel_id}/s"}, {"url": f"https://t/{channel_id}/m"}],
    }


def _profiles(data_dir: Path) -> list[dict[str, Any]]:
    return [json.loads(line) for line in (data_dir / "profiles.db").read_text("utf-8").splitlines()]


def test_newpipe_import_creates_default_profile(tmp_path: Path) -> None:
    source = tmp_path / "newpipe.json"
    source.write_text(
        json.dumps(
            {
                "subscriptions": [
                    {"service_id": 0, "url": "https://www.youtube.com/channel/UC1", "name": "One"},
                    {"service_id": 0, "url": "https://www.youtube.com/channel/UC2", "name": "Two"},
                ],
            },
        ),
        "utf-8",
    )

    with patch(_YTDLP_FETCH, side_effect=_fake_lookup):
        code = main(["--data-dir", str(tmp_path), "import-subscriptions", "newpipe", str(source)])

    assert code == exit_codes.SUCCESS
    [profile] = _profiles(tmp_path)
    assert profile["_id"] == "allChannels"
    assert profile["subscriptions"] == [
        {"id": "UC1", "name": "Resolved UC1", "thumbnail": "https://t/UC1/m"},
        {"id": "UC2", "name": "Resolved UC2", "thumbnail": "https://t/UC2/m"},
    ]


def test_opml_import_falls_back_to_invidious(tmp_path: Path) -> None:
    source = tmp_path / "subs.opml"
    source.write_text(
        '<opml version="1.1"><body><outline text="YouTube Subscriptions">'
        '<outline text="Feed" title="Feed" type="rss" '
        'xmlUrl="https://www.youtube.com/feeds/videos.xml?channel_id=UC9"/>'
        "</outline></body></opml>",
        "utf-8",
    )

    with patch(_YTDLP_FETCH, side_effect=ResolutionError("scrape failed")), \
            patch(_INVIDIOUS_FETCH, side_effect=_fake_lookup):
        code = main(["--data-dir", str(tmp_path), "import-subscriptions", "youtube", str(source)])

    assert code == exit_codes.SUCCESS
    assert _profiles(tmp_path)[0]["subscriptions"][0]["name"] == "Resolved UC9"


def test_history_round_trip_through_cli(tmp_path: Path) -> None:
    source = tmp_path / "in.db"
    source.write_bytes(encode_lines([history_record(extra="dropped")]))
    out_dir = tmp_path / "exports"
    out_dir.mkdir()

    assert main(["--data-dir", str(tmp_path), "import-history", str(source)]) == exit_codes.SUCCESS
    assert main(["--data-dir", str(tmp_path), "export-history", str(out_dir)]) == exit_codes.SUCCESS

    [exported] = out_dir.iterdir()
    assert exported.name.startswith("freetube-history-")
    assert [json.loads(line) for line in exported.read_text("utf-8").splitlines()] == [history_record()]


def test_corrupt_import_file_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "bad.json"
    source.write_text("{not json", "utf-8")

    code = main(["--data-dir", str(tmp_path), "import-subscriptions", "newpipe", str(source)])

    assert code == exit_codes.GENERAL_ERROR
    assert not (tmp_path / "profiles.db").exists()
    assert "Invalid subscriptions file" in capsys.readouterr().err


def test_bracketed_keys_and_bad_ids_do_not_abort_import(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    source = tmp_path / "in.db"
    source.write_bytes(
        encode_lines(
            [
                history_record(_id="v1", **{"[/x]": 1}),
                history_record(_id={"x": 1}),
                history_record(_id="v3"),
            ],
        ),
    )

    code = main(["--data-dir", str(tmp_path), "import-history", str(source)])

    assert code == exit_codes.SUCCESS
    stored = [json.loads(line)["_id"] for line in (tmp_path / "history.db").read_text("utf-8").splitlines()]
    assert stored == ["v1", "v3"]
    err = capsys.readouterr().err
    assert "Unknown data key: [/x]" in err
    assert "1 skipped" in err
