"""Regression tests for optional backend dependency boundaries.

These tests ensure CLI paths that do not resolve channels still work
when yt-dlp or requests are absent, while the providers themselves fail
cleanly with a typed environment error.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tubeport.cli import exit_codes
from tubeport.cli.app import main
from tubeport.exceptions import EnvironmentError
from tubeport.infra.invidious_provider import InvidiousChannelProvider
from tubeport.infra.ytdlp_channel_provider import YtDlpChannelProvider


def _remove_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "yt_dlp", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.utils", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.version", None)


def _remove_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "requests", None)


def test_help_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_backends(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _remove_ytdlp(monkeypatch)
    _remove_requests(monkeypatch)
    code = main(["--data-dir", str(tmp_path), "doctor"])
    assert code == exit_codes.SUCCESS


def test_history_export_works_without_backends(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
) -> None:
    _remove_ytdlp(monkeypatch)
    _remove_requests(monkeypatch)
    (tmp_path / "history.db").write_bytes(b'{"_id":"v1"}\n')
    out = tmp_path / "out"
    out.mkdir()

    code = main(["--data-dir", str(tmp_path), "export-history", str(out)])

    assert code == exit_codes.SUCCESS
    exported = list(out.iterdir())
    assert len(exported) == 1
    assert exported[0].read_bytes() == b'{"_id":"v1"}\n'


def test_channel_lookup_raises_environment_error_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_ytdlp(monkeypatch)
    provider = YtDlpChannelProvider()

    with pytest.raises(EnvironmentError, match="yt-dlp is not installed"):
        provider.fetch_channel_info("UC123")


def test_channel_lookup_raises_environment_error_without_requests(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_requests(monkeypatch)
    provider = InvidiousChannelProvider("https://example.org")

    with pytest.raises(EnvironmentError, match="requests is not installed"):
        provider.fetch_channel_info("UC123")
