"""Tests for the line-delimited JSON stores and the file gateway (infra/).

Every test works inside ``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from factories import history_record, profile_record

from tubeport.core.models import HistoryEntry, Profile, Subscription
from tubeport.exceptions import FileAccessError, FormatError
from tubeport.infra.file_gateway import LocalFileGateway
from tubeport.infra.jsonl_store import JsonLinesHistoryStore, JsonLinesProfileStore


def _lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text("utf-8").splitlines()]


class TestLocalFileGateway:
    def test_write_then_read(self, tmp_path: Path) -> None:
        gateway = LocalFileGateway()
        target = tmp_path / "nested" / "out.db"
        gateway.write_bytes(target, b"data")

        assert gateway.read_bytes(target) == b"data"
        assert not (target.parent / ".out.db.tmp").exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError, match="missing.db"):
            LocalFileGateway().read_bytes(tmp_path / "missing.db")

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(FileAccessError):
            LocalFileGateway().write_bytes(blocker / "child.db", b"data")

    def test_append_line_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "store.db"
        gateway = LocalFileGateway()
        gateway.append_line(target, b"one\n")
        gateway.append_line(target, b"two\n")

        assert target.read_bytes() == b"one\ntwo\n"

    def test_append_line_after_unterminated_line(self, tmp_path: Path) -> None:
        target = tmp_path / "store.db"
        target.write_bytes(b"one")
        LocalFileGateway().append_line(target, b"two\n")

        assert target.read_bytes() == b"one\ntwo\n"

    def test_append_line_unwritable(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(FileAccessError, match="child.db"):
            LocalFileGateway().append_line(blocker / "child.db", b"data\n")


class TestProfileStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonLinesProfileStore(tmp_path / "profiles.db").list_profiles() == []

    def test_update_then_list(self, tmp_path: Path) -> None:
        store = JsonLinesProfileStore(tmp_path / "profiles.db")
        profile = Profile.default().with_subscriptions_appended((Subscription("UC1", "One"),))
        store.update_profile(profile)

        assert store.list_profiles() == [profile]

    def test_upsert_replaces_by_id_and_keeps_order(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.db"
        store = JsonLinesProfileStore(path)
        store.update_profile(Profile.from_record(profile_record(_id="a", name="A")))
        store.update_profile(Profile.from_record(profile_record(_id="b", name="B")))
        store.update_profile(Profile.from_record(profile_record(_id="a", name="A2")))

        assert [(p.id, p.name) for p in store.list_profiles()] == [("a", "A2"), ("b", "B")]
        assert len(path.read_text("utf-8").splitlines()) == 3

    def test_append_only_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.db"
        path.write_text(
            "\n".join(
                [
                    json.dumps(profile_record(_id="a", name="old")),
                    json.dumps(profile_record(_id="b")),
                    json.dumps(profile_record(_id="a", name="new")),
                    json.dumps({"$$indexCreated": {"fieldName": "name"}}),
                    json.dumps({"_id": "b", "$$deleted": True}),
                ],
            )
            + "\n",
            "utf-8",
        )

        profiles = JsonLinesProfileStore(path).list_profiles()
        assert [(p.id, p.name) for p in profiles] == [("a", "new")]

    def test_unreadable_document_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.db"
        path.write_text(
            json.dumps(profile_record(_id="bad", subscriptions="x")) + "\n"
            + json.dumps(profile_record(_id="good")) + "\n",
            "utf-8",
        )
        assert [p.id for p in JsonLinesProfileStore(path).list_profiles()] == ["good"]

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.db"
        path.write_bytes(b"{oops\n")
        with pytest.raises(FormatError, match="corrupt") as exc_info:
            JsonLinesProfileStore(path).list_profiles()
        assert exc_info.value.hint

    def test_source_path(self, tmp_path: Path) -> None:
        assert JsonLinesProfileStore(tmp_path / "p.db").source_path == tmp_path / "p.db"


class TestHistoryStore:
    def test_update_writes_native_record(self, tmp_path: Path) -> None:
        path = tmp_path / "history.db"
        store = JsonLinesHistoryStore(path)
        store.update_history(HistoryEntry.from_record(history_record()))

        assert _lines(path) == [history_record()]

    def test_list_skips_incomplete(self, tmp_path: Path) -> None:
        path = tmp_path / "history.db"
        path.write_text(
            json.dumps({"_id": "partial"}) + "\n" + json.dumps(history_record(_id="v2")) + "\n",
            "utf-8",
        )
        assert [e.id for e in JsonLinesHistoryStore(path).list_history()] == ["v2"]


class TestAppendOnlyWrites:
    def test_upserts_append_without_reloading(self, tmp_path: Path) -> None:
        path = tmp_path / "history.db"
        files = MagicMock(wraps=LocalFileGateway())
        store = JsonLinesHistoryStore(path, files)

        for i in range(50):
            store.update_history(HistoryEntry.from_record(history_record(_id=f"v{i}")))

        files.read_bytes.assert_not_called()
        files.write_bytes.assert_not_called()
        assert files.append_line.call_count == 50
        assert [e.id for e in store.list_history()] == [f"v{i}" for i in range(50)]

    def test_append_after_missing_trailing_newline(self, tmp_path: Path) -> None:
        path = tmp_path / "history.db"
        path.write_text(json.dumps(history_record(_id="v1")), "utf-8")
        store = JsonLinesHistoryStore(path)
        store.update_history(HistoryEntry.from_record(history_record(_id="v2")))

        assert [line["_id"] for line in _lines(path)] == ["v1", "v2"]


class TestNonStringIds:
    def test_load_ignores_unhashable_ids(self, tmp_path: Path) -> None:
        path = tmp_path / "history.db"
        path.write_text(
            json.dumps(history_record(_id={"x": 1})) + "\n"
            + json.dumps(history_record(_id=["a"])) + "\n"
            + json.dumps(history_record(_id="ok")) + "\n",
            "utf-8",
        )
        assert [e.id for e in JsonLinesHistoryStore(path).list_history()] == ["ok"]


    def test_profile_with_object_id_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.db"
        path.write_text(
            json.dumps(profile_record(_id={"x": 1})) + "\n"
            + json.dumps(profile_record(_id="allChannels")) + "\n",
            "utf-8",
        )
        assert [p.id for p in JsonLinesProfileStore(path).list_profiles()] == ["allChannels"]
