"""Tests for the sync result log and the sync log collaborator."""

import dataclasses
import logging
import tempfile
from pathlib import Path

import pytest

from vaultsync.sync.result import SyncAction, SyncOperation, SyncResult, SyncResultEntry
from vaultsync.sync.sync_log import SyncLog


# --- Result Log Tests ---


def test_entries_keep_insertion_order():
    result = SyncResult()
    result.add_entry("/a", "/tmp/a", SyncOperation.MATERIALIZE)
    result.add_entry("/b", "/tmp/b", SyncOperation.DELETE)
    result.add_entry("/a", "/tmp/a", SyncOperation.MATERIALIZE, SyncAction.UPDATED)

    assert [e.logical_path for e in result] == ["/a", "/b", "/a"]
    assert len(result) == 3
    assert len(result.by_logical_path("/a")) == 2


def test_default_actions():
    result = SyncResult()
    added = result.add_entry("/a", "/tmp/a", SyncOperation.MATERIALIZE)
    deleted = result.add_entry("/b", "/tmp/b", SyncOperation.DELETE)

    assert added.action == SyncAction.ADDED
    assert deleted.action == SyncAction.DELETED


def test_entries_are_immutable():
    result = SyncResult()
    entry = result.add_entry("/a", Path("/tmp/a"), SyncOperation.MATERIALIZE)

    assert entry.physical_path == "/tmp/a"
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.logical_path = "/changed"


def test_entries_view_is_a_copy():
    result = SyncResult()
    result.add_entry("/a", "/tmp/a", SyncOperation.MATERIALIZE)
    view = result.entries
    result.add_entry("/b", "/tmp/b", SyncOperation.MATERIALIZE)

    assert len(view) == 1
    assert len(result.entries) == 2


def test_filters_and_summary():
    result = SyncResult()
    assert not result
    assert result.summary() == "no changes"

    result.add_entry("/a", "/tmp/a", SyncOperation.MATERIALIZE)
    result.add_entry("/b", "/tmp/b", SyncOperation.MATERIALIZE, SyncAction.UPDATED)
    result.add_entry("/c", "/tmp/c", SyncOperation.DELETE)

    assert [e.logical_path for e in result.materialized] == ["/a", "/b"]
    assert [e.logical_path for e in result.deleted] == ["/c"]
    assert result.by_physical_path(Path("/tmp/b"))[0].action == SyncAction.UPDATED
    assert result.summary() == "1 added, 1 updated, 1 deleted"


def test_entry_str():
    entry = SyncResultEntry("/a", "/tmp/a", SyncOperation.MATERIALIZE, SyncAction.UPDATED)
    assert str(entry) == "U /tmp/a (/a)"


# --- Sync Log Tests ---


def test_sync_log_writes_lines_to_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        log_file = Path(tmpdir) / "logs" / ".vlt-sync.log"
        sync_log = SyncLog(log_file=log_file)

        message = sync_log.log("%s file://%s", "A", "/tmp/a")
        sync_log.error("sync cannot create directory /tmp/b")

        assert message == "A file:///tmp/a"
        lines = log_file.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith(" A file:///tmp/a")
        assert lines[1].endswith(" E sync cannot create directory /tmp/b")


def test_sync_log_uses_injected_logger(caplog):
    logger = logging.getLogger("vaultsync.test")
    sync_log = SyncLog(logger=logger)

    with caplog.at_level(logging.INFO, logger="vaultsync.test"):
        sync_log.log("D file://%s", "/tmp/gone")

    assert caplog.records[0].name == "vaultsync.test"
    assert caplog.records[0].getMessage() == "D file:///tmp/gone"
