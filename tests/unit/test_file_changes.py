"""Tests for name-status parsing and lazy loading of stash file lists."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from shelfkit.core.file_changes import (
    AppFileStatusKind,
    CommittedFileChange,
    map_status,
    parse_changed_files,
)
from shelfkit.core.repository import Repository
from shelfkit.core.stash.files import get_stashed_files, load_stash_entry_files
from shelfkit.core.stash.models import StashEntry, StashedChangesLoadState, StashedFileChanges
from shelfkit.errors import GitError

SHA = "e" * 40
REPO = Repository(Path("/tmp/repo"))


class TestParseChangedFiles:
    def test_simple_statuses(self):
        stdout = "M\0README.md\0A\0new.txt\0D\0old.txt\0"
        changes = parse_changed_files(stdout, SHA)

        assert changes == [
            CommittedFileChange(path="README.md", status=AppFileStatusKind.MODIFIED, commitish=SHA),
            CommittedFileChange(path="new.txt", status=AppFileStatusKind.NEW, commitish=SHA),
            CommittedFileChange(path="old.txt", status=AppFileStatusKind.DELETED, commitish=SHA),
        ]

    def test_rename_carries_old_path(self):
        changes = parse_changed_files("R087\0src/a.py\0src/b.py\0M\0c.py\0", SHA)

        assert changes[0].status == AppFileStatusKind.RENAMED
        assert changes[0].old_path == "src/a.py"
        assert changes[0].path == "src/b.py"
        assert changes[1].path == "c.py"

    def test_copy_carries_old_path(self):
        changes = parse_changed_files("C100\0a.txt\0b.txt\0", SHA)
        assert changes == [
            CommittedFileChange(path="b.txt", status=AppFileStatusKind.COPIED, commitish=SHA, old_path="a.txt")
        ]

    def test_paths_with_spaces_and_newlines(self):
        changes = parse_changed_files("M\0dir with space/file\nname.txt\0", SHA)
        assert changes[0].path == "dir with space/file\nname.txt"

    def test_empty_output(self):
        assert parse_changed_files("", SHA) == []

    def test_truncated_rename_is_dropped(self):
        assert parse_changed_files("M\0a.txt\0R100\0only-old.txt\0", SHA) == [
            CommittedFileChange(path="a.txt", status=AppFileStatusKind.MODIFIED, commitish=SHA)
        ]

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            ("T", AppFileStatusKind.TYPE_CHANGED),
            ("U", AppFileStatusKind.UNMERGED),
            ("X", AppFileStatusKind.UNKNOWN),
            ("", AppFileStatusKind.UNKNOWN),
        ],
    )
    def test_map_status(self, code, kind):
        assert map_status(code) == kind

    def test_to_dict(self):
        change = CommittedFileChange(path="b", status=AppFileStatusKind.RENAMED, commitish=SHA, old_path="a")
        assert change.to_dict() == {"path": "b", "status": "renamed", "oldPath": "a", "commitish": SHA}


class TestLoadStashEntryFiles:
    @pytest.mark.asyncio
    async def test_get_stashed_files_invokes_stash_show(self, make_result):
        mock = AsyncMock(return_value=make_result(stdout="M\0README.md\0"))
        with patch("shelfkit.core.stash.files.run_git", new=mock):
            files = await get_stashed_files(REPO, SHA)

        assert mock.await_args.args[0] == ["stash", "show", "--name-status", "-z", "-M", SHA]
        assert [f.path for f in files] == ["README.md"]

    @pytest.mark.asyncio
    async def test_load_marks_entry_loaded(self, make_result):
        entry = StashEntry(name="stash@{0}", stash_sha=SHA, branch_name="main")
        mock = AsyncMock(return_value=make_result(stdout="A\0new.txt\0"))
        with patch("shelfkit.core.stash.files.run_git", new=mock):
            loaded = await load_stash_entry_files(REPO, entry)

        assert entry.files.kind == StashedChangesLoadState.NOT_LOADED
        assert loaded.files.kind == StashedChangesLoadState.LOADED
        assert loaded.files.files[0].status == AppFileStatusKind.NEW
        assert loaded.stash_sha == entry.stash_sha

    @pytest.mark.asyncio
    async def test_load_failure_is_reported_not_raised(self, make_result):
        entry = StashEntry(name="stash@{0}", stash_sha=SHA, branch_name="main")
        error = GitError(make_result(exit_code=128, stderr="fatal: bad revision"), ["stash", "show"])
        with patch("shelfkit.core.stash.files.run_git", new=AsyncMock(side_effect=error)):
            loaded = await load_stash_entry_files(REPO, entry)

        assert loaded.files.kind == StashedChangesLoadState.LOAD_FAILED
        assert loaded.files.files == ()


def test_stashed_file_changes_states():
    assert StashedFileChanges().kind == StashedChangesLoadState.NOT_LOADED
    assert StashedFileChanges.loading().kind == StashedChangesLoadState.LOADING
    assert StashedFileChanges.loaded([]).kind == StashedChangesLoadState.LOADED


def test_entry_to_dict_includes_files_only_when_loaded():
    change = CommittedFileChange(path="a", status=AppFileStatusKind.MODIFIED, commitish=SHA)
    entry = StashEntry(name="stash@{0}", stash_sha=SHA, branch_name="main")

    assert "files" not in entry.to_dict()
    loaded = StashEntry(
        name="stash@{0}", stash_sha=SHA, branch_name="main", files=StashedFileChanges.loaded([change])
    )
    assert loaded.to_dict()["files"] == [change.to_dict()]
    assert loaded.to_dict()["filesState"] == "loaded"
