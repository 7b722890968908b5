"""Tests for run environment preparation and work item discovery."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from blurqueue.core.pipeline.domain import discover_work_items, prepare_environment
from blurqueue.shared.errors import ErrorCode, PipelineEnvironmentError


class TestPrepareEnvironment:
    """Test cases for prepare_environment."""

    def test_creates_missing_output_root(self, tmp_path: Path) -> None:
        """A missing output root is created with its parents."""
        input_root = tmp_path / "input"
        input_root.mkdir()
        output_root = tmp_path / "nested" / "output"

        result = prepare_environment(input_root, output_root)

        assert result == (input_root, output_root)
        assert output_root.is_dir()

    def test_accepts_existing_output_root(self, tmp_path: Path) -> None:
        """An existing empty output directory is fine."""
        (tmp_path / "input").mkdir()
        (tmp_path / "output").mkdir()

        prepare_environment(str(tmp_path / "input"), str(tmp_path / "output"))

    def test_missing_input_root(self, tmp_path: Path) -> None:
        """A missing input root is fatal and nothing is created."""
        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "missing", tmp_path / "output")

        assert exc_info.value.code == ErrorCode.DIRECTORY_NOT_FOUND
        assert exc_info.value.context.file_path == str(tmp_path / "missing")
        assert not (tmp_path / "output").exists()

    def test_input_root_is_a_file(self, tmp_path: Path) -> None:
        """The input root must be a directory."""
        (tmp_path / "input").write_text("not a dir")

        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "input", tmp_path / "output")

        assert exc_info.value.code == ErrorCode.NOT_A_DIRECTORY

    def test_output_root_is_a_file(self, tmp_path: Path) -> None:
        """An existing file at the output root is fatal."""
        (tmp_path / "input").mkdir()
        (tmp_path / "output").write_text("occupied")

        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "input", tmp_path / "output")

        assert exc_info.value.code == ErrorCode.NOT_A_DIRECTORY

    def test_output_root_cannot_be_created(self, tmp_path: Path) -> None:
        """A parent that is a regular file blocks creation."""
        (tmp_path / "input").mkdir()
        (tmp_path / "blocker").write_text("file")

        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "input", tmp_path / "blocker" / "output")

        assert exc_info.value.code == ErrorCode.DIRECTORY_CREATION_FAILED
        assert exc_info.value.original_error is not None

    def test_output_root_not_writable(self, tmp_path: Path, mocker) -> None:
        """An output root without write permission is fatal."""
        (tmp_path / "input").mkdir()
        mocker.patch("blurqueue.core.pipeline.domain.environment.os.access", return_value=False)

        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "input", tmp_path / "output")

        assert exc_info.value.code == ErrorCode.OUTPUT_ROOT_UNUSABLE

    def test_same_input_and_output_root(self, tmp_path: Path) -> None:
        """Writing results over their own inputs is refused."""
        (tmp_path / "images").mkdir()

        with pytest.raises(PipelineEnvironmentError) as exc_info:
            prepare_environment(tmp_path / "images", tmp_path / "images" / ".." / "images")

        assert exc_info.value.code == ErrorCode.INVALID_PATH


class TestDiscoverWorkItems:
    """Test cases for discover_work_items."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.names = ["b.png", "a.JPG", "c.txt"]

    def _populate(self, root: Path) -> None:
        root.mkdir()
        for name in self.names:
            (root / name).write_bytes(b"x")
        (root / "sub").mkdir()
        (root / "sub" / "nested.png").write_bytes(b"x")

    def test_lists_regular_files_sorted(self, tmp_path: Path) -> None:
        """Every regular file directly under the root, sorted by name."""
        self._populate(tmp_path / "in")

        items = discover_work_items(tmp_path / "in")

        assert [item.name for item in items] == ["a.JPG", "b.png", "c.txt"]

    def test_extension_filter_is_case_insensitive(self, tmp_path: Path) -> None:
        """Suffixes match regardless of case."""
        self._populate(tmp_path / "in")

        items = discover_work_items(tmp_path / "in", [".PNG", ".jpg"])

        assert [item.name for item in items] == ["a.JPG", "b.png"]

    def test_empty_extension_list_keeps_everything(self, tmp_path: Path) -> None:
        """An empty filter behaves like no filter."""
        self._populate(tmp_path / "in")

        assert len(discover_work_items(tmp_path / "in", [])) == 3

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty input root yields no work items."""
        (tmp_path / "in").mkdir()

        assert discover_work_items(tmp_path / "in") == []

    def test_unlistable_directory(self, tmp_path: Path) -> None:
        """A root that cannot be listed is an environment error."""
        with pytest.raises(PipelineEnvironmentError) as exc_info:
            discover_work_items(tmp_path / "missing")

        assert exc_info.value.code == ErrorCode.DIRECTORY_NOT_FOUND

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_to_file_is_included(self, tmp_path: Path) -> None:
        """Symlinks resolving to regular files count as work items."""
        self._populate(tmp_path / "in")
        (tmp_path / "in" / "link.png").symlink_to(tmp_path / "in" / "b.png")

        names = [item.name for item in discover_work_items(tmp_path / "in", [".png"])]

        assert names == ["b.png", "link.png"]
