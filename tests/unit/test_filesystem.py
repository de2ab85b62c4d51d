"""
Unit tests for Filesystem.
"""

import pytest

from appbridge.filesystem import Filesystem


@pytest.fixture
def files():
    return Filesystem()


class TestFiles:
    """Tests for file operations."""

    def test_put_and_get(self, files, tmp_path):
        """put() writes and get() reads back."""
        path = tmp_path / "note.txt"

        files.put(path, "hello")

        assert files.exists(path) is True
        assert files.is_file(path) is True
        assert files.get(path) == "hello"

    def test_append(self, files, tmp_path):
        """append() adds to the end."""
        path = tmp_path / "log.txt"
        files.put(path, "a")

        files.append(path, "b")

        assert files.get(path) == "ab"

    def test_get_missing_raises(self, files, tmp_path):
        """get() on a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            files.get(tmp_path / "missing.txt")

    def test_require_json(self, files, tmp_path):
        """require_json() decodes JSON."""
        path = tmp_path / "data.json"
        files.put(path, '{"a": [1, 2]}')

        assert files.require_json(path) == {"a": [1, 2]}

    def test_delete(self, files, tmp_path):
        """delete() reports whether every file was removed."""
        path = tmp_path / "gone.txt"
        files.put(path, "x")

        assert files.delete(path) is True
        assert files.missing(path) is True
        assert files.delete(path) is False


class TestDirectories:
    """Tests for directory operations."""

    def test_ensure_directory_exists(self, files, tmp_path):
        """Nested directories are created."""
        path = tmp_path / "a" / "b"

        files.ensure_directory_exists(path)
        files.ensure_directory_exists(path)

        assert files.is_directory(path) is True

    def test_files_lists_sorted_regular_files(self, files, tmp_path):
        """files() lists regular files only."""
        files.put(tmp_path / "b.txt", "")
        files.put(tmp_path / "a.txt", "")
        files.make_directory(tmp_path / "sub")

        assert [p.name for p in files.files(tmp_path)] == ["a.txt", "b.txt"]

    def test_files_of_missing_directory(self, files, tmp_path):
        """files() of a missing directory is empty."""
        assert files.files(tmp_path / "nope") == []

    def test_glob(self, files, tmp_path):
        """glob() returns sorted matches."""
        files.put(tmp_path / "x.json", "{}")
        files.put(tmp_path / "y.txt", "")

        assert files.glob(str(tmp_path / "*.json")) == [str(tmp_path / "x.json")]

    def test_delete_directory(self, files, tmp_path):
        """delete_directory() removes trees."""
        path = tmp_path / "tree"
        files.make_directory(path / "leaf")

        assert files.delete_directory(path) is True
        assert files.delete_directory(path) is False
