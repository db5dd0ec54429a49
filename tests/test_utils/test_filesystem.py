from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from distsift.exceptions import FileOperationError
from distsift.models.filename import SourceDistFilename, WheelFilename
from distsift.utils.filesystem import list_find_links, safe_read_file


@pytest.fixture
def wheelhouse(tmp_path: Path) -> Path:
    """A find-links directory with distributions and unrelated files."""
    for name in (
        "six-1.16.0-py2.py3-none-any.whl",
        "idna-3.6.tar.gz",
        "idna-3.6-py3-none-any.whl",
        "README.txt",
        "idna-3.6-py3-none-any.whl.metadata",
    ):
        (tmp_path / name).write_bytes(b"x" * 4)
    (tmp_path / "nested-1.0.tar.gz").mkdir()
    return tmp_path


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_text(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[project]\n", encoding="utf-8")

        assert safe_read_file(path) == "[project]\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(tmp_path / "missing.toml")

        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.operation == "read"

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(tmp_path)

        assert "not a file" in str(exc_info.value).lower()

    def test_too_large(self, tmp_path: Path) -> None:
        path = tmp_path / "big.toml"
        path.write_text("x" * 100, encoding="utf-8")

        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(path, max_size=10)

        assert "too large" in str(exc_info.value).lower()

    def test_no_size_limit(self, tmp_path: Path) -> None:
        path = tmp_path / "big.toml"
        path.write_text("x" * 100, encoding="utf-8")

        assert len(safe_read_file(path, max_size=None)) == 100

    def test_decode_error(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.toml"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(FileOperationError) as exc_info:
            safe_read_file(path)

        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


@pytest.mark.unit
class TestListFindLinks:
    """Tests for list_find_links."""

    def test_lists_distributions_sorted(self, wheelhouse: Path) -> None:
        entries = list_find_links(wheelhouse)

        assert [entry.file.filename for entry in entries] == [
            "idna-3.6-py3-none-any.whl",
            "idna-3.6.tar.gz",
            "six-1.16.0-py2.py3-none-any.whl",
        ]
        assert entries.offline is False

    def test_entries_carry_origin_and_file_data(self, wheelhouse: Path) -> None:
        entry = list_find_links(wheelhouse).entries[0]

        assert isinstance(entry.filename, WheelFilename)
        assert entry.index == str(wheelhouse)
        assert entry.file.size == 4
        assert entry.file.url.startswith("file://")

    def test_sdist_filename_is_parsed(self, wheelhouse: Path) -> None:
        entry = list_find_links(wheelhouse).entries[1]

        assert isinstance(entry.filename, SourceDistFilename)

    def test_missing_directory_is_offline(self, tmp_path: Path) -> None:
        with patch("distsift.utils.filesystem.logger") as mock_logger:
            entries = list_find_links(tmp_path / "missing")

        assert entries.offline is True
        assert len(entries) == 0
        mock_logger.warning.assert_called_once()
