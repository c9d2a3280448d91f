"""
Unit Tests for File Tools

Tests read/write/append/list against a temporary directory.
"""

from unittest.mock import patch

import pytest

from tools.file_tools import (
    AppendFileArgs,
    ListFilesArgs,
    ReadFileArgs,
    WriteFileArgs,
    append_file,
    list_files,
    read_file,
    write_file,
)


class TestReadFile:
    """Test read_file."""

    @pytest.mark.asyncio
    async def test_read_text(self, tmp_path):
        """Test reading a UTF-8 text file."""
        path = tmp_path / "notes.md"
        path.write_text("# Title\ncafé", encoding="utf-8")

        assert await read_file(ReadFileArgs(path=str(path))) == "# Title\ncafé"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """Test a missing file is reported as text."""
        result = await read_file(ReadFileArgs(path=str(tmp_path / "nope.txt")))
        assert result.startswith("Error reading file")

    @pytest.mark.asyncio
    async def test_directory(self, tmp_path):
        """Test reading a directory points to list_files."""
        result = await read_file(ReadFileArgs(path=str(tmp_path)))
        assert "list_files" in result

    @pytest.mark.asyncio
    async def test_truncated(self, tmp_path):
        """Test long files are cut."""
        path = tmp_path / "big.txt"
        path.write_text("a" * 200)

        with patch("tools.file_tools.READ_MAX_CHARS", 50):
            result = await read_file(ReadFileArgs(path=str(path)))

        assert result.startswith("a" * 50)
        assert "[... truncated 150 characters]" in result

    @pytest.mark.asyncio
    @patch("tools.file_tools.extract_text_from_pdf")
    async def test_pdf_uses_extractor(self, mock_extract, tmp_path):
        """Test PDFs go through the PDF client."""
        path = tmp_path / "paper.pdf"
        path.write_bytes(b"%PDF-1.4")
        mock_extract.return_value = "Abstract: results"

        assert await read_file(ReadFileArgs(path=str(path))) == "Abstract: results"
        mock_extract.assert_called_once()


class TestWriteAndAppend:
    """Test write_file and append_file."""

    @pytest.mark.asyncio
    async def test_write_creates_parents(self, tmp_path):
        """Test parent directories are created."""
        path = tmp_path / "site" / "css" / "style.css"

        result = await write_file(WriteFileArgs(path=str(path), content="body {}"))

        assert path.read_text() == "body {}"
        assert result == f"Wrote 7 characters to {path}"

    @pytest.mark.asyncio
    async def test_write_replaces(self, tmp_path):
        """Test write_file overwrites existing content."""
        path = tmp_path / "a.txt"
        path.write_text("old")

        await write_file(WriteFileArgs(path=str(path), content="new"))

        assert path.read_text() == "new"

    @pytest.mark.asyncio
    async def test_append(self, tmp_path):
        """Test append_file adds to the end, creating the file first."""
        path = tmp_path / "log" / "out.txt"

        await append_file(AppendFileArgs(path=str(path), content="one\n"))
        await append_file(AppendFileArgs(path=str(path), content="two\n"))

        assert path.read_text() == "one\ntwo\n"

    @pytest.mark.asyncio
    async def test_write_failure_is_text(self, tmp_path):
        """Test an OS error comes back as an error string."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        result = await write_file(WriteFileArgs(path=str(blocker / "child.txt"), content="y"))

        assert result.startswith("Error: write_file failed")


class TestListFiles:
    """Test list_files."""

    @pytest.mark.asyncio
    async def test_list(self, tmp_path):
        """Test directories come first and get a slash."""
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "a_dir").mkdir()
        (tmp_path / "A.md").write_text("")

        result = await list_files(ListFilesArgs(path=str(tmp_path)))

        assert result.splitlines() == ["a_dir/", "A.md", "b.txt"]

    @pytest.mark.asyncio
    async def test_empty(self, tmp_path):
        """Test an empty directory is described."""
        assert await list_files(ListFilesArgs(path=str(tmp_path))) == f"{tmp_path} is empty"

    @pytest.mark.asyncio
    async def test_missing(self, tmp_path):
        """Test a missing directory is reported."""
        result = await list_files(ListFilesArgs(path=str(tmp_path / "nope")))
        assert result.startswith("Error: directory")

    def test_default_path(self):
        """Test the path defaults to the current directory."""
        assert ListFilesArgs().path == "."
