"""Tests for io_utils module (gzip support)."""

import gzip
from pathlib import Path

from snpeff_extract.io_utils import is_gzipped, iter_lines, smart_open


class TestIsGzipped:
    """Test gzip file detection."""

    def test_gzipped_file(self, tmp_path: Path) -> None:
        """Detect gzipped file by magic bytes."""
        gz_file = tmp_path / "calls.vcf.gz"
        with gzip.open(gz_file, "wt") as f:
            f.write("##fileformat=VCFv4.2\n")

        assert is_gzipped(gz_file) is True

    def test_plain_file(self, tmp_path: Path) -> None:
        """Detect plain text file."""
        txt_file = tmp_path / "calls.vcf"
        txt_file.write_text("##fileformat=VCFv4.2\n")

        assert is_gzipped(txt_file) is False

    def test_gz_extension_but_not_gzipped(self, tmp_path: Path) -> None:
        """Magic bytes win over the extension."""
        fake_gz = tmp_path / "fake.vcf.gz"
        fake_gz.write_text("not gzipped content")

        assert is_gzipped(fake_gz) is False

    def test_missing_file_falls_back_to_extension(self, tmp_path: Path) -> None:
        """Unreadable files are judged by suffix."""
        assert is_gzipped(tmp_path / "missing.vcf.gz") is True
        assert is_gzipped(tmp_path / "missing.vcf") is False


class TestSmartOpen:
    """Test smart_open for automatic gzip handling."""

    def test_open_plain_text(self, tmp_path: Path) -> None:
        txt_file = tmp_path / "calls.vcf"
        txt_file.write_text("line1\nline2\n")

        with smart_open(txt_file) as f:
            lines = f.readlines()

        assert [line.strip() for line in lines] == ["line1", "line2"]

    def test_open_gzipped(self, tmp_path: Path) -> None:
        gz_file = tmp_path / "calls.vcf.gz"
        with gzip.open(gz_file, "wt") as f:
            f.write("line1\nline2\n")

        with smart_open(gz_file) as f:
            lines = f.readlines()

        assert [line.strip() for line in lines] == ["line1", "line2"]


class TestIterLines:
    """Test line iterator."""

    def test_strips_newlines(self, tmp_path: Path) -> None:
        txt_file = tmp_path / "calls.vcf"
        txt_file.write_text("line1\nline2\n")

        assert list(iter_lines(txt_file)) == ["line1", "line2"]

    def test_strips_carriage_returns(self, tmp_path: Path) -> None:
        """Windows line endings do not leak into the last column."""
        txt_file = tmp_path / "calls.vcf"
        txt_file.write_bytes(b"a\tb\r\nc\td\r\n")

        assert list(iter_lines(txt_file)) == ["a\tb", "c\td"]
