"""I/O utilities for transparent gzip handling.

snpEff output is usually written as ``.vcf.gz``; the loader should not care.
Compression is detected by magic bytes, with the extension as a fallback.

Example:
    with smart_open(Path("annotated.vcf.gz")) as f:
        for line in f:
            process(line)
"""

import gzip
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

# Gzip magic bytes (first two bytes of gzip file)
GZIP_MAGIC = b"\x1f\x8b"


def is_gzipped(filepath: Path) -> bool:
    """Detect if a file is gzip-compressed.

    Args:
        filepath: Path to file to check

    Returns:
        True if file is gzip-compressed

    Example:
        >>> is_gzipped(Path("calls.ann.vcf.gz"))
        True
    """
    try:
        with open(filepath, "rb") as f:
            magic = f.read(2)
            if len(magic) >= 2:
                return magic == GZIP_MAGIC
    except OSError:
        pass

    # Fall back to extension check
    return filepath.suffix == ".gz"


@contextmanager
def smart_open(filepath: Path) -> Iterator[IO[str]]:
    """Open a text file with automatic gzip detection.

    Args:
        filepath: Path to file (may be .gz or uncompressed)

    Yields:
        Text file handle
    """
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding="utf-8")
    else:
        f = open(filepath, "rt", encoding="utf-8")

    try:
        yield f
    finally:
        f.close()


def iter_lines(filepath: Path) -> Iterator[str]:
    """Iterate over lines in a file with gzip auto-detection.

    Lines are stripped of trailing newlines (and carriage returns, since some
    VCFs pass through Windows tooling).
    """
    with smart_open(filepath) as f:
        for line in f:
            yield line.rstrip("\r\n")
