"""Batch URL file reading."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


def parse_url_lines(lines: Iterable[str]) -> list[str]:
    """Extract URLs from newline-delimited text.

    Blank lines and lines starting with ``#`` are ignored.
    """
    urls = []
    for line in lines:
        url = line.strip()
        if url and not url.startswith("#"):
            urls.append(url)
    return urls


def load_urls(path: str | Path) -> list[str]:
    """Read URLs from a batch file.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        return parse_url_lines(f)
