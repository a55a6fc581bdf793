"""Small utility helpers used across the vcf_admatrix package.

Logging goes to stderr so a matrix written to stdout stays clean.
"""
import gzip
import sys
from datetime import datetime
from typing import IO, Union
from pathlib import Path

from . import config

PathLike = Union[str, Path]


def _log(level: str, msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [{level}] {msg}", file=sys.stderr)


def log_info(msg: str) -> None:
    """Print info log message."""
    _log("INFO", msg)


def log_warn(msg: str) -> None:
    """Print warning log message."""
    _log("WARN", msg)


def log_error(msg: str) -> None:
    """Print error log message. The caller decides the exit status."""
    _log("ERROR", msg)


def progress_interval(count: int) -> int:
    """Return the reporting interval for ``count`` processed items.

    Start with 1K, then increase the interval as the count grows.
    """
    for upto, interval in config.PROGRESS_SCHEDULE:
        if count <= upto:
            return interval
    return config.PROGRESS_FALLBACK_INTERVAL


def is_gzipped(path: PathLike) -> bool:
    """Detect gzip by magic bytes (suffix not required)."""
    with open(path, "rb") as fh:
        return fh.read(2) == b"\x1f\x8b"


def open_text(path: PathLike) -> IO[str]:
    """Open a text file for reading; transparently decompress gzip/bgzip."""
    if is_gzipped(path):
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "rt", encoding="utf-8")


def write_text(path: PathLike) -> IO[str]:
    """Open a text file for writing; gzip-compress if the name ends in .gz."""
    if str(path).endswith(".gz"):
        return gzip.open(path, "wt", encoding="utf-8")
    return open(path, "wt", encoding="utf-8")


__all__ = [
    "log_info",
    "log_warn",
    "log_error",
    "progress_interval",
    "is_gzipped",
    "open_text",
    "write_text",
]
