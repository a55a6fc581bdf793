"""Error taxonomy for the allele-depth matrix merge.

Every error carries the exit status the CLI terminates with. Only
``MissingDepthField`` is absorbed by the merge engine (the affected cell
becomes the missing symbol); all others propagate to the caller.
"""
from typing import Optional, Tuple

from . import config

__all__ = [
    "ADMatrixError",
    "SourceUnavailable",
    "MalformedRecord",
    "MissingDepthField",
    "SinkWriteFailure",
    "UnknownExtractionRule",
]

Key = Tuple[str, int]


def _fmt_key(key: Optional[Key]) -> str:
    if key is None:
        return "start of stream"
    return f"{key[0]}:{key[1]}"


class ADMatrixError(Exception):
    """Base class for all merge errors."""

    exit_code = config.EX_SOFTWARE


class SourceUnavailable(ADMatrixError):
    """An input stream could not be opened or is not readable."""

    exit_code = config.EX_UNAVAILABLE

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot open {source}: {reason}")


class MalformedRecord(ADMatrixError):
    """A source yielded a line that is not a single-sample VCF record."""

    exit_code = config.EX_DATAERR

    def __init__(self, source: str, line_number: int, line: str, last_key: Optional[Key] = None,
                 reason: str = "not a single-sample VCF record"):
        self.source = source
        self.line_number = line_number
        self.line = line
        self.last_key = last_key
        self.reason = reason
        snippet = line if len(line) <= 80 else line[:77] + "..."
        super().__init__(
            f"{source}:{line_number}: {reason} (after {_fmt_key(last_key)}): {snippet!r}"
        )


class MissingDepthField(ADMatrixError):
    """The sample field has no usable allele-depth (or depth) subfield."""

    exit_code = config.EX_DATAERR

    def __init__(self, sample_field: str, reason: str = "no AD subfield"):
        self.sample_field = sample_field
        self.reason = reason
        super().__init__(f"{reason}: {sample_field!r}")


class SinkWriteFailure(ADMatrixError):
    """Writing a row to a matrix failed."""

    exit_code = config.EX_IOERR

    def __init__(self, sink: str, key: Optional[Key], reason: str):
        self.sink = sink
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot write {sink} at {_fmt_key(key)}: {reason}")


class UnknownExtractionRule(ADMatrixError):
    exit_code = config.EX_USAGE

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown extraction rule: {name!r}")
