"""Streaming single-sample VCF reader used as a merge input.

Each ``RecordSource`` wraps one sample's position-sorted VCF and buffers
exactly one record ahead, so memory stays O(number of samples) no matter
how long the inputs are. Header lines are skipped; nothing else of the
header is interpreted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, List, Optional, Tuple

from ..exceptions import MalformedRecord, SourceUnavailable
from ..utils import PathLike, open_text

# CHROM POS ID REF ALT QUAL FILTER INFO FORMAT SAMPLE
SINGLE_SAMPLE_COLUMNS = 10


@dataclass(frozen=True)
class Record:
	"""One sample's call at a single locus.

	Attributes
	----------
	chrom : str
		Chromosome name as written in the file.
	pos : int
		1-based position.
	sample_field : str
		Raw colon-delimited sample column (e.g. ``0/1:5,3:8``).
	format_keys : tuple of str
		FORMAT keys in order; empty when the record has none.
	"""

	chrom: str
	pos: int
	sample_field: str
	format_keys: Tuple[str, ...] = ()

	@property
	def key(self) -> Tuple[str, int]:
		return (self.chrom, self.pos)


def parse_record(line: str) -> Optional[Record]:
	"""Parse one VCF data line, returning None if it is not a valid
	single-sample record. Callers decide how to report the failure.
	"""
	parts = line.rstrip("\r\n").split("\t")
	if len(parts) != SINGLE_SAMPLE_COLUMNS:
		return None
	chrom, pos = parts[0], parts[1]
	if not chrom or not (pos.isascii() and pos.isdigit()):
		return None
	pos_val = int(pos)
	if pos_val < 1:
		return None
	fmt = parts[8]
	format_keys = tuple(fmt.split(":")) if fmt and fmt != "." else ()
	return Record(chrom, pos_val, parts[9], format_keys)


class RecordSource:
	"""One sample's sorted stream of records with a single-slot read-ahead.

	Parameters
	----------
	handle : text file object
		Already opened, readable handle positioned at the start of a VCF.
	name : str
		Identity used in diagnostics (usually the file path).

	Use :meth:`open` (or :func:`open_source`) rather than the constructor;
	they prime the buffer with the first record.
	"""

	def __init__(self, handle: IO[str], name: str):
		self.name = name
		self._handle: Optional[IO[str]] = handle
		self._current: Optional[Record] = None
		self._line_number = 0
		self._last_key: Optional[Tuple[str, int]] = None
		self.records_read = 0

	# -- construction -----------------------------------------------------
	@classmethod
	def open(cls, handle: IO[str], name: Optional[str] = None) -> "RecordSource":
		"""Wrap ``handle`` and read the first record.

		Raises ``SourceUnavailable`` if the handle is closed or not readable;
		a bad first record raises ``MalformedRecord`` like any later one.
		"""
		name = name or getattr(handle, "name", None) or "<stream>"
		if handle is None or getattr(handle, "closed", True):
			raise SourceUnavailable(str(name), "handle is closed or missing")
		try:
			readable = handle.readable()
		except (OSError, ValueError) as exc:
			raise SourceUnavailable(str(name), str(exc)) from exc
		if not readable:
			raise SourceUnavailable(str(name), "handle is not readable")
		source = cls(handle, str(name))
		source.advance()
		return source

	# -- state --------------------------------------------------------------
	@property
	def exhausted(self) -> bool:
		return self._handle is None and self._current is None

	def current(self) -> Optional[Record]:
		"""Return the buffered record, or None once exhausted."""
		return self._current

	def advance(self) -> Optional[Record]:
		"""Replace the buffered record with the next one from the stream.

		Returns None (and releases the handle) when the stream ends.
		Raises ``MalformedRecord`` for a line that is not a single-sample
		record; the source stays positioned after the offending line.
		"""
		if self._handle is None:
			self._current = None
			return None
		if self._current is not None:
			self._last_key = self._current.key
		try:
			for line in self._handle:
				self._line_number += 1
				if not line.strip() or line.startswith("#"):
					continue
				rec = parse_record(line)
				if rec is None:
					self._fail(line.rstrip("\r\n"))
				self._current = rec
				self.records_read += 1
				return rec
		except (OSError, UnicodeDecodeError, EOFError) as exc:
			# truncated gzip, binary data, etc.
			self._fail("", f"unreadable stream ({exc})", next_line=True)
		self._current = None
		self._release()
		return None

	def _fail(self, line: str, reason: str = "not a single-sample VCF record", next_line: bool = False) -> None:
		self._current = None
		self._release()
		line_number = self._line_number + 1 if next_line else self._line_number
		raise MalformedRecord(self.name, line_number, line, self._last_key, reason=reason)

	def close(self) -> None:
		"""Release the underlying handle early; the source becomes exhausted."""
		self._current = None
		self._release()

	def _release(self) -> None:
		# Closes the handle exactly once.
		handle, self._handle = self._handle, None
		if handle is not None:
			handle.close()

	def __repr__(self) -> str:
		state = "exhausted" if self.exhausted else repr(self._current)
		return f"RecordSource({self.name!r}, {state})"


def open_source(path: PathLike) -> RecordSource:
	"""Open a (optionally gzipped) single-sample VCF as a primed source."""
	try:
		handle = open_text(path)
	except OSError as exc:
		raise SourceUnavailable(str(path), exc.strerror or str(exc)) from exc
	return RecordSource.open(handle, str(path))


def open_sources(paths: List[PathLike]) -> List[RecordSource]:
	"""Open every path; on failure release the sources opened so far."""
	sources: List[RecordSource] = []
	try:
		for path in paths:
			sources.append(open_source(path))
	except Exception:
		for src in sources:
			src.close()
		raise
	return sources
