"""Tab-separated allele-depth matrix output.

One ``MatrixWriter`` renders one extraction rule: each row is written as
``chrom<TAB>pos<TAB>cell_1 ... cell_N`` with ``.`` for samples that have
no value. Rows are header-free.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Optional

from .. import config
from ..exceptions import SinkWriteFailure
from ..utils import PathLike, write_text

if TYPE_CHECKING:  # pragma: no cover
	from ..core.merge import Row


class MatrixWriter:
	"""Serialise merged rows for one extraction rule.

	Parameters
	----------
	handle : writable text file object
	rule : str
		Name of the rule whose value is rendered in each cell.
	name : str | None
		Identity used in error messages (defaults to the handle's name).
	"""

	def __init__(self, handle: IO[str], rule: str, *, name: Optional[str] = None,
				 delimiter: str = config.DELIMITER, missing: str = config.MISSING):
		self.handle = handle
		self.rule = rule
		self.name = name or str(getattr(handle, "name", "<matrix>"))
		self.delimiter = delimiter
		self.missing = missing
		self.rows_written = 0
		self._rule_index: Optional[int] = None
		self._closed = False

	def _index(self, row: "Row") -> int:
		if self._rule_index is None:
			try:
				self._rule_index = row.rules.index(self.rule)
			except ValueError:
				raise SinkWriteFailure(self.name, row.key, f"rule {self.rule!r} not extracted by this merge") from None
		return self._rule_index

	def format_row(self, row: "Row") -> str:
		ri = self._index(row)
		fields = [row.chrom, str(row.pos)]
		for cell in row.cells:
			value = None if cell is None else cell[ri]
			fields.append(self.missing if value is None else value)
		return self.delimiter.join(fields) + "\n"

	def accept(self, row: "Row") -> None:
		# the whole line is built before the single write call
		line = self.format_row(row)
		try:
			self.handle.write(line)
		except (OSError, ValueError) as exc:
			raise SinkWriteFailure(self.name, row.key, str(exc)) from exc
		self.rows_written += 1

	def flush(self) -> None:
		if self._closed:
			return
		try:
			self.handle.flush()
		except (OSError, ValueError) as exc:
			raise SinkWriteFailure(self.name, None, str(exc)) from exc

	def close(self) -> None:
		if self._closed:
			return
		self._closed = True
		try:
			self.handle.close()
		except OSError as exc:
			raise SinkWriteFailure(self.name, None, str(exc)) from exc

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.close()
		return False


def open_matrix(path: PathLike, rule: str, **kwargs) -> MatrixWriter:
	"""Open ``path`` for writing (gzip when it ends in ``.gz``)."""
	try:
		handle = write_text(path)
	except OSError as exc:
		raise SinkWriteFailure(str(path), None, exc.strerror or str(exc)) from exc
	return MatrixWriter(handle, rule, name=str(path), **kwargs)
