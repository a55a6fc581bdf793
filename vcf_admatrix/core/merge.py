"""Synchronized k-way merge of sorted single-sample VCF streams.

Every source holds exactly one buffered record. Each iteration finds the
smallest key among the sources that are still open, builds one row with a
cell for every source whose buffered key equals it (the *participants*) and
the missing symbol elsewhere, then advances only the participants. Sources
that did not participate keep their record for a later row. The loop ends
when every source is exhausted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import ADMatrixError, SinkWriteFailure, SourceUnavailable
from ..io.vcf_reader import Record, RecordSource
from ..utils import log_info, log_warn, progress_interval
from .chrom_order import NATURAL, KeyComparator
from .extract import Cell, ExtractionRule, extract

__all__ = ["Row", "MergeStats", "MergeResult", "MergeEngine", "run_merge"]


@dataclass(frozen=True)
class Row:
    """One matrix row: a key and one cell (or None) per sample."""

    chrom: str
    pos: int
    cells: Tuple[Optional[Cell], ...]
    rules: Tuple[str, ...] = ()

    @property
    def key(self) -> Tuple[str, int]:
        return (self.chrom, self.pos)

    def value(self, sample_index: int, rule_index: int = 0) -> Optional[str]:
        cell = self.cells[sample_index]
        return None if cell is None else cell[rule_index]


@dataclass
class MergeStats:
    """Per-sample counters collected while rows are emitted.

    ``records`` counts rows a sample participated in; ``missing_depth``
    counts participations where at least one rule found no usable depth;
    ``occupancy`` maps the number of participants to the number of rows.
    """

    samples: List[str]
    rows: int = 0
    records: List[int] = field(default_factory=list)
    missing_depth: List[int] = field(default_factory=list)
    occupancy: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        n = len(self.samples)
        if not self.records:
            self.records = [0] * n
        if not self.missing_depth:
            self.missing_depth = [0] * n

    def update(self, row: Row) -> None:
        self.rows += 1
        present = 0
        for i, cell in enumerate(row.cells):
            if cell is None:
                continue
            present += 1
            self.records[i] += 1
            if None in cell:
                self.missing_depth[i] += 1
        self.occupancy[present] = self.occupancy.get(present, 0) + 1


@dataclass
class MergeResult:
    row_count: int
    stats: MergeStats


class MergeEngine:
    """Merge primed ``RecordSource``s into a lazy sequence of ``Row``s.

    Parameters
    ----------
    sources : sequence of RecordSource
        Primed sources; column order follows this order.
    rules : sequence of ExtractionRule
        Every participant's sample field is run through all rules once.
    comparator : KeyComparator
        Order the inputs are sorted by.
    """

    def __init__(
        self,
        sources: Sequence[RecordSource],
        rules: Sequence[ExtractionRule],
        comparator: KeyComparator = NATURAL,
    ):
        for i, src in enumerate(sources):
            if not isinstance(src, RecordSource):
                raise SourceUnavailable(f"source #{i}", "not an opened record source")
        self.sources = list(sources)
        self.rules = list(rules)
        self.rule_names = tuple(r.name for r in self.rules)
        self.comparator = comparator
        self.active_count = sum(1 for s in self.sources if s.current() is not None)

    def _min_key(self) -> Tuple[str, int]:
        low: Optional[Tuple[str, int]] = None
        for src in self.sources:
            rec = src.current()
            if rec is None:
                continue
            if low is None or self.comparator.compare(rec.key, low) < 0:
                low = rec.key
        if low is None:
            raise ADMatrixError(f"{self.active_count} sources counted as open but none has a record")
        return low

    def _cell(self, rec: Record) -> Cell:
        return extract(rec.sample_field, self.rules, rec.format_keys)

    def rows(self) -> Iterator[Row]:
        compare = self.comparator.compare
        while self.active_count > 0:
            low = self._min_key()
            participants: List[RecordSource] = []
            cells: List[Optional[Cell]] = []
            for src in self.sources:
                rec = src.current()
                if rec is not None and compare(rec.key, low) == 0:
                    participants.append(src)
                    cells.append(self._cell(rec))
                else:
                    cells.append(None)
            yield Row(low[0], low[1], tuple(cells), self.rule_names)
            for src in participants:
                # MalformedRecord propagates and ends the merge
                if src.advance() is None:
                    self.active_count -= 1

    def __iter__(self) -> Iterator[Row]:
        return self.rows()

    def close(self) -> None:
        for src in self.sources:
            src.close()
        self.active_count = 0


def _flush_sinks(sinks: Sequence, failing: bool) -> None:
    """Flush every sink that has a ``flush()``.

    All sinks are attempted. While another error is already propagating
    (``failing``) a flush failure is only logged, so the original error
    reaches the caller; otherwise the first failure is raised.
    """
    first: Optional[SinkWriteFailure] = None
    for sink in sinks:
        flush = getattr(sink, "flush", None)
        if flush is None:
            continue
        try:
            flush()
        except SinkWriteFailure as exc:
            if failing:
                log_warn(f"{exc} (after an earlier error)")
            elif first is None:
                first = exc
    if first is not None:
        raise first


def run_merge(
    sources: Sequence[RecordSource],
    rules: Sequence[ExtractionRule],
    sinks: Sequence,
    comparator: KeyComparator = NATURAL,
    samples: Optional[Sequence[str]] = None,
    verbose: bool = True,
) -> MergeResult:
    """Drive a full merge into every sink and return the row count.

    Sinks only need an ``accept(row)`` method; ``flush()`` is called on
    each (when present) once the merge ends, successfully or not, so any
    written output ends on a complete row. Sources are closed on the way
    out.
    """
    engine = MergeEngine(sources, rules, comparator)
    names = list(samples) if samples is not None else [s.name for s in engine.sources]
    stats = MergeStats(names)
    if verbose:
        log_info(f"Merging {len(engine.sources)} sources ({engine.active_count} non-empty), "
                 f"rules: {', '.join(engine.rule_names)}")
    failing = True
    try:
        for row in engine.rows():
            for sink in sinks:
                sink.accept(row)
            stats.update(row)
            if verbose and stats.rows % progress_interval(stats.rows) == 0:
                log_info(f"Merged {stats.rows:,} rows (at {row.chrom}:{row.pos})...")
        failing = False
    finally:
        try:
            _flush_sinks(sinks, failing)
        finally:
            engine.close()
    if verbose:
        recovered = sum(stats.missing_depth)
        log_info(f"Merge complete: {stats.rows:,} rows")
        if recovered:
            log_info(f"{recovered:,} cells had no usable allele depth and were written as missing")
    return MergeResult(stats.rows, stats)
