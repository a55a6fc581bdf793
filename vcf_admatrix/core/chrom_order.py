"""Total order over (chromosome, position) keys.

The merge engine only ever asks a ``KeyComparator`` which of two keys is
smaller; the chromosome ordering itself is a pluggable key function.
Inputs must be sorted with the same ordering the merge uses.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Tuple, Union

__all__ = [
    "natural_chrom_key",
    "lexical_chrom_key",
    "KeyComparator",
    "NATURAL",
    "LEXICAL",
    "COMPARATORS",
    "get_comparator",
]

Key = Tuple[str, int]

_DIGITS = re.compile(r"(\d+)")


def natural_chrom_key(chrom: str) -> List[Union[str, int]]:
    """Generate sort key for natural sorting (chr1, chr2, ..., chr10, chrX).

    Digit runs compare as integers, everything else case-insensitively, so
    ``2 < 10 < X`` and ``chr2 < chr10 < chrM``. Text and number parts
    alternate, so two keys never compare a str against an int.
    """
    def convert(text):
        if text.isdigit():
            return int(text)
        return text.lower()

    return [convert(c) for c in _DIGITS.split(chrom)]


def lexical_chrom_key(chrom: str) -> str:
    return chrom


class KeyComparator:
    """Compare keys by chromosome (under ``chrom_key``), then position."""

    def __init__(self, chrom_key: Callable[[str], object], name: str = ""):
        self.chrom_key = chrom_key
        self.name = name or getattr(chrom_key, "__name__", "custom")
        self._cache: Dict[str, object] = {}

    def _ckey(self, chrom: str):
        # Few distinct chromosome names, many comparisons.
        try:
            return self._cache[chrom]
        except KeyError:
            k = self._cache[chrom] = self.chrom_key(chrom)
            return k

    def compare(self, a: Key, b: Key) -> int:
        """Return -1, 0 or 1 as ``a`` is less than, equal to or greater than ``b``."""
        if a[0] != b[0]:
            ka, kb = self._ckey(a[0]), self._ckey(b[0])
            if ka < kb:
                return -1
            if kb < ka:
                return 1
            # Distinct names the key function cannot tell apart (e.g. "chrX"
            # vs "chrx"): fall back to the raw names to stay a total order.
            return -1 if a[0] < b[0] else 1
        if a[1] < b[1]:
            return -1
        if a[1] > b[1]:
            return 1
        return 0

    def sort_key(self, key: Key):
        return (self._ckey(key[0]), key[0], key[1])

    def __repr__(self) -> str:
        return f"KeyComparator({self.name})"


NATURAL = KeyComparator(natural_chrom_key, "natural")
LEXICAL = KeyComparator(lexical_chrom_key, "lexical")

COMPARATORS: Dict[str, KeyComparator] = {
    "natural": NATURAL,
    "lexical": LEXICAL,
}


def get_comparator(name: str) -> KeyComparator:
    try:
        return COMPARATORS[name]
    except KeyError:
        raise ValueError(f"Unknown chromosome order {name!r}; choose from {sorted(COMPARATORS)}") from None
