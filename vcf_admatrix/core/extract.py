"""Allele-depth extraction from a single sample field.

A sample field is the colon-delimited genotype column of a VCF record,
e.g. ``0/1:5,3:8`` under ``FORMAT=GT:AD:DP``. The AD subfield holds the
reference read count followed by one count per alternate allele.

Which value ends up in a matrix cell is an explicit, named
``ExtractionRule`` rather than a fixed field position; several rules can be
applied to the same record so one merge pass can feed several matrices.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..exceptions import MissingDepthField, UnknownExtractionRule

__all__ = [
    "SampleDepths",
    "ExtractionRule",
    "RULES",
    "get_rule",
    "get_rules",
    "extract",
    "extract_value",
]

# Subfield positions assumed when a record carries no FORMAT keys.
POSITIONAL_FORMAT: Tuple[str, ...] = ("GT", "AD", "DP")

Cell = Tuple[Optional[str], ...]


@dataclass
class SampleDepths:
    """Raw AD/DP subfields of one sample field, parsed on demand."""

    sample_field: str
    ad_raw: Optional[str]
    dp_raw: Optional[str]
    _ad: Optional[List[int]] = field(default=None, repr=False)

    @classmethod
    def parse(cls, sample_field: str, format_keys: Sequence[str] = ()) -> "SampleDepths":
        keys = tuple(format_keys) or POSITIONAL_FORMAT
        values = sample_field.split(":")
        lookup = {k: values[i] for i, k in enumerate(keys) if i < len(values)}
        return cls(sample_field, lookup.get("AD"), lookup.get("DP"))

    def ad(self) -> List[int]:
        """AD as a list of ints (REF then ALT depths)."""
        if self._ad is None:
            raw = self.ad_raw
            if raw is None or raw in ("", "."):
                raise MissingDepthField(self.sample_field, "no AD subfield")
            try:
                self._ad = [int(x) for x in raw.split(",")]
            except ValueError:
                raise MissingDepthField(self.sample_field, f"non-numeric AD {raw!r}") from None
        return self._ad

    def dp(self) -> int:
        raw = self.dp_raw
        if raw is None or raw in ("", "."):
            raise MissingDepthField(self.sample_field, "no DP subfield")
        if not (raw.isascii() and raw.isdigit()):
            raise MissingDepthField(self.sample_field, f"non-numeric DP {raw!r}")
        return int(raw)


@dataclass(frozen=True)
class ExtractionRule:
    """A named way of turning a sample's depths into one cell value."""

    name: str
    description: str
    derive: Callable[[SampleDepths], str]

    def __call__(self, depths: SampleDepths) -> str:
        return self.derive(depths)


def _ref(d: SampleDepths) -> str:
    return str(d.ad()[0])


def _ref_alt(d: SampleDepths) -> str:
    ad = d.ad()
    if len(ad) < 2:
        raise MissingDepthField(d.sample_field, "AD has no alternate count")
    # multi-allelic: alt = all alternate reads combined
    return f"{ad[0]},{sum(ad[1:])}"


def _ref_depth(d: SampleDepths) -> str:
    return f"{d.ad()[0]},{d.dp()}"


RULES: Dict[str, ExtractionRule] = {
    r.name: r
    for r in (
        ExtractionRule("ref", "reference allele depth (AD[0])", _ref),
        ExtractionRule("ref_alt", "reference and summed alternate depth (AD[0],sum(AD[1:]))", _ref_alt),
        ExtractionRule("ref_depth", "reference depth and total depth (AD[0],DP)", _ref_depth),
    )
}


def get_rule(name: str) -> ExtractionRule:
    try:
        return RULES[name]
    except KeyError:
        raise UnknownExtractionRule(name) from None


def get_rules(names: Sequence[str]) -> List[ExtractionRule]:
    return [get_rule(n) for n in names]


def extract_value(sample_field: str, rule: ExtractionRule, format_keys: Sequence[str] = ()) -> str:
    """Apply a single rule; raises ``MissingDepthField`` if it cannot."""
    return rule(SampleDepths.parse(sample_field, format_keys))


def extract(sample_field: str, rules: Sequence[ExtractionRule], format_keys: Sequence[str] = ()) -> Cell:
    """Apply every rule to one sample field.

    Returns one entry per rule, in rule order. A rule that raises
    ``MissingDepthField`` yields None for its entry; the others are
    unaffected.
    """
    depths = SampleDepths.parse(sample_field, format_keys)
    values: List[Optional[str]] = []
    for rule in rules:
        try:
            values.append(rule(depths))
        except MissingDepthField:
            values.append(None)
    return tuple(values)
