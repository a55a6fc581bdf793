"""Manifest (list of VCF paths) loading."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..exceptions import SourceUnavailable
from ..utils import PathLike


def read_manifest(path: PathLike) -> List[Path]:
	"""Return the VCF paths listed in ``path``, one per line.

	Blank lines and ``#`` comments are ignored. Only the first
	tab-separated field of a line is used, so a manifest may carry extra
	columns (e.g. sample labels). Relative paths are resolved against the
	manifest's directory.
	"""
	manifest = Path(path)
	try:
		text = manifest.read_text(encoding="utf-8")
	except OSError as exc:
		raise SourceUnavailable(str(manifest), exc.strerror or str(exc)) from exc
	base = manifest.parent
	paths: List[Path] = []
	for line in text.splitlines():
		entry = line.split("\t", 1)[0].strip()
		if not entry or entry.startswith("#"):
			continue
		p = Path(entry)
		paths.append(p if p.is_absolute() else base / p)
	return paths


def sample_names(paths: List[PathLike]) -> List[str]:
	"""Derive column labels from file names (``a/S1.vcf.gz`` -> ``S1``).

	Labels are unique: a repeated name gets ``_2``, ``_3``... in manifest
	order (``b1/S1.vcf``, ``b2/S1.vcf`` -> ``S1``, ``S1_2``).
	"""
	names: List[str] = []
	used = set()
	for p in paths:
		base = Path(p).name
		for suffix in (".gz", ".bgz", ".vcf"):
			if base.endswith(suffix):
				base = base[: -len(suffix)]
		name, n = base, 1
		while name in used:
			n += 1
			name = f"{base}_{n}"
		used.add(name)
		names.append(name)
	return names
