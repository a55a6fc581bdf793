"""Command line interface for vcf_admatrix.

Current subcommands:
	build   – merge single-sample VCFs into allele-depth matrices
	summary – per-sample summary (and plots) of an existing matrix

Example:
	python -m vcf_admatrix build --manifest vcfs.txt --out cohort --rule ref ref_alt --summary
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from . import config
from .config import MergeConfig
from .core import get_comparator, get_rules, run_merge
from .core.chrom_order import COMPARATORS
from .core.extract import RULES
from .exceptions import ADMatrixError, SourceUnavailable
from .io import open_matrix, open_sources, read_manifest, sample_names
from .metrics import compute_sample_metrics, load_matrix, matrix_sample_metrics, row_occupancy
from .utils import log_error, log_info


def _write_outputs(metrics_df: pd.DataFrame, occupancy: Dict[int, int], n_samples: int,
				   summary_path: Optional[str], plot_dir: Optional[Path]) -> None:
	if summary_path:
		metrics_df.to_csv(summary_path, sep='\t', index=False, float_format="%.6g")
		log_info(f"Sample summary written to {summary_path}")
	if plot_dir is not None:
		from .plot import plot_called_rate_per_sample, plot_row_occupancy_distribution  # local import
		plot_dir.mkdir(parents=True, exist_ok=True)
		plot_called_rate_per_sample(
			metrics_df[["Sample", "CalledRate"]],
			output_path=str(plot_dir / 'sample_called_rate.png'),
		)
		plot_row_occupancy_distribution(
			occupancy,
			n_samples,
			output_path=str(plot_dir / 'row_occupancy.png'),
		)
		log_info(f"Plots written to {plot_dir}")


def cmd_build(args: argparse.Namespace) -> int:
	cfg = MergeConfig(
		manifest=Path(args.manifest),
		output_prefix=args.out,
		rules=tuple(dict.fromkeys(args.rule)),
		chrom_order=args.chrom_order,
		compress=args.gzip,
		summary=args.summary,
		plot_dir=Path(args.plot_dir) if args.plot_dir else None,
	)
	rules = get_rules(cfg.rules)
	comparator = get_comparator(cfg.chrom_order)

	paths = read_manifest(cfg.manifest)
	if not paths:
		raise SourceUnavailable(str(cfg.manifest), "manifest lists no VCF files")
	log_info(f"{len(paths)} VCF files.")
	samples = sample_names(paths)

	out_parent = Path(cfg.output_prefix).parent
	out_parent.mkdir(parents=True, exist_ok=True)

	sources = open_sources(paths)
	sinks = []
	try:
		for rule in rules:
			sinks.append(open_matrix(cfg.matrix_path(rule.name), rule.name,
									 delimiter=cfg.delimiter, missing=cfg.missing))
		result = run_merge(sources, rules, sinks, comparator=comparator, samples=samples)
	finally:
		for src in sources:
			src.close()
		for sink in sinks:
			sink.close()

	for sink in sinks:
		log_info(f"Matrix '{sink.rule}' written to {sink.name} ({sink.rows_written:,} rows)")
	if cfg.summary or cfg.plot_dir is not None:
		metrics_df = compute_sample_metrics(result.stats)
		_write_outputs(
			metrics_df,
			result.stats.occupancy,
			len(samples),
			cfg.summary_path() if cfg.summary else None,
			cfg.plot_dir,
		)
	return config.EX_OK


def cmd_summary(args: argparse.Namespace) -> int:
	paths = read_manifest(args.manifest)
	samples = sample_names(paths)
	try:
		df = load_matrix(args.matrix, samples)
	except FileNotFoundError as exc:
		raise SourceUnavailable(args.matrix, exc.strerror or str(exc)) from exc
	log_info(f"Loaded {len(df):,} rows x {len(samples)} samples from {args.matrix}")
	metrics_df = matrix_sample_metrics(df, samples)
	occupancy = {int(k): int(v) for k, v in row_occupancy(df, samples).value_counts().items()}
	out = args.out or f"{args.matrix}.summary.tsv"
	_write_outputs(metrics_df, occupancy, len(samples), out, Path(args.plot_dir) if args.plot_dir else None)
	return config.EX_OK


def build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="vcf-admatrix", description="Allele-depth matrix from single-sample VCFs")
	sub = p.add_subparsers(dest="command")
	sp = sub.add_parser("build", help="Merge sorted single-sample VCFs into allele-depth matrices")
	sp.add_argument("--manifest", required=True, help="File listing one VCF / VCF.GZ path per line")
	sp.add_argument("--out", required=True, help="Output prefix; writes <prefix>.<rule>.tsv per rule")
	sp.add_argument("--rule", nargs='+', default=list(config.DEFAULT_RULES), choices=sorted(RULES),
					help="Extraction rule(s); one matrix per rule")
	sp.add_argument("--chrom-order", default=config.DEFAULT_CHROM_ORDER, choices=sorted(COMPARATORS),
					help="Chromosome order the inputs are sorted by")
	sp.add_argument("--gzip", action="store_true", help="gzip-compress the matrices")
	sp.add_argument("--summary", action="store_true", help="Write <prefix>.summary.tsv with per-sample counts")
	sp.add_argument("--plot-dir", default=None, help="Write QC plots to this directory")
	sp.set_defaults(func=cmd_build)

	sp2 = sub.add_parser("summary", help="Per-sample summary of an existing matrix")
	sp2.add_argument("--matrix", required=True, help="Matrix TSV (optionally .gz)")
	sp2.add_argument("--manifest", required=True, help="Manifest the matrix was built from (column order)")
	sp2.add_argument("--out", default=None, help="Summary TSV path (default: <matrix>.summary.tsv)")
	sp2.add_argument("--plot-dir", default=None, help="Write QC plots to this directory")
	sp2.set_defaults(func=cmd_summary)
	return p


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	if not hasattr(args, 'func'):
		parser.print_help()
		return config.EX_USAGE
	try:
		return args.func(args)
	except ADMatrixError as exc:
		log_error(str(exc))
		return exc.exit_code
	except ValueError as exc:
		log_error(str(exc))
		return config.EX_DATAERR
	except KeyboardInterrupt:
		log_error("Interrupted; matrices are complete up to the last written row")
		return config.EX_INTERRUPTED


if __name__ == "__main__":  # pragma: no cover
	sys.exit(main())
