import gzip

import pandas as pd
import pytest

from vcf_admatrix.core.merge import MergeStats
from vcf_admatrix.metrics import compute_sample_metrics, load_matrix, matrix_sample_metrics, row_occupancy

MATRIX = "1\t10\t5\t.\n1\t20\t3\t4\n2\t5\t.\t7\n2\t9\t.\t8\n"


def test_compute_sample_metrics_from_stats():
    stats = MergeStats(["A", "B"], rows=4, records=[2, 4], missing_depth=[1, 0])
    df = compute_sample_metrics(stats)
    assert list(df.columns) == ["Sample", "Records", "MissingDepth", "CalledRate", "MissingRate"]
    a, b = df.iloc[0], df.iloc[1]
    assert a.Records == 2 and a.MissingDepth == 1
    assert a.CalledRate == pytest.approx(0.25)
    assert a.MissingRate == pytest.approx(0.75)
    assert b.CalledRate == pytest.approx(1.0)


def test_compute_sample_metrics_no_rows():
    df = compute_sample_metrics(MergeStats(["A"]))
    assert df.iloc[0].CalledRate == 0.0
    assert df.iloc[0].MissingRate == 0.0


@pytest.mark.parametrize("compress", [False, True])
def test_load_matrix(tmp_path, compress):
    path = tmp_path / ("m.tsv.gz" if compress else "m.tsv")
    if compress:
        with gzip.open(path, "wt") as fh:
            fh.write(MATRIX)
    else:
        path.write_text(MATRIX)
    df = load_matrix(str(path), ["A", "B"])
    assert list(df.columns) == ["Chrom", "Pos", "A", "B"]
    assert df["Pos"].tolist() == [10, 20, 5, 9]
    assert df["Chrom"].tolist() == ["1", "1", "2", "2"]
    assert pd.isna(df.loc[0, "B"])
    assert df.loc[1, "A"] == "3"


def test_load_matrix_keeps_pairs_as_text(tmp_path):
    path = tmp_path / "m.tsv"
    path.write_text("1\t10\t5,3\t.\n")
    df = load_matrix(str(path), ["A", "B"])
    assert df.loc[0, "A"] == "5,3"


def test_load_matrix_sample_count_mismatch(tmp_path):
    path = tmp_path / "m.tsv"
    path.write_text(MATRIX)
    with pytest.raises(ValueError):
        load_matrix(str(path), ["A", "B", "C"])


def test_load_empty_matrix(tmp_path):
    path = tmp_path / "m.tsv"
    path.write_text("")
    df = load_matrix(str(path), ["A"])
    assert df.empty
    assert list(df.columns) == ["Chrom", "Pos", "A"]


def test_matrix_sample_metrics_and_occupancy(tmp_path):
    path = tmp_path / "m.tsv"
    path.write_text(MATRIX)
    df = load_matrix(str(path), ["A", "B"])
    summary = matrix_sample_metrics(df, ["A", "B"])
    assert summary["Records"].tolist() == [2, 3]
    assert summary["CalledRate"].tolist() == pytest.approx([0.5, 0.75])
    assert row_occupancy(df, ["A", "B"]).tolist() == [1, 2, 1, 1]


def test_matrix_metrics_count_columns_by_position(tmp_path):
    path = tmp_path / "m.tsv"
    path.write_text(MATRIX)
    df = load_matrix(str(path), ["S1", "S1"])
    assert matrix_sample_metrics(df, ["S1", "S1"])["Records"].tolist() == [2, 3]
    assert row_occupancy(df, ["S1", "S1"]).tolist() == [1, 2, 1, 1]
