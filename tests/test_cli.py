"""End-to-end tests for the vcf-admatrix command line."""
import gzip

import matplotlib

matplotlib.use("Agg")

import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from vcf_admatrix import cli, config  # noqa: E402


@pytest.fixture
def cohort(tmp_path, write_vcf):
    """Three samples, one of them empty, listed in a manifest."""
    write_vcf("A.vcf", [("chr1", 100, "0/1:5,3:8")])
    write_vcf("B.vcf.gz", [("chr1", 100, "0/1:2,6:8"), ("chr1", 150, "1/1:0,9:9")], compress=True)
    write_vcf("C.vcf", [])
    manifest = tmp_path / "vcfs.txt"
    manifest.write_text("A.vcf\nB.vcf.gz\nC.vcf\n")
    return tmp_path, manifest


def test_build_writes_one_matrix_per_rule(cohort):
    tmp_path, manifest = cohort
    prefix = tmp_path / "out" / "cohort"
    rc = cli.main(["build", "--manifest", str(manifest), "--out", str(prefix),
                   "--rule", "ref", "ref_alt", "ref_depth"])
    assert rc == config.EX_OK
    assert (tmp_path / "out" / "cohort.ref.tsv").read_text() == "chr1\t100\t5\t2\t.\nchr1\t150\t.\t0\t.\n"
    assert (tmp_path / "out" / "cohort.ref_alt.tsv").read_text() == "chr1\t100\t5,3\t2,6\t.\nchr1\t150\t.\t0,9\t.\n"
    assert (tmp_path / "out" / "cohort.ref_depth.tsv").read_text() == "chr1\t100\t5,8\t2,8\t.\nchr1\t150\t.\t0,9\t.\n"


def test_build_gzip_summary_and_plots(cohort):
    tmp_path, manifest = cohort
    prefix = tmp_path / "cohort"
    plot_dir = tmp_path / "plots"
    rc = cli.main(["build", "--manifest", str(manifest), "--out", str(prefix), "--rule", "ref",
                   "--gzip", "--summary", "--plot-dir", str(plot_dir)])
    assert rc == config.EX_OK
    with gzip.open(tmp_path / "cohort.ref.tsv.gz", "rt") as fh:
        assert fh.read().splitlines()[0] == "chr1\t100\t5\t2\t."
    summary = pd.read_csv(tmp_path / "cohort.summary.tsv", sep="\t")
    assert summary["Sample"].tolist() == ["A", "B", "C"]
    assert summary["Records"].tolist() == [1, 2, 0]
    assert (plot_dir / "sample_called_rate.png").exists()
    assert (plot_dir / "row_occupancy.png").exists()


def test_summary_of_existing_matrix(cohort):
    tmp_path, manifest = cohort
    prefix = tmp_path / "cohort"
    assert cli.main(["build", "--manifest", str(manifest), "--out", str(prefix), "--rule", "ref_alt"]) == 0
    out = tmp_path / "s.tsv"
    rc = cli.main(["summary", "--matrix", str(tmp_path / "cohort.ref_alt.tsv"),
                   "--manifest", str(manifest), "--out", str(out)])
    assert rc == config.EX_OK
    summary = pd.read_csv(out, sep="\t")
    assert summary["Records"].tolist() == [1, 2, 0]
    assert summary["CalledRate"].tolist() == pytest.approx([0.5, 1.0, 0.0])


def test_missing_vcf_exits_unavailable(tmp_path, capsys):
    manifest = tmp_path / "vcfs.txt"
    manifest.write_text("nope.vcf\n")
    rc = cli.main(["build", "--manifest", str(manifest), "--out", str(tmp_path / "x")])
    assert rc == config.EX_UNAVAILABLE
    assert "nope.vcf" in capsys.readouterr().err


def test_missing_manifest_exits_unavailable(tmp_path):
    rc = cli.main(["build", "--manifest", str(tmp_path / "none.txt"), "--out", str(tmp_path / "x")])
    assert rc == config.EX_UNAVAILABLE


def test_empty_manifest_exits_unavailable(tmp_path):
    manifest = tmp_path / "vcfs.txt"
    manifest.write_text("# nothing here\n")
    rc = cli.main(["build", "--manifest", str(manifest), "--out", str(tmp_path / "x")])
    assert rc == config.EX_UNAVAILABLE


def test_malformed_record_exits_dataerr_with_partial_output(tmp_path, capsys):
    (tmp_path / "bad.vcf").write_text(
        "1\t1\t.\tA\tG\t.\t.\t.\tGT:AD:DP\t0/1:1,1:2\n"
        "1\t2\tgarbage\n"
    )
    manifest = tmp_path / "vcfs.txt"
    manifest.write_text("bad.vcf\n")
    rc = cli.main(["build", "--manifest", str(manifest), "--out", str(tmp_path / "m"), "--rule", "ref"])
    assert rc == config.EX_DATAERR
    err = capsys.readouterr().err
    assert "bad.vcf:2" in err
    assert (tmp_path / "m.ref.tsv").read_text() == "1\t1\t1\n"


def test_no_subcommand_prints_help(capsys):
    assert cli.main([]) == config.EX_USAGE
    assert "usage" in capsys.readouterr().out


def test_unknown_rule_rejected_by_parser(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["build", "--manifest", "x", "--out", "y", "--rule", "bogus"])
    assert exc_info.value.code == 2


def test_summary_with_repeated_file_names(tmp_path, write_vcf):
    (tmp_path / "b1").mkdir()
    (tmp_path / "b2").mkdir()
    write_vcf("b1/S1.vcf", [("1", 5, "0/1:3,1:4")])
    write_vcf("b2/S1.vcf", [("1", 5, "0/1:2,2:4"), ("1", 8, "0/1:6,0:6")])
    manifest = tmp_path / "vcfs.txt"
    manifest.write_text("b1/S1.vcf\nb2/S1.vcf\n")
    prefix = tmp_path / "dup"
    assert cli.main(["build", "--manifest", str(manifest), "--out", str(prefix), "--rule", "ref"]) == 0
    out = tmp_path / "dup.summary.tsv"
    rc = cli.main(["summary", "--matrix", str(tmp_path / "dup.ref.tsv"), "--manifest", str(manifest),
                   "--out", str(out)])
    assert rc == config.EX_OK
    summary = pd.read_csv(out, sep="\t")
    assert summary["Sample"].tolist() == ["S1", "S1_2"]
    assert summary["Records"].tolist() == [1, 2]
