import os

import pandas as pd
import pytest

import fungar.main
from fungar.database import resolve_database_dir, species_files
from fungar.diamond import check_dependencies, diamond_command
from fungar.errors import DependencyError, InputError
from fungar.globals import ALIGNMENT_FIELDS
from fungar.main import input_streams, main, parse_arguments, run_pipeline

SPECIES = "Candida_albicans"
FORWARD_SEQ = "AAAAA" + "L" + "A" * 20


@pytest.mark.parametrize("explicit,environ,expected", [
    ("/db", {"FUNGAR_DB": "/env", "CONDA_PREFIX": "/conda"}, "/db"),
    (None, {"FUNGAR_DB": "/env", "CONDA_PREFIX": "/conda"}, "/env"),
    (None, {"CONDA_PREFIX": "/conda"}, os.path.join("/conda", "share", "FUNGAR")),
    (None, {}, "database"),
])
def test_resolve_database_dir(explicit, environ, expected):
    assert resolve_database_dir(explicit, environ=environ) == expected


def test_species_files_missing(tmp_path):
    with pytest.raises(InputError):
        species_files(str(tmp_path), SPECIES)


def test_diamond_command():
    cmd = diamond_command("r1.fq.gz", "out.aln", "db.dmnd", cpus=8, min_pident=30)
    assert cmd[:2] == ["diamond", "blastx"]
    assert cmd[cmd.index("--threads") + 1] == "8"
    assert cmd[cmd.index("--id") + 1] == "30"
    start = cmd.index("--outfmt") + 2
    assert cmd[start:start + len(ALIGNMENT_FIELDS)] == ALIGNMENT_FIELDS


def test_check_dependencies_missing():
    with pytest.raises(DependencyError):
        check_dependencies("surely-not-an-installed-aligner")


@pytest.mark.parametrize("kwargs,labels", [
    ({"r1": "a", "r2": "b"}, ["R1", "R2"]),
    ({"se": "a"}, ["SE"]),
])
def test_input_streams(kwargs, labels):
    assert [label for _, label in input_streams(**kwargs)] == labels


@pytest.mark.parametrize("kwargs", [{}, {"r1": "a"}, {"r2": "b"}, {"r1": "a", "r2": "b", "se": "c"}])
def test_input_streams_invalid(kwargs):
    with pytest.raises(InputError):
        input_streams(**kwargs)


def test_parse_arguments():
    args = parse_arguments(["-id", "p1", "-sp", SPECIES, "-o", "out", "-1", "r1.fq", "-2", "r2.fq",
                            "-c", "2", "-orf", "30", "-code", "12", "--min-pident", "40", "--keep"])
    assert (args.sample, args.species, args.outdir) == ("p1", SPECIES, "out")
    assert (args.r1, args.r2, args.se) == ("r1.fq", "r2.fq", None)
    assert (args.cpus, args.min_orf, args.genetic_code, args.min_pident) == (2, 30, 12, 40)
    assert args.keep and not args.plot
    assert args.min_query_cover == 10


@pytest.fixture
def workspace(tmp_path, catalog_file, make_line, monkeypatch):
    """ Database directory, read files and a fake DIAMOND that writes fixed alignments """
    db_dir = os.path.dirname(catalog_file)
    open(os.path.join(db_dir, "{}_db.dmnd".format(SPECIES)), "w").close()
    reads = {}
    for label in ("R1", "R2", "SE"):
        reads[label] = str(tmp_path / "{}.fastq.gz".format(label))
        open(reads[label], "w").close()

    alignments = {
        "R1": [make_line("read1", "ERG11", 45, 70, FORWARD_SEQ), make_line("read3", "CDR1", 1, 30, "A" * 30)],
        "R2": [make_line("read1", "ERG11", 70, 45, FORWARD_SEQ[::-1]), "truncated\tline"],
        "SE": [make_line("read7", "FKS1", 630, 650, "A" * 11 + "S" + "A" * 9)],
    }
    calls = []

    def fake_diamond(query, output, protein_db, label, log_path, **kwargs):
        key = os.path.basename(output).rsplit("_", 1)[1].split(".")[0]
        calls.append((key, kwargs))
        with open(output, "w") as out:
            out.write("\n".join(alignments[key]) + "\n")
        return output

    monkeypatch.setattr(fungar.main, "check_dependencies", lambda: "/usr/bin/diamond")
    monkeypatch.setattr(fungar.main, "run_diamond", fake_diamond)
    return db_dir, reads, calls, tmp_path / "out"


def test_paired_pipeline(workspace):
    db_dir, reads, calls, outdir = workspace
    results, summary = run_pipeline("p1", SPECIES, str(outdir), r1=reads["R1"], r2=reads["R2"],
                                    database_dir=db_dir, min_pident=20)
    assert [c[0] for c in calls] == ["R1", "R2"]
    assert calls[0][1]["min_pident"] == 20

    written = pd.read_csv(outdir / "p1_results.csv")
    assert written.values.tolist() == [["read1", "ERG11", 50, "F", "L", "fluconazole", "R1"]]
    written_summary = pd.read_csv(outdir / "p1_summary.csv")
    assert written_summary.values.tolist() == [["ERG11", 50, "F", "L", "fluconazole", 2]]
    assert len(results) == 1 and summary["Support_Reads"].tolist() == [2]

    assert not (outdir / "p1_R1.aln").exists()
    assert not (outdir / "p1_R2.aln").exists()
    log = (outdir / "FUNGAR.p1.log").read_text()
    assert "Analysis complete for sample p1" in log
    assert "1 malformed" in log


def test_single_end_keep_and_plot(workspace):
    db_dir, reads, calls, outdir = workspace
    results, summary = run_pipeline("s1", SPECIES, str(outdir), se=reads["SE"], database_dir=db_dir,
                                    keep=True, plot=True)
    assert results["Read"].tolist() == ["SE"]
    assert summary.values.tolist() == [["FKS1", 641, "F", "S", "caspofungin", 1]]
    assert (outdir / "s1_SE.aln").exists()
    assert (outdir / "s1_support.pdf").exists()


def test_no_findings_still_writes_headers(workspace, tmp_path):
    db_dir, reads, calls, outdir = workspace
    other = tmp_path / "other.csv"
    other.write_text("gene,position,reference,mutation,fungicide\nCDR1,999,A,V,fluconazole\n")
    os.replace(str(other), os.path.join(db_dir, "{}_gene_mutations.csv".format(SPECIES)))
    run_pipeline("e1", SPECIES, str(outdir), se=reads["SE"], database_dir=db_dir, plot=True)
    with open(outdir / "e1_results.csv") as f:
        assert f.read().strip() == "Sample,Gene,Position,Reference,Mutation,Fungicide,Read"
    with open(outdir / "e1_summary.csv") as f:
        assert f.read().strip() == "Gene,Position,Reference,Mutation,Fungicide,Support_Reads"
    assert not (outdir / "e1_support.pdf").exists()


def test_main_reports_fatal_errors(workspace, tmp_path):
    db_dir, reads, calls, outdir = workspace
    assert main(["-id", "m1", "-sp", "Unknown_species", "-o", str(outdir), "-s", reads["SE"],
                 "-d", db_dir]) == 1
    assert main(["-id", "m1", "-sp", SPECIES, "-o", str(outdir), "-1", reads["R1"]]) == 1
    assert calls == []


def test_main_success(workspace):
    db_dir, reads, calls, outdir = workspace
    assert main(["-id", "m2", "-sp", SPECIES, "-o", str(outdir), "-s", reads["SE"], "-d", db_dir]) == 0
    assert (outdir / "m2_results.csv").exists()


@pytest.mark.parametrize("catalog_text,message", [
    ("gene,position,reference,fungicide\nERG11,50,F,fluconazole\n", "missing required columns: mutation"),
    ("gene,position,reference,mutation,fungicide\nERG11,fifty,F,L,fluconazole\n", "non-numeric position 'fifty'"),
    ("", "missing required columns"),
])
def test_main_reports_catalog_errors(workspace, catalog_text, message):
    db_dir, reads, calls, outdir = workspace
    catalog_path = os.path.join(db_dir, "{}_gene_mutations.csv".format(SPECIES))
    with open(catalog_path, "w") as f:
        f.write(catalog_text)
    assert main(["-id", "c1", "-sp", SPECIES, "-o", str(outdir), "-s", reads["SE"], "-d", db_dir]) == 1
    log = (outdir / "FUNGAR.c1.log").read_text()
    assert catalog_path in log
    assert message in log
    assert not (outdir / "c1_results.csv").exists()
