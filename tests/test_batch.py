"""Tests for batch plot generation."""

from unittest.mock import MagicMock

import polars as pl
import pytest
import yaml

from protein_lollipop.batch import SUMMARY_FILENAME, batch_process_genes
from protein_lollipop.uniprot.models import RetrievalResult


@pytest.fixture
def gene_config_file(tmp_path):
    path = tmp_path / "genes.tsv"
    path.write_text(
        "gene_name\tprotein_length\n"
        "TEST1\t500\n"
        "TEST2\t\n"
        "NOVARS\t300\n"
    )
    return path


@pytest.fixture
def small_plot():
    return {"width": 4, "height": 3, "dpi": 40}


def test_batch_statuses(variant_file, gene_config_file, tmp_path, small_plot):
    """Success, no_variants and error are recorded per gene; the batch continues."""
    output_dir = tmp_path / "out"
    retriever = MagicMock(return_value=RetrievalResult())

    report = batch_process_genes(
        variant_file,
        gene_config_file,
        output_dir=output_dir,
        retriever=retriever,
        **small_plot,
    )

    statuses = {r.gene_name: r.status for r in report.results}
    assert statuses == {"TEST1": "success", "TEST2": "error", "NOVARS": "no_variants"}
    assert report.status_counts == {"success": 1, "no_variants": 1, "error": 1}

    assert (output_dir / "TEST1_lollipop.png").exists()
    assert not (output_dir / "TEST2_lollipop.png").exists()
    assert not (output_dir / "NOVARS_lollipop.png").exists()

    error = next(r for r in report.results if r.status == "error")
    assert "Could not retrieve protein length for TEST2" in error.message


def test_batch_uses_retrieved_length(variant_file, gene_config_file, tmp_path, small_plot):
    retriever = MagicMock(return_value=RetrievalResult(protein_length=400))

    report = batch_process_genes(
        variant_file,
        gene_config_file,
        output_dir=tmp_path,
        retriever=retriever,
        **small_plot,
    )

    assert [r.status for r in report.results] == ["success", "success", "no_variants"]
    assert (tmp_path / "TEST2_lollipop.png").exists()


def test_batch_applies_filters(variant_file, tmp_path, small_plot):
    genes = pl.DataFrame({"gene_name": ["TEST1"], "protein_length": [500]})

    report = batch_process_genes(
        variant_file,
        genes,
        output_dir=tmp_path,
        impacts=["HIGH"],
        max_allele_frequency=0.01,
        auto_retrieve=False,
        **small_plot,
    )

    assert report.input_variants == 6
    assert report.filtered_variants == 2
    result = report.results[0]
    assert result.status == "success"
    assert result.variant_count == 1
    assert result.unique_positions == 1


def test_batch_all_filtered_is_no_variants(variant_file, tmp_path, small_plot):
    genes = pl.DataFrame({"gene_name": ["TEST1"]})

    report = batch_process_genes(
        variant_file,
        genes,
        output_dir=tmp_path,
        max_allele_frequency=0.00001,
        auto_retrieve=False,
        **small_plot,
    )

    assert report.results[0].status == "no_variants"


def test_batch_without_auto_retrieve(variant_file, gene_config_file, tmp_path, small_plot):
    report = batch_process_genes(
        variant_file,
        gene_config_file,
        output_dir=tmp_path,
        auto_retrieve=False,
        **small_plot,
    )

    error = next(r for r in report.results if r.gene_name == "TEST2")
    assert error.status == "error"
    assert "auto-retrieval is disabled" in error.message


def test_batch_summary_sidecar(variant_file, gene_config_file, tmp_path, small_plot):
    batch_process_genes(
        variant_file,
        gene_config_file,
        output_dir=tmp_path,
        impacts=["HIGH", "MODERATE"],
        retriever=lambda gene: RetrievalResult(),
        **small_plot,
    )

    summary = yaml.safe_load((tmp_path / SUMMARY_FILENAME).read_text())

    assert "timestamp" in summary
    assert summary["total_genes"] == 3
    assert summary["status_counts"] == {"success": 1, "no_variants": 1, "error": 1}
    assert summary["parameters"]["impacts"] == ["HIGH", "MODERATE"]
    genes = {g["gene_name"]: g for g in summary["genes"]}
    assert genes["TEST1"]["output_file"].endswith("TEST1_lollipop.png")
    assert "message" in genes["TEST2"]
    assert "output_file" not in genes["NOVARS"]


def test_batch_loads_domain_and_ptm_files(variant_file, tmp_path, small_plot):
    domain_file = tmp_path / "domains.tsv"
    domain_file.write_text("gene\tdomain_name\tstart\tend\nTEST1\tKinase\t10\t80\n")
    ptm_file = tmp_path / "ptms.tsv"
    ptm_file.write_text("gene\tptm_type\tposition\tdescription\nTEST1\tPhosphorylation\t15\tx\n")
    retriever = MagicMock()
    genes = pl.DataFrame({"gene_name": ["TEST1"], "protein_length": [500]})

    report = batch_process_genes(
        variant_file,
        genes,
        domain_file=domain_file,
        ptm_file=ptm_file,
        output_dir=tmp_path / "out",
        retriever=retriever,
        **small_plot,
    )

    assert report.results[0].status == "success"
    retriever.assert_not_called()


def test_batch_missing_optional_files_are_skipped(variant_file, tmp_path, small_plot):
    genes = pl.DataFrame({"gene_name": ["TEST1"], "protein_length": [500]})

    report = batch_process_genes(
        variant_file,
        genes,
        domain_file=tmp_path / "nope_domains.tsv",
        ptm_file=tmp_path / "nope_ptms.tsv",
        output_dir=tmp_path,
        auto_retrieve=False,
        **small_plot,
    )

    assert report.results[0].status == "success"


def test_batch_gene_config_requires_gene_name(variant_file, tmp_path):
    with pytest.raises(ValueError, match="gene_name"):
        batch_process_genes(variant_file, pl.DataFrame({"gene": ["TEST1"]}), output_dir=tmp_path)
