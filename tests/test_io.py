"""Tests for variant, domain, PTM and gene-config table I/O."""

import logging

import polars as pl
import pytest
import yaml
from polars.testing import assert_frame_equal

from protein_lollipop.io import (
    VARIANT_COLUMNS,
    load_domain_table,
    load_gene_config,
    load_ptm_table,
    load_variant_data,
    write_domain_table,
    write_ptm_table,
    write_yaml_sidecar,
)
from protein_lollipop.uniprot.models import DOMAIN_SCHEMA, PTM_SCHEMA


def test_load_variant_data(variant_file):
    df = load_variant_data(variant_file)

    assert df.height == 6
    assert df.columns == VARIANT_COLUMNS
    assert df["POS"].dtype == pl.Int64
    assert df["max_allele_frequency"].dtype == pl.Float64
    assert df["genotype"].dtype == pl.Utf8
    assert df["genotype"].to_list()[-1] == "0/0"


def test_load_variant_data_keeps_allele_strings(tmp_path):
    """Alleles like T or numeric-looking genotypes are not type-inferred."""
    path = tmp_path / "v.tsv"
    path.write_text(
        "gene_symbol\tPOS\tREF\tALT\tgenotype\n"
        "TEST1\t10\tT\tF\t1/1\n"
    )

    df = load_variant_data(path)

    assert df["REF"].to_list() == ["T"]
    assert df["ALT"].to_list() == ["F"]


def test_load_variant_data_missing_columns_warns(tmp_path, caplog):
    """Missing columns are a warning, not an error."""
    path = tmp_path / "partial.tsv"
    path.write_text("gene_symbol\tPOS\nTEST1\t10\n")

    with caplog.at_level(logging.WARNING):
        df = load_variant_data(path)

    assert df.height == 1
    assert "Missing columns" in caplog.text
    assert "consequence" in caplog.text


def test_load_variant_data_bad_numbers_become_null(tmp_path):
    path = tmp_path / "bad.tsv"
    path.write_text("gene_symbol\tPOS\tmax_allele_frequency\nTEST1\tabc\t.\n")

    df = load_variant_data(path)

    assert df["POS"].to_list() == [None]
    assert df["max_allele_frequency"].to_list() == [None]


def test_load_variant_data_custom_separator(tmp_path):
    path = tmp_path / "v.csv"
    path.write_text("gene_symbol,POS\nTEST1,10\n")

    df = load_variant_data(path, separator=",")

    assert df["POS"].to_list() == [10]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_variant_data(tmp_path / "missing.tsv")


def test_domain_table_round_trip(tmp_path):
    domains = pl.DataFrame(
        {
            "gene": ["TEST1", "TEST1"],
            "domain_name": ["Kinase", "SH2"],
            "start": [10, 120],
            "end": [80, 200],
        },
        schema=DOMAIN_SCHEMA,
    )

    path = write_domain_table(domains, tmp_path / "out" / "domains.tsv")
    loaded = load_domain_table(path)

    assert path.read_text().splitlines()[0] == "gene\tdomain_name\tstart\tend"
    assert_frame_equal(loaded, domains)


def test_ptm_table_round_trip(tmp_path):
    ptms = pl.DataFrame(
        {
            "gene": ["TEST1"],
            "ptm_type": ["Phosphorylation"],
            "position": [15],
            "description": ["Phosphoserine"],
        },
        schema=PTM_SCHEMA,
    )

    loaded = load_ptm_table(write_ptm_table(ptms, tmp_path / "ptms.tsv"))

    assert_frame_equal(loaded, ptms)


def test_domain_table_missing_columns(tmp_path):
    path = tmp_path / "domains.tsv"
    path.write_text("gene\tdomain_name\tstart\nTEST1\tKinase\t10\n")

    with pytest.raises(ValueError, match="end"):
        load_domain_table(path)


def test_ptm_table_missing_columns(tmp_path):
    path = tmp_path / "ptms.tsv"
    path.write_text("gene\tposition\nTEST1\t10\n")

    with pytest.raises(ValueError, match="ptm_type"):
        load_ptm_table(path)


def test_domain_table_drops_rows_without_coordinates(tmp_path):
    path = tmp_path / "domains.tsv"
    path.write_text(
        "gene\tdomain_name\tstart\tend\n"
        "TEST1\tKinase\t10\t80\n"
        "TEST1\tBroken\t\t90\n"
    )

    df = load_domain_table(path)

    assert df["domain_name"].to_list() == ["Kinase"]


def test_domain_table_extra_columns_ignored(tmp_path):
    path = tmp_path / "domains.tsv"
    path.write_text(
        "gene\tdomain_name\tstart\tend\tsource\n"
        "TEST1\tKinase\t10\t80\tPfam\n"
    )

    assert load_domain_table(path).columns == list(DOMAIN_SCHEMA)


def test_load_gene_config(tmp_path):
    path = tmp_path / "genes.tsv"
    path.write_text("gene_name\tprotein_length\nTEST1\t500\nTEST2\t\n")

    df = load_gene_config(path)

    assert df["gene_name"].to_list() == ["TEST1", "TEST2"]
    assert df["protein_length"].to_list() == [500, None]


def test_load_gene_config_without_lengths(tmp_path):
    path = tmp_path / "genes.tsv"
    path.write_text("gene_name\nTEST1\n")

    df = load_gene_config(path)

    assert df["protein_length"].dtype == pl.Int64
    assert df["protein_length"].to_list() == [None]


def test_load_gene_config_missing_gene_name(tmp_path):
    path = tmp_path / "genes.tsv"
    path.write_text("gene\tprotein_length\nTEST1\t500\n")

    with pytest.raises(ValueError, match="Gene config file must have column: gene_name"):
        load_gene_config(path)


def test_write_yaml_sidecar(tmp_path):
    path = write_yaml_sidecar(
        {"b": 1, "a": {"nested": [1, 2]}},
        tmp_path / "sub" / "meta.yaml",
    )

    text = path.read_text()
    assert text.index("b:") < text.index("a:")
    assert yaml.safe_load(text) == {"b": 1, "a": {"nested": [1, 2]}}
