"""Shared fixtures: a fake UniProt served through httpx.MockTransport."""

import re

import httpx
import polars as pl
import pytest

from protein_lollipop.uniprot.fetch import UniProtClient

BASE_URL = "https://uniprot.test"


def _feature(ftype, start, end=None, description=None):
    location = {"start": {"value": start}, "end": {"value": end if end is not None else start}}
    feature = {"type": ftype, "location": location}
    if description is not None:
        feature["description"] = description
    return feature


# Gene symbol -> (accession, entry JSON)
UNIPROT_ENTRIES = {
    "TEST1": ("P00001", {
        "primaryAccession": "P00001",
        "genes": [{"geneName": {"value": "TEST1"}}],
        "sequence": {"value": "M" * 500, "length": 500},
        "features": [
            _feature("Domain", 10, 80, "Kinase"),
            _feature("Repeat", 200, 240),
            _feature("Modified residue", 15, description="Phosphoserine"),
            _feature("Modified residue", 300, description="N6-acetyllysine"),
            _feature("Signal", 1, 20, "Signal peptide"),
        ],
    }),
    "TEST2": ("P00002", {
        "primaryAccession": "P00002",
        "genes": [{"geneName": {"value": "TEST2"}}],
        "sequence": {"value": "M" * 500, "length": 500},
        "features": [],
    }),
    "TEST3": ("P00003", {
        "primaryAccession": "P00003",
        "sequence": {"length": 350},
        "features": "not-a-list",
    }),
}


class FakeUniProt:
    """Route table for the fake UniProt API; records every request."""

    def __init__(self, entries=None):
        self.entries = dict(UNIPROT_ENTRIES if entries is None else entries)
        self.requests: list[httpx.Request] = []
        self.fail_with: Exception | None = None
        self.status_queue: list[int] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_with is not None:
            raise self.fail_with

        if self.status_queue:
            return httpx.Response(self.status_queue.pop(0), json={})

        path = request.url.path
        if path == "/uniprotkb/search":
            query = request.url.params.get("query", "")
            match = re.search(r"gene:(\S+)", query)
            gene = match.group(1) if match else ""
            if gene in self.entries:
                accession = self.entries[gene][0]
                return httpx.Response(200, json={"results": [{"primaryAccession": accession}]})
            return httpx.Response(200, json={"results": []})

        for accession, entry in self.entries.values():
            if path == f"/uniprotkb/{accession}.json":
                return httpx.Response(200, json=entry)

        return httpx.Response(404, json={"messages": ["not found"]})

    @property
    def request_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_uniprot():
    return FakeUniProt()


@pytest.fixture
def uniprot_client(fake_uniprot):
    """UniProtClient whose HTTP traffic goes to fake_uniprot."""
    http_client = httpx.Client(transport=httpx.MockTransport(fake_uniprot.handler))
    client = UniProtClient(base_url=BASE_URL, http_client=http_client)
    yield client
    http_client.close()


@pytest.fixture
def sample_variants():
    """Variant table for two genes with a recurrent position and a 0/0 row."""
    return pl.DataFrame({
        "Family_ID": ["FAM001", "FAM002", "FAM001", "FAM003", "FAM004", "FAM005"],
        "CHROM": ["chr1"] * 6,
        "POS": [100, 100, 250, 400, 50, 120],
        "REF": ["A", "A", "C", "G", "T", "G"],
        "ALT": ["G", "G", "T", "A", "C", "C"],
        "gene_symbol": ["TEST1", "TEST1", "TEST1", "TEST1", "TEST2", "TEST1"],
        "max_allele_frequency": [0.001, 0.001, 0.05, 0.0001, 0.002, 0.003],
        "impact": ["MODERATE", "MODERATE", "LOW", "HIGH", "HIGH", "MODIFIER"],
        "consequence": [
            "missense_variant",
            "missense_variant",
            "synonymous_variant",
            "stop_gained",
            "frameshift_variant",
            "mystery_variant",
        ],
        "sample": ["S1", "S2", "S1", "S3", "S4", "S5"],
        "genotype": ["0/1", "1/1", "0/1", "0/1", "0/1", "0/0"],
    })


@pytest.fixture
def variant_file(tmp_path, sample_variants):
    path = tmp_path / "variants.tsv"
    sample_variants.write_csv(path, separator="\t")
    return path
