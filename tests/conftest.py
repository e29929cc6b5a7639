"""Pytest fixtures for snpeff_extract tests."""

import gzip
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

VCF_META = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID=chr1,length=1000000>\n"
    '##INFO=<ID=ANN,Number=.,Type=String,Description="Functional annotations: '
    "'Allele | Annotation | Annotation_Impact | Gene_Name | Gene_ID | Feature_Type | "
    "Feature_ID | Transcript_BioType | Rank | HGVS.c | HGVS.p | cDNA.pos / cDNA.length | "
    "CDS.pos / CDS.length | AA.pos / AA.length | Distance | ERRORS / WARNINGS / INFO' \">\n"
)

FIXED_HEADER = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT"]


def ann_entry(
    allele: str,
    effect: str = "missense_variant",
    gene_id: str = "CAB11_002014",
    hgvs_p: str = "p.Ser643Pro",
    extra: Sequence[str] = ("",),
) -> str:
    """Build one snpEff ANN entry with 15 fields plus ``extra`` overflow tokens."""
    fields = [
        allele,
        effect,
        "MODERATE",
        "FKS1",
        gene_id,
        "transcript",
        f"{gene_id}-T",
        "protein_coding",
        "1/1",
        "c.1927T>C",
        hgvs_p,
        "1927/5700",
        "1927/5700",
        "643/1899",
        "",
    ]
    return "|".join(fields + list(extra))


@pytest.fixture
def make_ann() -> Callable[..., str]:
    """Factory for ANN entries."""
    return ann_entry


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a VCF from (CHROM, POS, REF, ALT, INFO, genotypes...) rows.

    Rows use FORMAT=GT; ``samples`` names the genotype columns.
    """

    def _write(
        rows: Sequence[Sequence[object]],
        samples: Sequence[str] = ("S1",),
        name: str = "calls.ann.vcf",
        compress: bool = False,
    ) -> Path:
        lines = [VCF_META, "\t".join(FIXED_HEADER + list(samples)) + "\n"]
        for chrom, pos, ref, alt, info, *genotypes in rows:
            fields = [chrom, str(pos), ".", ref, alt, "50", "PASS", info, "GT"]
            lines.append("\t".join(fields + [str(g) for g in genotypes]) + "\n")
        text = "".join(lines)

        path = tmp_path / name
        if compress:
            with gzip.open(path, "wt") as f:
                f.write(text)
        else:
            path.write_text(text)
        return path

    return _write


@pytest.fixture
def hotspot_vcf(write_vcf: Callable[..., Path]) -> Path:
    """Single FKS1 hotspot 1 site carried by S1 and S3, no-call in S2.

    221640 AGT>AGC, missense p.Ser643Pro in CAB11_002014.
    """
    info = "DP=30;ANN=" + ann_entry("AGC")
    return write_vcf(
        [("chr1", 221640, "AGT", "AGC", info, "1", ".", "1:30")],
        samples=("S1", "S2", "S3"),
    )
