"""Data models for snpEff mutation extraction.

Column-name constants for the VCF and result tables, the parsed ANN entry,
the tagged genotype call and run statistics.

ANN field order follows the snpEff documentation:
http://pcingola.github.io/SnpEff/se_inputoutput/
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

# Fixed leading columns of a VCF body; everything after FORMAT is a sample
VCF_FIXED_COLUMNS: tuple[str, ...] = (
    "#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT",
)

# Site identity carried through the annotation melt
SITE_KEY_COLUMNS: list[str] = ["row_id", "#CHROM", "POS", "REF", "ALT"]

ANN_MARKER = "ANN="

ANN_FIELDS: tuple[str, ...] = (
    "allele",
    "effect",
    "putative_impact",
    "gene_name",
    "gene_id",
    "feature_type",
    "feature_id",
    "transcript_biotype",
    "rank_total",
    "hgvs_c",
    "hgvs_p",
    "cdna_pos_len",
    "cds_pos_len",
    "protein_pos_len",
    "distance",
)

OUTPUT_COLUMNS: list[str] = [
    "sample_id",
    "snpeff_gene_name",
    "region",
    "position",
    "mutation",
    "ref_sequence",
    "sample_sequence",
]


@dataclass(slots=True)
class AnnotationEntry:
    """One snpEff ANN entry.

    The first 15 pipe-delimited sub-fields map onto named attributes; any
    further tokens (snpEff's ERRORS / WARNINGS / INFO) are kept verbatim in
    ``extra_fields`` and only joined when ``err_warn_info`` is read.
    Missing sub-fields are None.
    """

    allele: str | None = None
    effect: str | None = None
    putative_impact: str | None = None
    gene_name: str | None = None
    gene_id: str | None = None
    feature_type: str | None = None
    feature_id: str | None = None
    transcript_biotype: str | None = None
    rank_total: str | None = None
    hgvs_c: str | None = None
    hgvs_p: str | None = None
    cdna_pos_len: str | None = None
    cds_pos_len: str | None = None
    protein_pos_len: str | None = None
    distance: str | None = None
    extra_fields: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "AnnotationEntry":
        """Parse a single ANN entry, e.g. ``AGC|missense_variant|MODERATE|...``.

        Never raises on short entries: absent sub-fields stay None.
        """
        tokens = text.split("|")
        named = dict(zip(ANN_FIELDS, tokens))
        return cls(**named, extra_fields=tuple(tokens[len(ANN_FIELDS):]))

    @property
    def err_warn_info(self) -> str | None:
        """Overflow sub-fields joined with ``|``, or None if there are none."""
        if not self.extra_fields:
            return None
        return "|".join(self.extra_fields)

    def as_row(self) -> dict[str, str | None]:
        row = {name: getattr(self, name) for name in ANN_FIELDS}
        row["err_warn_info"] = self.err_warn_info
        return row


class CallKind(Enum):
    """Which allele a sample carries at a site."""

    NO_CALL = auto()
    REFERENCE = auto()
    ALTERNATE = auto()


@dataclass(frozen=True, slots=True)
class GenotypeCall:
    """Decoded genotype code.

    Attributes:
        kind: No-call, reference or alternate
        alt_index: 1-based index into the ALT list (ALTERNATE only)
    """

    kind: CallKind
    alt_index: int = 0

    @classmethod
    def from_code(cls, code: int) -> "GenotypeCall":
        """Build a call from a VCF allele index (negative means no-call)."""
        if code < 0:
            return cls(CallKind.NO_CALL)
        if code == 0:
            return cls(CallKind.REFERENCE)
        return cls(CallKind.ALTERNATE, alt_index=code)

    def resolve(self, alleles: Sequence[str]) -> str | None:
        """Resolve against a site's ``[REF, ALT1, ALT2, ...]`` list.

        Returns None for no-calls and for alternate indexes the site does
        not have.
        """
        if self.kind is CallKind.NO_CALL:
            return None
        if self.kind is CallKind.REFERENCE:
            return alleles[0] if alleles else None
        if self.alt_index < len(alleles):
            return alleles[self.alt_index]
        return None


@dataclass
class PipelineStats:
    """Row counts at each pipeline stage, for the run summary."""

    sites_loaded: int = 0
    sites_in_regions: int = 0
    annotated_sites: int = 0
    annotation_entries: int = 0
    entries_passing_filters: int = 0
    sample_calls: int = 0
    result_rows: int = 0
    samples: list[str] = field(default_factory=list)

    def summary_lines(self) -> list[str]:
        return [
            f"Sites loaded:                {self.sites_loaded:,}",
            f"Sites in regions:            {self.sites_in_regions:,}",
            f"Sites with ANN:              {self.annotated_sites:,}",
            f"Annotation entries:          {self.annotation_entries:,}",
            f"Entries passing filters:     {self.entries_passing_filters:,}",
            f"Samples:                     {len(self.samples):,}",
            f"Resolved sample calls:       {self.sample_calls:,}",
            f"Mutation rows:               {self.result_rows:,}",
        ]
