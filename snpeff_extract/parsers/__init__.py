"""Parsers for snpEff-annotated VCF input."""

from snpeff_extract.parsers.annotation import (
    parse_annotation_fields,
    select_annotated,
    split_annotations,
)
from snpeff_extract.parsers.vcf import read_vcf, sample_columns

__all__ = [
    "read_vcf",
    "sample_columns",
    "select_annotated",
    "split_annotations",
    "parse_annotation_fields",
]
