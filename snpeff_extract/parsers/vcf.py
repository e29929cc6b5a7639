"""VCF record loader.

Reads a snpEff-annotated VCF (plain or gzipped) into a pandas DataFrame with
the nine fixed VCF columns followed by one raw genotype column per sample.

VCF layout (tab-separated, ``##`` meta lines first):
##fileformat=VCFv4.2
#CHROM  POS     ID  REF  ALT  QUAL  FILTER  INFO              FORMAT  S1
chr1    221640  .   AGT  AGC  50    PASS    DP=10;ANN=AGC|... GT:DP   1:10
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from snpeff_extract.exceptions import InputFormatError
from snpeff_extract.io_utils import iter_lines
from snpeff_extract.models import VCF_FIXED_COLUMNS

logger = logging.getLogger(__name__)

# Added by the annotation splitter as the join key
RESERVED_COLUMNS = ("row_id",)


def read_vcf(vcf_path: Union[str, Path]) -> pd.DataFrame:
    """Load a VCF into memory.

    Args:
        vcf_path: Path to VCF file (.vcf or .vcf.gz)

    Returns:
        DataFrame with ``#CHROM, POS, ID, REF, ALT, QUAL, FILTER, INFO,
        FORMAT`` and one column per sample; POS is int64, everything else
        is str.

    Raises:
        InputFormatError: If the file is missing or unreadable, or its
            column layout is not a VCF body
    """
    vcf_path = Path(vcf_path)

    if not vcf_path.exists():
        raise InputFormatError(f"VCF file not found: {vcf_path}")

    try:
        header, data_rows = _read_vcf_data(vcf_path)
    except (OSError, UnicodeDecodeError, EOFError) as e:
        raise InputFormatError(f"Failed to read VCF {vcf_path}: {e}") from e

    _validate_header(header)

    vcf = pd.DataFrame(data_rows, columns=header, dtype=object)
    vcf["POS"] = _coerce_positions(vcf["POS"])

    logger.debug(
        f"Loaded {len(vcf)} sites and {len(sample_columns(vcf))} samples from {vcf_path}"
    )
    return vcf


def sample_columns(vcf: pd.DataFrame) -> List[str]:
    """Names of the per-sample genotype columns (everything that isn't fixed)."""
    return [col for col in vcf.columns if col not in VCF_FIXED_COLUMNS and col not in RESERVED_COLUMNS]


def _read_vcf_data(vcf_path: Path) -> tuple[List[str], List[List[str]]]:
    """Read VCF file and extract header and data rows."""
    header = None
    data_rows = []

    for line_num, line in enumerate(iter_lines(vcf_path), start=1):
        if not line or line.startswith("##"):
            continue

        if line.startswith("#CHROM"):
            header = line.split("\t")
            continue

        if header is None:
            raise InputFormatError(
                f"Data line {line_num} appears before the #CHROM header in {vcf_path}"
            )

        fields = line.split("\t")
        if len(fields) != len(header):
            raise InputFormatError(
                f"Invalid VCF format at line {line_num}: "
                f"expected {len(header)} columns, got {len(fields)}"
            )
        data_rows.append(fields)

    if header is None:
        raise InputFormatError(f"No #CHROM header line found in {vcf_path}")

    return header, data_rows


def _validate_header(header: List[str]) -> None:
    missing = [col for col in VCF_FIXED_COLUMNS if col not in header]
    if missing:
        raise InputFormatError(f"VCF header is missing required columns: {', '.join(missing)}")

    if list(header[:len(VCF_FIXED_COLUMNS)]) != list(VCF_FIXED_COLUMNS):
        raise InputFormatError(
            f"VCF fixed columns out of order: {header[:len(VCF_FIXED_COLUMNS)]}"
        )

    duplicated = sorted({col for col in header if header.count(col) > 1})
    if duplicated:
        raise InputFormatError(f"Duplicated column names in VCF header: {', '.join(duplicated)}")

    reserved = [col for col in header[len(VCF_FIXED_COLUMNS):] if col in RESERVED_COLUMNS]
    if reserved:
        raise InputFormatError(f"Sample names reserved for internal use: {', '.join(reserved)}")


def _coerce_positions(positions: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(positions, errors="coerce")
    bad = numeric.isna()
    if bad.any():
        example = positions[bad].iloc[0]
        raise InputFormatError(f"Non-integer POS value in VCF: {example!r}")
    return numeric.astype("int64")
