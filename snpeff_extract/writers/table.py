"""Result table formatting and writing."""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from snpeff_extract.models import OUTPUT_COLUMNS

logger = logging.getLogger(__name__)

# Internal column -> published column
OUTPUT_RENAMES = {
    "POS": "position",
    "REF": "ref_sequence",
    "gene_id": "snpeff_gene_name",
    "allele": "sample_sequence",
    "hgvs_p": "mutation",
}

OUTPUT_DTYPES = {
    "sample_id": object,
    "snpeff_gene_name": object,
    "region": object,
    "position": "int64",
    "mutation": object,
    "ref_sequence": object,
    "sample_sequence": object,
}

_SUFFIX_FORMATS = {
    ".csv": "csv",
    ".tsv": "tsv",
    ".txt": "tsv",
    ".parquet": "parquet",
    ".pq": "parquet",
}


def empty_result() -> pd.DataFrame:
    """Zero-row result with the published columns and types."""
    return pd.DataFrame({col: pd.Series(dtype=dtype) for col, dtype in OUTPUT_DTYPES.items()})


def format_results(mutations: pd.DataFrame) -> pd.DataFrame:
    """Rename and select the published columns. No rows are dropped."""
    if mutations.empty:
        return empty_result()
    result = mutations.rename(columns=OUTPUT_RENAMES)[OUTPUT_COLUMNS]
    return result.astype(OUTPUT_DTYPES).reset_index(drop=True)


def infer_output_format(path: Path) -> str:
    suffixes = [s.lower() for s in path.suffixes]
    if suffixes and suffixes[-1] == ".gz":
        suffixes = suffixes[:-1]
    if suffixes and suffixes[-1] in _SUFFIX_FORMATS:
        return _SUFFIX_FORMATS[suffixes[-1]]
    return "csv"


def write_results(
    results: pd.DataFrame,
    path: Union[str, Path],
    output_format: Optional[str] = None,
) -> Path:
    """
    Write the result table.

    Args:
        results: Output of ``format_results``
        path: Destination file; parent directories are created
        output_format: csv, tsv or parquet; inferred from the suffix if None

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    output_format = output_format or infer_output_format(path)

    if output_format == "parquet":
        results.to_parquet(path, index=False)
    elif output_format == "tsv":
        results.to_csv(path, sep="\t", index=False)
    elif output_format == "csv":
        results.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported output format: {output_format}. Expected csv, tsv or parquet")

    logger.info(f"Wrote {len(results)} rows to {path}")
    return path
