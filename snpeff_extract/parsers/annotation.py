"""snpEff ANN parsing.

Two steps, both on pandas frames:

1. ``split_annotations``: keep sites whose INFO carries ``ANN=``, number
   them (``row_id``), split the comma-separated ANN payload and melt it to
   one row per (site, annotation entry).
2. ``parse_annotation_fields``: split each entry on ``|`` into the named
   snpEff fields plus the overflow (ERRORS / WARNINGS / INFO).

Entry format (http://pcingola.github.io/SnpEff/se_inputoutput/):
Allele|Annotation|Impact|Gene_Name|Gene_ID|Feature_Type|Feature_ID|
Transcript_BioType|Rank|HGVS.c|HGVS.p|cDNA.pos/len|CDS.pos/len|AA.pos/len|
Distance|ERRORS/WARNINGS/INFO
"""

import logging

import pandas as pd

from snpeff_extract.models import ANN_FIELDS, ANN_MARKER, SITE_KEY_COLUMNS, AnnotationEntry

logger = logging.getLogger(__name__)

ANNOTATION_COLUMNS = SITE_KEY_COLUMNS + ["ann_index", "value"]
PARSED_COLUMNS = SITE_KEY_COLUMNS + ["ann_index"] + list(ANN_FIELDS) + ["err_warn_info"]


def select_annotated(vcf: pd.DataFrame) -> pd.DataFrame:
    """Keep sites carrying an ANN payload and number them 1..N as ``row_id``.

    The id is assigned here, before any split or melt, and is the join key
    for everything downstream.
    """
    annotated = vcf[vcf["INFO"].str.contains(ANN_MARKER, regex=False, na=False)].copy()
    annotated.insert(0, "row_id", range(1, len(annotated) + 1))
    annotated["row_id"] = annotated["row_id"].astype("int64")
    return annotated.reset_index(drop=True)


def extract_payload(info: pd.Series) -> pd.Series:
    """Text after the last ``ANN=`` marker, up to the next INFO key."""
    return info.str.rsplit(ANN_MARKER, n=1).str[-1].str.split(";", n=1).str[0]


def split_annotations(annotated: pd.DataFrame) -> pd.DataFrame:
    """Melt ANN payloads to one row per (site, annotation entry).

    Args:
        annotated: Output of ``select_annotated`` (must carry ``row_id``)

    Returns:
        DataFrame with ``row_id, #CHROM, POS, REF, ALT, ann_index, value``;
        ``ann_index`` is the 1-based position of the entry in its payload.
    """
    if annotated.empty:
        return pd.DataFrame(columns=ANNOTATION_COLUMNS).astype({"row_id": "int64", "POS": "int64"})

    # Ragged payloads are padded with None by expand=True
    entries = extract_payload(annotated["INFO"]).str.split(",", expand=True)
    entries.columns = range(1, entries.shape[1] + 1)

    wide = pd.concat([annotated[SITE_KEY_COLUMNS], entries], axis=1)
    long = wide.melt(id_vars=SITE_KEY_COLUMNS, var_name="ann_index", value_name="value")
    long = long[long["value"].notna()]

    long = long.sort_values(["row_id", "ann_index"], kind="stable").reset_index(drop=True)
    long["ann_index"] = long["ann_index"].astype("int64")

    logger.debug(f"Split {len(annotated)} annotated sites into {len(long)} ANN entries")
    return long[ANNOTATION_COLUMNS]


def parse_annotation_fields(annotations: pd.DataFrame) -> pd.DataFrame:
    """Replace the raw ``value`` column with the parsed snpEff fields.

    Short entries are padded with None rather than rejected, so a single
    malformed entry never stops the run; it just fails the later filters.
    """
    if annotations.empty:
        return pd.DataFrame(columns=PARSED_COLUMNS).astype({"row_id": "int64", "POS": "int64"})

    parsed = [AnnotationEntry.parse(value) for value in annotations["value"]]

    short = sum(1 for entry in parsed if entry.distance is None)
    if short:
        logger.debug(f"{short} ANN entries had fewer than {len(ANN_FIELDS)} fields")

    fields = pd.DataFrame(
        [entry.as_row() for entry in parsed],
        columns=list(ANN_FIELDS) + ["err_warn_info"],
        index=annotations.index,
    )
    result = pd.concat([annotations.drop(columns="value"), fields], axis=1)
    return result[PARSED_COLUMNS]
