"""
Genotype decoding.

Turns raw per-sample VCF genotype strings into the nucleotide sequence the
sample carries, by way of an explicit GenotypeCall:

    "1:35:0,35"  ->  ALTERNATE(1)  ->  ALT[0] of that site
    "0"          ->  REFERENCE     ->  REF of that site
    ".:0"        ->  NO_CALL       ->  None

The allele index is the text before the first '.', '|' or ':' in the
sample field, which covers haploid calls ("1"), phased calls ("1|0") and
missing calls ("." / "./."). Anything that is not an integer is a no-call.
"""

import logging
import re
from typing import List, Optional

import pandas as pd

from snpeff_extract.models import GenotypeCall

logger = logging.getLogger(__name__)

NO_CALL_CODE = -1

_LEADING_TOKEN = re.compile(r"^([^.|:]*)")


def genotype_code(raw: Optional[str]) -> int:
    """Allele index encoded in a sample field, or -1 for missing/unparseable."""
    if raw is None or pd.isna(raw):
        return NO_CALL_CODE
    token = _LEADING_TOKEN.match(str(raw)).group(1).strip()
    try:
        return int(token)
    except ValueError:
        return NO_CALL_CODE


def decode_genotype(raw: Optional[str]) -> GenotypeCall:
    """Decode a raw sample field into a GenotypeCall."""
    return GenotypeCall.from_code(genotype_code(raw))


def site_alleles(ref: str, alt: str) -> List[str]:
    """Ordered ``[REF, ALT1, ALT2, ...]`` for a site."""
    return [ref] + str(alt).split(",")


def decode_sample_calls(sites: pd.DataFrame, samples: List[str]) -> pd.DataFrame:
    """
    Resolve every sample's genotype to a sequence.

    Args:
        sites: Site table carrying ``row_id``, ``REF``, ``ALT`` and the
            sample columns
        samples: Names of the sample columns

    Returns:
        Same shape as the sample columns plus ``row_id``; each cell holds the
        sequence the sample carries at that site, or None for no-calls.
    """
    alleles = [site_alleles(ref, alt) for ref, alt in zip(sites["REF"], sites["ALT"])]

    decoded = pd.DataFrame({"row_id": sites["row_id"].to_numpy()})
    for sample in samples:
        decoded[sample] = pd.Series(
            [decode_genotype(raw).resolve(site) for raw, site in zip(sites[sample], alleles)],
            dtype=object,
        )

    no_calls = int(decoded[samples].isna().sum().sum()) if samples else 0
    logger.debug(f"Decoded {len(decoded) * len(samples)} sample calls ({no_calls} no-calls)")
    return decoded


def melt_sample_calls(decoded: pd.DataFrame, samples: List[str]) -> pd.DataFrame:
    """
    Reshape decoded calls to one row per (site, sample).

    Each row keeps ``row_id`` as the key back to its site. No-calls are
    dropped here since they can never match an annotated allele.
    """
    long = decoded.melt(
        id_vars=["row_id"],
        value_vars=samples,
        var_name="sample_id",
        value_name="sample_call",
    )
    long = long[long["sample_call"].notna()].reset_index(drop=True)
    long["sample_id"] = long["sample_id"].astype(str)
    return long
