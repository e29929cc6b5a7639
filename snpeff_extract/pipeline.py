"""
Mutation extraction pipeline.

Orchestrates the steps from a loaded VCF to the published table:

1. Position filter (regions)
2. ANN split + field parse
3. Annotation filters (HGVS.p present, effect not excluded, gene of interest)
4. Genotype decode and melt to one row per (site, sample)
5. Join on row_id, keep samples whose sequence equals the ANN allele
6. Region lookup and output formatting
"""

import logging
import re
from collections.abc import Iterable
from typing import Optional

import pandas as pd

from snpeff_extract.config import DEFAULT_EXCLUDE_EFFECTS, DEFAULT_GENES, DEFAULT_REGIONS, Settings
from snpeff_extract.exceptions import ConfigurationError, InputFormatError
from snpeff_extract.genotypes import decode_sample_calls, melt_sample_calls
from snpeff_extract.logging_config import get_progress_logger
from snpeff_extract.models import VCF_FIXED_COLUMNS, PipelineStats
from snpeff_extract.parsers.annotation import (
    parse_annotation_fields,
    select_annotated,
    split_annotations,
)
from snpeff_extract.parsers.vcf import read_vcf, sample_columns
from snpeff_extract.regions import RegionMap, filter_positions, region_frame
from snpeff_extract.writers.table import empty_result, format_results, write_results

logger = logging.getLogger(__name__)


def filter_annotations(
    annotations: pd.DataFrame,
    genes: Iterable[str],
    exclude_effects: str,
) -> pd.DataFrame:
    """
    Keep protein-level annotations of interest.

    All three conditions must hold: HGVS.p is non-empty, the effect does not
    match ``exclude_effects`` and the gene ID is in ``genes``.
    """
    has_protein_change = annotations["hgvs_p"].fillna("").ne("")
    excluded_effect = annotations["effect"].str.contains(exclude_effects, regex=True, na=False)
    wanted_gene = annotations["gene_id"].isin(list(genes))

    kept = annotations[has_protein_change & ~excluded_effect & wanted_gene]
    return kept.reset_index(drop=True)


def match_carriers(
    annotations: pd.DataFrame,
    calls: pd.DataFrame,
    samples: list[str],
) -> pd.DataFrame:
    """
    Pair every annotation with every sample call at its site and keep the
    samples that carry the annotated allele.

    One annotation row fans out to one row per sample at that site.
    """
    joined = annotations.merge(calls, on="row_id", how="inner")
    carriers = joined[joined["sample_call"] == joined["allele"]]

    # Group rows by sample in VCF column order
    sample_order = {name: i for i, name in enumerate(samples)}
    carriers = carriers.assign(_sample_order=carriers["sample_id"].map(sample_order))
    carriers = carriers.sort_values(["_sample_order", "row_id", "ann_index"], kind="stable")
    return carriers.drop(columns="_sample_order").reset_index(drop=True)


def extract_mutations(
    vcf: pd.DataFrame,
    regions: Optional[RegionMap] = None,
    genes: Optional[Iterable[str]] = None,
    exclude_effects: Optional[str] = None,
    stats: Optional[PipelineStats] = None,
) -> pd.DataFrame:
    """
    Extract per-sample mutation calls from a loaded snpEff VCF.

    Args:
        vcf: Output of ``read_vcf`` (fixed VCF columns + one column per sample)
        regions: Region name -> positions. Defaults to the FKS1 hotspots.
        genes: snpEff gene ID or IDs to keep. Defaults to ``CAB11_002014``.
        exclude_effects: Regex of effects to drop. Defaults to synonymous_variant.
        stats: Optional PipelineStats filled in with stage counts

    Returns:
        DataFrame with columns sample_id, snpeff_gene_name, region, position,
        mutation, ref_sequence, sample_sequence. Zero rows when nothing
        matches; the columns never change.

    Raises:
        InputFormatError: If ``vcf`` lacks the fixed VCF columns
        ConfigurationError: If ``exclude_effects`` is not a valid regex
    """
    regions = regions if regions is not None else DEFAULT_REGIONS
    if genes is None:
        genes = set(DEFAULT_GENES)
    elif isinstance(genes, str):
        genes = {genes}
    else:
        genes = set(genes)
    exclude_effects = exclude_effects if exclude_effects is not None else DEFAULT_EXCLUDE_EFFECTS
    stats = stats if stats is not None else PipelineStats()

    try:
        re.compile(exclude_effects)
    except re.error as e:
        raise ConfigurationError(f"Invalid exclude_effects pattern {exclude_effects!r}: {e}") from e

    missing = [col for col in VCF_FIXED_COLUMNS if col not in vcf.columns]
    if missing:
        raise InputFormatError(f"Record table is missing VCF columns: {', '.join(missing)}")

    stats.sites_loaded = len(vcf)
    stats.samples = sample_columns(vcf)

    sites = filter_positions(vcf, regions)
    stats.sites_in_regions = len(sites)
    if sites.empty:
        logger.info("No sites fall within the requested regions")
        return empty_result()

    annotated = select_annotated(sites)
    stats.annotated_sites = len(annotated)

    annotations = parse_annotation_fields(split_annotations(annotated))
    stats.annotation_entries = len(annotations)

    annotations = filter_annotations(annotations, genes, exclude_effects)
    stats.entries_passing_filters = len(annotations)

    samples = stats.samples
    calls = melt_sample_calls(decode_sample_calls(annotated, samples), samples)
    stats.sample_calls = len(calls)

    carriers = match_carriers(annotations, calls, samples)
    carriers = carriers.merge(region_frame(regions), on="POS", how="left")

    result = format_results(carriers)
    stats.result_rows = len(result)
    logger.info(
        f"{len(result)} mutation calls from {stats.entries_passing_filters} annotations "
        f"across {len(samples)} samples"
    )
    return result


def run_extraction(settings: Settings) -> pd.DataFrame:
    """
    Load the VCF named in ``settings``, extract mutations and write them if
    ``settings.output_path`` is set.

    Returns:
        The formatted result table
    """
    progress = get_progress_logger()
    stats = PipelineStats()

    if settings.vcf_path is None:
        raise ConfigurationError("No VCF path configured")

    progress.info(f"Step 1/3: Reading {settings.vcf_path}")
    vcf = read_vcf(settings.vcf_path)

    progress.info(
        f"Step 2/3: Extracting mutations for {len(settings.genes)} gene(s) "
        f"in {len(settings.regions)} region(s)"
    )
    result = extract_mutations(
        vcf,
        regions=settings.regions,
        genes=settings.genes,
        exclude_effects=settings.exclude_effects,
        stats=stats,
    )

    for line in stats.summary_lines():
        logger.info(line)

    if settings.output_path is not None:
        progress.info(f"Step 3/3: Writing {settings.output_path}")
        write_results(result, settings.output_path, settings.output_format)
    else:
        progress.info("Step 3/3: No output path set, skipping write")

    progress.info(f"Done: {len(result)} mutation calls")
    return result
