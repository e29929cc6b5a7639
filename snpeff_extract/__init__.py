"""
snpEff Mutation Extractor.

Pulls genotype-level mutation calls out of a snpEff-annotated VCF, restricted
to regions, genes and effects of interest, one row per (sample, mutation).
"""

__version__ = "1.0.0"

from snpeff_extract.pipeline import extract_mutations, run_extraction

__all__ = ["extract_mutations", "run_extraction", "__version__"]
