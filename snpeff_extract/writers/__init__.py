"""Output writers for extraction results."""

from snpeff_extract.writers.table import empty_result, format_results, write_results

__all__ = ["empty_result", "format_results", "write_results"]
