"""
Custom exceptions for snpEff mutation extraction.
Kept minimal - only what's needed for clear error handling.
"""


class SnpeffExtractError(Exception):
    """Base exception for extraction related errors."""
    pass


class InputFormatError(SnpeffExtractError):
    """Raised when a VCF cannot be read into the expected tabular layout."""
    pass


class ConfigurationError(SnpeffExtractError):
    """Raised when regions, genes or effect filters are invalid."""
    pass
