import re
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from snpeff_extract.exceptions import ConfigurationError


# FKS1 hotspot 1 and 2 in the C. auris B11221 assembly
DEFAULT_REGIONS: Dict[str, List[int]] = {
    "fks1_hs1": list(range(221638, 221666)),
    "fks1_hs2": list(range(223782, 223806)),
}
DEFAULT_GENES: List[str] = ["CAB11_002014"]
DEFAULT_EXCLUDE_EFFECTS = "synonymous_variant"


class Settings(BaseModel):
    """Run configuration for a single extraction."""

    vcf_path: Optional[Path] = Field(default=None, description="snpEff annotated VCF (.vcf or .vcf.gz)")
    regions: Dict[str, List[int]] = Field(
        default_factory=lambda: {name: list(posits) for name, posits in DEFAULT_REGIONS.items()},
        description="Region name -> positions; later regions win on overlap"
    )
    genes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_GENES),
        description="snpEff gene IDs to keep"
    )
    exclude_effects: str = Field(
        default=DEFAULT_EXCLUDE_EFFECTS,
        description="Regular expression of snpEff effects to drop"
    )

    # Output
    output_path: Optional[Path] = Field(default=None, description="Where to write the result table")
    output_format: Optional[Literal["csv", "tsv", "parquet"]] = Field(
        default=None,
        description="Output format; inferred from output_path suffix when unset"
    )
    log_dir: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('regions')
    @classmethod
    def validate_regions(cls, v: Dict[str, List[int]]) -> Dict[str, List[int]]:
        if not v:
            raise ValueError("At least one region is required")
        empty = [name for name, posits in v.items() if not posits]
        if empty:
            raise ValueError(f"Regions with no positions: {', '.join(empty)}")
        return v

    @field_validator('genes')
    @classmethod
    def validate_genes(cls, v: List[str]) -> List[str]:
        genes = [g.strip() for g in v if g and g.strip()]
        if not genes:
            raise ValueError("At least one gene ID is required")
        return genes

    @field_validator('exclude_effects')
    @classmethod
    def validate_exclude_effects(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid exclude_effects pattern {v!r}: {e}")
        return v


def parse_region_spec(spec: str) -> tuple[str, List[int]]:
    """
    Parse a CLI region string.

    Accepts ``name:start-end`` (inclusive) or ``name:pos``.

    Args:
        spec: Region string, e.g. ``fks1_hs1:221638-221665``

    Returns:
        (region name, list of positions)

    Raises:
        ConfigurationError: If the string is malformed or the range is inverted
    """
    name, sep, span = spec.partition(":")
    name = name.strip()
    span = span.strip()
    if not sep or not name or not span:
        raise ConfigurationError(f"Region must look like NAME:START-END or NAME:POS, got {spec!r}")

    start_text, dash, end_text = span.partition("-")
    try:
        start = int(start_text)
        end = int(end_text) if dash else start
    except ValueError:
        raise ConfigurationError(f"Region positions must be integers, got {spec!r}")

    if end < start:
        raise ConfigurationError(f"Region end precedes start in {spec!r}")

    return name, list(range(start, end + 1))


def build_regions(specs: List[str]) -> Dict[str, List[int]]:
    """Combine repeated region specs; specs sharing a name are concatenated in order."""
    regions: Dict[str, List[int]] = {}
    for spec in specs:
        name, posits = parse_region_spec(spec)
        regions.setdefault(name, []).extend(posits)
    return regions
