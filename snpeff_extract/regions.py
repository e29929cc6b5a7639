"""Region handling: position filter and position -> region lookup.

A region is a caller-named collection of integer positions (a hotspot
window, usually a contiguous range). Regions are matched on POS alone.
"""

import logging
from collections.abc import Iterable, Mapping

import pandas as pd

logger = logging.getLogger(__name__)

RegionMap = Mapping[str, Iterable[int]]


def build_position_index(regions: RegionMap) -> dict[int, str]:
    """Invert a region map to position -> region name.

    A position listed under several regions is assigned to the one defined
    last in ``regions``.
    """
    index: dict[int, str] = {}
    for name, positions in regions.items():
        for pos in positions:
            index[int(pos)] = name
    return index


def region_frame(regions: RegionMap) -> pd.DataFrame:
    """Position -> region lookup as a frame with ``POS`` and ``region`` columns."""
    index = build_position_index(regions)
    return pd.DataFrame(
        {"POS": pd.Series(list(index.keys()), dtype="int64"),
         "region": pd.Series(list(index.values()), dtype=object)}
    )


def filter_positions(vcf: pd.DataFrame, regions: RegionMap) -> pd.DataFrame:
    """Keep only sites whose POS falls in one of the regions.

    Returning an empty frame is a normal outcome, not an error.
    """
    index = build_position_index(regions)
    kept = vcf[vcf["POS"].isin(list(index))].reset_index(drop=True)
    logger.debug(f"{len(kept)} of {len(vcf)} sites fall within {len(regions)} regions")
    return kept
