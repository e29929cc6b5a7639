"""Tests for genotype decoding and resolution."""

import pandas as pd
import pytest

from snpeff_extract.genotypes import (
    NO_CALL_CODE,
    decode_genotype,
    decode_sample_calls,
    genotype_code,
    melt_sample_calls,
    site_alleles,
)
from snpeff_extract.models import CallKind, GenotypeCall


class TestGenotypeCode:
    """Tests for pulling the allele index out of a sample field."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0", 0),
            ("1", 1),
            ("2", 2),
            ("1:35:0,35", 1),
            ("0:12", 0),
            ("1|0", 1),
            (".", NO_CALL_CODE),
            (".:0", NO_CALL_CODE),
            ("./.", NO_CALL_CODE),
            ("", NO_CALL_CODE),
            (None, NO_CALL_CODE),
            ("0/1", NO_CALL_CODE),
            ("N", NO_CALL_CODE),
        ],
    )
    def test_codes(self, raw, expected) -> None:
        assert genotype_code(raw) == expected

    def test_nan_is_no_call(self) -> None:
        assert genotype_code(float("nan")) == NO_CALL_CODE


class TestGenotypeCall:
    """Tests for the tagged call and its resolution."""

    def test_from_code(self) -> None:
        assert GenotypeCall.from_code(-1).kind is CallKind.NO_CALL
        assert GenotypeCall.from_code(0).kind is CallKind.REFERENCE
        assert GenotypeCall.from_code(2) == GenotypeCall(CallKind.ALTERNATE, alt_index=2)

    def test_resolve_reference(self) -> None:
        """Code 0 is the reference allele."""
        assert decode_genotype("0").resolve(["AGT", "AGC"]) == "AGT"

    def test_resolve_first_alternate(self) -> None:
        """Code 1 is the first ALT, not the reference."""
        assert decode_genotype("1").resolve(["AGT", "AGC"]) == "AGC"

    def test_resolve_second_alternate(self) -> None:
        assert decode_genotype("2:9").resolve(["C", "T", "G"]) == "G"

    def test_resolve_no_call(self) -> None:
        assert decode_genotype(".").resolve(["AGT", "AGC"]) is None

    def test_out_of_range_alternate(self) -> None:
        """An index past the ALT list resolves to None instead of raising."""
        assert decode_genotype("3").resolve(["AGT", "AGC"]) is None

    def test_decoding_is_idempotent(self) -> None:
        raw = "1:35:0,35"

        assert decode_genotype(raw) == decode_genotype(raw)
        assert decode_genotype(raw).resolve(["A", "G"]) == decode_genotype(raw).resolve(["A", "G"])

    def test_site_alleles(self) -> None:
        assert site_alleles("C", "T,G") == ["C", "T", "G"]
        assert site_alleles("C", ".") == ["C", "."]


class TestDecodeSampleCalls:
    """Tests for decoding whole sample columns."""

    @pytest.fixture
    def sites(self) -> pd.DataFrame:
        return pd.DataFrame({
            "row_id": [1, 2],
            "REF": ["AGT", "C"],
            "ALT": ["AGC", "T,G"],
            "S1": ["1", "2:4"],
            "S2": ["0", "."],
        })

    def test_same_shape_as_samples(self, sites: pd.DataFrame) -> None:
        decoded = decode_sample_calls(sites, ["S1", "S2"])

        assert list(decoded.columns) == ["row_id", "S1", "S2"]
        assert decoded["row_id"].tolist() == [1, 2]
        assert decoded["S1"].tolist() == ["AGC", "G"]
        assert decoded.loc[0, "S2"] == "AGT"
        assert pd.isna(decoded.loc[1, "S2"])

    def test_melt_drops_no_calls(self, sites: pd.DataFrame) -> None:
        decoded = decode_sample_calls(sites, ["S1", "S2"])

        long = melt_sample_calls(decoded, ["S1", "S2"])

        assert list(long.columns) == ["row_id", "sample_id", "sample_call"]
        assert len(long) == 3
        assert long[["row_id", "sample_id", "sample_call"]].values.tolist() == [
            [1, "S1", "AGC"],
            [2, "S1", "G"],
            [1, "S2", "AGT"],
        ]
