"""Tests for unit helpers."""

import pytest

from reserve.utils.units import format_distance, format_number, hectares_to_m2, m2_to_hectares


def test_hectare_round_trip():
    assert hectares_to_m2(1.5) == 15_000
    assert m2_to_hectares(15_000) == pytest.approx(1.5)


@pytest.mark.parametrize("meters,label", [(25, "25m"), (500, "500m"), (1000, "1km"), (20_000, "20km"), (5_000_000, "5000km")])
def test_format_distance(meters, label):
    assert format_distance(meters) == label


@pytest.mark.parametrize("num,text", [(999, "999"), (1000, "1k"), (1500, "1.5k"), (2_000_000, "2M"), (12_345_678, "12.3M")])
def test_format_number(num, text):
    assert format_number(num) == text
