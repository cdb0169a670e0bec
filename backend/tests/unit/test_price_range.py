"""Unit tests for PriceRange normalization and validation."""

import pytest

from product_search.domain.search.errors import InvalidPriceRangeError
from product_search.domain.search.models import PriceRange


class TestPriceRange:
    def test_negative_bounds_clamp_to_zero(self):
        price_range = PriceRange(min_price=-10, max_price=-5)

        assert price_range.min_price == 0
        assert price_range.max_price == 0

    def test_zero_max_means_unbounded(self):
        price_range = PriceRange(min_price=500, max_price=0)

        assert price_range.min_price == 500
        assert price_range.max_price == 0

    def test_min_above_max_rejected(self):
        with pytest.raises(InvalidPriceRangeError) as exc:
            PriceRange(min_price=1000, max_price=200)

        assert exc.value.min_price == 1000
        assert exc.value.max_price == 200

    def test_equal_bounds_allowed(self):
        assert PriceRange(min_price=300, max_price=300).max_price == 300


class TestFromBounds:
    def test_none_when_both_unset(self):
        assert PriceRange.from_bounds(None, None) is None

    def test_one_sided(self):
        price_range = PriceRange.from_bounds(None, 800)

        assert price_range == PriceRange(min_price=0, max_price=800)

    def test_invalid_bounds_raise(self):
        with pytest.raises(InvalidPriceRangeError):
            PriceRange.from_bounds(900, 100)
