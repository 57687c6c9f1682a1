from decimal import Decimal

import pytest

from printbill.models import format_amount, format_inr, from_paise, to_paise


class TestPaise:
    def test_to_paise(self):
        assert to_paise(Decimal("2.50")) == 250

    def test_to_paise_whole(self):
        assert to_paise(Decimal("175")) == 17500

    def test_from_paise(self):
        assert from_paise(250) == Decimal("2.50")

    def test_from_paise_zero(self):
        assert from_paise(0) == Decimal("0.00")


class TestFormatAmount:
    def test_zero_places(self):
        assert format_amount(Decimal("250.00"), "Rs.", places=0) == "Rs.250"

    def test_half_up(self):
        assert format_amount(Decimal("2.50"), "Rs.", places=0) == "Rs.3"

    def test_default_two_places(self):
        assert format_amount(Decimal("2.5"), "Rs.") == "Rs.2.50"

    def test_no_grouping(self):
        assert format_amount(Decimal("25000"), "Rs.", places=0) == "Rs.25000"


class TestFormatInr:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("0"), "₹0.00"),
            (Decimal("250"), "₹250.00"),
            (Decimal("2500"), "₹2,500.00"),
            (Decimal("250000"), "₹2,50,000.00"),
            (Decimal("12345678.9"), "₹1,23,45,678.90"),
            (Decimal("-1500"), "-₹1,500.00"),
        ],
    )
    def test_grouping(self, amount, expected):
        assert format_inr(amount) == expected
