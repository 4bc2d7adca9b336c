from decimal import Decimal

import pytest

from vesselbook.services import money


class TestRounding:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, -1), (1.49, 1)])
    def test_round_half_up_goes_away_from_zero(self, value, expected):
        assert money.round_half_up(value) == expected

    def test_to_integer_and_back(self):
        assert money.to_integer("12.34") == 1234
        assert money.to_integer(None) == 0
        assert money.to_float(1234) == 12.34
        assert money.to_integer(Decimal("1.005")) == 101


class TestFormatting:
    def test_thousands_and_decimal_separators(self):
        assert money.format_money(1234567, "EUR") == "12.345,67 EUR"

    def test_with_symbol(self):
        assert money.format_money(150, "EUR", with_symbol=True) == "1,50 €"

    def test_negative_amount(self):
        assert money.format_money(-150, "USD", with_symbol=True) == "-1,50 $"

    def test_unknown_currency_uses_code(self):
        assert money.format_money(100, "gbp", with_symbol=True) == "1,00 GBP"

    def test_without_currency(self):
        assert money.format_money(100000) == "1.000,00"


class TestVat:
    def test_calculate_vat(self):
        assert money.calculate_vat(10000, Decimal("23.00")) == 2300
        assert money.calculate_vat(10000, 0) == 0

    def test_split_total_including_vat(self):
        assert money.split_total_including_vat(12300, Decimal("23")) == (10000, 2300)

    def test_split_without_rate(self):
        assert money.split_total_including_vat(500, 0) == (500, 0)

    def test_split_keeps_total(self):
        base, vat = money.split_total_including_vat(999, Decimal("21"))
        assert base + vat == 999


class TestParsing:
    @pytest.mark.parametrize("text,expected", [
        ("1.234,56 €", 123456),
        ("1,234.56", 123456),
        ("12", 1200),
        ("-3,5", -350),
        ("1.000", 100000),
    ])
    def test_parse_money_string(self, text, expected):
        assert money.parse_money_string(text) == expected

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            money.parse_money_string("abc")
