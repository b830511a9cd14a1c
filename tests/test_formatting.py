"""Tests for label formatting."""

from datetime import date

import pytest

from issue_archiver.compilers.formatting import format_issue_label, format_mets_label, to_roman


class TestToRoman:
    """Tests for Roman numeral conversion."""

    @pytest.mark.parametrize(
        "number, expected",
        [
            (1, "I"),
            (4, "IV"),
            (9, "IX"),
            (14, "XIV"),
            (40, "XL"),
            (90, "XC"),
            (147, "CXLVII"),
            (400, "CD"),
            (1994, "MCMXCIV"),
            (3999, "MMMCMXCIX"),
        ],
    )
    def test_conversion(self, number, expected):
        assert to_roman(number) == expected

    @pytest.mark.parametrize("number", [0, -1, 4000])
    def test_out_of_range(self, number):
        with pytest.raises(ValueError, match="1..3999"):
            to_roman(number)


class TestLabels:
    """Tests for issue and METS labels."""

    def test_issue_label(self):
        assert format_issue_label(147, 1, date(2025, 3, 10)) == "Vol. CXLVII, No. 1 (Mar 10, 2025)"

    def test_issue_label_pads_day(self):
        assert format_issue_label(148, 23, date(2025, 11, 4)) == "Vol. CXLVIII, No. 23 (Nov 04, 2025)"

    def test_mets_label(self):
        assert (
            format_mets_label("The Daily Princetonian", date(2025, 3, 10))
            == "The Daily Princetonian 10.03.2025"
        )
