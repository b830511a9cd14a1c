"""Label formatting for issue metadata."""

from datetime import date

_ROMAN_NUMERALS = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def to_roman(number: int) -> str:
    """Convert an integer to uppercase Roman numerals.

    Examples:
        >>> to_roman(147)
        'CXLVII'

    Raises:
        ValueError: If number is outside 1..3999
    """
    if not 1 <= number <= 3999:
        raise ValueError(f"Roman numerals cover 1..3999, got {number}")

    parts = []
    for value, numeral in _ROMAN_NUMERALS:
        count, number = divmod(number, value)
        parts.append(numeral * count)
    return "".join(parts)


def format_issue_label(volume_number: int, issue_number: int, issue_date: date) -> str:
    """Build the MODS issue label.

    Examples:
        >>> format_issue_label(147, 1, date(2025, 3, 10))
        'Vol. CXLVII, No. 1 (Mar 10, 2025)'
    """
    return f"Vol. {to_roman(volume_number)}, No. {issue_number} ({issue_date.strftime('%b %d, %Y')})"


def format_mets_label(title: str, issue_date: date) -> str:
    """Build the METS root LABEL, e.g. ``The Daily Princetonian 10.03.2025``."""
    return f"{title} {issue_date.strftime('%d.%m.%Y')}"
