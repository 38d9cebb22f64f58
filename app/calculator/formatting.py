"""
Display formatting for the presentation layer.

Renders a snapshot's display the way the device screen shows it: thousands
separators, rounding to 12 significant digits to hide float noise
(0.1 + 0.2 shows as 0.3), at most 9 fraction digits, and a trailing decimal
point kept while the user is typing.
"""

from app.calculator.display import DisplayValue

ERROR_TEXT = "Error"


def _group(value: float, max_fraction_digits: int) -> str:
    text = f"{value:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_display(
    value: DisplayValue,
    entry: str = "",
    precision: int = 12,
    max_fraction_digits: int = 9,
) -> str:
    """
    Format a display value for the screen.

    Args:
        value: Display value from a snapshot
        entry: Raw entry buffer; a trailing "." is preserved
        precision: Significant digits kept for magnitudes below 1e15
        max_fraction_digits: Maximum digits after the decimal point

    Returns:
        Screen text, or "Error" for error values
    """
    if value.is_error:
        return ERROR_TEXT

    number = value.number

    if entry.endswith("."):
        return _group(float(int(number)), 0) + "."

    if abs(number) < 1e15:
        number = float(f"{number:.{precision}g}")

    return _group(number, max_fraction_digits)
