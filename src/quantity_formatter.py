#!/usr/bin/env python3
"""
Quantity Scaling and Formatting Engine
Scales ingredient amounts by a multiplier, converts grams and millilitres
past 1000 to kilograms and litres, and formats the result for display.
Works on structured ingredients, on {ingredient.N} placeholders and on
quantities embedded in free text.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

Number = Union[int, float]

# Narrow no-break space, keeps "300 g" on one line
THIN_SPACE = "\u202f"

CONVERSION_THRESHOLD = 1000

MASS_UNITS = frozenset({"g", "gram", "grams"})
VOLUME_UNITS = frozenset({"ml", "milliliter", "milliliters"})

# Structured amounts
LEADING_NUMBER = re.compile(r"^\d+(?:\.\d+)?")
NUMBER_ONLY = re.compile(r"^(\d+(?:\.\d+)?)$")
NUMBER_WITH_UNIT = re.compile(r"^(\d+(?:\.\d+)?)\s*([a-zA-Z()]+.*)$")
RANGE_AMOUNT = re.compile(r"^\d+(?:\.\d+)?\s*(?:[-–]|to\s)\s*\d", re.IGNORECASE)

PLACEHOLDER = re.compile(r"\{ingredient\.(\d+)\}")

# Free-text vocabulary, longest alternatives first
SCALED_UNITS = (
    "grams", "gram", "g",
    "milliliters", "milliliter", "ml",
    "kg", "dl", "cl", "l",
    "tbsp", "tsp", "cups", "cup",
    "oz", "lbs", "lb", "cm", "mm",
)
UNSCALED_UNITS = (
    "minutes", "minute", "mins", "min",
    "hours", "hour", "hrs", "hr",
    "seconds", "second", "secs", "sec",
    "celsius", "fahrenheit", "degrees", "degree",
    "°C", "°F",
)
_UNSCALED_LOWER = frozenset(u.lower() for u in UNSCALED_UNITS)

_NUMBER = r"\d+(?:\.\d+)?"
_NUMBER_END = r"(?![\d/]|\.\d)"
FREE_TEXT_QUANTITY = re.compile(
    r"(?<![\w.,/])"
    r"(?P<number>" + _NUMBER + r")" + _NUMBER_END +
    r"(?:(?P<separator>\s*[-–]\s*|\s+to\s+)(?P<upper>" + _NUMBER + r")" + _NUMBER_END + r")?"
    r"(?:(?P<space>\s*)(?P<unit>" + "|".join(re.escape(u) for u in UNSCALED_UNITS + SCALED_UNITS) + r")(?![A-Za-z]))?",
    re.IGNORECASE,
)


def _to_fixed(value: float, places: int) -> str:
    """Fixed-point rendering with ties rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: Number) -> str:
    """
    Format a scaled quantity for display.

    Integers have no decimal part, values below 1 keep up to two decimals
    and everything else keeps at most one.

    Args:
        value: Quantity to format

    Returns:
        Formatted number without trailing zeros or a trailing point
    """
    value = float(value)
    # overflowed products stay printable
    if not math.isfinite(value):
        return str(value)
    if value.is_integer():
        return str(int(value))
    if value < 1:
        return _to_fixed(value, 2).rstrip("0").rstrip(".")
    formatted = _to_fixed(value, 1)
    if formatted.endswith(".0"):
        formatted = formatted[:-2]
    return formatted


def convert_unit(value: float, unit: str) -> Tuple[float, str]:
    """Convert grams to kg and millilitres to l once the value reaches 1000."""
    normalized = unit.lower()
    if value >= CONVERSION_THRESHOLD:
        if normalized in MASS_UNITS:
            return value / CONVERSION_THRESHOLD, "kg"
        if normalized in VOLUME_UNITS:
            return value / CONVERSION_THRESHOLD, "l"
    return value, unit


def _scale_number(value: float, unit: str, scale: Number) -> Tuple[str, str]:
    scaled_value, scaled_unit = convert_unit(value * scale, unit)
    return format_number(scaled_value), scaled_unit


def scale_quantity(amount: Optional[Union[Number, str]], unit: Optional[str],
                   scale: Number) -> Tuple[str, str]:
    """
    Scale an ingredient amount.

    Args:
        amount: Number, numeric string ("300", "300 g") or free text ("1-2")
        unit: Unit supplied next to the amount, if any
        scale: Positive scale factor

    Returns:
        Tuple of (formatted amount, unit). Amounts that do not start with a
        number, and ranges, come back unchanged.
    """
    if amount is None:
        return "", ""

    unit = unit or ""

    if isinstance(amount, str):
        text = amount.strip()
        if not LEADING_NUMBER.match(text) or RANGE_AMOUNT.match(text):
            return amount, unit

        number_match = NUMBER_ONLY.match(text)
        if number_match:
            return _scale_number(float(number_match.group(1)), unit, scale)

        unit_match = NUMBER_WITH_UNIT.match(text)
        if unit_match:
            number, embedded_unit = unit_match.groups()
            return _scale_number(float(number), embedded_unit, scale)

        return amount, unit

    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return str(amount), unit

    return _scale_number(float(amount), unit, scale)


def format_display(amount: str, unit: str) -> str:
    """Join amount and unit with a narrow no-break space."""
    if not amount:
        return ""
    if not unit:
        return amount
    return f"{amount}{THIN_SPACE}{unit}"


def _ingredient_field(ingredient: Any, name: str) -> Any:
    if isinstance(ingredient, Mapping):
        return ingredient.get(name)
    return getattr(ingredient, name, None)


def scale_ingredient(ingredient: Any, scale: Number) -> Tuple[str, str]:
    """Scale an Ingredient (or a mapping with amount/unit keys)."""
    return scale_quantity(
        _ingredient_field(ingredient, "amount"),
        _ingredient_field(ingredient, "unit"),
        scale,
    )


def interpolate_ingredients(text: str, ingredients: Sequence[Any], scale: Number) -> str:
    """
    Replace {ingredient.N} placeholders with the scaled ingredient quantity.

    Placeholders pointing past the end of the list are left as they are.
    """
    def replace(match: "re.Match[str]") -> str:
        index = int(match.group(1))
        if 0 <= index < len(ingredients):
            return format_display(*scale_ingredient(ingredients[index], scale))
        return match.group(0)

    return PLACEHOLDER.sub(replace, text)


def scale_free_text(text: str, scale: Number) -> str:
    """
    Scale quantities written directly into prose.

    Numbers followed by a known unit, and bare numbers, are scaled. Numbers
    followed by a time or temperature word are kept. Bare numbers that are
    really step counts or rack positions get scaled too.
    """
    def replace(match: "re.Match[str]") -> str:
        unit = match.group("unit") or ""
        if unit.lower() in _UNSCALED_LOWER:
            return match.group(0)
        # "2x", "3rd"
        if not unit and match.string[match.end():match.end() + 1].isalpha():
            return match.group(0)

        space = match.group("space") or ""
        upper = match.group("upper")

        if upper is None:
            amount, new_unit = _scale_number(float(match.group("number")), unit, scale)
            return f"{amount}{space}{new_unit}" if unit else amount

        upper_value, new_unit = convert_unit(float(upper) * scale, unit)
        divisor = CONVERSION_THRESHOLD if new_unit != unit else 1
        lower_value = float(match.group("number")) * scale / divisor
        scaled_range = (
            f"{format_number(lower_value)}{match.group('separator')}"
            f"{format_number(upper_value)}"
        )
        return f"{scaled_range}{space}{new_unit}" if unit else scaled_range

    return FREE_TEXT_QUANTITY.sub(replace, text)
