"""
Unit conversion utilities for food logging.
Simple hard-coded mappings from spoken units to grams (or millilitres for drinks).
"""
import math
import re
from typing import Dict, Optional


MASS_UNITS: Dict[str, float] = {
    "g": 1,
    "gram": 1,
    "grams": 1,
    "mg": 0.001,
    "kg": 1000,
    "kilogram": 1000,
    "kilograms": 1000,
    "oz": 28.35,
    "ounce": 28.35,
    "ounces": 28.35,
    "lb": 453.6,
    "lbs": 453.6,
    "pound": 453.6,
    "pounds": 453.6,
}

# Millilitres are treated 1:1 with grams
VOLUME_UNITS: Dict[str, float] = {
    "ml": 1,
    "milliliter": 1,
    "milliliters": 1,
    "millilitre": 1,
    "millilitres": 1,
    "cc": 1,
    "l": 1000,
    "liter": 1000,
    "liters": 1000,
    "litre": 1000,
    "litres": 1000,
    "cup": 240,
    "cups": 240,
    "tbsp": 15,
    "tablespoon": 15,
    "tablespoons": 15,
    "tsp": 5,
    "teaspoon": 5,
    "teaspoons": 5,
}

# Approximate weights for informal portions (in grams)
PORTION_WEIGHTS: Dict[str, float] = {
    "slice": 30,
    "slices": 30,
    "serving": 100,
    "servings": 100,
    "piece": 50,
    "pieces": 50,
    "egg": 50,
    "eggs": 50,
    "banana": 120,
    "bananas": 120,
    "apple": 180,
    "apples": 180,
}

# Typical drink containers (in ml), used when the food row has no sizes of its own
SERVING_SIZES_ML: Dict[str, float] = {
    "can": 330,
    "bottle": 500,
    "glass": 250,
}

CONTAINER_ALIASES: Dict[str, str] = {
    "can": "can",
    "cans": "can",
    "bottle": "bottle",
    "bottles": "bottle",
    "glass": "glass",
    "glasses": "glass",
}


def normalize_unit(unit: Optional[str]) -> str:
    """Lowercase a unit and strip whitespace ("Tbsp " -> "tbsp")."""
    if not unit:
        return ""
    return re.sub(r"\s+", "", unit.lower())


def convert_to_base(
    quantity: Optional[float],
    unit: Optional[str],
    serving_sizes_ml: Optional[Dict[str, float]] = None
) -> float:
    """
    Convert a spoken quantity into grams (or ml for liquids).

    Args:
        quantity: Amount; missing or non-positive values count as 100
        unit: Unit of measurement; empty means grams
        serving_sizes_ml: Optional per-food container sizes (can/bottle/glass)

    Returns:
        Amount in the base unit. Unknown units fall back to 100 of the base unit.
    """
    try:
        amount = float(quantity) if quantity is not None else 0.0
    except (TypeError, ValueError):
        amount = 0.0
    if not math.isfinite(amount) or amount <= 0:
        amount = 100.0

    unit_key = normalize_unit(unit) or "g"

    if unit_key in MASS_UNITS:
        return amount * MASS_UNITS[unit_key]

    if unit_key in VOLUME_UNITS:
        return amount * VOLUME_UNITS[unit_key]

    if unit_key in PORTION_WEIGHTS:
        return amount * PORTION_WEIGHTS[unit_key]

    if unit_key in CONTAINER_ALIASES:
        container = CONTAINER_ALIASES[unit_key]
        if serving_sizes_ml and serving_sizes_ml.get(container):
            return amount * float(serving_sizes_ml[container])
        return amount * SERVING_SIZES_ML[container]

    return 100.0
