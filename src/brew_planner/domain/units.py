"""Unit conversion constants shared by the calculators."""

import math

LITERS_TO_GALLONS = 0.264172
KG_TO_LBS = 2.20462
GRAMS_PER_OUNCE = 28.3495
POUNDS_TO_GRAMS = 453.59237
GRAVITY_TO_POINTS = 1000


def liters_to_gallons(liters: float) -> float:
    """Convert liters to US gallons."""
    return liters * LITERS_TO_GALLONS


def kg_to_lbs(kg: float) -> float:
    """Convert kilograms to pounds."""
    return kg * KG_TO_LBS


def grams_to_ounces(grams: float) -> float:
    """Convert grams to ounces."""
    return grams / GRAMS_PER_OUNCE


def celsius_to_fahrenheit(celsius: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return celsius * 9 / 5 + 32


def round_to(value: float, digits: int = 1) -> float:
    """Round to a fixed number of decimals with halves rounded up."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
