"""Weight and age unit conversion utilities."""

from enum import Enum


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class AgeUnit(str, Enum):
    MONTHS = "months"
    YEARS = "years"


# Conversion constants
KG_TO_LBS = 2.20462
LBS_TO_KG = 0.45359237
MONTHS_PER_YEAR = 12


def to_kg(weight: float, unit: WeightUnit) -> float:
    """Convert a weight in either unit to kilograms (unrounded)."""
    if WeightUnit(unit) == WeightUnit.LB:
        return weight * LBS_TO_KG
    return weight


def to_lbs(weight: float, unit: WeightUnit) -> float:
    """Convert a weight in either unit to pounds (unrounded)."""
    if WeightUnit(unit) == WeightUnit.KG:
        return weight * KG_TO_LBS
    return weight


def kg_to_lbs(kg: float) -> float:
    """Convert kilograms to pounds."""
    return round(kg * KG_TO_LBS, 2)


def lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms."""
    return round(lbs * LBS_TO_KG, 2)


def convert_weight(value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """Convert weight between units."""
    if from_unit == to_unit:
        return value
    if from_unit == WeightUnit.KG and to_unit == WeightUnit.LB:
        return kg_to_lbs(value)
    if from_unit == WeightUnit.LB and to_unit == WeightUnit.KG:
        return lbs_to_kg(value)
    return value


def format_weight(value: float, unit: WeightUnit) -> str:
    """Format weight with unit suffix."""
    return f"{value:.1f} {unit.value}"


def age_in_months(age: float, unit: AgeUnit) -> float:
    """Normalize an age to months."""
    if AgeUnit(unit) == AgeUnit.YEARS:
        return age * MONTHS_PER_YEAR
    return age


def age_in_years(age: float, unit: AgeUnit) -> float:
    """Normalize an age to years."""
    if AgeUnit(unit) == AgeUnit.MONTHS:
        return age / MONTHS_PER_YEAR
    return age
