"""Recipe calculations: gravity, alcohol, bitterness, color, and nutrition."""

import logging
import math
from dataclasses import dataclass

from brew_planner.domain.calculations import RecipeCalculations
from brew_planner.domain.recipe import Hop, Recipe
from brew_planner.domain.units import (
    GRAVITY_TO_POINTS,
    grams_to_ounces,
    kg_to_lbs,
    liters_to_gallons,
    round_to,
)
from brew_planner.services.fermentability import fermentability
from brew_planner.services.mash_ph import DEFAULT_TARGET_PH, MashPhService
from brew_planner.services.starter import sg_to_plato
from brew_planner.services.volumes import VolumeService

_logger = logging.getLogger(__name__)

ABV_FACTOR = 131.25
DEFAULT_ATTENUATION = 0.75
MIN_ATTENUATION = 0.60
MAX_ATTENUATION = 0.95

# Effective attenuation calibration.
REFERENCE_MASH_TEMP_C = 66.0
MASH_TEMP_ADJ_PER_C = 0.01
DECOCTION_ADJ = 0.005
REFERENCE_MASH_MINUTES = 60.0
MASH_TIME_ADJ_PER_15_MIN = 0.005
MASH_TIME_ADJ_CAP = 0.03
REFERENCE_FERMENT_TEMP_C = 20.0
FERMENT_TEMP_ADJ_PER_C = 0.004
REFERENCE_FERMENT_DAYS = 10.0
FERMENT_DAYS_ADJ_PER_DAY = 0.002
ATTENUATIVE_STEP_TYPES = frozenset({"primary", "secondary"})

# Tinseth
TINSETH_IBU_FACTOR = 75
FIRST_WORT_BONUS_MINUTES = 20
WHIRLPOOL_MIN_TEMP_C = 60.0
WHIRLPOOL_MAX_TEMP_C = 100.0
WHIRLPOOL_TEMP_EXPONENT = 1.8
DRY_HOP_UTILIZATION = 0.05
MASH_HOP_UTILIZATION = 0.02

# Morey
MOREY_COEFF = 1.4922
MOREY_EXPONENT = 0.6859

SERVING_L = 0.355


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def tinseth_utilization(minutes: float, wort_gravity: float) -> float:
    """Tinseth hop utilization for a boil time and wort gravity."""
    gravity_factor = 1.65 * 0.000125 ** (wort_gravity - 1)
    time_factor = (1 - math.exp(-0.04 * minutes)) / 4.15
    return gravity_factor * time_factor


def whirlpool_utilization(minutes: float, temp_c: float, wort_gravity: float) -> float:
    """Tinseth utilization scaled down for sub-boiling whirlpool temperatures."""
    if temp_c <= WHIRLPOOL_MIN_TEMP_C:
        return 0.0
    clamped = _clamp(temp_c, WHIRLPOOL_MIN_TEMP_C, WHIRLPOOL_MAX_TEMP_C)
    temp_factor = (
        (clamped - WHIRLPOOL_MIN_TEMP_C) / (WHIRLPOOL_MAX_TEMP_C - WHIRLPOOL_MIN_TEMP_C)
    ) ** WHIRLPOOL_TEMP_EXPONENT
    return tinseth_utilization(minutes, wort_gravity) * temp_factor


def hop_utilization(hop: Hop, og: float) -> float:
    """Return utilization for a hop addition based on its type."""
    if hop.type == "boil":
        return tinseth_utilization(hop.time_minutes, og)
    if hop.type == "first wort":
        return tinseth_utilization(hop.time_minutes + FIRST_WORT_BONUS_MINUTES, og)
    if hop.type == "whirlpool":
        minutes = (
            hop.whirlpool_time_minutes
            if hop.whirlpool_time_minutes is not None
            else hop.time_minutes
        )
        return whirlpool_utilization(minutes, hop.temperature_c, og)
    if hop.type == "dry hop":
        return DRY_HOP_UTILIZATION
    if hop.type == "mash":
        return MASH_HOP_UTILIZATION
    raise ValueError(f"Unknown hop addition type: {hop.type!r}")


def abv(og: float, fg: float) -> float:
    """Alcohol by volume from original and final gravity."""
    return (og - fg) * ABV_FACTOR


@dataclass
class RecipeCalculator:
    """Computes every derived value for a recipe.

    Pure and deterministic: the same recipe always yields an equal
    ``RecipeCalculations``. Empty grain bills, missing hops, and zero
    volumes produce neutral values (OG 1.000, IBU 0, SRM 0) rather than
    errors.
    """

    volume_service: VolumeService
    mash_ph_service: MashPhService
    target_mash_ph: float = DEFAULT_TARGET_PH
    default_attenuation: float = DEFAULT_ATTENUATION
    debug: bool = False

    def calculate(self, recipe: Recipe) -> RecipeCalculations:
        """Calculate all values for a recipe."""
        og = self.og(recipe)
        fg = self.fg(recipe)
        calories, carbs_g = self.nutrition(og, fg)

        mash_water_l = self.volume_service.mash_water(recipe)
        estimated_ph = self.mash_ph_service.mash_ph(recipe, mash_water_l)
        adjustment = None
        if estimated_ph is not None:
            adjustment = self.mash_ph_service.ph_adjustment(
                estimated_ph, self.target_mash_ph, recipe.total_grain_kg
            )

        result = RecipeCalculations(
            og=og,
            fg=fg,
            abv=abv(og, fg),
            ibu=self.ibu(recipe, og),
            srm=self.srm(recipe),
            calories=calories,
            carbs_g=carbs_g,
            pre_boil_volume_l=self.volume_service.pre_boil_volume(recipe),
            mash_water_l=mash_water_l,
            sparge_water_l=self.volume_service.sparge_water(recipe),
            total_water_l=self.volume_service.total_water(recipe),
            estimated_mash_ph=estimated_ph,
            mash_ph_adjustment=adjustment,
        )
        if self.debug:
            _logger.info(
                "Calculated recipe %r: og=%.3f fg=%.3f ibu=%.1f srm=%.1f",
                recipe.name,
                result.og,
                result.fg,
                result.ibu,
                result.srm,
            )
        return result

    def og(self, recipe: Recipe) -> float:
        """Original gravity; 1.000 when there is nothing to extract."""
        if not recipe.fermentables or recipe.batch_volume_l <= 0:
            return 1.0
        points = sum(self._gravity_points(recipe))
        return 1 + points / GRAVITY_TO_POINTS

    def fg(self, recipe: Recipe) -> float:
        """Final gravity from per-ingredient fermentability and attenuation."""
        if not recipe.fermentables or recipe.batch_volume_l <= 0:
            return 1.0

        fermentable_pts = 0.0
        non_fermentable_pts = 0.0
        for fermentable, points in zip(
            recipe.fermentables, self._gravity_points(recipe), strict=True
        ):
            share = fermentability(fermentable)
            fermentable_pts += points * share
            non_fermentable_pts += points * (1 - share)

        if fermentable_pts + non_fermentable_pts <= 0:
            return 1.0

        attenuation = self.effective_attenuation(recipe)
        residual = non_fermentable_pts + fermentable_pts * (1 - attenuation)
        return 1 + residual / GRAVITY_TO_POINTS

    def effective_attenuation(self, recipe: Recipe) -> float:
        """Yeast attenuation adjusted for mash and fermentation conditions."""
        base = (
            recipe.yeasts[0].attenuation if recipe.yeasts else self.default_attenuation
        )

        total_minutes = 0.0
        temp_acc = 0.0
        decoction_acc = 0.0
        for step in recipe.mash_steps:
            minutes = max(0.0, step.duration_minutes or 0)
            total_minutes += minutes
            temp_delta = REFERENCE_MASH_TEMP_C - step.temperature_c
            temp_acc += temp_delta * MASH_TEMP_ADJ_PER_C * minutes
            if step.type == "decoction":
                decoction_acc += DECOCTION_ADJ * minutes

        temp_adj = temp_acc / total_minutes if total_minutes > 0 else 0.0
        decoction_adj = decoction_acc / total_minutes if total_minutes > 0 else 0.0
        mash_minutes = total_minutes if total_minutes > 0 else REFERENCE_MASH_MINUTES
        mash_time_adj = _clamp(
            (mash_minutes - REFERENCE_MASH_MINUTES) / 15 * MASH_TIME_ADJ_PER_15_MIN,
            -MASH_TIME_ADJ_CAP,
            MASH_TIME_ADJ_CAP,
        )

        ferment_temp_c, ferment_days = self._ferment_metrics(recipe)
        ferment_temp_adj = (
            ferment_temp_c - REFERENCE_FERMENT_TEMP_C
        ) * FERMENT_TEMP_ADJ_PER_C
        ferment_days_adj = (
            ferment_days - REFERENCE_FERMENT_DAYS
        ) * FERMENT_DAYS_ADJ_PER_DAY

        raw = (
            base
            + temp_adj
            + decoction_adj
            + mash_time_adj
            + ferment_temp_adj
            + ferment_days_adj
        )
        effective = _clamp(raw, MIN_ATTENUATION, MAX_ATTENUATION)
        if self.debug and effective != raw:
            _logger.info("Attenuation %.3f clamped to %.3f", raw, effective)
        return effective

    def ibu(self, recipe: Recipe, og: float) -> float:
        """Total Tinseth IBU, rounded to one decimal."""
        if not recipe.hops or recipe.batch_volume_l <= 0:
            return 0.0
        batch_gal = liters_to_gallons(recipe.batch_volume_l)
        total = sum(self.hop_ibu(hop, og, batch_gal) for hop in recipe.hops)
        return round_to(total)

    def hop_ibu(self, hop: Hop, og: float, batch_volume_gal: float) -> float:
        """IBU contribution of a single hop addition."""
        if batch_volume_gal <= 0:
            return 0.0
        aau = grams_to_ounces(hop.grams) * hop.alpha_acid
        return aau * hop_utilization(hop, og) * TINSETH_IBU_FACTOR / batch_volume_gal

    def srm(self, recipe: Recipe) -> float:
        """Beer color by the Morey equation."""
        if not recipe.fermentables or recipe.batch_volume_l <= 0:
            return 0.0
        batch_gal = liters_to_gallons(recipe.batch_volume_l)
        mcu = sum(
            f.color_lovibond * kg_to_lbs(f.weight_kg) / batch_gal
            for f in recipe.fermentables
        )
        if mcu <= 0:
            return 0.0
        return MOREY_COEFF * mcu**MOREY_EXPONENT

    def nutrition(self, og: float, fg: float) -> tuple[float, float]:
        """Calories and grams of carbohydrate per 355 mL serving."""
        original_extract = sg_to_plato(og)
        apparent_extract = sg_to_plato(fg)
        real_extract = 0.1808 * original_extract + 0.8192 * apparent_extract
        abw = (original_extract - real_extract) / (2.0665 - 0.010665 * original_extract)

        calories_per_l = (6.9 * abw + 4.0 * (real_extract - 0.1)) * fg * 10
        carbs_per_l = (real_extract - 0.1) * fg * 10
        calories = max(0.0, float(math.floor(calories_per_l * SERVING_L + 0.5)))
        carbs_g = max(0.0, round_to(carbs_per_l * SERVING_L))
        return calories, carbs_g

    def abv(self, og: float, fg: float) -> float:
        """Alcohol by volume from original and final gravity."""
        return abv(og, fg)

    @staticmethod
    def _gravity_points(recipe: Recipe) -> list[float]:
        """Gravity points contributed by each fermentable, in recipe order."""
        batch_gal = liters_to_gallons(recipe.batch_volume_l)
        efficiency = recipe.equipment.mash_efficiency_percent / 100
        return [
            f.ppg * kg_to_lbs(f.weight_kg) * efficiency / batch_gal
            for f in recipe.fermentables
        ]

    @staticmethod
    def _ferment_metrics(recipe: Recipe) -> tuple[float, float]:
        """Duration-weighted fermentation temperature and total active days."""
        steps = [
            s for s in recipe.fermentation_steps if s.type in ATTENUATIVE_STEP_TYPES
        ]
        total_days = sum(max(0.0, s.duration_days or 0) for s in steps)
        if total_days <= 0:
            return REFERENCE_FERMENT_TEMP_C, REFERENCE_FERMENT_DAYS
        weighted = sum(max(0.0, s.duration_days or 0) * s.temperature_c for s in steps)
        return weighted / total_days, total_days
