"""Mash pH prediction using a proton deficit model.

Each mashable grain pulls the mash toward its distilled-water pH (pHdi)
with a universal buffering capacity. Water alkalinity and acid or base
additions shift the balance. The equilibrium pH is the root of the proton
balance, found by bisection.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from brew_planner.domain.calculations import MashPhAdjustment
from brew_planner.domain.recipe import Fermentable, OtherIngredient, Recipe
from brew_planner.domain.units import round_to
from brew_planner.domain.water import SaltAdditions, WaterProfile
from brew_planner.services.water_chemistry import WaterChemistryService

GrainPhCategory = Literal[
    "base", "wheat", "munich", "crystal", "roasted", "acidulated", "adjunct"
]

_logger = logging.getLogger(__name__)

# mEq per kg per pH unit; negative because lowering pH consumes protons.
MALT_BUFFERING_MEQ_KG_PH = -40.0
# 0.88 w/w × 1.209 g/mL × 1000 / 90.08 g/mol
LACTIC_88_MEQ_PER_ML = 11.81
# 1000 / 84.006 g/mol
NAHCO3_MEQ_PER_G = 11.904

BISECT_PH_LO = 3.0
BISECT_PH_HI = 8.0
BISECT_TOL = 0.001
BISECT_MAX_ITER = 50

DEFAULT_TARGET_PH = 5.4
ADJUSTMENT_TOLERANCE = 0.02
MASH_PH_RANGE = (5.2, 5.6)
MASH_PH_IDEAL = (5.2, 5.4)

GRAIN_DI_PH: dict[GrainPhCategory, tuple[float, float]] = {
    "base": (5.65, 5.72),
    "wheat": (5.95, 6.05),
    "munich": (4.70, 5.55),
    "crystal": (4.50, 5.20),
    "roasted": (4.45, 4.60),
    "acidulated": (3.35, 3.45),
    "adjunct": (5.70, 5.80),
}

# Color span (°L) over which darker grains interpolate toward the range minimum.
_COLOR_INTERPOLATION: dict[GrainPhCategory, tuple[float, float]] = {
    "munich": (4, 200),
    "crystal": (10, 120),
    "roasted": (300, 500),
}

_ROASTED_KEYWORDS = (
    "roasted",
    "black malt",
    "black patent",
    "black barley",
    "chocolate",
    "carafa",
    "midnight wheat",
    "blackprinz",
    "dehusked",
)
_CRYSTAL_KEYWORDS = (
    "crystal",
    "caramel",
    "caramunich",
    "carapils",
    "carahell",
    "caravienne",
    "caraaroma",
    "carafoam",
    "carastan",
    "carared",
    "special b",
)
_WHEAT_KEYWORDS = ("wheat", "weizen")
_KILNED_KEYWORDS = (
    "munich",
    "vienna",
    "biscuit",
    "melanoidin",
    "melano",
    "aromatic",
    "amber",
    "brown",
    "victory",
    "special roast",
    "honey malt",
    "abbey",
    "brumalt",
    "cookie",
    "coffee malt",
    "red x",
    "red ale",
)
_ADJUNCT_KEYWORDS = ("flaked", "torrified", "rice hull", "corn", "rice")
_NON_MASHABLE_KEYWORDS = (
    "extract",
    "dme",
    "lme",
    "dry malt",
    "liquid malt",
    "cane sugar",
    "corn sugar",
    "dextrose",
    "sucrose",
    "table sugar",
    "honey",
    "maple syrup",
    "molasses",
    "brown sugar",
    "candy sugar",
    "candi sugar",
    "invert sugar",
    "lactose",
    "maltodextrin",
)


def _contains_any(name: str, keywords: Iterable[str]) -> bool:
    return any(keyword in name for keyword in keywords)


def _is_crystal(name: str, color: float) -> bool:
    if _contains_any(name, _CRYSTAL_KEYWORDS):
        return True
    return "cara" in name and "carafa" not in name


# Evaluated top to bottom; the first match wins. Order matters for names that
# match several rules, e.g. "Chocolate Wheat" must be roasted.
_GRAIN_PH_RULES: tuple[tuple[Callable[[str, float], bool], GrainPhCategory], ...] = (
    (
        lambda n, c: _contains_any(n, ("acidulated", "acid malt", "sauermalz")),
        "acidulated",
    ),
    (lambda n, c: _contains_any(n, _ROASTED_KEYWORDS) or c >= 300, "roasted"),
    (_is_crystal, "crystal"),
    (lambda n, c: _contains_any(n, _WHEAT_KEYWORDS), "wheat"),
    (lambda n, c: _contains_any(n, _KILNED_KEYWORDS), "munich"),
    (lambda n, c: _contains_any(n, _ADJUNCT_KEYWORDS), "adjunct"),
    (lambda n, c: c > 10, "munich"),
)


def classify_grain_for_ph(name: str, color_lovibond: float) -> GrainPhCategory:
    """Classify a grain into a mash pH category by name and color."""
    lowered = name.lower()
    for predicate, category in _GRAIN_PH_RULES:
        if predicate(lowered, color_lovibond):
            return category
    return "base"


def grain_di_ph(category: GrainPhCategory, color_lovibond: float) -> float:
    """Return the distilled-water mash pH for a grain."""
    low, high = GRAIN_DI_PH[category]
    span = _COLOR_INTERPOLATION.get(category)
    if span is None:
        return (low + high) / 2
    min_color, max_color = span
    t = min(1.0, max(0.0, (color_lovibond - min_color) / (max_color - min_color)))
    return high - t * (high - low)


def is_mashable(fermentable: Fermentable) -> bool:
    """Return False for extracts and sugars that never see the mash."""
    return not _contains_any(fermentable.name.lower(), _NON_MASHABLE_KEYWORDS)


def effective_alkalinity_meq_per_l(profile: WaterProfile) -> float:
    """Water alkalinity in mEq/L net of Ca and Mg precipitation (Kolbach)."""
    return (
        profile.hco3 / 61.016
        - profile.ca / (40.078 * 3.5)
        - profile.mg / (24.305 * 7)
    )


@dataclass(frozen=True)
class GrainTerm:
    """A mashable grain reduced to what the solver needs."""

    weight_kg: float
    ph_di: float


def proton_balance(
    ph: float,
    water_alk_meq: float,
    grains: Iterable[GrainTerm],
    acid_meq: float,
    base_meq: float,
) -> float:
    """Net proton balance at a given pH; zero at equilibrium."""
    malt_deficit = sum(
        grain.weight_kg * MALT_BUFFERING_MEQ_KG_PH * (ph - grain.ph_di)
        for grain in grains
    )
    return water_alk_meq + malt_deficit - acid_meq + base_meq


def solve_bisection(
    func: Callable[[float], float],
    lo: float,
    hi: float,
    tolerance: float,
    max_iterations: int,
) -> float:
    """Find a root of func in [lo, hi] by bisection.

    When the bracket has no sign change, returns whichever bound gives the
    value closer to zero. Always terminates within max_iterations.
    """
    f_lo = func(lo)
    f_hi = func(hi)
    if f_lo * f_hi > 0:
        _logger.debug("No sign change in [%s, %s]; returning nearest bound", lo, hi)
        return lo if abs(f_lo) < abs(f_hi) else hi

    for _ in range(max_iterations):
        mid = (lo + hi) / 2
        f_mid = func(mid)
        if abs(f_mid) < tolerance or (hi - lo) / 2 < tolerance:
            return mid
        if f_mid * f_lo < 0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid
    return (lo + hi) / 2


def _to_ml(amount: float, unit: str) -> float:
    factors = {"ml": 1.0, "l": 1000.0, "tsp": 4.93, "tbsp": 14.79, "drops": 0.05}
    return amount * factors.get(unit.lower(), 0.0)


def _to_grams(amount: float, unit: str) -> float:
    # tsp/tbsp assume baking soda density of about 0.92 g/mL
    factors = {
        "g": 1.0,
        "kg": 1000.0,
        "oz": 28.3495,
        "lb": 453.592,
        "tsp": 4.6,
        "tbsp": 13.8,
    }
    return amount * factors.get(unit.lower(), 0.0)


def acid_base_from_ingredients(
    ingredients: Iterable[OtherIngredient],
) -> tuple[float, float]:
    """Return (mL of 88% lactic acid, g of baking soda) added to the mash."""
    lactic_ml = 0.0
    soda_g = 0.0
    for ingredient in ingredients:
        if ingredient.timing != "mash":
            continue
        name = ingredient.name.lower()
        if "lactic" in name:
            lactic_ml += _to_ml(ingredient.amount, ingredient.unit)
        elif _contains_any(name, ("baking soda", "sodium bicarbonate", "nahco3")):
            soda_g += _to_grams(ingredient.amount, ingredient.unit)
    return lactic_ml, soda_g


@dataclass
class MashPhService:
    """Predicts mash pH and recommends acid or base additions."""

    water_chemistry: WaterChemistryService
    ph_lo: float = BISECT_PH_LO
    ph_hi: float = BISECT_PH_HI
    tolerance: float = BISECT_TOL
    max_iterations: int = BISECT_MAX_ITER

    def mash_ph(self, recipe: Recipe, mash_water_l: float) -> float | None:
        """Predict the mash pH, or None when nothing is mashed."""
        grains = self._grain_terms(recipe.fermentables)
        if not grains:
            return None

        water_alk_meq = 0.0
        chemistry = recipe.water_chemistry
        if chemistry is not None and mash_water_l > 0:
            profile = self._mash_water_profile(
                recipe, chemistry.source_profile, chemistry.salt_additions, mash_water_l
            )
            water_alk_meq = effective_alkalinity_meq_per_l(profile) * mash_water_l

        lactic_ml, soda_g = acid_base_from_ingredients(recipe.other_ingredients)
        return self._solve(
            water_alk_meq,
            grains,
            lactic_ml * LACTIC_88_MEQ_PER_ML,
            soda_g * NAHCO3_MEQ_PER_G,
        )

    def grain_only_ph(self, fermentables: Iterable[Fermentable]) -> float | None:
        """Predict the mash pH in distilled water with no additions."""
        grains = self._grain_terms(fermentables)
        if not grains:
            return None
        return self._solve(0.0, grains, 0.0, 0.0)

    def ph_adjustment(
        self, current_ph: float, target_ph: float, total_grain_kg: float
    ) -> MashPhAdjustment | None:
        """Recommend lactic acid or baking soda to reach the target pH."""
        delta = current_ph - target_ph
        if abs(delta) < ADJUSTMENT_TOLERANCE:
            return None

        meq_needed = total_grain_kg * abs(MALT_BUFFERING_MEQ_KG_PH) * abs(delta)
        if delta > 0:
            return MashPhAdjustment(
                target_ph=target_ph,
                lactic_acid_88_ml=round_to(meq_needed / LACTIC_88_MEQ_PER_ML),
                baking_soda_g=0.0,
            )
        return MashPhAdjustment(
            target_ph=target_ph,
            lactic_acid_88_ml=0.0,
            baking_soda_g=round_to(meq_needed / NAHCO3_MEQ_PER_G),
        )

    def _solve(
        self,
        water_alk_meq: float,
        grains: list[GrainTerm],
        acid_meq: float,
        base_meq: float,
    ) -> float:
        return solve_bisection(
            lambda ph: proton_balance(ph, water_alk_meq, grains, acid_meq, base_meq),
            self.ph_lo,
            self.ph_hi,
            self.tolerance,
            self.max_iterations,
        )

    @staticmethod
    def _grain_terms(fermentables: Iterable[Fermentable]) -> list[GrainTerm]:
        mash_grains = [f for f in fermentables if is_mashable(f)]
        if sum(f.weight_kg for f in mash_grains) <= 0:
            return []
        return [
            GrainTerm(
                weight_kg=f.weight_kg,
                ph_di=grain_di_ph(
                    classify_grain_for_ph(f.name, f.color_lovibond), f.color_lovibond
                ),
            )
            for f in mash_grains
        ]

    def _mash_water_profile(
        self,
        recipe: Recipe,
        source: WaterProfile,
        additions: SaltAdditions,
        mash_water_l: float,
    ) -> WaterProfile:
        equipment = recipe.equipment
        grain_absorption_l = recipe.total_grain_kg * equipment.grain_absorption_l_per_kg
        mash_runoff_l = max(0.0, mash_water_l - grain_absorption_l)
        boil_off_l = equipment.boil_time_min / 60 * equipment.boil_off_rate_l_per_hour
        pre_boil_l = recipe.batch_volume_l + boil_off_l + equipment.kettle_loss_l
        sparge_water_l = max(0.0, pre_boil_l - mash_runoff_l)

        mash_salts, _ = self.water_chemistry.split_salts_proportionally(
            additions, mash_water_l, sparge_water_l
        )
        return self.water_chemistry.final_profile(source, mash_salts, mash_water_l)
