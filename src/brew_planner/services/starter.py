"""Yeast starter and pitch rate calculations.

Growth follows either the White Labs polynomial fit (cells grow as a
function of inoculation rate, capped by a per-liter saturation density) or
Braukaiser's linear model (a fixed number of cells per gram of extract).
"""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime

from brew_planner.domain.calculations import StarterPlan, StarterStepResult
from brew_planner.domain.recipe import (
    BraukaiserGrowth,
    Recipe,
    StarterInfo,
    StarterStep,
    WhiteGrowth,
    YeastType,
)
from brew_planner.domain.units import (
    GRAVITY_TO_POINTS,
    LITERS_TO_GALLONS,
    POUNDS_TO_GRAMS,
)

_logger = logging.getLogger(__name__)

# ASBC polynomial: Plato = A + B·SG + C·SG² + D·SG³
PLATO_COEFF_A = -616.868
PLATO_COEFF_B = 1111.14
PLATO_COEFF_C = -630.272
PLATO_COEFF_D = 135.997

# White Labs estimate of ~21% viability loss per month.
VIABILITY_LOSS_PER_DAY = 0.007

DRY_YEAST_SACHET_GRAMS = 11
DRY_YEAST_BILLION_PER_GRAM = 6
LIQUID_YEAST_STANDARD_BILLION = 100
LIQUID_YEAST_LARGE_BILLION = 200
LITERS_TO_ML = 1000

DME_PPG = 45
DEFAULT_PITCH_RATE = 0.75
_SAFE_DIVISOR_MIN = 0.0001

WHITE_MODEL_COEFF_A = 12.54793776
WHITE_MODEL_COEFF_B = -0.4594858324
WHITE_MODEL_COEFF_C = -0.9994994906
WHITE_MODEL_AERATION_BOOST = 0.5
WHITE_MODEL_MAX_GROWTH = 6
WHITE_MODEL_SATURATION_BILLION_PER_L = 200

BRAUKAISER_BILLION_PER_GRAM_DME = 1.4


def sg_to_plato(sg: float) -> float:
    """Convert specific gravity to degrees Plato."""
    return (
        PLATO_COEFF_A
        + PLATO_COEFF_B * sg
        + PLATO_COEFF_C * sg**2
        + PLATO_COEFF_D * sg**3
    )


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _parse_date(raw: str) -> date | None:
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


@dataclass
class StarterService:
    """Calculates cell counts and simulates multi-step starters."""

    pitch_rate: float = DEFAULT_PITCH_RATE
    dme_ppg: float = DME_PPG

    def sg_to_plato(self, sg: float) -> float:
        """Convert specific gravity to degrees Plato."""
        return sg_to_plato(sg)

    def dme_grams_for_gravity(
        self, liters: float, gravity: float, ppg: float | None = None
    ) -> float:
        """Return grams of dry malt extract to reach a starter gravity."""
        dme_ppg = self.dme_ppg if ppg is None else ppg
        points = max(0.0, (gravity - 1) * GRAVITY_TO_POINTS)
        gallons = liters * LITERS_TO_GALLONS
        pounds = points * gallons / max(_SAFE_DIVISOR_MIN, dme_ppg)
        return pounds * POUNDS_TO_GRAMS

    def viability(self, mfg_date: str | None, today: date | None = None) -> float:
        """Return yeast viability (0-1) from its manufacture date."""
        if not mfg_date:
            return 1.0
        made = _parse_date(mfg_date)
        if made is None:
            _logger.debug("Unparsable manufacture date: %r", mfg_date)
            return 1.0
        reference = today or datetime.now(tz=UTC).date()
        days = max(0, (reference - made).days)
        return _clamp(1 - VIABILITY_LOSS_PER_DAY * days, 0.0, 1.0)

    def cells_available(
        self,
        yeast_type: YeastType,
        packs: float,
        mfg_date: str | None = None,
        slurry_liters: float | None = None,
        slurry_billion_per_ml: float | None = None,
        today: date | None = None,
    ) -> float:
        """Return billions of cells in the pitched package(s)."""
        whole_packs = max(0, math.floor(packs))
        if yeast_type == "dry":
            return whole_packs * DRY_YEAST_SACHET_GRAMS * DRY_YEAST_BILLION_PER_GRAM
        if yeast_type == "slurry":
            return (
                max(0.0, slurry_liters or 0.0)
                * LITERS_TO_ML
                * max(0.0, slurry_billion_per_ml or 0.0)
            )
        if yeast_type == "liquid-200":
            per_pack = LIQUID_YEAST_LARGE_BILLION
        elif yeast_type == "liquid-100":
            per_pack = LIQUID_YEAST_STANDARD_BILLION
        else:
            raise ValueError(f"Unknown yeast package type: {yeast_type!r}")
        return whole_packs * per_pack * self.viability(mfg_date, today)

    def required_cells(
        self, volume_l: float, og: float, pitch_rate: float | None = None
    ) -> float:
        """Return billions of cells needed to pitch a batch."""
        rate = self.pitch_rate if pitch_rate is None else pitch_rate
        return rate * max(0.0, volume_l) * max(0.0, sg_to_plato(og))

    def white_growth(
        self, current_billion: float, liters: float, model: WhiteGrowth
    ) -> float:
        """Return the cell count after a White-model step."""
        inoculation_rate = current_billion / max(_SAFE_DIVISOR_MIN, liters)
        if inoculation_rate <= 0:
            return current_billion
        base = (
            WHITE_MODEL_COEFF_A * inoculation_rate**WHITE_MODEL_COEFF_B
            + WHITE_MODEL_COEFF_C
        )
        boost = WHITE_MODEL_AERATION_BOOST if model.aeration == "shaking" else 0.0
        growth_factor = _clamp(base + boost, 0.0, WHITE_MODEL_MAX_GROWTH)
        saturation = WHITE_MODEL_SATURATION_BILLION_PER_L * liters
        if current_billion >= saturation:
            # Already past the step's density ceiling: no growth, no loss.
            return current_billion
        return min(saturation, current_billion * (1 + growth_factor))

    def braukaiser_growth(
        self, current_billion: float, liters: float, gravity: float
    ) -> float:
        """Return the cell count after a Braukaiser-model step."""
        grams = self.dme_grams_for_gravity(liters, gravity)
        return current_billion + grams * BRAUKAISER_BILLION_PER_GRAM_DME

    def step(self, current_billion: float, step: StarterStep) -> StarterStepResult:
        """Apply one starter step to the current cell count."""
        dme_grams = self.dme_grams_for_gravity(step.liters, step.gravity)
        model = step.model
        if isinstance(model, WhiteGrowth):
            end = self.white_growth(current_billion, step.liters, model)
        elif isinstance(model, BraukaiserGrowth):
            end = self.braukaiser_growth(current_billion, step.liters, step.gravity)
        else:
            raise ValueError(f"Unknown starter growth model: {model!r}")
        return StarterStepResult(dme_grams=dme_grams, end_billion=end)

    def plan(
        self,
        volume_l: float,
        og: float,
        starter: StarterInfo,
        pitch_rate: float | None = None,
        today: date | None = None,
    ) -> StarterPlan:
        """Run every starter step in order and summarise the result."""
        required = self.required_cells(volume_l, og, pitch_rate)
        available = self.cells_available(
            starter.yeast_type,
            starter.packs,
            starter.mfg_date,
            starter.slurry_liters,
            starter.slurry_billion_per_ml,
            today,
        )

        results: list[StarterStepResult] = []
        current = max(0.0, available)
        for starter_step in starter.steps:
            result = self.step(current, starter_step)
            current = result.end_billion
            results.append(result)

        return StarterPlan(
            required_cells_b=required,
            cells_available_b=available,
            step_results=tuple(results),
            final_end_b=results[-1].end_billion if results else available,
            total_starter_l=sum(s.liters for s in starter.steps),
            total_dme_g=sum(r.dme_grams for r in results),
        )

    def plan_for_recipe(
        self, recipe: Recipe, og: float, today: date | None = None
    ) -> StarterPlan | None:
        """Plan the starter for the first yeast that has one."""
        for yeast in recipe.yeasts:
            if yeast.starter is not None:
                return self.plan(recipe.batch_volume_l, og, yeast.starter, today=today)
        return None
