"""Result models produced by the calculators."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MashPhAdjustment:
    """Acid or base needed to reach a target mash pH.

    Only one of ``lactic_acid_88_ml`` and ``baking_soda_g`` is ever positive.
    """

    target_ph: float
    lactic_acid_88_ml: float
    baking_soda_g: float


@dataclass(frozen=True)
class RecipeCalculations:
    """Derived values for a recipe. Never persisted."""

    og: float
    fg: float
    abv: float
    ibu: float
    srm: float
    calories: float
    carbs_g: float
    pre_boil_volume_l: float
    mash_water_l: float
    sparge_water_l: float
    total_water_l: float
    estimated_mash_ph: float | None
    mash_ph_adjustment: MashPhAdjustment | None


@dataclass(frozen=True)
class StarterStepResult:
    """Outcome of a single starter step."""

    dme_grams: float
    end_billion: float


@dataclass(frozen=True)
class StarterPlan:
    """Cell counts and extract needed for a yeast starter."""

    required_cells_b: float
    cells_available_b: float
    step_results: tuple[StarterStepResult, ...]
    final_end_b: float
    total_starter_l: float
    total_dme_g: float

    @property
    def pitch_ok(self) -> bool:
        """Whether the starter reaches the required cell count."""
        return self.final_end_b >= self.required_cells_b
