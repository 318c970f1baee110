"""Domain models for beer recipes."""

from dataclasses import dataclass, field
from typing import Literal

from brew_planner.domain.water import SaltAdditions, WaterProfile

HopAdditionType = Literal["boil", "whirlpool", "dry hop", "first wort", "mash"]
YeastType = Literal["liquid-100", "liquid-200", "dry", "slurry"]
MashStepType = Literal["infusion", "temperature", "decoction"]
FermentationStepType = Literal[
    "primary", "secondary", "conditioning", "cold-crash", "diacetyl-rest"
]
IngredientTiming = Literal[
    "mash", "boil", "whirlpool", "secondary", "kegging", "bottling"
]

KETTLE_HOP_TYPES: frozenset[str] = frozenset({"boil", "whirlpool", "first wort"})
MAX_STARTER_STEPS = 3


@dataclass(frozen=True)
class Equipment:
    """Brewhouse settings that drive volumes and efficiency."""

    boil_time_min: float = 60
    boil_off_rate_l_per_hour: float = 4.0
    mash_efficiency_percent: float = 75
    mash_thickness_l_per_kg: float = 3.0
    grain_absorption_l_per_kg: float = 1.04
    mash_tun_deadspace_l: float = 2.0
    kettle_loss_l: float = 1.0
    hops_absorption_l_per_kg: float = 0.7
    chiller_loss_l: float = 0.5
    fermenter_loss_l: float = 0.5
    cooling_shrinkage_percent: float = 4.0


@dataclass(frozen=True)
class Fermentable:
    """A grain, extract, or sugar in the grist."""

    name: str
    weight_kg: float
    color_lovibond: float
    ppg: float
    fermentability: float | None = None


@dataclass(frozen=True)
class Hop:
    """A single hop addition."""

    name: str
    alpha_acid: float
    grams: float
    type: HopAdditionType = "boil"
    time_minutes: float = 0
    temperature_c: float = 80
    whirlpool_time_minutes: float | None = None
    dry_hop_start_day: float | None = None
    dry_hop_days: float | None = None


@dataclass(frozen=True)
class WhiteGrowth:
    """White Labs growth model for a starter step."""

    aeration: Literal["none", "shaking"] = "none"
    kind: Literal["white"] = field(default="white", init=False)


@dataclass(frozen=True)
class BraukaiserGrowth:
    """Braukaiser linear growth model for a starter step."""

    kind: Literal["braukaiser"] = field(default="braukaiser", init=False)


GrowthModel = WhiteGrowth | BraukaiserGrowth


@dataclass(frozen=True)
class StarterStep:
    """One starter step."""

    liters: float
    gravity: float
    model: GrowthModel = field(default_factory=WhiteGrowth)


@dataclass(frozen=True)
class StarterInfo:
    """Yeast package and starter plan."""

    yeast_type: YeastType
    packs: float = 1
    mfg_date: str | None = None
    slurry_liters: float | None = None
    slurry_billion_per_ml: float | None = None
    steps: tuple[StarterStep, ...] = ()

    def __post_init__(self) -> None:
        if len(self.steps) > MAX_STARTER_STEPS:
            raise ValueError(
                f"A starter supports at most {MAX_STARTER_STEPS} steps, "
                f"got {len(self.steps)}"
            )


@dataclass(frozen=True)
class Yeast:
    """Yeast strain used for fermentation."""

    name: str
    attenuation: float
    laboratory: str | None = None
    starter: StarterInfo | None = None


@dataclass(frozen=True)
class MashStep:
    """A single step in the mash schedule."""

    name: str
    type: MashStepType
    temperature_c: float
    duration_minutes: float
    infusion_volume_l: float | None = None
    infusion_temp_c: float | None = None
    decoction_volume_l: float | None = None


@dataclass(frozen=True)
class FermentationStep:
    """A single step in the fermentation schedule."""

    name: str
    type: FermentationStepType
    duration_days: float
    temperature_c: float


@dataclass(frozen=True)
class WaterChemistry:
    """Source water and total salt additions."""

    source_profile: WaterProfile = field(default_factory=WaterProfile)
    salt_additions: SaltAdditions = field(default_factory=SaltAdditions)
    source_profile_name: str | None = None
    target_style_name: str | None = None


@dataclass(frozen=True)
class OtherIngredient:
    """Miscellaneous ingredient such as an acid, fining, or spice."""

    name: str
    amount: float
    unit: str
    timing: IngredientTiming
    category: str = "other"


@dataclass(frozen=True)
class Recipe:
    """A beer recipe as handed to the calculators."""

    name: str
    batch_volume_l: float
    equipment: Equipment = field(default_factory=Equipment)
    fermentables: tuple[Fermentable, ...] = ()
    hops: tuple[Hop, ...] = ()
    yeasts: tuple[Yeast, ...] = ()
    mash_steps: tuple[MashStep, ...] = ()
    fermentation_steps: tuple[FermentationStep, ...] = ()
    water_chemistry: WaterChemistry | None = None
    other_ingredients: tuple[OtherIngredient, ...] = ()
    style: str | None = None
    notes: str | None = None
    id: str | None = None

    @property
    def total_grain_kg(self) -> float:
        """Total fermentable weight in kilograms."""
        return sum(f.weight_kg for f in self.fermentables)


@dataclass(frozen=True)
class StoredRecipe:
    """A recipe kept in the recipe store, with its bookkeeping fields."""

    id: str
    current_version: int
    created_at: str | None
    updated_at: str | None
    recipe: Recipe

    @property
    def name(self) -> str:
        return self.recipe.name

    @property
    def style(self) -> str | None:
        return self.recipe.style
