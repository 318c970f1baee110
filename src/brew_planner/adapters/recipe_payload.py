"""Pydantic models for persisted recipe JSON.

Stored recipes use camelCase keys. Older documents predate the multi-yeast
schema and some optional lists; ``migrate_recipe_payload`` brings them up to
date before validation.
"""

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from brew_planner.domain.recipe import (
    BraukaiserGrowth,
    Equipment,
    Fermentable,
    FermentationStep,
    FermentationStepType,
    Hop,
    HopAdditionType,
    IngredientTiming,
    MashStep,
    MashStepType,
    OtherIngredient,
    Recipe,
    StarterInfo,
    StarterStep,
    WaterChemistry,
    WhiteGrowth,
    Yeast,
    YeastType,
)
from brew_planner.domain.water import SaltAdditions, WaterProfile

_logger = logging.getLogger(__name__)

_DEFAULT_EQUIPMENT = Equipment()


class CamelModel(BaseModel):
    """Base model for camelCase JSON documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EquipmentPayload(CamelModel):
    """Equipment payload."""

    boil_time_min: float = _DEFAULT_EQUIPMENT.boil_time_min
    boil_off_rate_l_per_hour: float = _DEFAULT_EQUIPMENT.boil_off_rate_l_per_hour
    mash_efficiency_percent: float = _DEFAULT_EQUIPMENT.mash_efficiency_percent
    mash_thickness_l_per_kg: float = _DEFAULT_EQUIPMENT.mash_thickness_l_per_kg
    grain_absorption_l_per_kg: float = _DEFAULT_EQUIPMENT.grain_absorption_l_per_kg
    mash_tun_deadspace_liters: float = _DEFAULT_EQUIPMENT.mash_tun_deadspace_l
    kettle_loss_liters: float = _DEFAULT_EQUIPMENT.kettle_loss_l
    hops_absorption_l_per_kg: float = _DEFAULT_EQUIPMENT.hops_absorption_l_per_kg
    chiller_loss_liters: float = _DEFAULT_EQUIPMENT.chiller_loss_l
    fermenter_loss_liters: float = _DEFAULT_EQUIPMENT.fermenter_loss_l
    cooling_shrinkage_percent: float = _DEFAULT_EQUIPMENT.cooling_shrinkage_percent

    def to_domain(self) -> Equipment:
        return Equipment(
            boil_time_min=self.boil_time_min,
            boil_off_rate_l_per_hour=self.boil_off_rate_l_per_hour,
            mash_efficiency_percent=self.mash_efficiency_percent,
            mash_thickness_l_per_kg=self.mash_thickness_l_per_kg,
            grain_absorption_l_per_kg=self.grain_absorption_l_per_kg,
            mash_tun_deadspace_l=self.mash_tun_deadspace_liters,
            kettle_loss_l=self.kettle_loss_liters,
            hops_absorption_l_per_kg=self.hops_absorption_l_per_kg,
            chiller_loss_l=self.chiller_loss_liters,
            fermenter_loss_l=self.fermenter_loss_liters,
            cooling_shrinkage_percent=self.cooling_shrinkage_percent,
        )


class FermentablePayload(CamelModel):
    """Fermentable payload."""

    id: str | None = None
    name: str
    weight_kg: float
    color_lovibond: float
    ppg: float
    efficiency_percent: float | None = None
    fermentability: float | None = Field(default=None, ge=0, le=1)

    def to_domain(self) -> Fermentable:
        return Fermentable(
            name=self.name,
            weight_kg=self.weight_kg,
            color_lovibond=self.color_lovibond,
            ppg=self.ppg,
            fermentability=self.fermentability,
        )


class HopPayload(CamelModel):
    """Hop addition payload."""

    id: str | None = None
    name: str
    alpha_acid: float
    grams: float
    type: HopAdditionType = "boil"
    time_minutes: float | None = None
    temperature_c: float | None = None
    whirlpool_time_minutes: float | None = None
    dry_hop_start_day: float | None = None
    dry_hop_days: float | None = None

    def to_domain(self) -> Hop:
        return Hop(
            name=self.name,
            alpha_acid=self.alpha_acid,
            grams=self.grams,
            type=self.type,
            time_minutes=self.time_minutes or 0,
            temperature_c=80 if self.temperature_c is None else self.temperature_c,
            whirlpool_time_minutes=self.whirlpool_time_minutes,
            dry_hop_start_day=self.dry_hop_start_day,
            dry_hop_days=self.dry_hop_days,
        )


class WhiteModelPayload(CamelModel):
    """White Labs growth model payload."""

    kind: Literal["white"] = "white"
    aeration: Literal["none", "shaking"] = "none"


class BraukaiserModelPayload(CamelModel):
    """Braukaiser growth model payload."""

    kind: Literal["braukaiser"] = "braukaiser"


GrowthModelPayload = Annotated[
    WhiteModelPayload | BraukaiserModelPayload, Field(discriminator="kind")
]


class StarterStepPayload(CamelModel):
    """Starter step payload."""

    id: str | None = None
    liters: float
    gravity: float
    model: GrowthModelPayload = Field(default_factory=WhiteModelPayload)

    def to_domain(self) -> StarterStep:
        if isinstance(self.model, BraukaiserModelPayload):
            model = BraukaiserGrowth()
        else:
            model = WhiteGrowth(aeration=self.model.aeration)
        return StarterStep(liters=self.liters, gravity=self.gravity, model=model)


class StarterPayload(CamelModel):
    """Yeast starter payload."""

    yeast_type: YeastType
    packs: float = 1
    mfg_date: str | None = None
    slurry_liters: float | None = None
    slurry_billion_per_ml: float | None = None
    steps: list[StarterStepPayload] = Field(default_factory=list, max_length=3)

    def to_domain(self) -> StarterInfo:
        return StarterInfo(
            yeast_type=self.yeast_type,
            packs=self.packs,
            mfg_date=self.mfg_date,
            slurry_liters=self.slurry_liters,
            slurry_billion_per_ml=self.slurry_billion_per_ml,
            steps=tuple(step.to_domain() for step in self.steps),
        )


class YeastPayload(CamelModel):
    """Yeast payload."""

    id: str | None = None
    name: str
    attenuation: float
    laboratory: str | None = None
    starter: StarterPayload | None = None

    def to_domain(self) -> Yeast:
        return Yeast(
            name=self.name,
            attenuation=self.attenuation,
            laboratory=self.laboratory,
            starter=self.starter.to_domain() if self.starter else None,
        )


class MashStepPayload(CamelModel):
    """Mash step payload."""

    id: str | None = None
    name: str = ""
    type: MashStepType = "infusion"
    temperature_c: float
    duration_minutes: float
    infusion_volume_liters: float | None = None
    infusion_temp_c: float | None = None
    decoction_volume_liters: float | None = None

    def to_domain(self) -> MashStep:
        return MashStep(
            name=self.name,
            type=self.type,
            temperature_c=self.temperature_c,
            duration_minutes=self.duration_minutes,
            infusion_volume_l=self.infusion_volume_liters,
            infusion_temp_c=self.infusion_temp_c,
            decoction_volume_l=self.decoction_volume_liters,
        )


class FermentationStepPayload(CamelModel):
    """Fermentation step payload."""

    id: str | None = None
    name: str = ""
    type: FermentationStepType = "primary"
    duration_days: float
    temperature_c: float
    notes: str | None = None

    def to_domain(self) -> FermentationStep:
        return FermentationStep(
            name=self.name,
            type=self.type,
            duration_days=self.duration_days,
            temperature_c=self.temperature_c,
        )


class WaterProfilePayload(BaseModel):
    """Water profile payload keyed by ion symbol."""

    model_config = ConfigDict(populate_by_name=True)

    ca: float = Field(default=0.0, alias="Ca")
    mg: float = Field(default=0.0, alias="Mg")
    na: float = Field(default=0.0, alias="Na")
    cl: float = Field(default=0.0, alias="Cl")
    so4: float = Field(default=0.0, alias="SO4")
    hco3: float = Field(default=0.0, alias="HCO3")

    def to_domain(self) -> WaterProfile:
        return WaterProfile(
            ca=self.ca,
            mg=self.mg,
            na=self.na,
            cl=self.cl,
            so4=self.so4,
            hco3=self.hco3,
        )


class SaltAdditionsPayload(BaseModel):
    """Salt additions payload in grams."""

    gypsum_g: float | None = None
    cacl2_g: float | None = None
    epsom_g: float | None = None
    nacl_g: float | None = None
    nahco3_g: float | None = None

    def to_domain(self) -> SaltAdditions:
        return SaltAdditions(
            gypsum_g=self.gypsum_g or 0.0,
            cacl2_g=self.cacl2_g or 0.0,
            epsom_g=self.epsom_g or 0.0,
            nacl_g=self.nacl_g or 0.0,
            nahco3_g=self.nahco3_g or 0.0,
        )


class WaterChemistryPayload(CamelModel):
    """Water chemistry payload."""

    source_profile: WaterProfilePayload = Field(default_factory=WaterProfilePayload)
    salt_additions: SaltAdditionsPayload = Field(default_factory=SaltAdditionsPayload)
    source_profile_name: str | None = None
    target_style_name: str | None = None

    def to_domain(self) -> WaterChemistry:
        return WaterChemistry(
            source_profile=self.source_profile.to_domain(),
            salt_additions=self.salt_additions.to_domain(),
            source_profile_name=self.source_profile_name,
            target_style_name=self.target_style_name,
        )


class OtherIngredientPayload(CamelModel):
    """Miscellaneous ingredient payload."""

    id: str | None = None
    name: str
    category: str = "other"
    amount: float
    unit: str
    timing: IngredientTiming
    notes: str | None = None

    def to_domain(self) -> OtherIngredient:
        return OtherIngredient(
            name=self.name,
            amount=self.amount,
            unit=self.unit,
            timing=self.timing,
            category=self.category,
        )


class RecipePayload(CamelModel):
    """Stored recipe document."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str | None = None
    name: str
    style: str | None = None
    notes: str | None = None
    current_version: int = 1
    batch_volume_l: float
    equipment: EquipmentPayload = Field(default_factory=EquipmentPayload)
    fermentables: list[FermentablePayload] = Field(default_factory=list)
    hops: list[HopPayload] = Field(default_factory=list)
    yeasts: list[YeastPayload] = Field(default_factory=list)
    other_ingredients: list[OtherIngredientPayload] = Field(default_factory=list)
    mash_steps: list[MashStepPayload] = Field(default_factory=list)
    fermentation_steps: list[FermentationStepPayload] = Field(default_factory=list)
    water_chemistry: WaterChemistryPayload | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_domain(self) -> Recipe:
        """Convert the stored document into the calculation model."""
        return Recipe(
            id=self.id,
            name=self.name,
            style=self.style,
            notes=self.notes,
            batch_volume_l=self.batch_volume_l,
            equipment=self.equipment.to_domain(),
            fermentables=tuple(f.to_domain() for f in self.fermentables),
            hops=tuple(h.to_domain() for h in self.hops),
            yeasts=tuple(y.to_domain() for y in self.yeasts),
            mash_steps=tuple(s.to_domain() for s in self.mash_steps),
            fermentation_steps=tuple(s.to_domain() for s in self.fermentation_steps),
            water_chemistry=(
                self.water_chemistry.to_domain() if self.water_chemistry else None
            ),
            other_ingredients=tuple(i.to_domain() for i in self.other_ingredients),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def migrate_recipe_payload(raw: dict[str, Any]) -> dict[str, Any]:
    """Upgrade an older recipe document to the current schema.

    Returns a new dict; the input is left untouched. A document that needs no
    migration compares equal to the input.
    """
    migrated = dict(raw)
    if "currentVersion" not in migrated:
        migrated["currentVersion"] = 1
    for key in ("otherIngredients", "mashSteps", "fermentationSteps"):
        if not migrated.get(key):
            migrated[key] = []
    if "yeasts" not in migrated or migrated["yeasts"] is None:
        old_yeast = migrated.pop("yeast", None)
        migrated["yeasts"] = [old_yeast] if old_yeast else []
        _logger.debug("Migrated single yeast for recipe %s", migrated.get("id"))
    return migrated


def parse_recipe(raw: dict[str, Any]) -> RecipePayload:
    """Migrate and validate a raw recipe document."""
    return RecipePayload.model_validate(migrate_recipe_payload(raw))
