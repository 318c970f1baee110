"""Water volume calculations for a brew day."""

from dataclasses import dataclass

from brew_planner.domain.recipe import KETTLE_HOP_TYPES, Recipe
from brew_planner.domain.units import round_to

STRIKE_THERMAL_CONSTANT = 0.41
DEFAULT_GRAIN_TEMP_C = 20.0


@dataclass
class VolumeService:
    """Derives mash, sparge, and pre-boil volumes from equipment losses."""

    grain_temp_c: float = DEFAULT_GRAIN_TEMP_C

    def pre_boil_volume(self, recipe: Recipe) -> float:
        """Return the kettle volume needed before the boil starts."""
        equipment = recipe.equipment
        boil_off_l = equipment.boil_off_rate_l_per_hour * equipment.boil_time_min / 60

        # Dry hops and mash hops never reach the kettle.
        kettle_hops_kg = sum(
            hop.grams / 1000 for hop in recipe.hops if hop.type in KETTLE_HOP_TYPES
        )
        hop_absorption_l = kettle_hops_kg * equipment.hops_absorption_l_per_kg

        losses_l = (
            equipment.kettle_loss_l
            + hop_absorption_l
            + equipment.chiller_loss_l
            + equipment.fermenter_loss_l
        )
        shrinkage = 1 + equipment.cooling_shrinkage_percent / 100

        # Shrinkage applies to boiled wort only, so boil-off is added afterwards.
        return round_to((recipe.batch_volume_l + losses_l) * shrinkage + boil_off_l)

    def mash_water(self, recipe: Recipe) -> float:
        """Return the strike water volume."""
        equipment = recipe.equipment
        return round_to(
            recipe.total_grain_kg * equipment.mash_thickness_l_per_kg
            + equipment.mash_tun_deadspace_l
        )

    def sparge_water(self, recipe: Recipe) -> float:
        """Return sparge water, clamped at zero for no-sparge mashes."""
        equipment = recipe.equipment
        grain_absorption_l = recipe.total_grain_kg * equipment.grain_absorption_l_per_kg
        mash_runoff_l = (
            self.mash_water(recipe)
            - grain_absorption_l
            - equipment.mash_tun_deadspace_l
        )
        return max(0.0, round_to(self.pre_boil_volume(recipe) - mash_runoff_l))

    def total_water(self, recipe: Recipe) -> float:
        """Return mash plus sparge water."""
        return round_to(self.mash_water(recipe) + self.sparge_water(recipe))

    def strike_temp(
        self,
        target_mash_temp_c: float,
        mash_thickness_l_per_kg: float,
        grain_temp_c: float | None = None,
    ) -> float:
        """Return the strike water temperature for a single infusion."""
        grain = self.grain_temp_c if grain_temp_c is None else grain_temp_c
        if mash_thickness_l_per_kg <= 0:
            return round_to(target_mash_temp_c)
        temp_diff = target_mash_temp_c - grain
        return round_to(
            temp_diff * (STRIKE_THERMAL_CONSTANT / mash_thickness_l_per_kg)
            + target_mash_temp_c
        )

    def infusion_temp(
        self,
        current_mash_temp_c: float,
        target_mash_temp_c: float,
        current_mash_volume_l: float,
        infusion_volume_l: float,
        total_grain_kg: float,
    ) -> float:
        """Return the water temperature for a step-mash infusion."""
        if infusion_volume_l <= 0:
            return target_mash_temp_c
        mash_heat_capacity = (
            total_grain_kg * STRIKE_THERMAL_CONSTANT + current_mash_volume_l
        )
        temp_rise = target_mash_temp_c - current_mash_temp_c
        return round_to(
            temp_rise * mash_heat_capacity / infusion_volume_l + target_mash_temp_c
        )
