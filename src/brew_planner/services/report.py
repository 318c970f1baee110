"""Markdown brew sheet rendering."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from brew_planner.domain.calculations import RecipeCalculations, StarterPlan
from brew_planner.domain.recipe import Hop, Recipe, StarterStep, WhiteGrowth
from brew_planner.domain.units import (
    GRAVITY_TO_POINTS,
    celsius_to_fahrenheit,
    grams_to_ounces,
    kg_to_lbs,
    liters_to_gallons,
    round_to,
)
from brew_planner.domain.water import WaterProfile
from brew_planner.services.mash_ph import MASH_PH_RANGE
from brew_planner.services.recipe_calculator import RecipeCalculator
from brew_planner.services.starter import StarterService
from brew_planner.services.volumes import VolumeService
from brew_planner.services.water_chemistry import WaterChemistryService

_HOP_ORDER = {"first wort": 0, "boil": 1, "whirlpool": 2, "mash": 3, "dry hop": 4}
_SALT_LABELS = {
    "gypsum_g": "Gypsum",
    "cacl2_g": "CaCl2",
    "epsom_g": "Epsom",
    "nacl_g": "NaCl",
    "nahco3_g": "Baking Soda",
}


def _fmt(value: float | None, digits: int = 2) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


def _liters(value: float) -> str:
    return f"{_fmt(value, 1)} L ({_fmt(liters_to_gallons(value), 2)} gal)"


def _temp(value: float) -> str:
    return f"{_fmt(value, 0)}°C ({_fmt(celsius_to_fahrenheit(value), 0)}°F)"


def _ions(label: str, profile: WaterProfile) -> str:
    values = " | ".join(
        _fmt(v, 0)
        for v in (
            profile.ca,
            profile.mg,
            profile.na,
            profile.cl,
            profile.so4,
            profile.hco3,
        )
    )
    return f"| **{label}** | {values} |"


def _hop_sort_key(hop: Hop) -> tuple[int, float, str]:
    if hop.type == "dry hop":
        start = hop.dry_hop_start_day
        day = start if start is not None else float("inf")
        return _HOP_ORDER[hop.type], day, hop.name
    return _HOP_ORDER.get(hop.type, len(_HOP_ORDER)), -hop.time_minutes, ""


def _hop_time(hop: Hop) -> str:
    if hop.type in ("boil", "first wort", "mash"):
        return f"{_fmt(hop.time_minutes, 0)} min"
    if hop.type == "whirlpool":
        minutes = (
            hop.whirlpool_time_minutes
            if hop.whirlpool_time_minutes is not None
            else hop.time_minutes
        )
        return f"{_fmt(minutes, 0)} min @ {_fmt(hop.temperature_c, 0)}°C"
    parts = []
    if hop.dry_hop_start_day is not None:
        parts.append(f"day {_fmt(hop.dry_hop_start_day, 0)}")
    if hop.dry_hop_days is not None:
        parts.append(f"{_fmt(hop.dry_hop_days, 0)} days")
    return ", ".join(parts) or "-"


@dataclass
class ReportService:
    """Renders a recipe and its calculations as a markdown brew sheet."""

    calculator: RecipeCalculator
    volume_service: VolumeService
    water_chemistry: WaterChemistryService
    starter_service: StarterService

    def render(
        self,
        recipe: Recipe,
        calculations: RecipeCalculations | None = None,
        today: date | None = None,
    ) -> str:
        """Render the full brew sheet."""
        calc = (
            calculations
            if calculations is not None
            else self.calculator.calculate(recipe)
        )
        lines = [f"# {recipe.name or 'Untitled Recipe'}", ""]
        if recipe.style:
            lines += [f"**{recipe.style}**", ""]
        if recipe.notes:
            lines += ["> " + recipe.notes.replace("\n", "  \n> "), ""]

        lines += self._vital_stats(recipe, calc)
        lines += self._water(recipe, calc)
        lines += self._chemistry(recipe, calc)
        lines += self._fermentables(recipe)
        lines += self._hops(recipe, calc)
        lines += self._yeast(recipe, calc, today)
        lines += self._mash(recipe)
        lines += self._fermentation(recipe)
        lines += self._ph_advice(calc)
        return "\n".join(lines).rstrip() + "\n"

    def pre_boil_gravity(self, recipe: Recipe, calc: RecipeCalculations) -> float:
        """Gravity of the wort before the boil concentrates it."""
        if calc.pre_boil_volume_l <= 0:
            return calc.og
        return 1 + (calc.og - 1) * recipe.batch_volume_l / calc.pre_boil_volume_l

    def post_boil_volume(self, recipe: Recipe, calc: RecipeCalculations) -> float:
        """Kettle volume at flameout."""
        equipment = recipe.equipment
        boil_off_l = equipment.boil_off_rate_l_per_hour * equipment.boil_time_min / 60
        return max(0.0, calc.pre_boil_volume_l - boil_off_l)

    @staticmethod
    def bu_gu(calc: RecipeCalculations) -> float:
        """Bitterness to gravity ratio."""
        points = round_to((calc.og - 1) * GRAVITY_TO_POINTS, 0)
        return calc.ibu / points if points > 0 else 0.0

    def _vital_stats(self, recipe: Recipe, calc: RecipeCalculations) -> list[str]:
        equipment = recipe.equipment
        lines = [
            "## Vital Statistics",
            "",
            "| | |",
            "|:--|:--|",
            f"| **Batch Size** | {_liters(recipe.batch_volume_l)} |",
            f"| **Boil Time** | {_fmt(equipment.boil_time_min, 0)} min |",
            f"| **Efficiency** | {_fmt(equipment.mash_efficiency_percent, 0)}% |",
            f"| **Pre-Boil Gravity** | "
            f"{_fmt(self.pre_boil_gravity(recipe, calc), 3)} |",
            f"| **OG** | {_fmt(calc.og, 3)} |",
            f"| **FG** | {_fmt(calc.fg, 3)} |",
            f"| **ABV** | {_fmt(calc.abv, 1)}% |",
            f"| **IBU** | {_fmt(calc.ibu, 0)} |",
            f"| **SRM** | {_fmt(calc.srm, 1)} |",
        ]
        if calc.estimated_mash_ph is not None:
            lines.append(f"| **Est. Mash pH** | {_fmt(calc.estimated_mash_ph, 2)} |")
        lines += [
            f"| **BU:GU** | {_fmt(self.bu_gu(calc), 2)} |",
            f"| **Calories** | {_fmt(calc.calories, 0)} per 12 oz |",
            f"| **Carbs** | {_fmt(calc.carbs_g, 1)} g per 12 oz |",
            "",
        ]
        return lines

    def _water(self, recipe: Recipe, calc: RecipeCalculations) -> list[str]:
        lines = ["## Water", "", "| | |", "|:--|--:|"]
        if recipe.mash_steps:
            strike = self.volume_service.strike_temp(
                recipe.mash_steps[0].temperature_c,
                recipe.equipment.mash_thickness_l_per_kg,
            )
            lines.append(f"| **Strike Temp** | {_temp(strike)} |")
        lines += [
            f"| **Mash Water** | {_liters(calc.mash_water_l)} |",
            f"| **Sparge Water** | {_liters(calc.sparge_water_l)} |",
            f"| **Total Water** | {_liters(calc.total_water_l)} |",
            f"| **Pre-Boil Volume** | {_liters(calc.pre_boil_volume_l)} |",
            f"| **Post-Boil Volume** | "
            f"{_liters(self.post_boil_volume(recipe, calc))} |",
            "",
        ]
        return lines

    def _chemistry(self, recipe: Recipe, calc: RecipeCalculations) -> list[str]:
        chemistry = recipe.water_chemistry
        if chemistry is None:
            return []
        lines = ["### Water Chemistry", ""]
        if chemistry.source_profile_name or chemistry.target_style_name:
            lines += [
                f"Source: **{chemistry.source_profile_name or '-'}**, "
                f"target: **{chemistry.target_style_name or '-'}**",
                "",
            ]

        additions = chemistry.salt_additions
        mash_salts, sparge_salts = self.water_chemistry.split_salts_proportionally(
            additions, calc.mash_water_l, calc.sparge_water_l
        )
        if not additions.is_empty():
            lines += [
                "| Salt | Mash (g) | Sparge (g) | Total (g) |",
                "|:--|--:|--:|--:|",
            ]
            for (salt, total), (_, mash), (_, sparge) in zip(
                additions.items(), mash_salts.items(), sparge_salts.items(), strict=True
            ):
                if total > 0:
                    lines.append(
                        f"| {_SALT_LABELS[salt]} | {_fmt(mash, 1)} "
                        f"| {_fmt(sparge, 1)} | {_fmt(total, 1)} |"
                    )
            lines.append("")

        mash_profile = self.water_chemistry.final_profile(
            chemistry.source_profile, mash_salts, calc.mash_water_l
        )
        lines += [
            "| | Ca | Mg | Na | Cl | SO4 | HCO3 |",
            "|:--|--:|--:|--:|--:|--:|--:|",
            _ions("Source", chemistry.source_profile),
            _ions("Mash", mash_profile),
            "",
        ]
        ratio = self.water_chemistry.chloride_to_sulfate_ratio(mash_profile)
        lines += [f"Cl:SO4 ratio: {_fmt(ratio, 2)}", ""]
        return lines

    @staticmethod
    def _fermentables(recipe: Recipe) -> list[str]:
        lines = ["## Fermentables", ""]
        if not recipe.fermentables:
            return lines + ["_No fermentables_", ""]
        total_kg = recipe.total_grain_kg
        lines += ["| Fermentable | Amount | % | Color | PPG |", "|:--|--:|--:|--:|--:|"]
        for fermentable in recipe.fermentables:
            share = fermentable.weight_kg / total_kg * 100 if total_kg > 0 else 0.0
            lines.append(
                f"| {fermentable.name} "
                f"| {_fmt(fermentable.weight_kg, 2)} kg "
                f"({_fmt(kg_to_lbs(fermentable.weight_kg), 2)} lb) "
                f"| {_fmt(share, 1)}% "
                f"| {_fmt(fermentable.color_lovibond, 0)} °L "
                f"| {_fmt(fermentable.ppg, 0)} |"
            )
        lines += [
            f"| **Total** | **{_fmt(total_kg, 2)} kg "
            f"({_fmt(kg_to_lbs(total_kg), 2)} lb)** | | | |",
            "",
        ]
        return lines

    def _hops(self, recipe: Recipe, calc: RecipeCalculations) -> list[str]:
        lines = ["## Hops", ""]
        if not recipe.hops:
            return lines + ["_No hops_", ""]
        batch_gal = liters_to_gallons(recipe.batch_volume_l)
        lines += [
            "| Hop | Amount | AA | Use | Time | IBU |",
            "|:--|--:|--:|:--|:--|--:|",
        ]
        for hop in sorted(recipe.hops, key=_hop_sort_key):
            hop_ibu = self.calculator.hop_ibu(hop, calc.og, batch_gal)
            lines.append(
                f"| {hop.name} | {_fmt(hop.grams, 0)} g "
                f"({_fmt(grams_to_ounces(hop.grams), 2)} oz) "
                f"| {_fmt(hop.alpha_acid, 1)}% | {hop.type.title()} "
                f"| {_hop_time(hop)} | {_fmt(hop_ibu, 1)} |"
            )
        total_g = sum(hop.grams for hop in recipe.hops)
        lines += [
            f"| **Total** | **{_fmt(total_g, 0)} g** | | | | **{_fmt(calc.ibu, 0)}** |",
            "",
        ]
        return lines

    def _yeast(
        self, recipe: Recipe, calc: RecipeCalculations, today: date | None
    ) -> list[str]:
        lines = ["## Yeast", ""]
        if not recipe.yeasts:
            return lines + ["_No yeast_", ""]
        for yeast in recipe.yeasts:
            lab = f" ({yeast.laboratory})" if yeast.laboratory else ""
            lines.append(
                f"- **{yeast.name}**{lab}: "
                f"{_fmt(yeast.attenuation * 100, 0)}% attenuation"
            )
            if yeast.starter is None:
                continue
            plan = self.starter_service.plan(
                recipe.batch_volume_l, calc.og, yeast.starter, today=today
            )
            lines += self._starter_lines(yeast.starter.steps, plan)
        lines.append("")
        return lines

    @staticmethod
    def _starter_lines(
        steps: Sequence[StarterStep], plan: StarterPlan
    ) -> list[str]:
        lines = [
            f"  - Cells needed: {_fmt(plan.required_cells_b, 0)} B, "
            f"available: {_fmt(plan.cells_available_b, 0)} B"
        ]
        for index, (step, result) in enumerate(
            zip(steps, plan.step_results, strict=True), start=1
        ):
            model = (
                f"White / {step.model.aeration}"
                if isinstance(step.model, WhiteGrowth)
                else "Braukaiser"
            )
            lines.append(
                f"    {index}. {_fmt(step.liters, 2)} L @ {_fmt(step.gravity, 3)} "
                f"({model}): {_fmt(result.dme_grams, 0)} g DME, "
                f"{_fmt(result.end_billion, 0)} B cells"
            )
        verdict = "enough" if plan.pitch_ok else "short"
        lines.append(
            f"  - Pitch: {_fmt(plan.final_end_b, 0)} B cells ({verdict}), "
            f"{_fmt(plan.total_dme_g, 0)} g DME in {_fmt(plan.total_starter_l, 2)} L"
        )
        return lines

    @staticmethod
    def _mash(recipe: Recipe) -> list[str]:
        lines = ["## Mash", ""]
        if not recipe.mash_steps:
            return lines + ["_No mash steps_", ""]
        lines += ["| Step | Type | Temperature | Duration |", "|:--|:--|--:|--:|"]
        for step in recipe.mash_steps:
            lines.append(
                f"| {step.name or step.type.title()} | {step.type.title()} "
                f"| {_temp(step.temperature_c)} "
                f"| {_fmt(step.duration_minutes, 0)} min |"
            )
        return lines + [""]

    @staticmethod
    def _fermentation(recipe: Recipe) -> list[str]:
        lines = ["## Fermentation", ""]
        if not recipe.fermentation_steps:
            return lines + ["_No fermentation steps_", ""]
        lines += ["| Step | Temperature | Duration |", "|:--|--:|--:|"]
        for step in recipe.fermentation_steps:
            lines.append(
                f"| {step.name or step.type.title()} | {_temp(step.temperature_c)} "
                f"| {_fmt(step.duration_days, 0)} days |"
            )
        return lines + [""]

    @staticmethod
    def _ph_advice(calc: RecipeCalculations) -> list[str]:
        if calc.estimated_mash_ph is None:
            return []
        low, high = MASH_PH_RANGE
        lines = ["## Mash pH", ""]
        ph = calc.estimated_mash_ph
        status = "in range" if low <= ph <= high else "out of range"
        lines.append(
            f"Estimated {_fmt(ph, 2)} ({status}, {_fmt(low, 1)}-{_fmt(high, 1)})."
        )
        adjustment = calc.mash_ph_adjustment
        if adjustment is None:
            return lines + [""]
        if ph > adjustment.target_ph:
            amount = adjustment.lactic_acid_88_ml
            action = f"add {_fmt(amount, 1)} mL lactic acid (88%)"
        else:
            amount = adjustment.baking_soda_g
            action = f"add {_fmt(amount, 1)} g baking soda"
        if amount > 0:
            lines.append(f"To reach {_fmt(adjustment.target_ph, 2)}, {action}.")
        return lines + [""]
