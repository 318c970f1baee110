"""Water chemistry calculations for salt additions."""

from dataclasses import dataclass

from brew_planner.domain.water import SaltAdditions, WaterProfile

# mg/L of each ion per 1 g of salt in 1 L of water, from molar-mass ratios.
ION_PPM_PER_G_PER_L: dict[str, WaterProfile] = {
    "gypsum_g": WaterProfile(ca=232.8, so4=558.3),  # CaSO4·2H2O
    "cacl2_g": WaterProfile(ca=272.6, cl=482.0),  # CaCl2·2H2O
    "epsom_g": WaterProfile(mg=98.6, so4=389.6),  # MgSO4·7H2O
    "nacl_g": WaterProfile(na=393.4, cl=606.6),
    "nahco3_g": WaterProfile(na=273.7, hco3=726.3),
}

_MIN_VOLUME_L = 0.0001


@dataclass
class WaterChemistryService:
    """Ion algebra for source water and brewing salts."""

    def ion_delta_from_salts(
        self, additions: SaltAdditions, volume_l: float
    ) -> WaterProfile:
        """Return the ion change (ppm) from dissolving salts in a volume."""
        volume = max(_MIN_VOLUME_L, volume_l)
        delta = WaterProfile()
        for salt, grams in additions.items():
            if grams > 0:
                delta = delta + ION_PPM_PER_G_PER_L[salt].scaled(grams / volume)
        return delta

    def add_profiles(self, a: WaterProfile, b: WaterProfile) -> WaterProfile:
        """Add two profiles ion by ion."""
        return a + b

    def scale_profile(self, profile: WaterProfile, factor: float) -> WaterProfile:
        """Scale every ion by a factor."""
        return profile.scaled(factor)

    def clamp_profile(self, profile: WaterProfile) -> WaterProfile:
        """Floor every ion at zero."""
        return profile.clamped()

    def chloride_to_sulfate_ratio(self, profile: WaterProfile) -> float | None:
        """Return Cl:SO4, or None when there is no sulfate."""
        if profile.so4 <= 0:
            return None
        return profile.cl / profile.so4

    def final_profile(
        self, source: WaterProfile, additions: SaltAdditions, volume_l: float
    ) -> WaterProfile:
        """Return the source profile after dissolving salts into a volume."""
        return self.clamp_profile(
            self.add_profiles(source, self.ion_delta_from_salts(additions, volume_l))
        )

    def split_salts_proportionally(
        self, additions: SaltAdditions, mash_water_l: float, sparge_water_l: float
    ) -> tuple[SaltAdditions, SaltAdditions]:
        """Split a total salt dose between mash and sparge by water volume."""
        total_water_l = mash_water_l + sparge_water_l
        if total_water_l <= 0:
            return SaltAdditions(), SaltAdditions()

        mash_ratio = mash_water_l / total_water_l
        sparge_ratio = sparge_water_l / total_water_l
        mash: dict[str, float] = {}
        sparge: dict[str, float] = {}
        for salt, grams in additions.items():
            if grams > 0:
                mash[salt] = grams * mash_ratio
                sparge[salt] = grams * sparge_ratio
        return SaltAdditions(**mash), SaltAdditions(**sparge)

    def residual_alkalinity(self, profile: WaterProfile) -> float:
        """Return residual alkalinity in ppm as CaCO3."""
        alkalinity = profile.hco3 * 50 / 61.016
        return alkalinity - profile.ca / 2.5 - profile.mg / 3.33

    def salts_for_target(
        self,
        source: WaterProfile,
        target: WaterProfile,
        mash_water_l: float,
        sparge_water_l: float,
    ) -> tuple[SaltAdditions, SaltAdditions]:
        """Suggest gypsum and calcium chloride to reach a target profile.

        Gypsum covers the sulfate shortfall and calcium chloride covers the
        chloride shortfall. The total dose is split between mash and sparge
        the same way a brewer-entered dose is.
        """
        total_water_l = mash_water_l + sparge_water_l
        if total_water_l <= 0:
            return SaltAdditions(), SaltAdditions()

        so4_delta = max(0.0, target.so4 - source.so4)
        cl_delta = max(0.0, target.cl - source.cl)
        total = SaltAdditions(
            gypsum_g=so4_delta * total_water_l / ION_PPM_PER_G_PER_L["gypsum_g"].so4,
            cacl2_g=cl_delta * total_water_l / ION_PPM_PER_G_PER_L["cacl2_g"].cl,
        )
        return self.split_salts_proportionally(total, mash_water_l, sparge_water_l)
