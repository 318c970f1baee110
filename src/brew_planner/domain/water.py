"""Water ion profiles and brewing salt additions."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class WaterProfile:
    """Ion concentrations in ppm (mg/L)."""

    ca: float = 0.0
    mg: float = 0.0
    na: float = 0.0
    cl: float = 0.0
    so4: float = 0.0
    hco3: float = 0.0

    def __add__(self, other: "WaterProfile") -> "WaterProfile":
        return WaterProfile(
            *(getattr(self, f.name) + getattr(other, f.name) for f in fields(self))
        )

    def scaled(self, factor: float) -> "WaterProfile":
        """Return the profile with every ion multiplied by a factor."""
        return WaterProfile(*(getattr(self, f.name) * factor for f in fields(self)))

    def clamped(self) -> "WaterProfile":
        """Return the profile with negative ions floored at zero."""
        return WaterProfile(*(max(0.0, getattr(self, f.name)) for f in fields(self)))


@dataclass(frozen=True)
class SaltAdditions:
    """Salt additions in grams."""

    gypsum_g: float = 0.0
    cacl2_g: float = 0.0
    epsom_g: float = 0.0
    nacl_g: float = 0.0
    nahco3_g: float = 0.0

    def items(self) -> list[tuple[str, float]]:
        """Return (salt field, grams) pairs in declaration order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def is_empty(self) -> bool:
        """Return True when no salt has a positive mass."""
        return all(grams <= 0 for _, grams in self.items())


RO_WATER = WaterProfile()

COMMON_WATER_PROFILES: dict[str, WaterProfile] = {
    "RO": RO_WATER,
    "Pilsen": WaterProfile(ca=7, mg=3, na=2, cl=5, so4=5, hco3=15),
    "Dortmund": WaterProfile(ca=225, mg=40, na=60, cl=180, so4=120, hco3=180),
    "Burton": WaterProfile(ca=275, mg=40, na=25, cl=35, so4=470, hco3=300),
    "Dublin": WaterProfile(ca=120, mg=4, na=12, cl=19, so4=53, hco3=319),
    "Vienna": WaterProfile(ca=163, mg=12, na=10, cl=40, so4=125, hco3=258),
    "Montreal": WaterProfile(ca=31, mg=8, na=15, cl=26, so4=22, hco3=0),
}
