"""Fermentability heuristics for recipe fermentables."""

import re
from typing import Literal

from brew_planner.domain.recipe import Fermentable

FermentableGroup = Literal[
    "base", "crystal", "roasted", "toasted", "adjunct", "extract", "sugar", "lauter"
]
FermentableType = Literal["grain", "extract", "sugar", "adjunct_mashable"]

# Share of extracted sugars that brewer's yeast can ferment, per group.
CATEGORY_FERMENTABILITY: dict[FermentableGroup, float] = {
    "base": 1.00,
    "crystal": 0.50,
    "roasted": 0.60,
    "toasted": 0.85,
    "adjunct": 1.00,
    "extract": 0.78,
    "sugar": 1.00,
    "lauter": 0.00,
}

NAME_OVERRIDES: tuple[tuple[re.Pattern[str], float], ...] = (
    (re.compile(r"\blactose\b", re.IGNORECASE), 0.0),
    (re.compile(r"\bmaltodextrin\b", re.IGNORECASE), 0.0),
    (re.compile(r"\bcara\s*pils\b", re.IGNORECASE), 0.50),
    (re.compile(r"\bdextrin[e]?\s*malt\b", re.IGNORECASE), 0.50),
)

_EXTRACT_KEYWORDS = ("extract", "lme", "dme", "liquid malt", "dry malt")
_SUGAR_KEYWORDS = (
    "sugar",
    "honey",
    "syrup",
    "molasses",
    "candi",
    "candy",
    "dextrose",
    "sucrose",
    "lactose",
    "maltodextrin",
    "agave",
    "maple",
    "invert",
    "jaggery",
    "treacle",
    "cane",
)


def infer_type(name: str) -> FermentableType:
    """Guess the ingredient type from its name."""
    lowered = name.lower()
    if any(keyword in lowered for keyword in _EXTRACT_KEYWORDS):
        return "extract"
    if any(keyword in lowered for keyword in _SUGAR_KEYWORDS):
        return "sugar"
    if "flaked" in lowered or "torrified" in lowered:
        return "adjunct_mashable"
    return "grain"


def categorize(name: str, color_lovibond: float) -> FermentableGroup:
    """Place a fermentable into a fermentability group."""
    lowered = name.lower()
    kind = infer_type(name)
    if kind == "extract":
        return "extract"
    if kind == "sugar":
        return "sugar"
    if "rice hull" in lowered:
        return "lauter"
    if kind == "adjunct_mashable":
        return "adjunct"
    if (
        any(word in lowered for word in ("roasted", "black", "chocolate", "carafa"))
        or (color_lovibond >= 300 and "caramel" not in lowered)
    ):
        return "roasted"
    if any(word in lowered for word in ("crystal", "caramel", "cara")) or (
        10 <= color_lovibond < 200
        and not any(word in lowered for word in ("munich", "aromatic", "biscuit"))
    ):
        return "crystal"
    if any(
        word in lowered
        for word in (
            "aromatic",
            "biscuit",
            "victory",
            "amber",
            "brown",
            "melanoidin",
            "special",
        )
    ) or (20 <= color_lovibond < 100):
        return "toasted"
    return "base"


def fermentability(fermentable: Fermentable) -> float:
    """Return the fermentable share (0-1) of an ingredient's extract.

    An explicit value on the fermentable wins, then name overrides such as
    lactose, then the group default.
    """
    if fermentable.fermentability is not None:
        return fermentable.fermentability
    for pattern, value in NAME_OVERRIDES:
        if pattern.search(fermentable.name):
            return value
    return CATEGORY_FERMENTABILITY[
        categorize(fermentable.name, fermentable.color_lovibond)
    ]
