"""Tests for water profiles and salt additions."""

from brew_planner.domain.water import COMMON_WATER_PROFILES, SaltAdditions, WaterProfile


def test_profile_addition_and_scaling() -> None:
    a = WaterProfile(ca=10, so4=20)
    b = WaterProfile(ca=5, cl=3)

    assert a + b == WaterProfile(ca=15, cl=3, so4=20)
    assert a.scaled(2) == WaterProfile(ca=20, so4=40)


def test_profile_clamped_floors_negative_ions() -> None:
    profile = WaterProfile(ca=-5, mg=3, hco3=-1)

    assert profile.clamped() == WaterProfile(mg=3)


def test_salt_additions_empty() -> None:
    assert SaltAdditions().is_empty()
    assert not SaltAdditions(epsom_g=0.5).is_empty()


def test_reference_profiles_include_ro() -> None:
    assert COMMON_WATER_PROFILES["RO"] == WaterProfile()
    assert COMMON_WATER_PROFILES["Burton"].so4 > COMMON_WATER_PROFILES["Pilsen"].so4
