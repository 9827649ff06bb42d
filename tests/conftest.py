"""Shared fixtures: element sets and a small Sun / Earth / Moon universe."""

import pytest
from unxt import Quantity

from orrery import Body, OrbitalElementSet, Universe

SUN_MASS = 1.98847e30  # kg
EARTH_MU = 3.986004418e14  # m^3 / s^2
AU_KM = 149597870.7


@pytest.fixture
def earth_elements() -> OrbitalElementSet:
    """Earth-like elements, with no rates (the mean anomaly follows the mean motion)."""
    return OrbitalElementSet(
        semi_major_axis=Quantity(AU_KM, "km"),
        eccentricity=0.0167086,
        inclination=Quantity(0.00005, "deg"),
        lon_asc_node=Quantity(-11.26064, "deg"),
        arg_peri=Quantity(114.20783, "deg"),
        mean_anomaly=Quantity(358.617, "deg"),
    )


@pytest.fixture
def moon_elements() -> OrbitalElementSet:
    return OrbitalElementSet(
        semi_major_axis=Quantity(384400.0, "km"),
        eccentricity=0.0549,
        inclination=Quantity(5.145, "deg"),
        lon_asc_node=Quantity(125.08, "deg"),
        arg_peri=Quantity(318.15, "deg"),
        mean_anomaly=Quantity(135.27, "deg"),
    )


@pytest.fixture
def universe(
    earth_elements: OrbitalElementSet, moon_elements: OrbitalElementSet
) -> Universe:
    """Initialized Sun / Earth / Moon system at J2000."""
    sun = Body("sun", mass=Quantity(SUN_MASS, "kg"), is_central=True)
    earth = Body(
        "earth",
        mass=Quantity(5.9722e24, "kg"),
        mu=Quantity(EARTH_MU, "m3 / s2"),
        elements=earth_elements,
        relative_to="sun",
    )
    moon = Body(
        "moon",
        mass=Quantity(7.342e22, "kg"),
        elements=moon_elements,
        relative_to="earth",
    )
    # Registered child-first on purpose: the universe orders bodies itself
    u = Universe([moon, earth, sun])
    u.initialize()
    return u
