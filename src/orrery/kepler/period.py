"""Orbital period from Kepler's third law."""

import math

from orrery.kepler.elements import InstantElements

__all__ = ["orbital_period"]


def orbital_period(elements: InstantElements, mu: float | None) -> float | None:
    """Period (seconds) of the ellipse with the given semi-major axis.

    Returns None when the gravitational parameter ``mu`` of the reference body is
    unknown: callers treat that as "no orbit path available", not as an error.
    """
    if mu is None or mu <= 0:
        return None
    a = float(elements.semi_major_axis)
    return 2 * math.pi * math.sqrt(a**3 / mu)
