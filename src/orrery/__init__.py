"""
orrery: Keplerian element propagation and orbit-path sampling

Propagates bodies from (secularly varying) classical orbital elements, composes
positions of bodies that orbit other bodies into one frame, and samples orbit paths
into vertex sequences evenly spaced in angle, for rendering.

Units are SI throughout (metres, seconds, radians); element sets and physical
parameters take unxt Quantities at the boundary.
"""

import jax

# Sub-degree angular sampling at astronomical distances needs double precision
jax.config.update("jax_enable_x64", True)

from orrery.bodies import Body, Universe, load_system  # noqa: E402
from orrery.config import DEFAULT_CONFIG, OrbitConfig, load_config  # noqa: E402
from orrery.kepler import (  # noqa: E402
    ElementPropagator,
    ElementRates,
    InstantElements,
    OrbitalElementSet,
)
from orrery.orbit import OrbitSampler  # noqa: E402

__all__ = [
    "Body",
    "Universe",
    "load_system",
    "OrbitConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "ElementPropagator",
    "ElementRates",
    "InstantElements",
    "OrbitalElementSet",
    "OrbitSampler",
]
