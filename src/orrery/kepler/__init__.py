from .elements import ElementRates, InstantElements, OrbitalElementSet
from .helpers import angle_between, elements_from_state, true_anomaly
from .orientation import KeplerianOrientation
from .period import orbital_period
from .propagator import ElementPropagator
from .solver import orbital_plane_position, position_from_elements, solve_kepler
from .velocity import estimate_velocity, finite_difference_velocity, vis_viva_velocity

__all__ = [
    "ElementRates",
    "OrbitalElementSet",
    "InstantElements",
    "KeplerianOrientation",
    "ElementPropagator",
    "solve_kepler",
    "orbital_plane_position",
    "position_from_elements",
    "estimate_velocity",
    "finite_difference_velocity",
    "vis_viva_velocity",
    "orbital_period",
    "angle_between",
    "elements_from_state",
    "true_anomaly",
]
