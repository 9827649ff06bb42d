"""Velocity of a propagated body, by finite differences or from vis-viva."""

import logging

import equinox as eqx
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array, Float

from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.custom_types import HostVec3, Vec3
from orrery.kepler.elements import InstantElements
from orrery.kepler.helpers import true_anomaly
from orrery.kepler.orientation import KeplerianOrientation
from orrery.kepler.propagator import ElementPropagator
from orrery.kepler.solver import solve_kepler

__all__ = [
    "finite_difference_velocity",
    "vis_viva_velocity",
    "estimate_velocity",
]

logger = logging.getLogger(__name__)


def finite_difference_velocity(
    propagator: ElementPropagator, elapsed: float, delta: float | None = None
) -> HostVec3:
    """Velocity (m / s) from two positions ``delta`` seconds apart."""
    if delta is None:
        delta = propagator.config.velocity_delta
    r0 = propagator.position_at(elapsed)
    r1 = propagator.position_at(elapsed + delta)
    return (r1 - r0) / delta


@eqx.filter_jit
def vis_viva_velocity(
    elements: InstantElements,
    mu: Float[Array, ""] | float,
    config: OrbitConfig = DEFAULT_CONFIG,
) -> Vec3:
    """Velocity (m / s) of the Keplerian ellipse described by ``elements``.

    The speed follows the vis-viva relation v^2 = μ (2 / r - 1 / a); the direction is
    the ellipse tangent at the current true anomaly ν, which in the orbital plane is
    proportional to (-sin ν, e + cos ν).
    """
    a = elements.semi_major_axis
    e = jnp.clip(elements.eccentricity, 0.0, config.max_eccentricity)
    E = solve_kepler(
        elements.mean_anomaly,
        e,
        tol=config.kepler_tolerance,
        max_iter=config.kepler_max_iter,
        max_ecc=config.max_eccentricity,
    )
    nu = true_anomaly(E, e)
    r = a * (1.0 - e * jnp.cos(E))

    speed = jnp.sqrt(mu * (2.0 / r - 1.0 / a))
    tangent = jnp.stack([-jnp.sin(nu), e + jnp.cos(nu), jnp.zeros_like(nu)])
    v_orb = speed * tangent / jnp.linalg.norm(tangent)

    orientation = KeplerianOrientation.from_radians(
        elements.arg_peri,
        elements.lon_asc_node,
        elements.inclination,
        elements.tilt,
    )
    return orientation.rotation_matrix @ v_orb


def estimate_velocity(
    propagator: ElementPropagator,
    elapsed: float,
    use_element_derivative: bool = False,
) -> HostVec3:
    """Velocity of a propagated body at ``elapsed`` seconds past its element epoch.

    Parameters
    ----------
    propagator
        The body's element propagator. Its ``mu`` is the gravitational parameter of the
        body it orbits.
    elapsed
        Element time, seconds.
    use_element_derivative
        If True, derive the velocity analytically from the instantaneous elements
        (vis-viva). Otherwise, finite-difference two close positions. The analytic mode
        needs ``propagator.mu`` and falls back to finite differences without it.
    """
    if use_element_derivative:
        if propagator.mu is not None:
            computed = propagator.evaluate(elapsed)
            return np.array(
                vis_viva_velocity(computed, propagator.mu, propagator.config),
                dtype=float,
            )
        logger.warning(
            "Vis-viva velocity requested without a gravitational parameter; "
            "using finite differences"
        )
    return finite_difference_velocity(propagator, elapsed)
