"""Kepler's equation and the element-to-position transform."""

import functools

import equinox as eqx
import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.custom_types import Vec3
from orrery.kepler.elements import InstantElements
from orrery.kepler.orientation import KeplerianOrientation

__all__ = [
    "solve_kepler",
    "orbital_plane_position",
    "position_from_elements",
]

TWO_PI = 2 * jnp.pi


@functools.partial(jax.jit, static_argnames=("tol", "max_iter", "max_ecc"))
def solve_kepler(
    mean_anomaly: Float[Array, ""] | float,
    eccentricity: Float[Array, ""] | float,
    tol: float = DEFAULT_CONFIG.kepler_tolerance,
    max_iter: int = DEFAULT_CONFIG.kepler_max_iter,
    max_ecc: float = DEFAULT_CONFIG.max_eccentricity,
) -> Float[Array, ""]:
    """Solve Kepler's equation M = E - e sin(E) for the eccentric anomaly E.

    Newton-Raphson iteration, stopped when the Newton step falls below ``tol`` or after
    ``max_iter`` steps, whichever comes first. The mean anomaly is reduced to [0, 2π)
    first. Eccentricities at or above 1 are clamped to ``max_ecc``: the result is then a
    best-effort value for an ellipse that approximates the unbound orbit.

    Parameters
    ----------
    mean_anomaly
        Mean anomaly, radians. Any real value.
    eccentricity
        Orbital eccentricity.

    Returns
    -------
    E
        Eccentric anomaly in [0, 2π) (up to the last Newton step).
    """
    M = jnp.mod(jnp.asarray(mean_anomaly, dtype=float), TWO_PI)
    e = jnp.clip(jnp.asarray(eccentricity, dtype=float), 0.0, max_ecc)

    # Starting at π keeps Newton monotone for highly eccentric orbits
    E0 = jnp.where(e < 0.8, M, jnp.pi * jnp.ones_like(M))

    def cond_fn(state):  # type: ignore[no-untyped-def] # noqa: ANN202
        _, step, it = state
        return (it < max_iter) & (jnp.abs(step) > tol)

    def body_fn(state):  # type: ignore[no-untyped-def] # noqa: ANN202
        E, _, it = state
        step = (E - e * jnp.sin(E) - M) / (1.0 - e * jnp.cos(E))
        return E - step, step, it + 1

    E, _, _ = jax.lax.while_loop(cond_fn, body_fn, (E0, jnp.full_like(E0, jnp.inf), 0))
    return E


@jax.jit
def orbital_plane_position(
    semi_major_axis: Float[Array, ""],
    eccentricity: Float[Array, ""],
    eccentric_anomaly: Float[Array, ""],
) -> Vec3:
    """Position in the orbital plane, focus at the origin and periapsis along +x."""
    a = semi_major_axis
    e = eccentricity
    E = eccentric_anomaly
    return jnp.stack(
        [
            a * (jnp.cos(E) - e),
            a * jnp.sqrt(1.0 - e**2) * jnp.sin(E),
            jnp.zeros_like(E),
        ]
    )


@eqx.filter_jit
def position_from_elements(
    elements: InstantElements, config: OrbitConfig = DEFAULT_CONFIG
) -> Vec3:
    """Cartesian position in the parent frame for a set of instantaneous elements.

    Solves Kepler's equation, places the body in its orbital plane and rotates the plane
    by ω, i and Ω (and the parent frame tilt, if any).
    """
    e = jnp.clip(elements.eccentricity, 0.0, config.max_eccentricity)
    E = solve_kepler(
        elements.mean_anomaly,
        e,
        tol=config.kepler_tolerance,
        max_iter=config.kepler_max_iter,
        max_ecc=config.max_eccentricity,
    )
    xyz_orb = orbital_plane_position(elements.semi_major_axis, e, E)

    orientation = KeplerianOrientation.from_radians(
        elements.arg_peri,
        elements.lon_asc_node,
        elements.inclination,
        elements.tilt,
    )
    return orientation.rotation_matrix @ xyz_orb
