import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array, Float

from orrery.custom_types import HostVec3, Vec3

__all__ = ["angle_between", "elements_from_state", "true_anomaly"]

# Below this magnitude the node line (or the eccentricity vector) is undefined
_DEGENERATE_TOL = 1e-11


def angle_between(a: HostVec3, b: HostVec3) -> float:
    """Unsigned angle between two vectors, radians.

    Uses atan2(|a x b|, a . b), which keeps full precision for the small angles
    between consecutive orbit samples. Returns 0 if either vector has zero length.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    cross = np.linalg.norm(np.cross(a, b))
    dot = float(np.dot(a, b))
    if cross == 0.0 and dot == 0.0:
        return 0.0
    return float(np.arctan2(cross, dot))


@jax.jit
def true_anomaly(
    eccentric_anomaly: Float[Array, ""], eccentricity: Float[Array, ""]
) -> Float[Array, ""]:
    """True anomaly from eccentric anomaly."""
    E = eccentric_anomaly
    e = eccentricity
    return 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0), jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )


@jax.jit
def elements_from_state(
    position: Vec3, velocity: Vec3, mu: Float[Array, ""] | float
) -> Float[Array, "6"]:
    """Convert a Cartesian state to osculating classical elements.

    Follows the atan2 formulation of Flores & Fantino (Advances in Space Research 75,
    4910). For equatorial orbits the node longitude is set to 0, and for circular
    orbits the periapsis is placed at the ascending node, so neither case yields NaNs.

    Parameters
    ----------
    position
        Position relative to the attracting body, metres.
    velocity
        Velocity relative to the attracting body, metres per second.
    mu
        Gravitational parameter of the attracting body, m^3 / s^2.

    Returns
    -------
    elements
        (a, e, i, Ω, ω, M) in metres and radians. M is in [0, 2π).
    """
    r_vec = jnp.asarray(position, dtype=float)
    v_vec = jnp.asarray(velocity, dtype=float)
    r = jnp.linalg.norm(r_vec)

    h_vec = jnp.cross(r_vec, v_vec)
    h = jnp.linalg.norm(h_vec)
    h_xy = jnp.sqrt(h_vec[0] ** 2 + h_vec[1] ** 2)

    i = jnp.arctan2(h_xy, h_vec[2])
    equatorial = h_xy <= _DEGENERATE_TOL * h
    Omega = jnp.where(equatorial, 0.0, jnp.arctan2(h_vec[0], -h_vec[1]))

    # In-plane basis: node line and its perpendicular along the direction of motion
    n_hat = jnp.array([jnp.cos(Omega), jnp.sin(Omega), 0.0])
    b_hat = jnp.cross(h_vec / h, n_hat)

    a = 1.0 / (2.0 / r - jnp.dot(v_vec, v_vec) / mu)
    e_vec = jnp.cross(v_vec, h_vec) / mu - r_vec / r
    e = jnp.linalg.norm(e_vec)

    circular = e <= _DEGENERATE_TOL
    omega = jnp.where(
        circular, 0.0, jnp.arctan2(jnp.dot(e_vec, b_hat), jnp.dot(e_vec, n_hat))
    )
    u = jnp.arctan2(jnp.dot(r_vec, b_hat), jnp.dot(r_vec, n_hat))
    nu = u - omega

    # Mean anomaly through the eccentric anomaly (elliptic case)
    e_ell = jnp.clip(e, 0.0, 1.0 - 1e-12)
    E = 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 - e_ell) * jnp.sin(nu / 2.0),
        jnp.sqrt(1.0 + e_ell) * jnp.cos(nu / 2.0),
    )
    M = jnp.mod(E - e_ell * jnp.sin(E), 2 * jnp.pi)

    return jnp.stack(
        [
            a,
            e,
            i,
            jnp.mod(Omega, 2 * jnp.pi),
            jnp.mod(omega, 2 * jnp.pi),
            M,
        ]
    )
