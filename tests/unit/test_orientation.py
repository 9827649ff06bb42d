"""Unit tests for :mod:`orrery.kepler.orientation`."""

import jax
import numpy as np
import pytest
import quaxed.numpy as jnp
from jax import config as jax_config
from unxt import Quantity

from orrery.kepler.orientation import KeplerianOrientation


def _rx(angle: float) -> jax.Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rz(angle: float) -> jax.Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


@pytest.fixture(params=["float32", "float64"])
def dtype(request):
    """Parametrize tests over float32 and float64."""
    original_value = jax_config.read("jax_enable_x64")
    jax_config.update("jax_enable_x64", request.param == "float64")
    yield request.param
    jax_config.update("jax_enable_x64", original_value)


def test_zero_angles_give_identity() -> None:
    orientation = KeplerianOrientation()
    assert jnp.allclose(orientation.rotation_matrix, jnp.eye(3))
    assert jnp.allclose(orientation.periapsis_direction, jnp.array([1.0, 0.0, 0.0]))
    assert jnp.allclose(orientation.normal, jnp.array([0.0, 0.0, 1.0]))


@pytest.mark.parametrize(
    ("arg_peri", "lon_asc_node", "inclination", "tilt"),
    [
        (0.0, 0.0, 0.0, 0.0),  # zero angles
        (1.5, 2.0, jnp.pi / 2, 0.0),  # polar orbit
        (
            2 * jnp.pi - 0.01,
            2 * jnp.pi - 0.02,
            jnp.pi / 2 - 0.001,
            0.0,
        ),  # angles near 2π and π/2
        (1.2, 0.5, 0.3, -0.409),  # arbitrary angles, Earth-like frame tilt
        (0.8, 2.3, 2.5, 0.1),  # retrograde
    ],
)
def test_rotation_matrix_composition(
    arg_peri: float,
    lon_asc_node: float,
    inclination: float,
    tilt: float,
    dtype: str,
) -> None:
    """The rotation is R_x(τ) R_z(Ω) R_x(i) R_z(ω), and is orthonormal."""
    atol = 1e-5 if dtype == "float32" else 1e-12

    orientation = KeplerianOrientation.from_angles(
        arg_peri=Quantity(arg_peri, "rad"),
        lon_asc_node=Quantity(lon_asc_node, "rad"),
        inclination=Quantity(inclination, "rad"),
        tilt=Quantity(tilt, "rad"),
    )
    R = orientation.rotation_matrix
    expected = _rx(tilt) @ _rz(lon_asc_node) @ _rx(inclination) @ _rz(arg_peri)

    assert jnp.allclose(R, expected, atol=atol)
    assert jnp.allclose(R @ R.T, jnp.eye(3), atol=atol)
    assert np.isclose(np.linalg.det(np.asarray(R, dtype=float)), 1.0, atol=atol)


@pytest.mark.parametrize("seed", [42, 123, 456])
def test_angles_recovered_from_sin_cos(seed: int) -> None:
    """The angle properties recover the inputs (modulo 2π)."""
    key = jax.random.PRNGKey(seed)
    vals = jax.random.uniform(key, shape=(4,))
    arg_peri = vals[0] * 2 * jnp.pi
    lon_asc_node = vals[1] * 2 * jnp.pi
    inclination = vals[2] * jnp.pi
    tilt = (vals[3] - 0.5) * jnp.pi

    orientation = KeplerianOrientation.from_radians(
        arg_peri, lon_asc_node, inclination, tilt
    )

    def wrap(x):  # type: ignore[no-untyped-def] # noqa: ANN202
        return jnp.mod(x, 2 * jnp.pi)

    assert jnp.allclose(wrap(orientation.arg_peri), arg_peri, atol=1e-10)
    assert jnp.allclose(wrap(orientation.lon_asc_node), lon_asc_node, atol=1e-10)
    assert jnp.allclose(orientation.inclination, inclination, atol=1e-10)
    assert jnp.allclose(orientation.tilt, tilt, atol=1e-10)


def test_from_angles_accepts_degrees() -> None:
    in_deg = KeplerianOrientation.from_angles(
        arg_peri=Quantity(90.0, "deg"),
        lon_asc_node=Quantity(45.0, "deg"),
        inclination=Quantity(30.0, "deg"),
    )
    in_rad = KeplerianOrientation.from_radians(jnp.pi / 2, jnp.pi / 4, jnp.pi / 6)
    assert jnp.allclose(in_deg.rotation_matrix, in_rad.rotation_matrix)


def test_tilt_rotates_normal_about_x() -> None:
    """A frame tilt τ maps the reference pole +z to (0, -sin τ, cos τ)."""
    tilt = 0.409
    orientation = KeplerianOrientation.from_radians(0.0, 0.0, 0.0, tilt)
    assert jnp.allclose(
        orientation.normal, jnp.array([0.0, -jnp.sin(tilt), jnp.cos(tilt)])
    )
    # The x axis is the rotation axis, so periapsis stays put
    assert jnp.allclose(orientation.periapsis_direction, jnp.array([1.0, 0.0, 0.0]))


def test_periapsis_direction_in_reference_plane() -> None:
    """With i = 0, periapsis lies at longitude Ω + ω in the reference plane."""
    orientation = KeplerianOrientation.from_radians(0.7, 0.4, 0.0)
    expected = jnp.array([jnp.cos(1.1), jnp.sin(1.1), 0.0])
    assert jnp.allclose(orientation.periapsis_direction, expected)
