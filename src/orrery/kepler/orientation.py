"""Orientation of an orbital plane within its parent reference frame."""

import equinox as eqx
import jax
import quaxed.numpy as jnp
from jaxtyping import Array, Float
from unxt import Quantity, ustrip

__all__ = ["KeplerianOrientation"]


def _check_normalized(s, c, what: str) -> None:  # type: ignore[no-untyped-def]
    x = jnp.asarray(s**2 + c**2)
    eqx.error_if(
        x,
        jnp.logical_not(jnp.isclose(x, 1.0, atol=jnp.finfo(float).eps)),
        f"{what} sin/cos values are not normalized",
    )


class KeplerianOrientation(eqx.Module):
    """Orientation of a Keplerian orbit in 3D space.

    Stores the Euler angles that place the orbital plane in the parent frame:
    - Argument of periapsis (ω): orientation of the ellipse within the orbital plane
    - Inclination (i): tilt of the orbital plane from the reference plane
    - Longitude of ascending node (Ω): where the orbit crosses the reference plane
    - Frame tilt: rotation about the x axis from the reference plane into the
      parent's equatorial frame (minus the parent's axial tilt, zero by default)

    Angles are stored as sin/cos pairs for numerical stability.
    """

    # sin/cos of argument of periapsis (ω)
    sin_arg_peri: float = 0.0
    cos_arg_peri: float = 1.0

    # sin/cos of longitude of ascending node (Ω)
    sin_lon_asc_node: float = 0.0
    cos_lon_asc_node: float = 1.0

    # sin/cos of inclination (i)
    sin_i: float = 0.0
    cos_i: float = 1.0

    # sin/cos of the parent frame tilt
    sin_tilt: float = 0.0
    cos_tilt: float = 1.0

    def __check_init__(self) -> None:
        _check_normalized(self.sin_arg_peri, self.cos_arg_peri, "Argument of periapsis")
        _check_normalized(
            self.sin_lon_asc_node, self.cos_lon_asc_node, "Longitude of ascending node"
        )
        _check_normalized(self.sin_i, self.cos_i, "Inclination")
        _check_normalized(self.sin_tilt, self.cos_tilt, "Frame tilt")

    @classmethod
    def from_angles(
        cls,
        /,
        arg_peri: Quantity["angle"] = Quantity(0, "rad"),
        lon_asc_node: Quantity["angle"] = Quantity(0, "rad"),
        inclination: Quantity["angle"] = Quantity(0, "rad"),
        tilt: Quantity["angle"] = Quantity(0, "rad"),
    ) -> "KeplerianOrientation":
        """Construct from angle values."""
        return cls.from_radians(
            ustrip("rad", arg_peri),
            ustrip("rad", lon_asc_node),
            ustrip("rad", inclination),
            ustrip("rad", tilt),
        )

    @classmethod
    def from_radians(
        cls,
        arg_peri: Float[Array, ""] | float,
        lon_asc_node: Float[Array, ""] | float,
        inclination: Float[Array, ""] | float,
        tilt: Float[Array, ""] | float = 0.0,
    ) -> "KeplerianOrientation":
        """Construct from bare angles in radians (usable inside ``jax.jit``)."""
        return cls(
            sin_arg_peri=jnp.sin(arg_peri),
            cos_arg_peri=jnp.cos(arg_peri),
            sin_lon_asc_node=jnp.sin(lon_asc_node),
            cos_lon_asc_node=jnp.cos(lon_asc_node),
            sin_i=jnp.sin(inclination),
            cos_i=jnp.cos(inclination),
            sin_tilt=jnp.sin(tilt),
            cos_tilt=jnp.cos(tilt),
        )

    @property
    def arg_peri(self) -> Float[Array, ""]:
        """Argument of periapsis (ω), radians."""
        return jnp.arctan2(self.sin_arg_peri, self.cos_arg_peri)

    @property
    def lon_asc_node(self) -> Float[Array, ""]:
        """Longitude of ascending node (Ω), radians."""
        return jnp.arctan2(self.sin_lon_asc_node, self.cos_lon_asc_node)

    @property
    def inclination(self) -> Float[Array, ""]:
        """Inclination (i), radians."""
        return jnp.arctan2(self.sin_i, self.cos_i)

    @property
    def tilt(self) -> Float[Array, ""]:
        """Parent frame tilt, radians."""
        return jnp.arctan2(self.sin_tilt, self.cos_tilt)

    @property
    def rotation_matrix(self) -> jax.Array:
        """Compute rotation matrix from the orbital plane to the parent frame.

        Returns the rotation matrix R such that:
        r_parent_frame = R @ r_orbital_plane

        The rotation is composed of four sequential rotations:
        1. R_z(ω): Rotate by argument of periapsis, ω, in the orbital plane
        2. R_x(i): Rotate by inclination, i, to tilt the orbital plane
        3. R_z(Ω): Rotate by longitude of ascending node, Ω, in the reference plane
        4. R_x(τ): Rotate by the frame tilt, τ, into the parent's equatorial frame

        The full rotation matrix is therefore:
        R = R_x(τ) @ R_z(Ω) @ R_x(i) @ R_z(ω)

        The first three rotations are written out explicitly from the sin/cos pairs;
        the frame tilt is applied as a separate matrix product since it is the
        identity for most bodies.
        """
        s_w = self.sin_arg_peri
        c_w = self.cos_arg_peri
        s_W = self.sin_lon_asc_node
        c_W = self.cos_lon_asc_node
        s_i = self.sin_i
        c_i = self.cos_i

        r11 = c_W * c_w - s_W * c_i * s_w
        r12 = -c_W * s_w - s_W * c_i * c_w
        r13 = s_W * s_i
        r21 = s_W * c_w + c_W * c_i * s_w
        r22 = -s_W * s_w + c_W * c_i * c_w
        r23 = -c_W * s_i
        r31 = s_i * s_w
        r32 = s_i * c_w
        r33 = c_i

        plane = jnp.array([[r11, r12, r13], [r21, r22, r23], [r31, r32, r33]])

        s_t = self.sin_tilt
        c_t = self.cos_tilt
        tilt = jnp.array([[1.0, 0.0, 0.0], [0.0, c_t, -s_t], [0.0, s_t, c_t]])

        return tilt @ plane

    @property
    def periapsis_direction(self) -> jax.Array:
        """Unit vector pointing from the focus to periapsis, in the parent frame."""
        return self.rotation_matrix[:, 0]

    @property
    def normal(self) -> jax.Array:
        """Unit normal of the orbital plane (direction of angular momentum)."""
        return self.rotation_matrix[:, 2]
