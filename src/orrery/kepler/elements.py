"""Classical orbital element sets with linear secular rates."""

import logging

import equinox as eqx
import jax
import jax.numpy as jnp
from jaxtyping import Array, Float
from unxt import Quantity, ustrip

from orrery.constants import CENTURY

__all__ = ["ElementRates", "OrbitalElementSet", "InstantElements"]

logger = logging.getLogger(__name__)

# Canonical units of (a, e, i, Ω, ω, M) and of their per-day rates
ELEMENT_UNITS = ("m", "", "rad", "rad", "rad", "rad")
RATE_UNITS = ("m / day", "", "rad / day", "rad / day", "rad / day", "rad / day")


def _zero(unit: str):  # type: ignore[no-untyped-def] # noqa: ANN202
    return eqx.field(default_factory=lambda: Quantity(0.0, unit))


class ElementRates(eqx.Module):
    """Per-day secular rates of the six classical elements.

    The eccentricity rate is a plain number per day; all other rates carry units.
    """

    semi_major_axis: Quantity["speed"] = _zero("km / day")
    eccentricity: float = 0.0
    inclination: Quantity = _zero("deg / day")
    lon_asc_node: Quantity = _zero("deg / day")
    arg_peri: Quantity = _zero("deg / day")
    mean_anomaly: Quantity = _zero("deg / day")

    @classmethod
    def from_per_century(
        cls,
        semi_major_axis: Quantity["length"] = Quantity(0.0, "km"),
        eccentricity: float = 0.0,
        inclination: Quantity["angle"] = Quantity(0.0, "deg"),
        lon_asc_node: Quantity["angle"] = Quantity(0.0, "deg"),
        arg_peri: Quantity["angle"] = Quantity(0.0, "deg"),
        mean_anomaly: Quantity["angle"] = Quantity(0.0, "deg"),
    ) -> "ElementRates":
        """Construct from changes per Julian century, as in planetary tables."""
        per_day = Quantity(1.0 / CENTURY, "1 / day")
        return cls(
            semi_major_axis=semi_major_axis * per_day,
            eccentricity=eccentricity / CENTURY,
            inclination=inclination * per_day,
            lon_asc_node=lon_asc_node * per_day,
            arg_peri=arg_peri * per_day,
            mean_anomaly=mean_anomaly * per_day,
        )

    def as_array(self) -> Float[Array, "6"]:
        """Rates in canonical units per day, ordered (a, e, i, Ω, ω, M)."""
        return jnp.array(
            [
                ustrip(RATE_UNITS[0], self.semi_major_axis),
                self.eccentricity,
                ustrip(RATE_UNITS[2], self.inclination),
                ustrip(RATE_UNITS[3], self.lon_asc_node),
                ustrip(RATE_UNITS[4], self.arg_peri),
                ustrip(RATE_UNITS[5], self.mean_anomaly),
            ],
            dtype=float,
        )


class OrbitalElementSet(eqx.Module):
    """Base values of the six classical elements at epoch, plus their secular rates.

    Parameters
    ----------
    semi_major_axis
        Semi-major axis (a).
    eccentricity
        Eccentricity (e). Bound orbits have 0 <= e < 1.
    inclination
        Inclination (i).
    lon_asc_node
        Longitude of the ascending node (Ω).
    arg_peri
        Argument of periapsis (ω).
    mean_anomaly
        Mean anomaly at epoch (M).
    rates
        Optional: linear per-day rates of the elements above.
    """

    semi_major_axis: Quantity["length"]
    eccentricity: float
    inclination: Quantity["angle"] = Quantity(0.0, "rad")
    lon_asc_node: Quantity["angle"] = Quantity(0.0, "rad")
    arg_peri: Quantity["angle"] = Quantity(0.0, "rad")
    mean_anomaly: Quantity["angle"] = Quantity(0.0, "rad")
    rates: ElementRates = eqx.field(default_factory=ElementRates)

    def __check_init__(self) -> None:
        if not ustrip("m", self.semi_major_axis) > 0:
            raise ValueError("Semi-major axis must be positive")
        if not self.eccentricity >= 0:
            raise ValueError("Eccentricity must be non-negative")
        if self.eccentricity >= 1:
            logger.warning(
                "Eccentricity %s >= 1: unbound orbits are only propagated on a "
                "best-effort basis",
                float(self.eccentricity),
            )

    # ========================================================================
    # Alternative constructors
    #

    @classmethod
    def from_longitudes(
        cls,
        semi_major_axis: Quantity["length"],
        eccentricity: float,
        inclination: Quantity["angle"],
        lon_asc_node: Quantity["angle"],
        lon_peri: Quantity["angle"],
        mean_lon: Quantity["angle"],
        rates: ElementRates | None = None,
    ) -> "OrbitalElementSet":
        """Construct from longitude of periapsis and mean longitude.

        Uses ω = ϖ - Ω and M = L - ϖ. Rates, if given, must already be expressed
        for ω and M.
        """
        kw = {}
        if rates is not None:
            kw["rates"] = rates

        return cls(
            semi_major_axis=semi_major_axis,
            eccentricity=eccentricity,
            inclination=inclination,
            lon_asc_node=lon_asc_node,
            arg_peri=lon_peri - lon_asc_node,
            mean_anomaly=mean_lon - lon_peri,
            **kw,
        )

    # ========================================================================
    # Other methods
    #

    def as_array(self) -> Float[Array, "6"]:
        """Base values in canonical units, ordered (a, e, i, Ω, ω, M)."""
        return jnp.array(
            [
                ustrip(ELEMENT_UNITS[0], self.semi_major_axis),
                self.eccentricity,
                ustrip(ELEMENT_UNITS[2], self.inclination),
                ustrip(ELEMENT_UNITS[3], self.lon_asc_node),
                ustrip(ELEMENT_UNITS[4], self.arg_peri),
                ustrip(ELEMENT_UNITS[5], self.mean_anomaly),
            ],
            dtype=float,
        )


class InstantElements(eqx.Module):
    """The six elements evaluated at one instant, in canonical units.

    Distances are in metres and angles in radians. ``time`` is the element time in
    seconds the snapshot was evaluated at, and ``tilt`` the rotation (about x) from the
    orbit's reference plane into the parent frame.
    """

    semi_major_axis: Float[Array, ""]
    eccentricity: Float[Array, ""]
    inclination: Float[Array, ""]
    lon_asc_node: Float[Array, ""]
    arg_peri: Float[Array, ""]
    mean_anomaly: Float[Array, ""]
    time: Float[Array, ""] = eqx.field(default_factory=lambda: jnp.zeros(()))
    tilt: Float[Array, ""] = eqx.field(default_factory=lambda: jnp.zeros(()))

    @classmethod
    def from_array(
        cls, values: Float[Array, "6"], time: float = 0.0, tilt: float = 0.0
    ) -> "InstantElements":
        """Construct from an (a, e, i, Ω, ω, M) array in canonical units."""
        values = jnp.asarray(values, dtype=float)
        return cls(
            semi_major_axis=values[0],
            eccentricity=values[1],
            inclination=values[2],
            lon_asc_node=values[3],
            arg_peri=values[4],
            mean_anomaly=values[5],
            time=jnp.asarray(time, dtype=float),
            tilt=jnp.asarray(tilt, dtype=float),
        )

    def as_array(self) -> Float[Array, "6"]:
        return jnp.stack(
            [
                self.semi_major_axis,
                self.eccentricity,
                self.inclination,
                self.lon_asc_node,
                self.arg_peri,
                self.mean_anomaly,
            ]
        )

    def to_element_set(self) -> OrbitalElementSet:
        """Freeze this snapshot into an element set without rates."""
        values = jax.device_get(self.as_array())
        return OrbitalElementSet(
            semi_major_axis=Quantity(float(values[0]), ELEMENT_UNITS[0]),
            eccentricity=float(values[1]),
            inclination=Quantity(float(values[2]), "rad"),
            lon_asc_node=Quantity(float(values[3]), "rad"),
            arg_peri=Quantity(float(values[4]), "rad"),
            mean_anomaly=Quantity(float(values[5]), "rad"),
        )
