"""Time evaluation of orbital element sets."""

import logging
from collections.abc import Callable

import equinox as eqx
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array, Float

from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.constants import CENTURY, DAY
from orrery.custom_types import HostVec3
from orrery.kepler.elements import InstantElements, OrbitalElementSet
from orrery.kepler.helpers import elements_from_state
from orrery.kepler.solver import position_from_elements

__all__ = ["ElementPropagator"]

logger = logging.getLogger(__name__)

ElementCalculator = Callable[[float], OrbitalElementSet]


class ElementPropagator(eqx.Module):
    """Evaluates an element set at an elapsed time and turns it into positions.

    Each element evolves linearly: value(t) = base + rate * t, with t in days since
    the element epoch.

    Parameters
    ----------
    elements
        Base element set and its secular rates.
    tilt
        Rotation (radians, about x) from the orbit's reference plane into the parent
        frame. This is minus the parent's axial tilt.
    mu
        Optional: gravitational parameter of the attracting body, m^3 / s^2. Used for
        the Keplerian mean-motion fallback and for osculating elements.
    calculator
        Optional: ``calculator(T)`` returning the element set at T Julian centuries past
        the epoch. Replaces base + rate * t when no override set is given.
    config
        Numeric policy constants.
    """

    elements: OrbitalElementSet
    tilt: float = 0.0
    mu: float | None = None
    calculator: ElementCalculator | None = None
    config: OrbitConfig = DEFAULT_CONFIG

    @property
    def base(self) -> Float[Array, "6"]:
        """Canonical (a, e, i, Ω, ω, M) base values."""
        return self.elements.as_array()

    @property
    def rates(self) -> Float[Array, "6"]:
        """Canonical per-day rates, in the same order as :attr:`base`."""
        return self.elements.rates.as_array()

    @property
    def mean_motion(self) -> float | None:
        """Keplerian mean motion sqrt(μ / a^3), rad / s, if μ is known."""
        if self.mu is None:
            return None
        a = float(self.base[0])
        return float(np.sqrt(self.mu / a**3))

    def evaluate(
        self,
        elapsed: float,
        override: OrbitalElementSet | None = None,
        osculating: bool = False,
    ) -> InstantElements:
        """Instantaneous elements at ``elapsed`` seconds past the element epoch.

        Parameters
        ----------
        elapsed
            Elapsed element time, seconds.
        override
            Optional: element set used instead of this propagator's own base values and
            rates (the calculator is bypassed as well).
        osculating
            If True, return the osculating elements of the propagated state at this
            instant instead of the mean elements. Requires ``mu``; falls back to the
            mean elements if it is missing.
        """
        if osculating:
            if self.mu is not None:
                return self.osculating_elements(elapsed)
            logger.warning(
                "Osculating elements requested without a gravitational parameter; "
                "using mean elements"
            )

        days = elapsed / DAY
        if override is not None:
            values = override.as_array() + override.rates.as_array() * days
        elif self.calculator is not None:
            values = self.calculator(days / CENTURY).as_array()
        else:
            rates = self.rates
            values = self.base + rates * days
            if rates[5] == 0 and self.mu is not None:
                values = values.at[5].add(self.mean_motion * elapsed)

        return InstantElements.from_array(values, time=elapsed, tilt=self.tilt)

    def position_at(
        self, elapsed: float, override: OrbitalElementSet | None = None
    ) -> HostVec3:
        """Position (metres, parent frame) at ``elapsed`` seconds past the epoch."""
        computed = self.evaluate(elapsed, override)
        return np.array(position_from_elements(computed, self.config), dtype=float)

    def osculating_elements(self, elapsed: float) -> InstantElements:
        """Elements of the ellipse tangent to the propagated state at ``elapsed``.

        The state is the propagated position and its finite-difference velocity, both
        expressed before the parent frame tilt, so the tilt is carried over unchanged.
        """
        untilted = eqx.tree_at(lambda p: p.tilt, self, 0.0)
        dt = self.config.velocity_delta
        r0 = untilted.position_at(elapsed)
        r1 = untilted.position_at(elapsed + dt)
        values = elements_from_state(
            jnp.asarray(r0), jnp.asarray((r1 - r0) / dt), self.mu
        )
        return InstantElements.from_array(values, time=elapsed, tilt=self.tilt)
