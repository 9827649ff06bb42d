"""Bodies whose motion is driven by orbital elements."""

import logging
import math
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import numpy as np
from astropy.time import Time
from unxt import Quantity, ustrip

from orrery.bodies.frames import parent_position, position_relative_to
from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.constants import CIRCLE, J2000
from orrery.custom_types import HostVec3
from orrery.events import EventDispatcher
from orrery.kepler.elements import InstantElements, OrbitalElementSet
from orrery.kepler.helpers import angle_between
from orrery.kepler.period import orbital_period
from orrery.kepler.propagator import ElementCalculator, ElementPropagator
from orrery.kepler.velocity import estimate_velocity
from orrery.orbit.sampler import OrbitSampler

if TYPE_CHECKING:
    from orrery.bodies.universe import Universe

__all__ = ["Body"]

logger = logging.getLogger(__name__)

REVOLUTION = "revolution"

_X_AXIS = np.array([1.0, 0.0, 0.0])
_Y_AXIS = np.array([0.0, 1.0, 0.0])


class Body:
    """A body orbiting another one (or sitting at the centre of the universe).

    The body owns one element set and its propagator. Its state (position, velocity,
    relative position, movement, speed and the angle swept since the last completed
    revolution) is updated in place, once per simulation tick.

    Units: positions in metres, velocities in metres per second, times in seconds,
    angles in radians.

    Parameters
    ----------
    name
        Unique name, used by other bodies to refer to this one.
    mass
        Mass of the body.
    elements
        Optional: orbital elements relative to ``relative_to``. Bodies without elements
        stay at the origin of their parent frame.
    relative_to
        Optional: name of the body this one orbits.
    is_central
        Whether this is the universe's central, non-orbiting body.
    mu
        Optional: gravitational parameter; defaults to G * mass.
    tilt
        Axial tilt. Bodies orbiting this one have their orbits expressed in its
        equatorial frame.
    epoch
        Optional: epoch of ``elements``; J2000 if not given.
    calculator
        Optional: callable computing the element set from Julian centuries past the
        epoch, used instead of base values plus rates.
    calculate_from_elements
        If True, the initial velocity is derived from the elements (vis-viva) rather
        than by finite differences.
    custom_initialize
        Optional: ``custom_initialize(body)``, called after initialization.
    custom_after_tick
        Optional: ``custom_after_tick(body, epoch_time, date, dt)``, called after each
        tick (and once after initialization, with dt = 0).
    on_orbit_completed
        Optional: ``on_orbit_completed(body)``, called on each completed revolution.
    config
        Numeric policy constants.
    """

    def __init__(
        self,
        name: str,
        mass: Quantity["mass"] = Quantity(0.0, "kg"),
        elements: OrbitalElementSet | None = None,
        relative_to: str | None = None,
        is_central: bool = False,
        mu: Quantity | None = None,
        tilt: Quantity["angle"] = Quantity(0.0, "deg"),
        epoch: Time | None = None,
        calculator: ElementCalculator | None = None,
        calculate_from_elements: bool = False,
        custom_initialize: Callable[["Body"], Any] | None = None,
        custom_after_tick: Callable[..., Any] | None = None,
        on_orbit_completed: Callable[["Body"], Any] | None = None,
        config: OrbitConfig = DEFAULT_CONFIG,
    ):
        self.name = name
        self.mass = float(ustrip("kg", mass))
        self.mu = None if mu is None else float(ustrip("m3 / s2", mu))
        self.tilt = float(ustrip("rad", tilt))
        self.elements = elements
        self.relative_to = relative_to
        self.is_central = is_central
        self.epoch = epoch
        self.calculator = calculator
        self.calculate_from_elements = calculate_from_elements
        self.custom_initialize = custom_initialize
        self.custom_after_tick = custom_after_tick
        self.on_orbit_completed = on_orbit_completed
        self.config = config

        self.events = EventDispatcher((REVOLUTION,))
        self.universe: Universe | None = None
        self.propagator: ElementPropagator | None = None

        self.position = np.zeros(3)
        self.velocity: HostVec3 | None = None
        self.relative_position = np.zeros(3)
        self.previous_relative_position: HostVec3 | None = None
        self.movement = np.zeros(3)
        self.force = np.zeros(3)
        self.speed = 0.0
        self.angle = 0.0
        self.inv_mass = 0.0

    def __repr__(self) -> str:
        return f"<Body {self.name!r} relative_to={self.relative_to!r}>"

    # ========================================================================
    # Lifecycle
    #

    def initialize(self, universe: "Universe") -> None:
        """Bind the body to a universe and build its element propagator."""
        self.universe = universe
        self.reset()
        self.movement = np.zeros(3)
        self.inv_mass = 1.0 / self.mass if self.mass > 0 else 0.0

        if self.is_central or self.elements is None:
            self.propagator = None
            return

        parent = universe.get_body(self.relative_to) if self.relative_to else None
        self.propagator = ElementPropagator(
            self.elements,
            tilt=-parent.tilt if parent is not None else 0.0,
            mu=universe.gravitational_parameter(self.relative_to),
            calculator=self.calculator,
            config=self.config,
        )

    def reset(self) -> None:
        """Zero the swept angle, force and movement and forget the previous position."""
        self.angle = 0.0
        self.force = np.zeros(3)
        self.movement = np.zeros(3)
        self.previous_relative_position = None

    def after_initialized(self, is_set_relative_to: bool) -> None:
        if is_set_relative_to:
            self.previous_relative_position = self.position.copy()
            self.position_relative_to()

        if self.custom_initialize is not None:
            self.custom_initialize(self)
        if self.custom_after_tick is not None:
            universe = self.universe
            self.custom_after_tick(self, universe.epoch_time, universe.date, 0.0)

    # ========================================================================
    # Propagation
    #

    def get_epoch_time(self, epoch_time: float) -> float:
        """Convert seconds past J2000 into seconds past this body's element epoch."""
        if self.epoch is not None:
            return epoch_time - (self.epoch - J2000).to_value("s")
        return epoch_time

    def set_position_from_date(
        self, epoch_time: float, calculate_velocity: bool
    ) -> None:
        """Propagate the body to ``epoch_time`` seconds past J2000.

        The position is relative to the parent until :meth:`position_relative_to` (or
        a tick with ``recompute_relative``) composes it into the absolute frame.
        """
        t = self.get_epoch_time(epoch_time)
        if self.is_central or self.propagator is None:
            self.position = np.zeros(3)
        else:
            self.position = self.propagator.position_at(t)
        self.relative_position = np.zeros(3)

        if calculate_velocity:
            if self.is_central or self.propagator is None:
                self.velocity = np.zeros(3)
            else:
                self.velocity = estimate_velocity(
                    self.propagator, t, self.calculate_from_elements
                )

    def calculate_position(self, t: float) -> HostVec3:
        """Position at element time ``t``, relative to the parent."""
        if self.propagator is None:
            return np.zeros(3)
        return self.propagator.position_at(t)

    def calculate_period(self, elements: InstantElements) -> float | None:
        """Orbital period in seconds, or None if the parent's μ is unknown."""
        mu = self.universe.gravitational_parameter(self.relative_to)
        return orbital_period(elements, mu)

    def position_relative_to(self) -> None:
        position_relative_to(self, self.universe)

    def before_move(self, dt: float) -> None:
        pass

    def after_move(self, dt: float) -> None:
        pass

    def tick(self, dt: float, recompute_relative: bool) -> None:
        """Update the relative state after the body's position was advanced by ``dt``.

        Fires the "revolution" event each time the swept angle exceeds a full circle.
        """
        if not self.is_central:
            if recompute_relative:
                self.position_relative_to()

            parent = parent_position(self, self.universe)
            self.relative_position = self.position - parent
            if self.previous_relative_position is None:
                self.previous_relative_position = self.relative_position.copy()

            self.movement = self.relative_position - self.previous_relative_position
            self.speed = float(np.linalg.norm(self.movement)) / dt if dt else 0.0
            self.angle += angle_between(
                self.relative_position, self.previous_relative_position
            )
            self.previous_relative_position = self.relative_position.copy()

            if self.angle > CIRCLE:
                self.angle = math.fmod(self.angle, CIRCLE)
                logger.debug("%s completed a revolution", self.name)
                self.events.dispatch(REVOLUTION, body=self)
                if self.on_orbit_completed is not None:
                    self.on_orbit_completed(self)

        if self.custom_after_tick is not None:
            universe = self.universe
            self.custom_after_tick(self, universe.epoch_time, universe.date, dt)

    # ========================================================================
    # Queries
    #

    def get_position(self) -> HostVec3:
        return self.position.copy()

    def get_velocity(self) -> HostVec3 | None:
        return None if self.velocity is None else self.velocity.copy()

    def get_orbit_vertices(
        self, use_osculating_ellipse: bool = False
    ) -> list[HostVec3] | None:
        """Vertices of one revolution of the orbit, relative to the parent."""
        return OrbitSampler(self.config).sample(self, use_osculating_ellipse)

    def get_angle_to(self, body_name: str) -> float:
        """Signed bearing (radians) of this body seen from another, in the x-y plane.

        The angle is measured from the x axis and is negative when the bearing points
        away from the y axis (more than 90 degrees from it). Returns 0 if the other body
        is unknown or coincides with this one.
        """
        ref = self.universe.get_body(body_name)
        if ref is None:
            logger.warning("get_angle_to: unknown body %r", body_name)
            return 0.0

        bearing = self.position - ref.get_position()
        bearing[2] = 0.0
        if not np.any(bearing):
            return 0.0

        angle_x = angle_between(bearing, _X_AXIS)
        angle_y = angle_between(bearing, _Y_AXIS)
        return -angle_x if angle_y > math.pi / 2 else angle_x

    def is_orbit_around(self, other: "Body") -> bool:
        return other.name == self.relative_to

    # ========================================================================
    # Events
    #

    def on(self, event: str, listener: Callable[..., Any]) -> None:
        self.events.on(event, listener)

    def off(self, event: str, listener: Callable[..., Any]) -> None:
        self.events.off(event, listener)
