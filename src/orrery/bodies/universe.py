"""Body registry and simulation clock."""

import logging
from collections.abc import Iterable

from astropy.time import Time, TimeDelta

from orrery.bodies.body import Body
from orrery.constants import G, J2000

__all__ = ["Universe"]

logger = logging.getLogger(__name__)


class Universe:
    """Registry of bodies keyed by name, with one central body and a clock.

    The clock counts seconds since J2000 (``epoch_time``). :meth:`tick` advances it and
    updates every body parent-first, so that relative positions can be composed in a
    single pass.

    Parameters
    ----------
    bodies
        Bodies to register. At most one may be central.
    date
        Optional: start date of the simulation; J2000 by default.
    """

    def __init__(self, bodies: Iterable[Body] = (), date: Time | None = None):
        self._bodies: dict[str, Body] = {}
        self._central: str | None = None
        self.epoch_time = 0.0 if date is None else (date - J2000).to_value("s")
        for body in bodies:
            self.add_body(body)

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self):  # type: ignore[no-untyped-def] # noqa: ANN204
        return iter(self._bodies.values())

    def __contains__(self, name: str) -> bool:
        return name in self._bodies

    # ========================================================================
    # Registry
    #

    def add_body(self, body: Body) -> None:
        if body.name in self._bodies:
            raise KeyError(f"A body named {body.name!r} is already registered")
        if body.is_central:
            if self._central is not None:
                raise ValueError(
                    f"Cannot add central body {body.name!r}: "
                    f"{self._central!r} is already central"
                )
            self._central = body.name
        self._bodies[body.name] = body

    def get_body(self, name: str | None = None) -> Body | None:
        """Body registered under ``name``, or the central body when no name is given."""
        if name is None:
            return self._bodies.get(self._central) if self._central else None
        return self._bodies.get(name)

    def gravitational_parameter(self, name: str | None) -> float | None:
        """μ (m^3 / s^2) of the named body, or None if it cannot be resolved."""
        body = self.get_body(name) if name else None
        if body is None:
            return None
        if body.mu is not None:
            return body.mu
        if body.mass > 0:
            return G * body.mass
        return None

    def ordered_bodies(self) -> list[Body]:
        """Bodies sorted so that every body comes after the one it is relative to.

        Raises
        ------
        ValueError
            If the relative_to links form a cycle.
        """
        depths: dict[str, int] = {}

        def depth(body: Body, seen: tuple[str, ...]) -> int:
            if body.name in depths:
                return depths[body.name]
            if body.name in seen:
                chain = " -> ".join((*seen, body.name))
                raise ValueError(f"Cyclic relative_to configuration: {chain}")
            parent = self.get_body(body.relative_to) if body.relative_to else None
            d = 0 if parent is None else depth(parent, (*seen, body.name)) + 1
            depths[body.name] = d
            return d

        for body in self._bodies.values():
            depth(body, ())
        return sorted(self._bodies.values(), key=lambda b: depths[b.name])

    # ========================================================================
    # Clock
    #

    @property
    def current_time(self) -> float:
        """Current simulated time, seconds since J2000."""
        return self.epoch_time

    @property
    def date(self) -> Time:
        return J2000 + TimeDelta(self.epoch_time, format="sec")

    def set_date(self, date: Time) -> None:
        self.epoch_time = (date - J2000).to_value("s")

    # ========================================================================
    # Simulation
    #

    def initialize(self) -> None:
        """Initialize every body and place it (with velocity) at the current time."""
        ordered = self.ordered_bodies()
        for body in ordered:
            body.initialize(self)
        for body in ordered:
            body.set_position_from_date(self.epoch_time, True)
            body.after_initialized(True)
        logger.debug("Initialized %d bodies at %s", len(ordered), self.date.isot)

    def tick(self, dt: float) -> None:
        """Advance the clock by ``dt`` seconds and update all bodies parent-first.

        Each body's relative position and velocity are rebuilt before its parent's
        state is added, so the composed velocity never accumulates across ticks.
        """
        self.epoch_time += dt
        for body in self.ordered_bodies():
            body.before_move(dt)
            body.set_position_from_date(self.epoch_time, True)
            body.after_move(dt)
            body.tick(dt, True)
