"""Adaptive angular sampling of one orbital revolution.

Vertices are spaced by the angle they subtend at the focus rather than by time, so a
rendered polyline stays smooth near periapsis (where a body moves fast) without piling
up vertices near apoapsis. The walk stops once the vertices cover one full revolution
and never overshoots it by more than ``overshoot_tolerance_deg``.
"""

import dataclasses
import logging
import math
from collections.abc import Callable
from typing import TYPE_CHECKING

from unxt import Quantity

from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.constants import RAD_TO_DEG
from orrery.custom_types import HostVec3
from orrery.kepler.elements import ElementRates
from orrery.kepler.helpers import angle_between

if TYPE_CHECKING:
    from orrery.bodies.body import Body

__all__ = ["OrbitSampler", "walk_orbit"]

logger = logging.getLogger(__name__)

PositionFn = Callable[[float], HostVec3]


class _EvaluationLimitError(Exception):
    """Raised internally when a walk exceeds its evaluation budget."""


def _angle_deg(a: HostVec3, b: HostVec3) -> float:
    return angle_between(a, b) * RAD_TO_DEG


def walk_orbit(
    position_at: PositionFn,
    start: float,
    increment: float,
    config: OrbitConfig = DEFAULT_CONFIG,
) -> list[HostVec3] | None:
    """Walk an orbit from ``start`` and emit vertices about one degree apart.

    Positions are evaluated at ``start + increment * i``. A coarse point is accepted
    directly if it lies at most ``max_step_deg`` from the last vertex and does not push
    the cumulative angle past the closing limit. Otherwise the interval since the last
    vertex is split into ``ceil(angle)`` equal time steps and one vertex is emitted per
    step. The first vertex that brings the cumulative angle to a full circle closes the
    path; if it would overshoot the tolerance, it is moved back by bisection in time.

    Parameters
    ----------
    position_at
        Callable returning the position (relative to the focus) at a given time.
    start
        Time of the first vertex.
    increment
        Coarse time step.
    config
        Sampling thresholds and bounds.

    Returns
    -------
    vertices
        Ordered vertices whose cumulative pairwise angle lies in
        [full_circle_deg, full_circle_deg + overshoot_tolerance_deg], or None if the
        walk did not close within ``max_evaluations`` position evaluations.
    """
    full = config.full_circle_deg
    limit = full + config.overshoot_tolerance_deg
    evaluations = 0

    def evaluate(t: float) -> HostVec3:
        nonlocal evaluations
        evaluations += 1
        if evaluations > config.max_evaluations:
            raise _EvaluationLimitError
        return position_at(t)

    def closing_vertex(
        last_point: HostVec3, total: float, t_lo: float, t_hi: float, point: HostVec3
    ) -> HostVec3:
        """Move a closing candidate back in time until it lands inside the limit."""
        logger.debug("Bisecting closing vertex between t=%s and t=%s", t_lo, t_hi)
        for _ in range(config.closing_max_bisections):
            t_mid = 0.5 * (t_lo + t_hi)
            candidate = evaluate(t_mid)
            reached = total + _angle_deg(candidate, last_point)
            if reached > limit:
                t_hi, point = t_mid, candidate
            elif reached < full:
                t_lo = t_mid
            else:
                return candidate
        logger.warning(
            "Closing vertex still past %s degrees after %d bisections; "
            "path overshoots by %.3g degrees",
            limit,
            config.closing_max_bisections,
            total + _angle_deg(point, last_point) - full,
        )
        return point

    try:
        last_point = evaluate(start)
        last_time = start
        points = [last_point]
        total = 0.0

        i = 1
        while total < full:
            t = start + increment * i
            point = evaluate(t)
            angle = _angle_deg(point, last_point)

            if angle <= config.max_step_deg and total + angle <= limit:
                points.append(point)
                total += angle
                last_point, last_time = point, t
                i += 1
                continue

            # Refine: about one vertex per degree travelled since the last vertex
            n_steps = max(math.ceil(angle), 1)
            sub_step = (t - last_time) / n_steps
            t_start = last_time
            for j in range(1, n_steps + 1):
                t_sub = t_start + sub_step * j
                sub_point = point if j == n_steps else evaluate(t_sub)
                delta = _angle_deg(sub_point, last_point)

                if total + delta >= full:
                    if total + delta > limit:
                        sub_point = closing_vertex(
                            last_point, total, last_time, t_sub, sub_point
                        )
                        delta = _angle_deg(sub_point, last_point)
                    points.append(sub_point)
                    total += delta
                    return points

                points.append(sub_point)
                total += delta
                last_point, last_time = sub_point, t_sub

            i += 1

    except _EvaluationLimitError:
        logger.warning(
            "Orbit walk did not close after %d position evaluations",
            config.max_evaluations,
        )
        return None

    return points


class OrbitSampler:
    """Builds the vertex sequence approximating a body's orbit path."""

    def __init__(self, config: OrbitConfig = DEFAULT_CONFIG):
        self.config = config

    def sample(
        self, body: "Body", use_osculating_ellipse: bool = False
    ) -> list[HostVec3] | None:
        """Vertices of one revolution of ``body``, relative to the body it orbits.

        By default the body's own (possibly perturbed) elements are walked from the
        current simulated time, with a coarse step of one 360th of the period. With
        ``use_osculating_ellipse``, the ellipse tangent to the body's current state is
        walked instead, from time 0, advancing its mean anomaly by a fixed rate per
        ``osculating_step``.

        Returns None when no period can be computed for the body (for example when
        the body it orbits is unknown), or when the walk fails to close.
        """
        if body.propagator is None:
            return None

        start = body.get_epoch_time(body.universe.epoch_time)
        elements = body.propagator.evaluate(start)
        period = body.calculate_period(elements)
        if not period:
            logger.info("No period for %s; orbit path cannot be drawn", body.name)
            return None

        if use_osculating_ellipse:
            osculating = body.propagator.evaluate(start, osculating=True)
            synthetic = dataclasses.replace(
                osculating.to_element_set(),
                rates=ElementRates(
                    mean_anomaly=Quantity(
                        self.config.osculating_mean_anomaly_rate_deg, "deg / day"
                    )
                ),
            )

            def position_at(t: float) -> HostVec3:
                return body.propagator.position_at(t, override=synthetic)

            step = self.config.osculating_step
            return walk_orbit(position_at, 0.0, step, self.config)

        return walk_orbit(
            body.propagator.position_at, start, period / 360.0, self.config
        )
