"""Numeric policy constants for propagation and orbit sampling."""

import dataclasses
import logging
import pathlib

import equinox as eqx
import yaml

from orrery.constants import DAY

__all__ = ["OrbitConfig", "DEFAULT_CONFIG", "load_config"]

logger = logging.getLogger(__name__)


class OrbitConfig(eqx.Module):
    """Tolerances, thresholds and bounds used by the solver and the orbit sampler.

    All fields are plain Python scalars, so a config passed through
    ``equinox.filter_jit`` is treated as static.

    Parameters
    ----------
    kepler_tolerance
        Newton step size (radians) below which Kepler's equation is considered solved.
    kepler_max_iter
        Upper bound on Newton iterations.
    max_eccentricity
        Eccentricities at or above 1 are clamped to this value before solving.
    velocity_delta
        Time offset (seconds) of the finite-difference velocity estimate.
    max_step_deg
        Largest angular step accepted without refinement when sampling an orbit.
    full_circle_deg
        Cumulative angle at which sampling stops.
    overshoot_tolerance_deg
        Allowed overshoot of ``full_circle_deg`` for the closing vertex.
    closing_max_bisections
        Bisection bound used to place the closing vertex inside the tolerance.
    max_evaluations
        Bound on position evaluations per sampled orbit.
    osculating_step
        Time increment (seconds) used to sample the osculating ellipse.
    osculating_mean_anomaly_rate_deg
        Mean anomaly advance (degrees per day) of the synthetic osculating ellipse.
    """

    kepler_tolerance: float = 1e-6
    kepler_max_iter: int = 50
    max_eccentricity: float = 1.0 - 1e-6

    velocity_delta: float = 60.0

    max_step_deg: float = 1.3
    full_circle_deg: float = 360.0
    overshoot_tolerance_deg: float = 0.5
    closing_max_bisections: int = 40
    max_evaluations: int = 200_000

    osculating_step: float = DAY
    osculating_mean_anomaly_rate_deg: float = 1.0

    def __check_init__(self) -> None:
        if self.kepler_tolerance <= 0:
            raise ValueError("kepler_tolerance must be positive")
        if self.kepler_max_iter < 1:
            raise ValueError("kepler_max_iter must be at least 1")
        if not (0.0 < self.max_eccentricity < 1.0):
            raise ValueError("max_eccentricity must be in the range (0, 1)")
        if self.velocity_delta <= 0:
            raise ValueError("velocity_delta must be positive")
        if self.max_step_deg <= 0:
            raise ValueError("max_step_deg must be positive")
        if self.full_circle_deg <= 0 or self.overshoot_tolerance_deg < 0:
            raise ValueError("full_circle_deg and overshoot_tolerance_deg are invalid")
        if self.osculating_step <= 0 or self.osculating_mean_anomaly_rate_deg <= 0:
            raise ValueError("osculating sampling step and rate must be positive")


DEFAULT_CONFIG = OrbitConfig()


def load_config(path: str | pathlib.Path) -> OrbitConfig:
    """Read an :class:`OrbitConfig` from a YAML mapping.

    Keys not present in the file keep their default values.
    """
    path = pathlib.Path(path)
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path!s}: expected a mapping at the top level")

    known = {f.name for f in dataclasses.fields(OrbitConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path!s}: unknown config keys {unknown}")

    logger.debug("Loaded orbit config from %s: %s", path, data)
    return OrbitConfig(**data)
