"""
Load a Universe from a YAML system description.

Schema
------
date: 2000-01-01T12:00:00          # optional, ISO date; J2000 by default
time_scale: tt                     # optional, astropy scale of all dates; tt by default
bodies:
  sun:
    mass: 1.98847e30               # kg
    central: true
    tilt: 7.25                     # deg, optional
  earth:
    mass: 5.9722e24
    mu: 3.986004418e14             # m^3 / s^2, optional (defaults to G * mass)
    relative_to: sun
    tilt: 23.44
    epoch: 2000-01-01T12:00:00     # optional element epoch
    velocity_from_elements: false  # optional
    elements:
      a: 149598023                 # km
      e: 0.0167086
      i: 0.00005                   # deg
      o: -11.26064                 # deg, longitude of ascending node
      w: 114.20783                 # deg, argument of periapsis (or lp)
      M: 358.617                   # deg, mean anomaly (or l, mean longitude)
    rates:                         # optional, same keys; per day or per century
      M: 0.9856                    # or lp / l, rates of the longitudes
    rates_per: day
"""

import logging
import pathlib

import yaml
from astropy.time import Time
from unxt import Quantity

from orrery.bodies.body import Body
from orrery.bodies.universe import Universe
from orrery.config import DEFAULT_CONFIG, OrbitConfig
from orrery.kepler.elements import ElementRates, OrbitalElementSet

__all__ = ["load_system", "system_from_dict"]

logger = logging.getLogger(__name__)

_ANGLE_KEYS = {
    "i": "inclination",
    "o": "lon_asc_node",
    "w": "arg_peri",
    "M": "mean_anomaly",
}


def _rates_from_dict(data: dict, per: str) -> ElementRates:
    if per not in ("day", "century"):
        raise ValueError(f"rates_per must be 'day' or 'century', got {per!r}")
    unknown = set(data) - {"a", "e", "lp", "l", *_ANGLE_KEYS}
    if unknown:
        raise ValueError(f"Unknown rate keys {sorted(unknown)}")

    data = dict(data)
    if "lp" in data or "l" in data:
        # Rates of the longitudes translate into rates of ω = ϖ - Ω and M = L - ϖ
        lp = float(data.pop("lp", 0.0))
        data["w"] = lp - float(data.get("o", 0.0))
        data["M"] = float(data.pop("l", 0.0)) - lp

    if per == "century":
        kw = {"semi_major_axis": Quantity(float(data.get("a", 0.0)), "km")}
        kw.update(
            {
                name: Quantity(float(data.get(k, 0.0)), "deg")
                for k, name in _ANGLE_KEYS.items()
            }
        )
        return ElementRates.from_per_century(
            eccentricity=float(data.get("e", 0.0)), **kw
        )

    kw = {"semi_major_axis": Quantity(float(data.get("a", 0.0)), "km / day")}
    kw.update(
        {
            name: Quantity(float(data.get(k, 0.0)), "deg / day")
            for k, name in _ANGLE_KEYS.items()
        }
    )
    return ElementRates(eccentricity=float(data.get("e", 0.0)), **kw)


def _elements_from_dict(data: dict, rates: ElementRates) -> OrbitalElementSet:
    a = Quantity(float(data["a"]), "km")
    e = float(data["e"])
    i = Quantity(float(data.get("i", 0.0)), "deg")
    o = Quantity(float(data.get("o", 0.0)), "deg")

    if "lp" in data:
        return OrbitalElementSet.from_longitudes(
            semi_major_axis=a,
            eccentricity=e,
            inclination=i,
            lon_asc_node=o,
            lon_peri=Quantity(float(data["lp"]), "deg"),
            mean_lon=Quantity(float(data["l"]), "deg"),
            rates=rates,
        )

    return OrbitalElementSet(
        semi_major_axis=a,
        eccentricity=e,
        inclination=i,
        lon_asc_node=o,
        arg_peri=Quantity(float(data.get("w", 0.0)), "deg"),
        mean_anomaly=Quantity(float(data.get("M", 0.0)), "deg"),
        rates=rates,
    )


def _body_from_dict(name: str, data: dict, scale: str, config: OrbitConfig) -> Body:
    elements = None
    if "elements" in data:
        rates = _rates_from_dict(data.get("rates", {}), data.get("rates_per", "day"))
        elements = _elements_from_dict(data["elements"], rates)

    kw = {}
    if "mu" in data:
        kw["mu"] = Quantity(float(data["mu"]), "m3 / s2")
    if "epoch" in data:
        kw["epoch"] = Time(str(data["epoch"]), scale=scale)

    return Body(
        name=name,
        mass=Quantity(float(data.get("mass", 0.0)), "kg"),
        elements=elements,
        relative_to=data.get("relative_to"),
        is_central=bool(data.get("central", False)),
        tilt=Quantity(float(data.get("tilt", 0.0)), "deg"),
        calculate_from_elements=bool(data.get("velocity_from_elements", False)),
        config=config,
        **kw,
    )


def system_from_dict(data: dict, config: OrbitConfig = DEFAULT_CONFIG) -> Universe:
    """Build (but do not initialize) a Universe from a parsed system description."""
    if not isinstance(data, dict) or not isinstance(data.get("bodies"), dict):
        raise ValueError("A system description needs a 'bodies' mapping")

    scale = str(data.get("time_scale", "tt"))
    date = Time(str(data["date"]), scale=scale) if "date" in data else None
    universe = Universe(date=date)
    for name, body_data in data["bodies"].items():
        universe.add_body(_body_from_dict(str(name), body_data or {}, scale, config))

    logger.debug("Loaded system with bodies %s", [b.name for b in universe])
    return universe


def load_system(
    path: str | pathlib.Path, config: OrbitConfig = DEFAULT_CONFIG
) -> Universe:
    """Read a YAML system description and return an initialized Universe."""
    path = pathlib.Path(path)
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    universe = system_from_dict(data, config)
    universe.initialize()
    return universe
