"""Unit tests for :mod:`orrery.bodies.systems`."""

import pathlib

import numpy as np
import pytest

from orrery import load_system
from orrery.bodies.systems import system_from_dict
from orrery.constants import CENTURY, DEG_TO_RAD

SYSTEM_YAML = """
date: 2000-01-01T12:00:00
bodies:
  sun:
    mass: 1.98847e30
    central: true
  earth:
    mass: 6.0458e24
    mu: 3.986004418e14
    relative_to: sun
    elements:
      a: 149598261.1
      e: 0.01671123
      i: -0.00001531
      o: 0.0
      lp: 102.93768193
      l: 100.46457166
    rates:
      lp: 0.32327364
      l: 35999.37244981
    rates_per: century
  moon:
    mass: 7.342e22
    relative_to: earth
    velocity_from_elements: true
    elements:
      a: 384400
      e: 0.0549
      i: 5.145
      o: 125.08
      w: 318.15
      M: 135.27
"""


@pytest.fixture
def system_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "system.yaml"
    path.write_text(SYSTEM_YAML)
    return path


def test_load_system(system_file: pathlib.Path) -> None:
    universe = load_system(system_file)

    assert [b.name for b in universe.ordered_bodies()] == ["sun", "earth", "moon"]
    assert universe.get_body() is universe.get_body("sun")
    # Dates are TT unless the file says otherwise, so noon is exactly J2000
    assert universe.current_time == pytest.approx(0.0, abs=1e-6)

    earth = universe.get_body("earth")
    assert 1.47e11 < np.linalg.norm(earth.get_position()) < 1.53e11
    assert universe.get_body("moon").calculate_from_elements


def test_longitudes_and_century_rates(system_file: pathlib.Path) -> None:
    earth = load_system(system_file).get_body("earth")
    base = np.asarray(earth.elements.as_array())
    rates = np.asarray(earth.elements.rates.as_array())

    assert base[0] == pytest.approx(149598261.1e3)
    assert base[4] == pytest.approx(102.93768193 * DEG_TO_RAD)
    assert base[5] == pytest.approx((100.46457166 - 102.93768193) * DEG_TO_RAD)
    assert rates[4] == pytest.approx(0.32327364 / CENTURY * DEG_TO_RAD)
    assert rates[5] == pytest.approx(
        (35999.37244981 - 0.32327364) / CENTURY * DEG_TO_RAD
    )


def test_per_day_rates() -> None:
    universe = system_from_dict(
        {
            "bodies": {
                "sun": {"mass": 2e30, "central": True},
                "rock": {
                    "relative_to": "sun",
                    "elements": {"a": 1e8, "e": 0.1},
                    "rates": {"M": 1.0, "a": 2.0},
                },
            }
        }
    )
    rates = np.asarray(universe.get_body("rock").elements.rates.as_array())
    assert rates[0] == pytest.approx(2000.0)
    assert rates[5] == pytest.approx(DEG_TO_RAD)


@pytest.mark.parametrize(
    ("data", "match"),
    [
        ({}, "bodies"),
        ({"bodies": []}, "bodies"),
        (
            {"bodies": {"x": {"elements": {"a": 1, "e": 0}, "rates": {"q": 1}}}},
            "Unknown rate keys",
        ),
        (
            {"bodies": {"x": {"elements": {"a": 1, "e": 0}, "rates_per": "year"}}},
            "rates_per",
        ),
        ({"bodies": {"x": {"elements": {"a": -1, "e": 0}}}}, "must be positive"),
    ],
)
def test_invalid_systems(data: dict, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        system_from_dict(data)


def test_sample_system_file() -> None:
    """The system shipped with the scripts loads and every planet has a path."""
    path = pathlib.Path(__file__).parents[2] / "scripts" / "inner_system.yaml"
    universe = load_system(path)
    for name in ("mercury", "venus", "earth", "mars"):
        vertices = universe.get_body(name).get_orbit_vertices()
        assert vertices is not None
        assert len(vertices) >= 360


def test_time_scale() -> None:
    """A top-level time_scale applies to the date and to element epochs."""
    data = {
        "date": "2000-01-01T12:00:00",
        "time_scale": "utc",
        "bodies": {
            "sun": {"mass": 2e30, "central": True},
            "rock": {
                "relative_to": "sun",
                "epoch": "2000-01-01T12:00:00",
                "elements": {"a": 1e8, "e": 0.1},
            },
        },
    }
    universe = system_from_dict(data)
    # TT - UTC was 64.184 s at J2000
    assert universe.current_time == pytest.approx(64.184, abs=1e-2)
    assert universe.get_body("rock").get_epoch_time(0.0) == pytest.approx(
        -64.184, abs=1e-2
    )
