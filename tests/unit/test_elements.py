"""Unit tests for :mod:`orrery.kepler.elements`."""

import logging

import jax.numpy as jnp
import numpy as np
import pytest
from unxt import Quantity

from orrery.constants import CENTURY, DEG_TO_RAD
from orrery.kepler.elements import ElementRates, InstantElements, OrbitalElementSet


def test_as_array_canonical_units() -> None:
    elements = OrbitalElementSet(
        semi_major_axis=Quantity(1.0, "km"),
        eccentricity=0.1,
        inclination=Quantity(90.0, "deg"),
        lon_asc_node=Quantity(180.0, "deg"),
        arg_peri=Quantity(1.0, "rad"),
        mean_anomaly=Quantity(45.0, "deg"),
    )
    assert np.allclose(
        elements.as_array(), [1000.0, 0.1, np.pi / 2, np.pi, 1.0, np.pi / 4]
    )
    assert np.allclose(elements.rates.as_array(), np.zeros(6))


def test_rates_as_array_per_day() -> None:
    rates = ElementRates(
        semi_major_axis=Quantity(2.0, "km / day"),
        eccentricity=1e-5,
        mean_anomaly=Quantity(0.9856, "deg / day"),
    )
    assert np.allclose(
        rates.as_array(), [2000.0, 1e-5, 0.0, 0.0, 0.0, 0.9856 * DEG_TO_RAD]
    )


def test_rates_from_per_century() -> None:
    rates = ElementRates.from_per_century(
        semi_major_axis=Quantity(CENTURY, "km"),
        eccentricity=CENTURY * 1e-6,
        mean_anomaly=Quantity(35999.37244981, "deg"),
    )
    values = np.asarray(rates.as_array())
    assert values[0] == pytest.approx(1000.0)
    assert values[1] == pytest.approx(1e-6)
    assert values[5] == pytest.approx(35999.37244981 / CENTURY * DEG_TO_RAD)


def test_from_longitudes() -> None:
    """ω = ϖ - Ω and M = L - ϖ."""
    elements = OrbitalElementSet.from_longitudes(
        semi_major_axis=Quantity(1.0, "AU"),
        eccentricity=0.0167,
        inclination=Quantity(0.0, "deg"),
        lon_asc_node=Quantity(10.0, "deg"),
        lon_peri=Quantity(102.9, "deg"),
        mean_lon=Quantity(100.5, "deg"),
    )
    values = np.asarray(elements.as_array())
    assert values[4] == pytest.approx(92.9 * DEG_TO_RAD)
    assert values[5] == pytest.approx(-2.4 * DEG_TO_RAD)


@pytest.mark.parametrize(
    ("a", "e"),
    [(0.0, 0.1), (-1.0, 0.1), (1.0, -0.01)],
)
def test_invalid_elements_raise(a: float, e: float) -> None:
    with pytest.raises(ValueError, match="must be"):
        OrbitalElementSet(semi_major_axis=Quantity(a, "km"), eccentricity=e)


def test_unbound_eccentricity_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="orrery"):
        OrbitalElementSet(semi_major_axis=Quantity(1.0, "km"), eccentricity=1.2)
    assert "unbound" in caplog.text


def test_instant_elements_snapshot() -> None:
    values = jnp.array([1.5e11, 0.2, 0.1, 0.3, 0.4, 0.5])
    snapshot = InstantElements.from_array(values, time=60.0, tilt=-0.4)

    assert np.allclose(snapshot.as_array(), values)
    assert float(snapshot.time) == 60.0
    assert float(snapshot.tilt) == -0.4

    frozen = snapshot.to_element_set()
    assert np.allclose(frozen.as_array(), values)
    assert np.allclose(frozen.rates.as_array(), np.zeros(6))
