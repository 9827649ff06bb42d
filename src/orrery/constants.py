"""Unit constants shared across orrery.

Canonical internal units are metre, radian and second. Secular element rates are
expressed per day.
"""

import math

from astropy.constants import G as G_astropy  # noqa: N811
from astropy.time import Time

DAY = 86400.0  # seconds
CENTURY = 36525.0  # days

CIRCLE = 2 * math.pi
DEG_TO_RAD = math.pi / 180
RAD_TO_DEG = 180 / math.pi

G = float(G_astropy.si.value)  # m^3 kg^-1 s^-2

J2000 = Time(2451545.0, format="jd", scale="tt")
