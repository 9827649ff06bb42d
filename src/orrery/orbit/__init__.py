"""Orbit path sampling."""

from orrery.orbit.sampler import OrbitSampler, walk_orbit

__all__ = ["OrbitSampler", "walk_orbit"]
