"""Composition of relative positions into the absolute frame."""

import logging
from typing import TYPE_CHECKING

import numpy as np

from orrery.custom_types import HostVec3

if TYPE_CHECKING:
    from orrery.bodies.body import Body
    from orrery.bodies.universe import Universe

__all__ = ["position_relative_to", "parent_position"]

logger = logging.getLogger(__name__)


def position_relative_to(body: "Body", universe: "Universe") -> None:
    """Add the parent's absolute position (and velocity) to the body's own, in place.

    Only one level of indirection is resolved: the parent's position must already be
    final for this tick. Nothing happens when the body has no parent, when the parent
    is unknown, or when the parent is the universe's central body (whose position is
    the origin by definition).
    """
    if not body.relative_to:
        return

    parent = universe.get_body(body.relative_to)
    if parent is None:
        logger.warning(
            "%s is relative to unknown body %r; position left unchanged",
            body.name,
            body.relative_to,
        )
        return

    if parent is universe.get_body():
        return

    body.position += parent.position
    if body.velocity is not None and parent.velocity is not None:
        body.velocity += parent.velocity


def parent_position(body: "Body", universe: "Universe") -> HostVec3:
    """Absolute position of the body's parent, or the origin if there is none."""
    parent = universe.get_body(body.relative_to) if body.relative_to else None
    if parent is None:
        return np.zeros(3)
    return parent.get_position()
