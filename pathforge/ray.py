"""
Half-lines traced through the scene.

Camera rays and every scattered bounce are Rays; hit distances are
measured in units of the direction vector.
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """An origin point and the direction it travels in.

    The direction keeps whatever length it was built with, so `t` is a
    distance only when the direction happens to be a unit vector.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Point3:
        """Point reached after travelling t direction-lengths from the origin."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray({self.origin} -> {self.direction})"
