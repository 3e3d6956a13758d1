"""Geometry module for 4D primitives.

Components:
    hypersphere: Hypersphere primitive, the shared Hit record and the
        closed-form ray-hypersphere intersection
    hyperplane: Finite hyperplane slab placed by a motor

Both intersection routines are Taichi functions (@ti.func) and return a Hit
record; a miss has ``hit == 0``.
"""

from .hyperplane import Hyperplane, intersect_hyperplane, make_hyperplane
from .hypersphere import Hit, Hypersphere, intersect_hypersphere, make_hypersphere, make_miss

__all__ = [
    "Hit",
    "make_miss",
    "Hypersphere",
    "intersect_hypersphere",
    "make_hypersphere",
    "Hyperplane",
    "intersect_hyperplane",
    "make_hyperplane",
]
