"""Procedural galaxy generation and dynamics."""

from .store import BodyKind, BodyStore
from .generators import GalaxyType, build_galaxy
from .simulation import GalaxySimulation

__all__ = ["BodyKind", "BodyStore", "GalaxyType", "build_galaxy", "GalaxySimulation"]
