"""Rendering components for the galaxy simulation."""

from .galaxy_renderer import GalaxyRenderer
from .hud import HudRenderer

__all__ = ["GalaxyRenderer", "HudRenderer"]
