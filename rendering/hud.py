"""Heads-up display drawn over the star field."""

import pygame
from OpenGL.GL import *


class HudRenderer:
    """
    Stacked text lines in the top-left corner.

    Rendered lines are cached by content; the status line changes every
    frame (FPS) but help and morphology lines rarely do.
    """

    MAX_CACHED = 64

    def __init__(self, color=(0.7, 0.8, 0.9), font_name: str = "monospace",
                 font_size: int = 18, margin: int = 10, spacing: int = 7):
        pygame.font.init()
        self.font = pygame.font.SysFont(font_name, font_size)
        self.color = tuple(int(min(max(c, 0.0), 1.0) * 255) for c in color)
        self.margin = margin
        self.line_height = self.font.get_linesize() + spacing
        self._cache = {}

    def _rasterize(self, text: str):
        cached = self._cache.get(text)
        if cached is None:
            if len(self._cache) >= self.MAX_CACHED:
                self._cache.clear()
            surface = self.font.render(text, True, self.color)
            w, h = surface.get_size()
            cached = (pygame.image.tostring(surface, "RGBA", True), w, h)
            self._cache[text] = cached
        return cached

    def draw(self, lines, screen_size: tuple):
        """Draw `lines` top to bottom; empty strings leave a gap."""
        width, height = screen_size

        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, width, 0, height, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()

        # Alpha-blended, unlike the additive star pass
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)

        y = self.margin
        for line in lines:
            if line:
                pixels, w, h = self._rasterize(line)
                glRasterPos2f(self.margin, height - y - h)
                glDrawPixels(w, h, GL_RGBA, GL_UNSIGNED_BYTE, pixels)
            y += self.line_height

        glDisable(GL_BLEND)

        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)
