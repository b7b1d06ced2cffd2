"""Additive triangle renderer for the galaxy vertex stream."""

import numpy as np
from OpenGL.GL import *
from OpenGL.arrays import vbo

from config import galaxy as config


class GalaxyRenderer:
    """Draws one small triangle per body with additive (ONE, ONE) blending."""

    def __init__(self):
        self.view_extent = float(config.RENDER["view_extent"])
        self._vbo_positions = None
        self._vbo_colors = None
        self._vbos_initialized = False

    def _init_vbos(self, positions: np.ndarray, colors: np.ndarray):
        """Initialize VBOs for rendering."""
        try:
            self._vbo_positions = vbo.VBO(positions, usage=GL_DYNAMIC_DRAW)
            self._vbo_colors = vbo.VBO(colors, usage=GL_DYNAMIC_DRAW)
            self._vbos_initialized = True
        except Exception as e:
            print(f"[Render] VBO init failed: {e}")
            self._vbos_initialized = False

    def setup_projection(self, width: int, height: int):
        """Orthographic view of [-extent*aspect, extent*aspect] x [-extent, extent]."""
        aspect = width / height
        e = self.view_extent
        glViewport(0, 0, width, height)
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        glOrtho(-e * aspect, e * aspect, -e, e, -1.0, 1.0)
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def draw(self, positions: np.ndarray, colors: np.ndarray):
        """Render the full (3n) vertex stream."""
        count = len(positions)
        if count == 0:
            return

        if not self._vbos_initialized:
            self._init_vbos(positions, colors)

        glEnable(GL_BLEND)
        glBlendFunc(GL_ONE, GL_ONE)

        if self._vbos_initialized:
            # set_array also handles a resized stream after a reset
            self._vbo_positions.set_array(positions)
            self._vbo_colors.set_array(colors)

            self._vbo_positions.bind()
            glEnableClientState(GL_VERTEX_ARRAY)
            glVertexPointer(2, GL_FLOAT, 0, None)

            self._vbo_colors.bind()
            glEnableClientState(GL_COLOR_ARRAY)
            glColorPointer(3, GL_FLOAT, 0, None)

            glDrawArrays(GL_TRIANGLES, 0, count)

            self._vbo_positions.unbind()
            self._vbo_colors.unbind()
            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)
        else:
            # Fallback
            glEnableClientState(GL_VERTEX_ARRAY)
            glEnableClientState(GL_COLOR_ARRAY)
            glVertexPointer(2, GL_FLOAT, 0, positions)
            glColorPointer(3, GL_FLOAT, 0, colors)
            glDrawArrays(GL_TRIANGLES, 0, count)
            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)

        glDisable(GL_BLEND)
