"""Main application class that ties everything together."""

import time

import pygame
from pygame.locals import *
from OpenGL.GL import *

from config import galaxy as config
from galaxy import GalaxySimulation
from rendering import GalaxyRenderer, HudRenderer
from .frame_driver import FrameDriver
from .input_handler import InputAction, InputHandler


class GalaxyApplication:
    """Window, event loop and HUD around the galaxy simulation."""

    def __init__(self, star_count=None, morphology=None, seed=None):
        pygame.init()
        pygame.display.set_mode(
            (config.WINDOW["width"], config.WINDOW["height"]),
            DOUBLEBUF | OPENGL
        )
        pygame.display.set_caption(config.WINDOW["title"])

        self.input_handler = InputHandler()
        self.renderer = GalaxyRenderer()
        self.hud = HudRenderer(color=config.COLORS["text"])

        print("[App] Initializing galaxy simulation...")
        self.simulation = GalaxySimulation(star_count=star_count, morphology=morphology, seed=seed)
        self.driver = FrameDriver(self.simulation)

        # State
        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0
        self.show_help = True

        self._setup_gl()
        print("[App] Ready!")

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glDisable(GL_DEPTH_TEST)
        self.renderer.setup_projection(config.WINDOW["width"], config.WINDOW["height"])

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            action = self.input_handler.handle_event(event)
            if action == InputAction.QUIT:
                self.running = False
            elif action == InputAction.RESET:
                self.driver.request_reset()
            elif action == InputAction.TOGGLE_PAUSE:
                self.driver.paused = not self.driver.paused
                print(f"[App] {'Paused' if self.driver.paused else 'Running'}")
            elif action == InputAction.TOGGLE_HELP:
                self.show_help = not self.show_help

    def _render(self, positions, colors):
        """Render the scene."""
        glClear(GL_COLOR_BUFFER_BIT)
        self.renderer.setup_projection(config.WINDOW["width"], config.WINDOW["height"])
        self.renderer.draw(positions, colors)

        # HUD
        status = "PAUSED" if self.driver.paused else "RUNNING"
        lines = [
            f"{self.simulation.morphology.value}  |  Bodies: {self.simulation.num_bodies:,}"
            f"  |  FPS: {self.fps:.0f}  |  {status}"
        ]
        if self.simulation.last_error:
            lines.append(f"Last reset failed: {self.simulation.last_error}")
        if self.show_help:
            lines.append("SPACE/Click/R: New galaxy | P: Pause | H: Toggle help | ESC: Quit")
        self.hud.draw(lines, (config.WINDOW["width"], config.WINDOW["height"]))

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        print("[App] Starting main loop...")

        while self.running:
            self.clock.tick()  # Uncapped FPS
            self.fps = self.clock.get_fps()

            self._handle_events()
            positions, colors = self.driver.frame(time.perf_counter())
            self._render(positions, colors)

        pygame.quit()
        print("[App] Shutdown complete")
