"""Input handling for keyboard and mouse events."""

from enum import Enum

import pygame
from pygame.locals import *


class InputAction(Enum):
    NONE = "none"
    QUIT = "quit"
    RESET = "reset"
    TOGGLE_PAUSE = "toggle_pause"
    TOGGLE_HELP = "toggle_help"


class InputHandler:
    """Maps pygame events to application actions.

    A left click, SPACE or R regenerates the galaxy.
    """

    KEY_ACTIONS = {
        K_ESCAPE: InputAction.QUIT,
        K_SPACE: InputAction.RESET,
        K_r: InputAction.RESET,
        K_p: InputAction.TOGGLE_PAUSE,
        K_h: InputAction.TOGGLE_HELP,
    }

    def handle_event(self, event: pygame.event.Event) -> InputAction:
        """Translate a single pygame event."""
        if event.type == QUIT:
            return InputAction.QUIT
        elif event.type == KEYDOWN:
            return self.KEY_ACTIONS.get(event.key, InputAction.NONE)
        elif event.type == MOUSEBUTTONDOWN:
            if event.button == 1:
                return InputAction.RESET
        return InputAction.NONE
