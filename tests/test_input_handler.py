import pygame
import pytest
from pygame.locals import *

from core.input_handler import InputAction, InputHandler


@pytest.fixture
def handler():
    return InputHandler()


@pytest.mark.parametrize("key, action", [
    (K_ESCAPE, InputAction.QUIT),
    (K_SPACE, InputAction.RESET),
    (K_r, InputAction.RESET),
    (K_p, InputAction.TOGGLE_PAUSE),
    (K_h, InputAction.TOGGLE_HELP),
    (K_a, InputAction.NONE),
])
def test_keys(handler, key, action):
    event = pygame.event.Event(KEYDOWN, key=key)
    assert handler.handle_event(event) == action


def test_window_close(handler):
    assert handler.handle_event(pygame.event.Event(QUIT)) == InputAction.QUIT


@pytest.mark.parametrize("button, action", [
    (1, InputAction.RESET),
    (3, InputAction.NONE),
])
def test_mouse_buttons(handler, button, action):
    event = pygame.event.Event(MOUSEBUTTONDOWN, button=button, pos=(10, 10))
    assert handler.handle_event(event) == action


def test_other_events_ignored(handler):
    assert handler.handle_event(pygame.event.Event(KEYUP, key=K_SPACE)) == InputAction.NONE
    assert handler.handle_event(pygame.event.Event(MOUSEMOTION, pos=(1, 1))) == InputAction.NONE
