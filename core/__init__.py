"""Core application components."""

from .frame_driver import FrameDriver, clamp_dt
from .input_handler import InputAction, InputHandler

__all__ = ["FrameDriver", "clamp_dt", "InputAction", "InputHandler"]
