# game/host.py
"""Pygame side of the collaborators dispel talks to: cursor mode and pointer input."""
import logging

import pygame

from dispel.types import FrameInput
from gesture.types import HandPointerState
from gesture.utils import ButtonEdges

logger = logging.getLogger(__name__)

PRIMARY, SECONDARY = 1, 3   # pygame mouse button numbers


class PygameCursor:
    """captured = hidden + grabbed (mouse-look), released = visible arrow/crosshair."""

    def __init__(self):
        self.captured = False

    def capture(self) -> None:
        pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_ARROW)
        pygame.mouse.set_visible(False)
        pygame.event.set_grab(True)
        pygame.mouse.get_rel()  # drop motion accumulated while free
        self.captured = True

    def release(self) -> None:
        pygame.event.set_grab(False)
        pygame.mouse.set_visible(True)
        pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_CROSSHAIR)
        self.captured = False


class MouseInput:
    """Collects one frame of mouse input from the pygame event stream."""

    def __init__(self):
        self._pressed = set()
        self._released = set()

    def handle_event(self, event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            self._pressed.add(event.button)
        elif event.type == pygame.MOUSEBUTTONUP:
            self._released.add(event.button)

    def frame(self, dt: float) -> FrameInput:
        pointer = pygame.mouse.get_pos() if pygame.mouse.get_focused() else None
        held = pygame.mouse.get_pressed(num_buttons=3)[0]

        frame = FrameInput(
            pointer=pointer,
            primary_pressed=PRIMARY in self._pressed,
            primary_held=held or PRIMARY in self._pressed,
            primary_released=PRIMARY in self._released,
            secondary_pressed=SECONDARY in self._pressed,
            dt=dt,
        )
        self._pressed.clear()
        self._released.clear()
        return frame


class HandInput:
    """Turns the hand worker's shared state into FrameInput, one snapshot per frame."""

    def __init__(self, state: HandPointerState, lock):
        self.state = state
        self.lock = lock
        self.edges = ButtonEdges()
        self.label = state.label
        self.hand_seen = state.hand_seen

    def frame(self, dt: float) -> FrameInput:
        with self.lock:
            pointer = self.state.pointer
            pinch = self.state.pinch
            cancel = self.state.cancel
            self.state.cancel = False
            self.label = self.state.label
            self.hand_seen = self.state.hand_seen

        pressed, released = self.edges.update(pinch)
        return FrameInput(
            pointer=pointer,
            primary_pressed=pressed,
            primary_held=pinch,
            primary_released=released,
            secondary_pressed=cancel,
            dt=dt,
        )
