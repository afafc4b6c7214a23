# game/app.py
import logging
import time

import pygame

from config import (
    CANVAS_H, CANVAS_SCALE, CANVAS_W, FPS, MOUSE_SENSITIVITY, PLAYER_HEIGHT, GROUND_Y,
    USE_HAND_POINTER, WIN_H, WIN_W,
)
from dispel.controller import DispelController
from dispel.projector import Camera, Projector
from dispel.types import Feedback
from game.host import HandInput, MouseInput, PygameCursor
from game.scene import render
from game.targets import TargetRegistry

logger = logging.getLogger(__name__)


def start_hand_pointer():
    """Start the webcam worker (needs the "hand" extra: OpenCV + MediaPipe)."""
    from gesture.types import HandPointerState
    from gesture.worker import HandPointerWorker

    state = HandPointerState()
    worker = HandPointerWorker(state)
    worker.start()
    logger.info("[Main] HandPointerWorker started: %s", worker.is_alive())
    return worker, HandInput(state, worker.lock)


def run_game():
    pygame.init()
    screen = pygame.display.set_mode((WIN_W, WIN_H))
    pygame.display.set_caption("Dispel - draw a loop around them")
    canvas = pygame.Surface((CANVAS_W, CANVAS_H))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("Consolas", 18)

    camera = Camera(position=(0.0, GROUND_Y + PLAYER_HEIGHT, 5.0), viewport=(CANVAS_W, CANVAS_H))
    projector = Projector(camera, scale=CANVAS_SCALE)
    cursor = PygameCursor()
    dispel = DispelController(cursor, projector)
    targets = TargetRegistry()

    mouse = MouseInput()
    worker, hand = start_hand_pointer() if USE_HAND_POINTER else (None, None)

    cursor.capture()
    paused = False
    feedback = Feedback()
    last_time = time.time()

    try:
        while True:
            now = time.time()
            dt = now - last_time
            last_time = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        paused = not paused
                        if paused or dispel.active:
                            cursor.release()
                        else:
                            cursor.capture()
                    if paused and event.key == pygame.K_q:
                        return
                if not paused:
                    mouse.handle_event(event)

            if not paused:
                frame = hand.frame(dt) if hand is not None else mouse.frame(dt)

                if cursor.captured:
                    rel_x, rel_y = pygame.mouse.get_rel()
                    camera.look(-rel_x * MOUSE_SENSITIVITY, -rel_y * MOUSE_SENSITIVITY)

                targets.update(dt, camera)
                result = dispel.update(frame, targets.live())
                feedback = result.feedback
                if result.removal is not None:
                    targets.remove(result.removal.target_ids)

            render(canvas, camera, targets.live(), feedback)
            pygame.transform.scale(canvas, (WIN_W, WIN_H), screen)

            hud1 = font.render(f"Targets: {len(targets)}", True, (230, 230, 230))
            hud2 = font.render(f"Dispel: {dispel.mode.value} | points: {len(dispel.session.path)}", True, (200, 200, 200))
            screen.blit(hud1, (8, 6))
            screen.blit(hud2, (8, 28))
            if worker is not None:
                screen.blit(font.render(f"Hand: {hand.label} | seen: {hand.hand_seen}", True, (150, 150, 150)), (8, 50))
            if paused:
                msg = font.render("PAUSED (ESC to resume, Q to quit)", True, (255, 255, 120))
                screen.blit(msg, (8, 72))

            pygame.display.flip()
            clock.tick(FPS)
    finally:
        dispel.teardown()
        if worker is not None:
            worker.stop()
        pygame.quit()
