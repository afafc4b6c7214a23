from __future__ import annotations

import numpy as np
import pytest

from conftest import SCREEN_CENTER, FakeCursor, circle, hold, press
from dispel.controller import DispelController
from dispel.types import FrameInput, GestureSession, Mode, SegmentTimer, Target

LOOP = circle(SCREEN_CENTER, 100, 12)


def targets():
    return [
        Target(1, np.array([0.0, 0.0, -5.0])),    # screen center, inside the loop
        Target(2, np.array([3.0, 0.0, -5.0])),    # far right, outside
        Target(3, np.array([0.0, 0.0, 5.0])),     # behind the camera
    ]


def draw_loop(controller: DispelController, points=LOOP[1:]):
    results = [controller.update(hold(p), targets()) for p in points]
    return results


def test_activation_arms_then_draws(controller: DispelController, cursor: FakeCursor) -> None:
    assert controller.mode == Mode.DORMANT
    assert not controller.active

    controller.update(press(LOOP[0]))
    assert controller.mode == Mode.ARMED
    assert controller.session.path == []
    assert cursor.calls == ["release"]

    controller.update(press(LOOP[0]))
    assert controller.mode == Mode.DRAWING
    assert controller.session.path == [LOOP[0]]


def test_closed_loop_removes_enclosed_targets(drawing: DispelController, cursor: FakeCursor) -> None:
    results = draw_loop(drawing)
    assert all(r.removal is None for r in results)
    assert len(drawing.session.path) == len(LOOP)

    closing = (LOOP[0][0] - 5.0, LOOP[0][1] + 5.0)
    result = drawing.update(hold(closing), targets())

    assert result.removal is not None
    assert result.removal.target_ids == frozenset({1})
    assert drawing.mode == Mode.DORMANT
    assert drawing.session.path == []
    assert cursor.calls == ["release", "capture"]


def test_closure_with_no_targets_still_completes(drawing: DispelController) -> None:
    draw_loop(drawing)
    result = drawing.update(hold(LOOP[0]), [])
    assert result.removal is not None
    assert result.removal.target_ids == frozenset()
    assert drawing.mode == Mode.DORMANT


def test_closure_detected_without_button_held(drawing: DispelController) -> None:
    draw_loop(drawing)
    result = drawing.update(FrameInput(pointer=LOOP[0], dt=0.001), targets())
    assert result.removal.target_ids == frozenset({1})


def test_short_path_never_closes(drawing: DispelController) -> None:
    small = circle(SCREEN_CENTER, 100, 5, stop_deg=300.0)
    draw_loop(drawing, small[1:])
    result = drawing.update(hold(LOOP[0]), targets())

    assert result.removal is None
    assert drawing.mode == Mode.DRAWING


def test_cancel_wins_over_closure(drawing: DispelController, cursor: FakeCursor) -> None:
    draw_loop(drawing)
    frame = FrameInput(pointer=LOOP[0], primary_held=True, secondary_pressed=True, dt=0.06)
    result = drawing.update(frame, targets())

    assert result.removal is None
    assert drawing.mode == Mode.DORMANT
    assert drawing.session.path == []
    assert cursor.calls == ["release", "capture"]


def test_cancel_while_armed(controller: DispelController, cursor: FakeCursor) -> None:
    controller.update(press(LOOP[0]))
    controller.update(FrameInput(pointer=LOOP[0], secondary_pressed=True))
    assert controller.mode == Mode.DORMANT
    assert cursor.calls == ["release", "capture"]


def test_cancel_while_dormant_does_nothing(controller: DispelController, cursor: FakeCursor) -> None:
    controller.update(FrameInput(secondary_pressed=True))
    assert controller.mode == Mode.DORMANT
    assert cursor.calls == []


def test_cancel_then_rearm_gives_a_fresh_session(drawing: DispelController) -> None:
    draw_loop(drawing, LOOP[1:6])
    drawing.update(FrameInput(secondary_pressed=True))
    drawing.update(press(LOOP[3]))

    assert drawing.session == GestureSession(mode=Mode.ARMED, path=[], segment_timer=SegmentTimer())


def test_release_clears_path_but_keeps_drawing(drawing: DispelController) -> None:
    draw_loop(drawing, LOOP[1:6])
    drawing.update(FrameInput(pointer=LOOP[5], primary_released=True, dt=0.06))

    assert drawing.mode == Mode.DRAWING
    assert drawing.session.path == []

    # pointer moving without the button held adds nothing
    drawing.update(FrameInput(pointer=LOOP[7], dt=0.06))
    assert drawing.session.path == []

    # the next press starts a new stroke where it happens
    drawing.update(press(LOOP[8]))
    assert drawing.session.path == [LOOP[8]]
    assert drawing.mode == Mode.DRAWING


def test_pointer_lost_for_whole_session(controller: DispelController) -> None:
    controller.update(press(None))
    controller.update(press(None))
    for _ in range(30):
        result = controller.update(hold(None), targets())
        assert result.removal is None

    assert controller.mode == Mode.DRAWING
    assert controller.session.path == []


def test_pointer_lost_mid_stroke_keeps_path(drawing: DispelController) -> None:
    draw_loop(drawing, LOOP[1:6])
    before = list(drawing.session.path)
    for _ in range(10):
        drawing.update(hold(None), targets())
    assert drawing.session.path == before


def test_targets_only_read_when_loop_closes(drawing: DispelController) -> None:
    reads = []

    def live():
        reads.append(1)
        yield from targets()

    for p in LOOP[1:]:
        drawing.update(hold(p), live())
    assert reads == []

    drawing.update(hold(LOOP[0]), live())
    assert reads == [1]


def test_feedback_follows_the_path(controller: DispelController) -> None:
    assert controller.update(FrameInput(pointer=LOOP[0])).feedback.active is False

    controller.update(press(LOOP[0]))
    controller.update(press(LOOP[0]))
    result = controller.update(hold(LOOP[1]))

    feedback = result.feedback
    assert feedback.active
    assert feedback.path == (LOOP[0], LOOP[1])
    assert len(feedback.world_path) == 2
    assert feedback.start_marker == pytest.approx(feedback.world_path[0])
    assert feedback.cursor_marker == pytest.approx(feedback.world_path[1])
    assert controller.projector.world_to_screen(feedback.world_path[1]) == pytest.approx(LOOP[1])


def test_feedback_without_pointer_has_no_cursor_marker(drawing: DispelController) -> None:
    draw_loop(drawing, LOOP[1:3])
    feedback = drawing.update(hold(None)).feedback
    assert feedback.active
    assert feedback.cursor_marker is None
    assert len(feedback.world_path) == 3


def test_teardown_resets_and_releases_cursor(drawing: DispelController, cursor: FakeCursor) -> None:
    draw_loop(drawing, LOOP[1:6])
    drawing.teardown()

    assert drawing.mode == Mode.DORMANT
    assert drawing.session.path == []
    assert cursor.calls[-1] == "release"

    drawing.update(press(LOOP[0]))
    assert drawing.mode == Mode.ARMED


def test_feedback_for_a_long_path_matches_single_point_projection(drawing: DispelController) -> None:
    # a long open gesture: many points, none near enough the start to close
    drawing.session.path.extend(
        (100.0 + 0.5 * i, 100.0 + (i % 2) * 40.0) for i in range(1200)
    )
    pointer = (700.0, 300.0)

    feedback = drawing.update(FrameInput(pointer=pointer)).feedback

    projector = drawing.projector
    assert len(feedback.world_path) == len(drawing.session.path)
    for screen, world in zip(drawing.session.path, feedback.world_path):
        assert world == pytest.approx(projector.screen_to_world_point(screen, drawing.gizmo_depth), abs=1e-9)
    assert feedback.start_marker == pytest.approx(feedback.world_path[0])
    assert feedback.cursor_marker == pytest.approx(projector.screen_to_world_point(pointer, drawing.gizmo_depth), abs=1e-9)
