# dispel/controller.py
"""
DispelController: runs the dispel mechanic once per frame.

update() is a fixed list of steps over one owned GestureSession:

  1. _toggle          primary press arms / starts drawing / restarts a stroke
  2. _draw            sample the pointer while the primary button is held
  3. _check_closure   loop closed? test every live target, emit removals
  4. _check_cancel    secondary press leaves the mechanic
  5. _refresh_feedback  world-space points for the feedback renderer

A cancel press on the same tick as a closure wins: closure is skipped.
"""
import logging
from typing import Iterable, Optional

from config import GIZMO_DEPTH
from dispel.closure import ClosureDetector
from dispel.enclosure import EnclosureTester
from dispel.fsm import DispelFSM
from dispel.projector import Projector
from dispel.sampler import Sampler
from dispel.types import (
    CursorMode, DispelUpdate, Feedback, FrameInput, GestureSession, Mode, RemovalRequest, Target,
)

logger = logging.getLogger(__name__)


class DispelController:
    def __init__(
        self,
        cursor: CursorMode,
        projector: Projector,
        sampler: Optional[Sampler] = None,
        closure: Optional[ClosureDetector] = None,
        gizmo_depth: float = GIZMO_DEPTH,
    ):
        self.cursor = cursor
        self.projector = projector
        self.sampler = sampler or Sampler()
        self.closure = closure or ClosureDetector()
        self.tester = EnclosureTester(projector)
        self.gizmo_depth = gizmo_depth

        self.session = GestureSession()
        self.fsm = DispelFSM(self.session, cursor, self.sampler)
        self.fsm.sync_mode_to_session()

    @property
    def mode(self) -> Mode:
        return self.session.mode

    @property
    def active(self) -> bool:
        return self.session.active

    # ------------------------------------------------------------------
    def update(self, frame: FrameInput, targets: Iterable[Target] = ()) -> DispelUpdate:
        """
        Advance one frame. targets is only iterated if a loop closes this
        tick, so a lazy view of the registry sees the frame's current state.
        """
        self._toggle(frame)
        self._draw(frame)
        removal = self._check_closure(frame, targets)
        self._check_cancel(frame)
        return DispelUpdate(removal=removal, feedback=self._refresh_feedback(frame))

    def teardown(self) -> None:
        """Scene exit: drop any gesture in progress and hand the cursor back."""
        self.session.clear()
        self.fsm = DispelFSM(self.session, self.cursor, self.sampler)
        self.fsm.sync_mode_to_session()
        self.cursor.release()

    # ------------------------------------------------------------------
    def _send(self, event: str, **kwargs) -> None:
        self.fsm.send(event, **kwargs)
        self.fsm.sync_mode_to_session()

    def _toggle(self, frame: FrameInput) -> None:
        if not frame.primary_pressed:
            return

        if self.mode == Mode.DORMANT:
            self._send("arm")
            logger.info("[Dispel] armed")
        elif self.mode == Mode.ARMED:
            self._send("begin", pointer=frame.pointer)
            logger.info("[Dispel] drawing")
        elif not self.session.path:
            # new stroke after the previous one was released
            self.sampler.seed(self.session, frame.pointer)

    def _draw(self, frame: FrameInput) -> None:
        if self.mode != Mode.DRAWING:
            return

        if frame.primary_released:
            self._send("lift")
            logger.debug("[Dispel] stroke released, path cleared")
            return

        if not frame.primary_held:
            return

        self.sampler.sample(self.session, frame.pointer, frame.dt)

    def _check_closure(self, frame: FrameInput, targets: Iterable[Target]) -> Optional[RemovalRequest]:
        if frame.secondary_pressed:
            return None
        if not self.closure.check(self.session, frame.pointer):
            return None

        removal = self.tester.find_enclosed(self.session.path, targets)
        logger.info(
            "[Dispel] loop closed with %d points, %d target(s) enclosed",
            len(self.session.path), len(removal.target_ids),
        )
        self._send("complete")
        return removal

    def _check_cancel(self, frame: FrameInput) -> None:
        if frame.secondary_pressed and self.mode != Mode.DORMANT:
            self._send("cancel")
            logger.info("[Dispel] cancelled")

    def _refresh_feedback(self, frame: FrameInput) -> Feedback:
        path = tuple(self.session.path)
        if not self.active or len(path) < 2:
            return Feedback(active=self.active, path=path)

        screens = list(path) if frame.pointer is None else list(path) + [frame.pointer]
        points = self.projector.screen_to_world_points(screens, self.gizmo_depth)

        world_path = [p for p in points[:len(path)] if p is not None]
        start = points[0]
        cursor = points[-1] if frame.pointer is not None else None

        return Feedback(
            active=True,
            path=path,
            world_path=tuple(world_path),
            start_marker=start,
            cursor_marker=cursor,
        )
