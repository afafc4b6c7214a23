# dispel/fsm.py
from statemachine import State, StateMachine

from dispel.sampler import Sampler
from dispel.types import CursorMode, GestureSession, Mode


class DispelFSM(StateMachine):
    """
    Dormant -> Armed -> Drawing -> Dormant.

    The machine only guards transitions and applies their side effects on
    the session and the host cursor; the controller decides when to fire
    events and copies the resulting state back with sync_mode_to_session().
    """

    dormant = State(Mode.DORMANT.value, value=Mode.DORMANT, initial=True)
    armed = State(Mode.ARMED.value, value=Mode.ARMED)
    drawing = State(Mode.DRAWING.value, value=Mode.DRAWING)

    arm = dormant.to(armed)
    begin = armed.to(drawing)
    lift = drawing.to.itself()
    complete = drawing.to(dormant)
    cancel = armed.to(dormant) | drawing.to(dormant)

    def __init__(self, session: GestureSession, cursor: CursorMode, sampler: Sampler):
        self.session = session
        self.cursor = cursor
        self.sampler = sampler
        super().__init__()

    def on_arm(self) -> None:
        self.session.clear()
        self.cursor.release()

    def on_begin(self, pointer=None) -> None:
        self.sampler.seed(self.session, pointer)

    def on_lift(self) -> None:
        # stroke abandoned, wait in Drawing for the next press
        self.session.clear()

    def on_complete(self) -> None:
        self.session.clear()
        self.cursor.capture()

    def on_cancel(self) -> None:
        self.session.clear()
        self.cursor.capture()

    def sync_mode_to_session(self) -> None:
        self.session.mode = Mode(self.current_state.value)
