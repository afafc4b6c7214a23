# gesture/worker.py
import logging
import threading
import time

import cv2
import mediapipe as mp

from config import (
    MIRROR, SHOW_CAMERA, WIN_W, WIN_H,
    PINCH_DIST_RATIO, OPEN_THUMB_SEP_RATIO,
    OPEN_HOLD_FRAMES, OPEN_COOLDOWN_SEC, POINTER_SMOOTHING,
)
from dispel.geometry import dist
from gesture.types import HandPointerState
from gesture.camera import try_open_camera
from gesture.utils import Debounce, PointerSmoother, lm_xy, pinch_ratio

logger = logging.getLogger(__name__)

CAMERA_WINDOW = "Hand pointer (press Q to close this window)"


def fingers_extended(landmarks, w, h):
    """Four fingers straight? (tip above pip in image space)"""
    lm = mp.solutions.hands.HandLandmark
    pts = {i: lm_xy(landmarks[i], w, h) for i in range(21)}
    ext = {}
    for name, tip, pip in [
        ("index", lm.INDEX_FINGER_TIP, lm.INDEX_FINGER_PIP),
        ("middle", lm.MIDDLE_FINGER_TIP, lm.MIDDLE_FINGER_PIP),
        ("ring", lm.RING_FINGER_TIP, lm.RING_FINGER_PIP),
        ("pinky", lm.PINKY_TIP, lm.PINKY_PIP),
    ]:
        ext[name] = bool(pts[tip][1] < pts[pip][1])
    return ext, pts


def estimate_hand_size(pts):
    lm = mp.solutions.hands.HandLandmark
    return max(1e-6, dist(pts[lm.WRIST], pts[lm.MIDDLE_FINGER_MCP]))


def detect_pinch(pts, hand_size) -> bool:
    lm = mp.solutions.hands.HandLandmark
    return pinch_ratio(pts[lm.THUMB_TIP], pts[lm.INDEX_FINGER_TIP], hand_size) < PINCH_DIST_RATIO


def detect_open_hand(ext, pts, hand_size) -> bool:
    if not all(ext.values()):
        return False
    lm = mp.solutions.hands.HandLandmark
    return pinch_ratio(pts[lm.THUMB_TIP], pts[lm.INDEX_FINGER_TIP], hand_size) > OPEN_THUMB_SEP_RATIO


class HandPointerWorker(threading.Thread):
    """
    Webcam hand tracking on a daemon thread.

    Index fingertip -> pointer, thumb/index pinch -> primary button held,
    open hand (debounced) -> cancel. Results go into a shared
    HandPointerState guarded by self.lock.
    """

    def __init__(self, state: HandPointerState):
        super().__init__(daemon=True)
        self.state = state
        self._stop_event = threading.Event()
        self.lock = threading.Lock()

        self.smoother = PointerSmoother(POINTER_SMOOTHING)
        self.open_db = Debounce(OPEN_HOLD_FRAMES, OPEN_COOLDOWN_SEC)

        self.show_camera = SHOW_CAMERA

    def stop(self):
        self._stop_event.set()

    def run(self):
        try:
            cap, cam_info = try_open_camera()
            with self.lock:
                self.state.cam_info = cam_info

            if cap is None:
                with self.lock:
                    self.state.label = "CAMERA_OPEN_FAILED"
                    self.state.hand_seen = False
                logger.warning("[HandPointer] CAMERA_OPEN_FAILED, falling back to the mouse")
                return

            logger.info("[HandPointer] opened %s", cam_info)

            mp_hands = mp.solutions.hands
            hands = mp_hands.Hands(
                static_image_mode=False,
                max_num_hands=1,
                model_complexity=1,
                min_detection_confidence=0.5,
                min_tracking_confidence=0.5,
            )
            drawer = mp.solutions.drawing_utils

            while not self._stop_event.is_set():
                ok, frame = cap.read()
                if not ok:
                    with self.lock:
                        self.state.label = "CAMERA_READ_FAILED"
                        self.state.hand_seen = False
                        self.state.pointer = None
                        self.state.pinch = False
                    time.sleep(0.01)
                    continue

                if MIRROR:
                    frame = cv2.flip(frame, 1)

                h, w = frame.shape[:2]
                result = hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))

                now = time.time()
                pointer = None
                pinch = False
                cancel = False
                label = "NO_HAND"

                if result.multi_hand_landmarks:
                    hand_landmarks = result.multi_hand_landmarks[0]
                    ext, pts = fingers_extended(hand_landmarks.landmark, w, h)
                    hand_size = estimate_hand_size(pts)

                    tip = pts[mp_hands.HandLandmark.INDEX_FINGER_TIP]
                    pointer = (float(tip[0]) / w * WIN_W, float(tip[1]) / h * WIN_H)

                    is_open = detect_open_hand(ext, pts, hand_size)
                    pinch = not is_open and detect_pinch(pts, hand_size)
                    cancel = self.open_db.update(is_open, now)

                    if is_open:
                        label = "OPEN_HAND -> CANCEL"
                    elif pinch:
                        label = "PINCH -> DRAW"
                    else:
                        label = "POINT"
                else:
                    self.open_db.update(False, now)

                smoothed = self.smoother.update(pointer)

                if self.show_camera:
                    if result.multi_hand_landmarks:
                        drawer.draw_landmarks(frame, hand_landmarks, mp_hands.HAND_CONNECTIONS)
                    cv2.putText(frame, cam_info, (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
                    cv2.putText(frame, label, (10, 52), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2)
                    cv2.imshow(CAMERA_WINDOW, frame)
                    if (cv2.waitKey(1) & 0xFF) in (ord('q'), ord('Q')):
                        cv2.destroyWindow(CAMERA_WINDOW)
                        self.show_camera = False

                with self.lock:
                    self.state.hand_seen = smoothed is not None
                    self.state.label = label
                    self.state.pointer = None if smoothed is None else (float(smoothed[0]), float(smoothed[1]))
                    self.state.pinch = pinch
                    self.state.cancel = self.state.cancel or cancel

            cap.release()
            hands.close()
            if self.show_camera:
                cv2.destroyAllWindows()

        except Exception:
            with self.lock:
                self.state.label = "WORKER_EXCEPTION"
                self.state.hand_seen = False
                self.state.pointer = None
                self.state.pinch = False
            logger.exception("[HandPointer] worker stopped")
