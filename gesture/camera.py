# gesture/camera.py
import logging
from typing import Optional, Tuple

import cv2

from config import CAM_INDEX_CANDIDATES, CAP_BACKENDS, CAM_W, CAM_H

logger = logging.getLogger(__name__)


def try_open_camera() -> Tuple[Optional[cv2.VideoCapture], str]:
    """
    Try each camera index with each backend in turn; returns the capture and
    a short description, or (None, "CAMERA_OPEN_FAILED").
    """
    for idx in CAM_INDEX_CANDIDATES:
        for name in CAP_BACKENDS:
            backend = getattr(cv2, f"CAP_{name}", None)
            if name != "DEFAULT" and backend is None:
                continue  # backend not built into this OpenCV
            cap = cv2.VideoCapture(idx) if backend is None else cv2.VideoCapture(idx, backend)

            if cap.isOpened():
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, CAM_W)
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, CAM_H)
                return cap, f"CAM idx={idx}, backend={name}"

            logger.debug("[Camera] idx=%d backend=%s not available", idx, name)
            cap.release()

    return None, "CAMERA_OPEN_FAILED"
