# config.py
import math

LOG_LEVEL = "INFO"

# Window / render target
WIN_W, WIN_H = 960, 540
CANVAS_SCALE = 2.0            # window pixels per render-target pixel (scene renders at half res)
CANVAS_W, CANVAS_H = int(WIN_W / CANVAS_SCALE), int(WIN_H / CANVAS_SCALE)
FPS = 60

# Dispel
SEGMENT_INTERVAL = 0.05       # seconds between path samples
CLOSURE_DISTANCE = 30.0       # window pixels from path[0] that count as closed
MIN_POINTS = 10               # stops a single click from closing a loop
MIN_POINT_DISTANCE = 5.0      # window pixels; holding still adds nothing
GIZMO_DEPTH = 0.5             # world units in front of the camera for feedback lines

# Camera
FOV_Y_DEG = 45.0
NEAR, FAR = 0.1, 1000.0
PLAYER_HEIGHT = 1.7
GROUND_Y = 0.0
MOUSE_SENSITIVITY = 0.0025    # radians per pixel of relative motion
MAX_PITCH = math.pi / 2 - 0.01

# Targets
MAX_TARGETS = 5
SPAWN_MIN_SECS, SPAWN_MAX_SECS = 5.0, 10.0
SPAWN_MIN_DIST, SPAWN_MAX_DIST = 8.0, 18.0
SPAWN_HALF_ANGLE = math.pi / 4  # +-45 deg around the look direction
TARGET_DRIFT_SPEED = 0.6      # world units / second
TARGET_SIZE = 2.0

# Hand pointer (webcam). Off by default: the mouse is the pointer.
USE_HAND_POINTER = False

CAM_INDEX_CANDIDATES = [0, 1, 2]
# Resolved against cv2.CAP_<name> at runtime, "DEFAULT" = no explicit backend
CAP_BACKENDS = ["DSHOW", "MSMF", "DEFAULT"]
CAM_W, CAM_H = 640, 360
MIRROR = True
SHOW_CAMERA = False

PINCH_DIST_RATIO = 0.30
OPEN_THUMB_SEP_RATIO = 0.42
OPEN_HOLD_FRAMES = 9
OPEN_COOLDOWN_SEC = 0.9
POINTER_SMOOTHING = 0.6       # EMA weight of the previous pointer position
