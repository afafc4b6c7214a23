# gesture/types.py
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class HandPointerState:
    pointer: Optional[Tuple[float, float]] = None   # window pixels, None = no hand
    pinch: bool = False                               # primary button held
    cancel: bool = False                              # latched until the game consumes it
    label: str = "INIT"
    hand_seen: bool = False
    cam_info: str = ""
