"""Shared constants and paths for Bitruvius."""

from pathlib import Path

# Package paths
PACKAGE_ROOT = Path(__file__).parent
CONFIG_DIR = PACKAGE_ROOT / "config"

# 1 head unit in pixels (scaling factor for every segment)
HEAD_UNIT = 40.0

# Segment lengths
HEAD = 1.0 * HEAD_UNIT
NECK = 0.5 * HEAD_UNIT
TORSO = 2.6 * HEAD_UNIT
PELVIS = 2.0 * HEAD_UNIT
UPPER_ARM = 2.0 * HEAD_UNIT
LOWER_ARM = 2.0 * HEAD_UNIT
HAND = 0.8 * HEAD_UNIT
LEG_UPPER = 2.5 * HEAD_UNIT
LEG_LOWER = 2.5 * HEAD_UNIT
FOOT = 0.6 * HEAD_UNIT
TOES = 0.4 * HEAD_UNIT

# Widths that position child attachments
SHOULDER_WIDTH = 2.0 * HEAD_UNIT
HIP_WIDTH = 1.8 * HEAD_UNIT

# Rigging offsets (socket placement of arms and neck)
SHOULDER_INSET = 5.0
SHOULDER_LIFT = -12.0
CLAVICLE_EXTENSION = 0.5 * HEAD_UNIT
NECK_SINK = -15.0

# Lateral attachment of the arm/leg chains in their parent's child frame
SHOULDER_OFFSET_X = SHOULDER_WIDTH / 2 - SHOULDER_INSET + CLAVICLE_EXTENSION  # 55
HIP_OFFSET_X = HIP_WIDTH / 4  # 18

# Floor line (root to sole with straight legs)
FLOOR_Y = PELVIS + LEG_UPPER + LEG_LOWER

# Sequence / recording defaults
MAX_FRAMES = 60
RECORDING_THRESHOLD = 22.5  # degrees (root displacement compared in px)
DEFAULT_FPS = 6
MIN_FPS = 1
MAX_FPS = 60

# Overlay auto-hide delay after the displayed pose stops changing
ACTIVITY_TIMEOUT_MS = 2000.0

# Host refresh interval for the Qt playback timer (~60 fps)
TIMER_INTERVAL_MS = 16

# Reach is clamped to L1 + L2 - IK_REACH_EPSILON to keep the triangle solvable
IK_REACH_EPSILON = 1e-6
# Below this root-to-target distance the IK keeps the current angles
IK_MIN_DISTANCE = 1e-9
