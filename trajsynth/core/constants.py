"""Physical constants and solver thresholds."""

G_MPS2 = 9.8

# Orientation pairs closer than this are treated as identical; pairs within
# this of 180 degrees are treated as antipodal.
ANGLE_THRESHOLD_DEG = 0.1

MIN_SPEED_DELTA_MPS = 0.1

MIN_UPDATE_RATE_S = 0.01
MIN_OUTPUT_PRECISION = 5

MAX_BEARING_DEG = 360.0
MAX_PITCH_DEG = 90.0

# Combined-maneuver split-angle search.
SPLIT_ANGLE_START_DEG = 45.0
SPLIT_ANGLE_STEP_DEG = 45.0
SPLIT_ANGLE_NUDGE_DEG = 1e-3
SPLIT_ANGLE_TOLERANCE_DEG = 1e-3
SPLIT_ANGLE_MAX_ITERATIONS = 1000
