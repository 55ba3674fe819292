"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Cosine similarity required to accept a match (chosen empirically).
DEFAULT_MATCH_THRESHOLD = 0.2

# Coordinates per landmark point in a flattened sample: [x0, y0, x1, y1, ...].
DEFAULT_LANDMARK_POINT_DIM = 2

# Below this the landmark cloud is treated as collapsed to a single point.
DEGENERATE_EPSILON = 1e-12

DEFAULT_SESSION_UPDATE_ATTEMPTS = 5
DEFAULT_SESSION_LOCK_TIMEOUT_SECONDS = 2.0
DEFAULT_TEMPLATE_CACHE_SECONDS = 30.0

DEFAULT_SESSION_HISTORY_LIMIT = 20
MAX_SESSION_HISTORY_LIMIT = 200
