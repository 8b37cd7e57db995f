"""Configuration constants for the scene core.

Every value can be overridden from the environment, which is how the
example scripts and test runs tune tolerances without code changes.
"""

import os

# Smallest ray parameter accepted as a triangle hit. Anything closer is
# treated as a self-intersection at the ray origin.
EPSILON = float(os.getenv("RAYCORE_EPSILON", "1e-7"))

# Loose tolerance for scalar comparisons of derived quantities.
FCOMPARE_TOLERANCE = float(os.getenv("RAYCORE_FCOMPARE_TOLERANCE", "1e-4"))

# Defaults for near-equality checks on vectors and scalars.
MAX_DELTA_MAG = 1e-6
MAX_COMP_DIFF = 1e-6
MAX_DOUBLE_DIFF = 1e-6

# Logging
LOG_LEVEL = os.getenv("RAYCORE_LOG_LEVEL", "WARNING")
LOG_FORMAT = os.getenv(
    "RAYCORE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Taichi backend used by scripts that initialise the runtime themselves.
TAICHI_ARCH = os.getenv("RAYCORE_TAICHI_ARCH", "cpu")
