"""Custom types used in orrery."""

import jax
import numpy as np
from jaxtyping import Float

# Device-side vectors (inside jitted kernels) and host-side body state
Vec3 = Float[jax.Array, "3"]
HostVec3 = Float[np.ndarray, "3"]
