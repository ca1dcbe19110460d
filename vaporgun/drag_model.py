"""
Aerodynamic Drag Model
======================
Mach-dependent drag coefficients (Cd) for airgun-style projectiles.

Two tabulated profiles:
- Pellet (GA): domed diabolo pellet, high drag with a strong transonic rise
- Slug (SLG0): reference airgun slug, subsonic/transonic points from
  wind-tunnel data, supersonic points extended

Lookup is piecewise-linear between table points. Outside the table the
end values are held (clamped); there is no extrapolation.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple

import numpy as np
from scipy.interpolate import interp1d


# ══════════════════════════════════════════════════════════════════════════
#  Cd vs Mach tables
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DragProfile:
    """Read-only Cd vs Mach table; Mach strictly increasing."""
    key: str
    name: str
    color: str
    linestyle: str
    mach: Tuple[float, ...]
    cd: Tuple[float, ...]

    def __post_init__(self):
        if len(self.mach) != len(self.cd) or len(self.mach) < 2:
            raise ValueError(f"{self.key}: mach and cd tables must match in length")
        if any(b <= a for a, b in zip(self.mach, self.mach[1:])):
            raise ValueError(f"{self.key}: mach table must be strictly increasing")


PELLET = DragProfile(
    key='pellet',
    name='Pellet (GA)',
    color='#e74c3c',
    linestyle='-',
    mach=(0, 0.2, 0.3, 0.5, 0.7, 0.9, 1, 1.2, 1.5, 2, 3),
    cd=(0.25, 0.21, 0.207, 0.189, 0.202, 0.488, 0.597, 0.649, 0.667, 0.602, 0.521),
)

SLUG = DragProfile(
    key='slug',
    name='Slug (SLG0)',
    color='#3498db',
    linestyle='--',
    mach=(0, 0.045, 0.089, 0.134, 0.179, 0.223, 0.268, 0.313, 0.357, 0.402,
          0.446, 0.491, 0.536, 0.58, 0.625, 0.67, 0.714, 0.759, 0.804, 0.848,
          0.893, 0.938, 0.982, 1.027, 1.15, 1.3, 1.5, 2, 2.5, 3, 4, 5),
    cd=(0.21, 0.205, 0.201, 0.198, 0.195, 0.194, 0.193, 0.194, 0.197, 0.2,
        0.204, 0.208, 0.212, 0.217, 0.222, 0.227, 0.234, 0.24, 0.246, 0.252,
        0.269, 0.323, 0.453, 0.614, 0.62, 0.61, 0.58, 0.54, 0.52, 0.51, 0.50, 0.495),
)

ALL_PROFILES = MappingProxyType({
    PELLET.key: PELLET,
    SLUG.key: SLUG,
})


# ══════════════════════════════════════════════════════════════════════════
#  Interpolation-based Cd lookup
# ══════════════════════════════════════════════════════════════════════════

class DragModel:
    """
    Drag coefficient model for one projectile type.

    Scalar and vectorized lookups share one scipy linear interpolator
    whose fill values hold the end Cd outside the table.
    """

    def __init__(self, profile_key: str = 'pellet'):
        """
        Parameters
        ----------
        profile_key : str
            One of 'pellet', 'slug'
        """
        if profile_key not in ALL_PROFILES:
            raise ValueError(
                f"Unknown ammo type '{profile_key}'. "
                f"Available: {list(ALL_PROFILES.keys())}"
            )

        self.profile = ALL_PROFILES[profile_key]
        self.key = profile_key
        self.name = self.profile.name
        self.color = self.profile.color
        self.linestyle = self.profile.linestyle

        self._interp = interp1d(
            np.array(self.profile.mach), np.array(self.profile.cd),
            kind='linear',
            bounds_error=False,
            fill_value=(self.profile.cd[0], self.profile.cd[-1]),
            assume_sorted=True,
        )

    def cd(self, mach: float) -> float:
        """Return drag coefficient at the given Mach number."""
        return float(self._interp(mach))

    def cd_array(self, mach_array: np.ndarray) -> np.ndarray:
        """Vectorized Cd lookup."""
        return self._interp(np.asarray(mach_array, dtype=float))

    def __repr__(self):
        return f"DragModel({self.key!r})"


def drag_force(velocity: np.ndarray, rho: float, cd: float,
               area: float) -> np.ndarray:
    """
    Drag force vector (N) along −v: −½ ρ Cd A |v| v.

    Parameters
    ----------
    velocity : np.ndarray
        Velocity relative to still air [vx, vy] (m/s)
    rho : float
        Air density (kg/m³)
    cd : float
        Drag coefficient
    area : float
        Frontal area (m²)
    """
    velocity = np.asarray(velocity, dtype=float)
    speed = np.hypot(*velocity)
    return -0.5 * rho * cd * area * speed * velocity
