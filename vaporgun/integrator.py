"""
Numerical Integration Engine
=============================
Fixed-step Euler integration of the 2D flight path under gravity and
Mach-dependent quadratic drag:

    dv/dt = −g ŷ − (½ ρ(y) Cd(M) A |v|² / m) v̂
    dx/dt = v

Each step updates the velocity first and then advances the position with
the updated velocity. Flat ground at y = 0; x is downrange, y is height
above the launch site's ground.

Termination:
  - impact  — y drops below 0
  - stall   — |v| < 0.1 m/s
  - timeout — t reaches max_time (60 s by default)

Output: TrajectoryResult with one TrajectorySample per step.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Union

import numpy as np

from .atmosphere import GRAVITY, mach_number
from .drag_model import DragModel, drag_force


DEFAULT_DT = 0.001            # s
DEFAULT_MAX_TIME = 60.0       # s
STALL_SPEED = 0.1             # m/s

Density = Union[float, Callable[[float], float]]


@dataclass(frozen=True)
class TrajectorySample:
    """Projectile state after one integration step."""
    x: float
    y: float
    speed: float
    kinetic_energy: float
    t: float


@dataclass(frozen=True)
class TrajectoryResult:
    """Complete trajectory output."""
    samples: tuple
    drag_model: DragModel
    muzzle_velocity: float
    angle_deg: float
    launch_height: float
    mass_kg: float
    dt: float
    termination: str          # 'impact', 'stall' or 'timeout'

    def __len__(self):
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index):
        return self.samples[index]

    # Arrays, each of shape (N,)
    @property
    def time(self) -> np.ndarray:
        return np.array([s.t for s in self.samples])

    @property
    def x(self) -> np.ndarray:
        return np.array([s.x for s in self.samples])

    @property
    def y(self) -> np.ndarray:
        return np.array([s.y for s in self.samples])

    @property
    def speed(self) -> np.ndarray:
        return np.array([s.speed for s in self.samples])

    @property
    def kinetic_energy(self) -> np.ndarray:
        return np.array([s.kinetic_energy for s in self.samples])

    @property
    def initial_energy(self) -> float:
        return self.samples[0].kinetic_energy

    @property
    def range_total(self) -> float:
        """Horizontal distance at the last sample (m)."""
        return self.samples[-1].x

    @property
    def max_height(self) -> float:
        """Highest point above ground (m)."""
        return max(s.y for s in self.samples)

    @property
    def flight_time(self) -> float:
        """Total flight time (s)."""
        return self.samples[-1].t

    @property
    def impact_velocity(self) -> float:
        """Speed at the last sample (m/s)."""
        return self.samples[-1].speed

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent over the last step (degrees below horizontal)."""
        if len(self.samples) < 2:
            return 0.0
        a, b = self.samples[-2], self.samples[-1]
        return float(np.degrees(np.arctan2(a.y - b.y, b.x - a.x)))

    def summary(self) -> str:
        """Human-readable summary string."""
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.drag_model.name:<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vel   : {self.muzzle_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {self.angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Launch height: {self.launch_height:>10.2f} m{'':<24s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range_total:>10.1f} m{'':<24s} ║",
            f"║  Max height   : {self.max_height:>10.1f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.2f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Ended by     : {self.termination:<36s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def _density_function(density: Density) -> Callable[[float], float]:
    if callable(density):
        return density
    rho = float(density)
    return lambda y: rho


def simulate_euler(muzzle_velocity: float, angle_deg: float, mass_kg: float,
                   diameter_m: float, density: Density,
                   ammo: Union[str, DragModel] = 'pellet',
                   launch_height: float = 0.0,
                   dt: float = DEFAULT_DT,
                   max_time: float = DEFAULT_MAX_TIME) -> TrajectoryResult:
    """
    Integrate the flight path until impact, stall or timeout.

    Parameters
    ----------
    muzzle_velocity : float
        Launch speed (m/s)
    angle_deg : float
        Elevation above horizontal (degrees)
    mass_kg, diameter_m : float
        Projectile mass and caliber
    density : float or callable
        Constant air density (kg/m³) or rho(y) for height y above ground
    ammo : str or DragModel
        Drag profile ('pellet' or 'slug')
    launch_height : float
        Muzzle height above ground (m)
    """
    drag_model = ammo if isinstance(ammo, DragModel) else DragModel(ammo)
    rho_at = _density_function(density)

    angle = math.radians(angle_deg)
    vx = muzzle_velocity * math.cos(angle)
    vy = muzzle_velocity * math.sin(angle)
    x = 0.0
    y = float(launch_height)
    t = 0.0
    area = math.pi * (diameter_m / 2) ** 2
    half_m = 0.5 * mass_kg

    samples: List[TrajectorySample] = [
        TrajectorySample(0.0, y, muzzle_velocity,
                         half_m * muzzle_velocity * muzzle_velocity, 0.0)
    ]
    termination = 'impact'

    while True:
        if y < 0:
            termination = 'impact'
            break
        if t >= max_time:
            termination = 'timeout'
            break
        v = math.sqrt(vx * vx + vy * vy)
        if v < STALL_SPEED:
            termination = 'stall'
            break

        cd = drag_model.cd(mach_number(v))
        fx, fy = drag_force(np.array([vx, vy]), rho_at(y), cd, area)
        ax = float(fx) / mass_kg
        ay = float(fy) / mass_kg - GRAVITY

        vx += ax * dt
        vy += ay * dt
        x += vx * dt
        y += vy * dt
        t += dt

        v_new = math.sqrt(vx * vx + vy * vy)
        samples.append(TrajectorySample(x, y, v_new, half_m * v_new * v_new, t))

    return TrajectoryResult(
        samples=tuple(samples),
        drag_model=drag_model,
        muzzle_velocity=muzzle_velocity,
        angle_deg=angle_deg,
        launch_height=float(launch_height),
        mass_kg=mass_kg,
        dt=dt,
        termination=termination,
    )
