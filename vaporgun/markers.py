"""
Energy Decile Markers
=====================
First points along a trajectory where kinetic energy has fallen to
90 %, 80 %, ..., 10 % of its launch value.

Deciles the flight never reaches (it ended too early) are omitted, so a
marker list may hold fewer than nine entries.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .integrator import TrajectorySample

DECILES = (90, 80, 70, 60, 50, 40, 30, 20, 10)


@dataclass(frozen=True)
class EnergyMarker:
    """Trajectory point where energy first drops to `percent` of E0."""
    percent: int
    x: float
    y: float
    speed: float
    kinetic_energy: float
    t: float


def energy_markers(samples: Sequence[TrajectorySample],
                   initial_energy: Optional[float] = None) -> List[EnergyMarker]:
    """
    Decile markers in descending percent order.

    Parameters
    ----------
    samples : sequence of TrajectorySample
        Chronologically ordered trajectory (a TrajectoryResult works too)
    initial_energy : float, optional
        Reference energy E0; defaults to the first sample's energy
    """
    if not len(samples):
        return []
    e0 = samples[0].kinetic_energy if initial_energy is None else initial_energy

    markers = []
    for percent in DECILES:
        threshold = percent * e0 / 100
        # the launch sample itself never counts as a crossing
        for s in samples[1:]:
            if s.kinetic_energy <= threshold:
                markers.append(EnergyMarker(percent, s.x, s.y, s.speed,
                                            s.kinetic_energy, s.t))
                break
    return markers
