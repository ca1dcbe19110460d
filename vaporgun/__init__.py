"""
Vapor Gun Ballistics Simulator
==============================
Interior and exterior ballistics of a combustion ("flammable vapor")
launcher:
  - Van der Waals real-gas solver for chamber charges and air density
  - Barometric / lapse-rate atmosphere above the launch site
  - Ethanol, diethyl ether and HHO combustion energy
  - Barrel model: chamber energy -> muzzle velocity
  - Mach-dependent drag for pellets and slugs
  - Fixed-step trajectory integration with energy decile markers

Every function is a pure evaluation of its inputs; results are frozen
dataclasses.
"""

from .eos import (
    solve_van_der_waals, solve_van_der_waals_detailed,
    real_gas_density, ideal_gas_density, EOSSolution, VDW_CONSTANTS,
    VDW_CONSTANTS_SI,
)
from .atmosphere import (
    AmbientCondition, AtmosphereState, ground_state, state_at_height,
    density_at_height, density_profile, SPEED_OF_SOUND,
)
from .combustion import (
    FuelReactionResult, react, FUELS, Chemistry, CHEMISTRIES,
    DEFAULT_CHEMISTRY, BALANCED_CHEMISTRY,
)
from .launcher import GunConfiguration, LaunchResult, compute_launch, fire
from .drag_model import DragModel, DragProfile, ALL_PROFILES, PELLET, SLUG
from .integrator import TrajectorySample, TrajectoryResult, simulate_euler
from .markers import EnergyMarker, energy_markers
from .validation import ValidationError
from .calculator import (
    LauncherInputs, ShotResult, calculate, simulate_shot, compare_fuels,
)
from .sweep import sweep, normalized_sweep

__version__ = "1.0.0"
__all__ = [
    'solve_van_der_waals', 'solve_van_der_waals_detailed',
    'real_gas_density', 'ideal_gas_density', 'EOSSolution', 'VDW_CONSTANTS',
    'VDW_CONSTANTS_SI',
    'AmbientCondition', 'AtmosphereState', 'ground_state', 'state_at_height',
    'density_at_height', 'density_profile', 'SPEED_OF_SOUND',
    'FuelReactionResult', 'react', 'FUELS', 'Chemistry', 'CHEMISTRIES',
    'DEFAULT_CHEMISTRY', 'BALANCED_CHEMISTRY',
    'GunConfiguration', 'LaunchResult', 'compute_launch', 'fire',
    'DragModel', 'DragProfile', 'ALL_PROFILES', 'PELLET', 'SLUG',
    'TrajectorySample', 'TrajectoryResult', 'simulate_euler',
    'EnergyMarker', 'energy_markers',
    'ValidationError',
    'LauncherInputs', 'ShotResult', 'calculate', 'simulate_shot', 'compare_fuels',
    'sweep', 'normalized_sweep',
]
