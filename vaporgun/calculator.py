"""
Calculator Facade
=================
Entry points taking raw form-style inputs (numbers or numeric strings):

- calculate     — one interior-ballistics evaluation for a fuel
- simulate_shot — launch + exterior ballistics + energy markers
- compare_fuels — simulate_shot for every fuel with the same gun

All inputs are validated up front; a ValidationError means nothing was
computed.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .atmosphere import AmbientCondition, density_profile, ground_state
from .combustion import FUELS, Chemistry
from .integrator import TrajectoryResult, simulate_euler
from .launcher import GunConfiguration, LaunchResult, fire
from .markers import EnergyMarker, energy_markers
from .validation import clamp_angle, clamp_launch_height, parse_number


@dataclass(frozen=True)
class LauncherInputs:
    """Raw calculator inputs with the default form values."""
    temperature_c: float = 25.0
    altitude_m: float = 0.0
    chamber_volume_l: float = 2.0
    barrel_diameter_mm: float = 40.0
    barrel_length_mm: float = 1000.0
    projectile_mass_g: float = 50.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'temperature_c': self.temperature_c,
            'altitude_m': self.altitude_m,
            'chamber_volume_l': self.chamber_volume_l,
            'barrel_diameter_mm': self.barrel_diameter_mm,
            'barrel_length_mm': self.barrel_length_mm,
            'projectile_mass_g': self.projectile_mass_g,
        }


INPUT_KEYS = tuple(LauncherInputs().as_dict())


@dataclass(frozen=True)
class ShotResult:
    """Launch plus flight path; trajectory is None for non-physical launches."""
    launch: LaunchResult
    trajectory: Optional[TrajectoryResult] = None
    markers: List[EnergyMarker] = field(default_factory=list)

    @property
    def range_total(self) -> float:
        return self.trajectory.range_total if self.trajectory is not None else 0.0


def _prepare(temperature_c, altitude_m, chamber_volume_l, barrel_diameter_mm,
             barrel_length_mm, projectile_mass_g):
    ambient = ground_state(parse_number(temperature_c, 'temperature_c'),
                           parse_number(altitude_m, 'altitude_m'))
    gun = GunConfiguration(chamber_volume_l, barrel_diameter_mm,
                           barrel_length_mm, projectile_mass_g)
    return ambient, gun


def calculate(fuel: str, temperature_c=25.0, altitude_m=0.0,
              chamber_volume_l=2.0, barrel_diameter_mm=40.0,
              barrel_length_mm=1000.0, projectile_mass_g=50.0,
              chemistry: Union[str, Chemistry] = 'default') -> LaunchResult:
    """Interior ballistics for one fuel and gun configuration."""
    ambient, gun = _prepare(temperature_c, altitude_m, chamber_volume_l,
                            barrel_diameter_mm, barrel_length_mm,
                            projectile_mass_g)
    return fire(fuel, ambient, gun, chemistry)


def fly(launch: LaunchResult, ambient: AmbientCondition, gun: GunConfiguration,
        altitude_m: float, ammo: str = 'pellet', angle_deg=0.0,
        launch_height_m=1.5) -> ShotResult:
    """Exterior ballistics for an already computed launch."""
    if not launch.is_physical:
        return ShotResult(launch=launch)

    rho = density_profile(ambient.temperature_k, altitude_m)
    trajectory = simulate_euler(
        launch.muzzle_velocity,
        clamp_angle(angle_deg),
        gun.projectile_mass_kg,
        gun.barrel_diameter_m,
        rho,
        ammo=ammo,
        launch_height=clamp_launch_height(launch_height_m),
    )
    return ShotResult(launch=launch, trajectory=trajectory,
                      markers=energy_markers(trajectory))


def simulate_shot(fuel: str, inputs: LauncherInputs = LauncherInputs(),
                  ammo: str = 'pellet', angle_deg=0.0,
                  launch_height_m=1.5,
                  chemistry: Union[str, Chemistry] = 'default') -> ShotResult:
    """
    Fire and fly one shot.

    Air density along the path is the real-gas density at each height
    above the launch site.
    """
    ambient, gun = _prepare(**inputs.as_dict())
    launch = fire(fuel, ambient, gun, chemistry)
    return fly(launch, ambient, gun, parse_number(inputs.altitude_m, 'altitude_m'),
               ammo=ammo, angle_deg=angle_deg, launch_height_m=launch_height_m)


def compare_fuels(inputs: LauncherInputs = LauncherInputs(), ammo: str = 'pellet',
                  angle_deg=0.0, launch_height_m=1.5,
                  chemistry: Union[str, Chemistry] = 'default'
                  ) -> Dict[str, ShotResult]:
    """One shot per fuel, same gun and conditions."""
    ambient, gun = _prepare(**inputs.as_dict())
    altitude = parse_number(inputs.altitude_m, 'altitude_m')
    return {
        fuel: fly(fire(fuel, ambient, gun, chemistry), ambient, gun, altitude,
                  ammo=ammo, angle_deg=angle_deg, launch_height_m=launch_height_m)
        for fuel in FUELS
    }
