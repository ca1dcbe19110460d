"""
Launcher Definition & Barrel Model
==================================
Converts the chamber energy of one charge into projectile motion.

Unit system inside the barrel model: pressures in MPa, areas in mm²,
so pressure × area gives force in N directly (1 MPa·mm² = 1 N).
Chamber pressure is energy over volume: kJ / L = MPa.

    P_chamber = E / V_chamber
    P_muzzle  = P_chamber / (V_total / V_chamber) − P_ambient
    F_avg     = ½ (F_initial + F_muzzle)
    F_net     = F_avg − μ·m·g
    a         = F_net / (m + m_air,barrel)
    v         = √(2·a·L)

A charge too weak to overcome friction gives a ≤ 0 and hence v = NaN or
0; this is reported, not raised (see LaunchResult.is_physical).
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from .atmosphere import AmbientCondition, GRAVITY, SPEED_OF_SOUND
from .combustion import Chemistry, FuelReactionResult, is_valid_reaction, react
from .validation import require_positive


FRICTION_COEFFICIENT = 0.5192971331


@dataclass(frozen=True)
class GunConfiguration:
    """
    Chamber and barrel geometry plus projectile mass.
    Values may be given as numbers or numeric strings.
    """
    chamber_volume_l: float = 2.0
    barrel_diameter_mm: float = 40.0
    barrel_length_mm: float = 1000.0
    projectile_mass_g: float = 50.0

    def __post_init__(self):
        for name in ('chamber_volume_l', 'barrel_diameter_mm',
                     'barrel_length_mm', 'projectile_mass_g'):
            object.__setattr__(self, name, require_positive(getattr(self, name), name))

    @property
    def bore_area_mm2(self) -> float:
        """Barrel cross-section (mm²)."""
        return np.pi * (self.barrel_diameter_mm / 2) ** 2

    @property
    def barrel_volume_l(self) -> float:
        """Swept barrel volume (L)."""
        return self.bore_area_mm2 * self.barrel_length_mm / 1e6

    @property
    def projectile_mass_kg(self) -> float:
        return self.projectile_mass_g / 1000

    @property
    def barrel_diameter_m(self) -> float:
        return self.barrel_diameter_mm / 1000

    @property
    def barrel_length_m(self) -> float:
        return self.barrel_length_mm / 1000


@dataclass(frozen=True)
class LaunchResult:
    """Interior ballistics of one shot."""
    reaction: FuelReactionResult
    atmospheric_pressure_pa: float
    chamber_pressure_mpa: float
    net_pressure_mpa: float
    muzzle_pressure_mpa: float
    initial_force_n: float
    muzzle_force_n: float
    average_force_n: float
    friction_force_n: float
    net_force_n: float
    acceleration_ms2: float
    muzzle_velocity: float        # m/s
    mach: float
    kinetic_energy_j: float
    time_in_barrel_ms: float
    efficiency_percent: float

    @property
    def combustion_energy_kj(self) -> float:
        return self.reaction.combustion_energy_kj

    @property
    def is_physical(self) -> bool:
        """True for a valid charge and a finite, positive muzzle velocity."""
        v = self.muzzle_velocity
        return bool(is_valid_reaction(self.reaction) and np.isfinite(v) and v > 0)

    def summary(self) -> str:
        """Human-readable summary string."""
        fuel = (f"{self.reaction.fuel_volume_ml:.2f} mL"
                if self.reaction.fuel_volume_ml is not None else "—")
        lines = [
            f"  Fuel              : {self.reaction.fuel_label}",
            f"  Fuel amount       : {fuel}",
            f"  Combustion energy : {self.combustion_energy_kj:>10.3f} kJ",
            f"  Chamber pressure  : {self.chamber_pressure_mpa:>10.3f} MPa",
            f"  Net force         : {self.net_force_n:>10.2f} N",
            f"  Muzzle velocity   : {self.muzzle_velocity:>10.2f} m/s  (Mach {self.mach:.2f})",
            f"  Kinetic energy    : {self.kinetic_energy_j:>10.2f} J",
            f"  Time in barrel    : {self.time_in_barrel_ms:>10.2f} ms",
            f"  Efficiency        : {self.efficiency_percent:>10.2f} %",
        ]
        if not self.is_physical:
            lines.append("  !! Non-physical configuration: charge cannot move the projectile")
        return '\n'.join(lines)


def compute_launch(ambient: AmbientCondition, gun: GunConfiguration,
                   reaction: FuelReactionResult) -> LaunchResult:
    """
    Barrel model for a given combustion result.

    Parameters
    ----------
    ambient : AmbientCondition
        Ground state (pressure and air density)
    gun : GunConfiguration
        Chamber/barrel geometry and projectile mass
    reaction : FuelReactionResult
        Energy released by the charge

    Returns
    -------
    LaunchResult
        May carry NaN/zero velocity for non-physical configurations.
    """
    energy_kj = reaction.combustion_energy_kj
    p_amb = ambient.pressure_pa / 1e6

    chamber_pressure = energy_kj / gun.chamber_volume_l
    net_pressure = chamber_pressure - p_amb

    area = gun.bore_area_mm2
    barrel_volume = gun.barrel_volume_l
    total_volume = gun.chamber_volume_l + barrel_volume
    muzzle_pressure = chamber_pressure / (total_volume / gun.chamber_volume_l) - p_amb
    air_mass_kg = ambient.air_density * barrel_volume / 1000

    initial_force = area * net_pressure
    muzzle_force = area * muzzle_pressure
    average_force = (initial_force + muzzle_force) / 2
    friction_force = gun.projectile_mass_kg * GRAVITY * FRICTION_COEFFICIENT
    net_force = average_force - friction_force

    mass = gun.projectile_mass_kg
    acceleration = net_force / (mass + air_mass_kg)

    with np.errstate(invalid='ignore', divide='ignore'):
        velocity = float(np.sqrt(np.float64(2 * acceleration * gun.barrel_length_m)))
        time_in_barrel = float(np.float64(velocity) / np.float64(acceleration))
        kinetic_energy = 0.5 * mass * velocity * velocity
        efficiency = float(np.float64(kinetic_energy) / np.float64(energy_kj * 1000)) * 100

    return LaunchResult(
        reaction=reaction,
        atmospheric_pressure_pa=ambient.pressure_pa,
        chamber_pressure_mpa=chamber_pressure,
        net_pressure_mpa=net_pressure,
        muzzle_pressure_mpa=muzzle_pressure,
        initial_force_n=initial_force,
        muzzle_force_n=muzzle_force,
        average_force_n=average_force,
        friction_force_n=friction_force,
        net_force_n=net_force,
        acceleration_ms2=acceleration,
        muzzle_velocity=velocity,
        mach=velocity / SPEED_OF_SOUND,
        kinetic_energy_j=kinetic_energy,
        time_in_barrel_ms=time_in_barrel * 1000,
        efficiency_percent=efficiency,
    )


def fire(fuel: str, ambient: AmbientCondition, gun: GunConfiguration,
         chemistry: Union[str, Chemistry] = 'default') -> LaunchResult:
    """Combustion followed by the barrel model."""
    reaction = react(fuel, ambient, gun.chamber_volume_l, chemistry)
    return compute_launch(ambient, gun, reaction)
