"""
Atmosphere Model
================
Ambient conditions at the launch site and along the flight path.

- Ground state: barometric pressure at the site altitude for the given
  ground temperature, with real-gas (Van der Waals) air density.
- In-flight state: temperature falls with the tropospheric lapse rate
  above the launch site; pressure follows the polytropic relation.

Speed of sound is held at a fixed reference value (343 m/s); Mach numbers
throughout the package use it.
"""

from dataclasses import dataclass
from typing import Callable, NamedTuple

import numpy as np

from .eos import GAS_CONSTANT, MOLAR_MASS_AIR, real_gas_density
from .validation import ValidationError


# ── Constants ─────────────────────────────────────────────────────────────
SEA_LEVEL_PRESSURE = 101325.0    # Pa
GRAVITY            = 9.80665     # m/s²
LAPSE_RATE         = 0.0065      # K/m  (troposphere, positive = cooling)
SPEED_OF_SOUND     = 343.0       # m/s  fixed reference
CELSIUS_OFFSET     = 273.15      # K

# Fallback state once the lapse would drive T ≤ 0
CLAMP_PRESSURE_FACTOR = 0.5
CLAMP_TEMPERATURE     = 273.15   # K


@dataclass(frozen=True)
class AmbientCondition:
    """Ground-level ambient state for one evaluation."""
    pressure_pa: float
    temperature_k: float
    air_density: float       # kg/m³

    @property
    def pressure_mpa(self) -> float:
        return self.pressure_pa / 1e6


class AtmosphereState(NamedTuple):
    """Pressure (Pa) and temperature (K) at some height above ground."""
    P: float
    T: float


def barometric_pressure(temperature_k: float, altitude_m: float) -> float:
    """Pressure (Pa) at altitude (m ASL): p0·exp(−g·M·h / (R·T))."""
    return SEA_LEVEL_PRESSURE * np.exp(
        -GRAVITY * MOLAR_MASS_AIR * altitude_m / (GAS_CONSTANT * temperature_k)
    )


def ground_state(temperature_c: float, altitude_m: float) -> AmbientCondition:
    """
    Ambient condition at the launch site.

    Parameters
    ----------
    temperature_c : float
        Ground temperature (°C)
    altitude_m : float
        Site altitude above sea level (m)

    Raises
    ------
    ValidationError
        If the temperature is at or below absolute zero
    """
    temperature_k = temperature_c + CELSIUS_OFFSET
    if not temperature_k > 0:
        raise ValidationError('temperature_c', temperature_c,
                              "must be above absolute zero")
    pressure = float(barometric_pressure(temperature_k, altitude_m))
    density = real_gas_density(pressure, temperature_k)
    return AmbientCondition(pressure_pa=pressure,
                            temperature_k=temperature_k,
                            air_density=density)


def state_at_height(y_above_ground: float, ground_temp_k: float,
                    ground_altitude_m: float) -> AtmosphereState:
    """
    Pressure and temperature at height y (m) above the launch site.

    T(y) = T_ground − L·y
    P(y) = P_ground·(T / T_ground)^(g·M / (R·L))
    """
    P_ground = float(barometric_pressure(ground_temp_k, ground_altitude_m))
    T = ground_temp_k - LAPSE_RATE * y_above_ground
    if T <= 0:
        return AtmosphereState(P_ground * CLAMP_PRESSURE_FACTOR, CLAMP_TEMPERATURE)

    exponent = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * LAPSE_RATE)
    P = P_ground * (T / ground_temp_k) ** exponent
    return AtmosphereState(P, T)


def density_at_height(y_above_ground: float, ground_temp_k: float,
                      ground_altitude_m: float) -> float:
    """Real-gas air density (kg/m³) at height y above the launch site."""
    state = state_at_height(y_above_ground, ground_temp_k, ground_altitude_m)
    return real_gas_density(state.P, state.T)


def density_profile(ground_temp_k: float,
                    ground_altitude_m: float) -> Callable[[float], float]:
    """Return rho(y) for the trajectory integrator."""
    def rho(y: float) -> float:
        return density_at_height(y, ground_temp_k, ground_altitude_m)
    return rho


def mach_number(velocity_magnitude: float) -> float:
    """Mach number against the fixed reference speed of sound."""
    return velocity_magnitude / SPEED_OF_SOUND


# ── Vectorized version for plotting ───────────────────────────────────────
def atmosphere_profile(heights: np.ndarray, ground_temp_k: float,
                       ground_altitude_m: float) -> dict:
    """
    Atmospheric state for an array of heights above the launch site.
    Returns dict with keys: 'height', 'temperature', 'pressure', 'density'.
    """
    states = [state_at_height(h, ground_temp_k, ground_altitude_m) for h in heights]
    P = np.array([s.P for s in states])
    T = np.array([s.T for s in states])
    rho = np.array([real_gas_density(s.P, s.T) for s in states])
    return {
        'height': np.asarray(heights),
        'temperature': T,
        'pressure': P,
        'density': rho,
    }
