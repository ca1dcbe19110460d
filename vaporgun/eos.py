"""
Van der Waals Equation of State
===============================
Newton-Raphson solvers for the real-gas relation

    (P + a·n²/V²)(V/n − b) = R·T

used in two forms:

1. **Molar quantity** — moles of a species filling a chamber at a given
   partial pressure (combustion model).
2. **Molar density** — the rearranged form P = RTν/(1 − bν) − aν², giving
   real-gas air density (atmosphere model).

Both start from the ideal-gas estimate and fall back to halving the
estimate whenever a Newton step would leave the physical domain (n ≤ 0).
The solvers are best-effort: when the iteration cap is reached the last
estimate is returned as-is.

P, V, T and R are SI. The air terms are SI (a in Pa·m⁶/mol², b in m³/mol);
the O₂ and fuel vapour terms in VDW_CONSTANTS are effective values used
directly with SI P and V. VDW_CONSTANTS_SI holds the same species
converted to SI.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)


# ── Gas constants ─────────────────────────────────────────────────────────
GAS_CONSTANT    = 8.31432      # J/(mol·K)
MOLAR_MASS_AIR  = 0.0289644    # kg/mol
R_SPECIFIC_AIR  = 287.05       # J/(kg·K)

TOLERANCE          = 1e-6
MOLAR_MAX_ITER     = 50
DENSITY_MAX_ITER   = 20
MIN_INITIAL_MOLES  = 1e-10


@dataclass(frozen=True)
class VanDerWaalsConstants:
    """Species attraction (a) and covolume (b) terms."""
    name: str
    a: float
    b: float


# Effective constants for dry air and the reacting species
VDW_CONSTANTS = MappingProxyType({
    'air':           VanDerWaalsConstants('Air',           0.1358, 3.64e-5),
    'O2':            VanDerWaalsConstants('Oxygen',        1.382,  0.03186),
    'ethanol':       VanDerWaalsConstants('Ethanol',       12.18,  0.08407),
    'diethyl_ether': VanDerWaalsConstants('Diethyl ether', 17.61,  0.1344),
})

# Pa·m⁶/mol², m³/mol
VDW_CONSTANTS_SI = MappingProxyType({
    'air':           VDW_CONSTANTS['air'],
    'O2':            VanDerWaalsConstants('Oxygen',        0.1382, 3.186e-5),
    'ethanol':       VanDerWaalsConstants('Ethanol',       1.218,  8.407e-5),
    'diethyl_ether': VanDerWaalsConstants('Diethyl ether', 1.761,  1.344e-4),
})


@dataclass(frozen=True)
class EOSSolution:
    """Result of one Newton-Raphson solve."""
    value: float
    iterations: int
    converged: bool


def solve_van_der_waals_detailed(P: float, V: float, T: float,
                                 a: float, b: float,
                                 max_iter: int = MOLAR_MAX_ITER) -> EOSSolution:
    """
    Solve the Van der Waals equation for the molar quantity n (mol).

    Parameters
    ----------
    P : float
        Pressure (Pa)
    V : float
        Volume (m³)
    T : float
        Temperature (K)
    a, b : float
        Species constants
    max_iter : int
        Newton iteration cap

    Returns
    -------
    EOSSolution
        Last estimate of n, the iterations used and whether |f(n)| < 1e-6
        was reached.
    """
    RT = GAS_CONSTANT * T
    n = max(P * V / RT, MIN_INITIAL_MOLES)
    V2 = V * V

    for i in range(max_iter):
        n2 = n * n
        f = (P + a * n2 / V2) * (V / n - b) - RT
        if abs(f) < TOLERANCE:
            return EOSSolution(n, i, True)
        df = (2 * a * n / V2) * (V / n - b) + (P + a * n2 / V2) * (-V / n2)
        n_new = n - f / df
        if n_new <= 0:
            n = n / 2
        else:
            n = n_new

    logger.debug("Van der Waals molar solve hit %d iterations (P=%.1f Pa, "
                 "V=%.3e m³, T=%.2f K); returning n=%.6e",
                 max_iter, P, V, T, n)
    return EOSSolution(n, max_iter, False)


def solve_van_der_waals(P: float, V: float, T: float, a: float, b: float,
                        max_iter: int = MOLAR_MAX_ITER) -> float:
    """Moles (mol) satisfying the Van der Waals equation; best estimate."""
    return solve_van_der_waals_detailed(P, V, T, a, b, max_iter).value


def ideal_gas_density(pressure: float, temperature: float) -> float:
    """Air density (kg/m³) from the ideal gas law: ρ = P / (R_specific × T)."""
    return pressure / (R_SPECIFIC_AIR * temperature)


def real_gas_density(pressure: float, temperature: float,
                     a: float = VDW_CONSTANTS['air'].a,
                     b: float = VDW_CONSTANTS['air'].b,
                     molar_mass: float = MOLAR_MASS_AIR,
                     max_iter: int = DENSITY_MAX_ITER) -> float:
    """
    Real-gas density (kg/m³).

    Solves P = RTν/(1 − bν) − aν² for the molar density ν = n/V and
    returns ν·M. Falls back to the ideal-gas value once 1 − bν ≤ 0
    (past the close-packing limit).
    """
    RT = GAS_CONSTANT * temperature
    nu = pressure / RT

    for _ in range(max_iter):
        one_minus_bnu = 1 - b * nu
        if one_minus_bnu <= 0:
            return pressure * molar_mass / RT
        f = RT * nu / one_minus_bnu - a * nu * nu - pressure
        if abs(f) < TOLERANCE:
            break
        df = RT / (one_minus_bnu * one_minus_bnu) - 2 * a * nu
        nu_new = nu - f / df
        if nu_new <= 0:
            nu = nu * 0.5
        else:
            nu = nu_new
    else:
        logger.debug("Real-gas density solve hit %d iterations "
                     "(P=%.1f Pa, T=%.2f K)", max_iter, pressure, temperature)

    return nu * molar_mass
