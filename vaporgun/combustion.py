"""
Combustion Model
================
Energy released by one chamber charge for each supported fuel.

Liquid fuels (ethanol, diethyl ether):
  - O₂ partial pressure = atmospheric O₂ fraction × ambient pressure
  - fuel vapour partial pressure = midpoint of the flammability limits
  - moles of O₂ and fuel vapour from the Van der Waals solver
  - liquid volume from a DIPPR-105 density correlation at ambient T
  - oxidizer-limited burn: fuel used = n_O₂ / (O₂ per fuel molecule)

HHO (oxyhydrogen, 2:1 H₂:O₂):
  - the chamber holds only reactive gas, O₂ takes a third of the pressure
  - no liquid fuel, so fuel mass and volume are reported as None

Released energy (kJ) = Σ |ΔH_f| × n over products − |ΔH_f| × n over fuel.

Two chemistry tables are available:
  - 'default'  — effective Van der Waals terms, 6 mol O₂ per mol of either
                 liquid fuel and one molar mass (0.04607 kg/mol) for both
  - 'balanced' — SI Van der Waals terms, balanced-equation O₂ demand and
                 each fuel's own molar mass
"""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping, Optional, Union

import numpy as np

from .atmosphere import AmbientCondition
from .eos import (
    VDW_CONSTANTS, VDW_CONSTANTS_SI, VanDerWaalsConstants, solve_van_der_waals,
)
from .validation import require_positive


O2_MOLE_FRACTION = 0.2095        # ≈ 21 % of dry air

# Standard enthalpies of formation (kJ/mol)
DH_FORMATION = MappingProxyType({
    'CO2': -393.5,
    'H2O': -241.8,      # gas
    'H2': 0.0,
    'ethanol': -234.8,
    'diethyl_ether': -252.7,
})


@dataclass(frozen=True)
class DipprCoefficients:
    """DIPPR-105 liquid density: ρ = A / B^(1 + (1 − T/C)^D)  (kg/m³)."""
    A: float
    B: float
    C: float     # critical temperature (K)
    D: float

    def density(self, temperature_k: float) -> float:
        """Liquid density (kg/m³); NaN at or above the critical temperature."""
        tau = 1 - temperature_k / self.C
        if tau <= 0:
            return float('nan')
        return self.A / self.B ** (1 + tau ** self.D)


@dataclass(frozen=True)
class LiquidFuel:
    """Stoichiometry and property data for a vaporised liquid fuel."""
    key: str
    label: str
    vdw: VanDerWaalsConstants
    lel_pct: float            # lower explosive limit (vol %)
    uel_pct: float            # upper explosive limit (vol %)
    molar_mass: float         # kg/mol
    dippr: DipprCoefficients
    o2_per_fuel: float        # mol O₂ per mol fuel
    co2_per_fuel: float
    h2o_per_fuel: float

    @property
    def vapor_fraction(self) -> float:
        return (self.lel_pct + self.uel_pct) / 2 / 100


# C₂H₅OH → 2 CO₂ + 3 H₂O
ETHANOL = LiquidFuel(
    key='ethanol',
    label='Ethanol (mL)',
    vdw=VDW_CONSTANTS['ethanol'],
    lel_pct=3.3, uel_pct=19.0,
    molar_mass=0.04607,
    dippr=DipprCoefficients(A=99.3974, B=0.310729, C=513.18, D=0.305143),
    o2_per_fuel=6, co2_per_fuel=2, h2o_per_fuel=3,
)

# (C₂H₅)₂O → 4 CO₂ + 5 H₂O
DIETHYL_ETHER = LiquidFuel(
    key='diethyl_ether',
    label='Diethyl ether (mL)',
    vdw=VDW_CONSTANTS['diethyl_ether'],
    lel_pct=1.9, uel_pct=36.0,
    molar_mass=0.04607,
    dippr=DipprCoefficients(A=70.6361, B=0.26782, C=466.578, D=0.28243),
    o2_per_fuel=6, co2_per_fuel=4, h2o_per_fuel=5,
)

# C₂H₅OH + 3 O₂ → 2 CO₂ + 3 H₂O
ETHANOL_BALANCED = replace(ETHANOL, vdw=VDW_CONSTANTS_SI['ethanol'],
                           o2_per_fuel=3)

# (C₂H₅)₂O + 6 O₂ → 4 CO₂ + 5 H₂O
DIETHYL_ETHER_BALANCED = replace(DIETHYL_ETHER,
                                 vdw=VDW_CONSTANTS_SI['diethyl_ether'],
                                 molar_mass=0.07412)

HHO_KEY = 'HHO'
HHO_LABEL = 'HHO (2:1)'

LIQUID_FUELS = MappingProxyType({
    ETHANOL.key: ETHANOL,
    DIETHYL_ETHER.key: DIETHYL_ETHER,
})

FUELS = (ETHANOL.key, DIETHYL_ETHER.key, HHO_KEY)


@dataclass(frozen=True)
class Chemistry:
    """Oxygen constants and liquid fuel records for one set of reactions."""
    key: str
    oxygen: VanDerWaalsConstants
    liquid_fuels: Mapping[str, LiquidFuel]


DEFAULT_CHEMISTRY = Chemistry(
    key='default',
    oxygen=VDW_CONSTANTS['O2'],
    liquid_fuels=LIQUID_FUELS,
)

BALANCED_CHEMISTRY = Chemistry(
    key='balanced',
    oxygen=VDW_CONSTANTS_SI['O2'],
    liquid_fuels=MappingProxyType({
        ETHANOL_BALANCED.key: ETHANOL_BALANCED,
        DIETHYL_ETHER_BALANCED.key: DIETHYL_ETHER_BALANCED,
    }),
)

CHEMISTRIES = MappingProxyType({
    DEFAULT_CHEMISTRY.key: DEFAULT_CHEMISTRY,
    BALANCED_CHEMISTRY.key: BALANCED_CHEMISTRY,
})


def get_chemistry(chemistry: Union[str, Chemistry]) -> Chemistry:
    """Chemistry table by key; Chemistry instances pass through."""
    if isinstance(chemistry, Chemistry):
        return chemistry
    if chemistry not in CHEMISTRIES:
        raise ValueError(
            f"Unknown chemistry '{chemistry}'. Available: {list(CHEMISTRIES)}"
        )
    return CHEMISTRIES[chemistry]


@dataclass(frozen=True)
class FuelReactionResult:
    """Energy and fuel consumption of one chamber charge."""
    combustion_energy_kj: float
    fuel_mass_g: Optional[float]
    fuel_volume_ml: Optional[float]
    fuel_label: str

    @property
    def has_liquid_fuel(self) -> bool:
        return self.fuel_volume_ml is not None


def _check_inputs(ambient: AmbientCondition, chamber_volume_l: float) -> float:
    require_positive(ambient.pressure_pa, 'ambient.pressure_pa')
    require_positive(ambient.temperature_k, 'ambient.temperature_k')
    return require_positive(chamber_volume_l, 'chamber_volume_l')


def _oxygen_moles(partial_pressure: float, volume_m3: float,
                  temperature_k: float, oxygen: VanDerWaalsConstants) -> float:
    return solve_van_der_waals(partial_pressure, volume_m3, temperature_k,
                               oxygen.a, oxygen.b)


def burn_liquid_fuel(fuel: LiquidFuel, ambient: AmbientCondition,
                     chamber_volume_l: float,
                     oxygen: VanDerWaalsConstants = VDW_CONSTANTS['O2']
                     ) -> FuelReactionResult:
    """Oxidizer-limited combustion of a vapour/air charge."""
    volume_m3 = _check_inputs(ambient, chamber_volume_l) / 1000
    T = ambient.temperature_k

    n_o2 = _oxygen_moles(ambient.pressure_pa * O2_MOLE_FRACTION, volume_m3, T,
                         oxygen)
    n_fuel = solve_van_der_waals(ambient.pressure_pa * fuel.vapor_fraction,
                                 volume_m3, T, fuel.vdw.a, fuel.vdw.b)

    fuel_mass_kg = n_fuel * fuel.molar_mass
    liquid_density = fuel.dippr.density(T) / 1000        # kg/L
    fuel_volume_l = fuel_mass_kg / liquid_density

    fuel_used = n_o2 / fuel.o2_per_fuel
    co2 = fuel_used * fuel.co2_per_fuel
    h2o = fuel_used * fuel.h2o_per_fuel

    energy = (abs(DH_FORMATION['CO2']) * co2
              + abs(DH_FORMATION['H2O']) * h2o
              - abs(DH_FORMATION[fuel.key]) * fuel_used)

    return FuelReactionResult(
        combustion_energy_kj=energy,
        fuel_mass_g=fuel_mass_kg * 1000,
        fuel_volume_ml=fuel_volume_l * 1000,
        fuel_label=fuel.label,
    )


def burn_hho(ambient: AmbientCondition, chamber_volume_l: float,
             oxygen: VanDerWaalsConstants = VDW_CONSTANTS['O2']
             ) -> FuelReactionResult:
    """2 H₂ + O₂ → 2 H₂O with the chamber filled by electrolysis gas."""
    volume_m3 = _check_inputs(ambient, chamber_volume_l) / 1000

    n_o2 = _oxygen_moles(ambient.pressure_pa / 3, volume_m3,
                         ambient.temperature_k, oxygen)
    h2_used = 2 * n_o2
    h2o = h2_used

    energy = (abs(DH_FORMATION['H2O']) * h2o
              - abs(DH_FORMATION['H2']) * h2_used)

    return FuelReactionResult(
        combustion_energy_kj=energy,
        fuel_mass_g=None,
        fuel_volume_ml=None,
        fuel_label=HHO_LABEL,
    )


def react(fuel: str, ambient: AmbientCondition, chamber_volume_l: float,
          chemistry: Union[str, Chemistry] = 'default') -> FuelReactionResult:
    """
    Combustion result for one fuel.

    Parameters
    ----------
    fuel : str
        One of 'ethanol', 'diethyl_ether', 'HHO'
    ambient : AmbientCondition
        Ground state; the chamber is charged at ambient P and T
    chamber_volume_l : float
        Combustion chamber volume (L)
    chemistry : str or Chemistry
        'default' or 'balanced'
    """
    table = get_chemistry(chemistry)
    if fuel == HHO_KEY:
        return burn_hho(ambient, chamber_volume_l, table.oxygen)
    if fuel not in table.liquid_fuels:
        raise ValueError(f"Unknown fuel '{fuel}'. Available: {list(FUELS)}")
    return burn_liquid_fuel(table.liquid_fuels[fuel], ambient, chamber_volume_l,
                            table.oxygen)


def is_valid_reaction(result: FuelReactionResult) -> bool:
    """Finite positive energy and, for liquid fuels, finite positive volume."""
    if not (np.isfinite(result.combustion_energy_kj)
            and result.combustion_energy_kj > 0):
        return False
    if result.fuel_volume_ml is None:
        return True
    return bool(np.isfinite(result.fuel_volume_ml) and result.fuel_volume_ml > 0)
