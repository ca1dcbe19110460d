#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  VAPOR GUN BALLISTICS SIMULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete pipeline for one gun configuration:
    1. Ambient conditions at the launch site
    2. Cd vs Mach curves for both ammo types
    3. Interior ballistics for every fuel
    4. Trajectory + energy decile markers for the chosen fuel/ammo
    5. Fuel comparison
    6. Parameter sweep and normalized sweep

  Figures are saved to outputs/ unless --no-plots is given.

  Usage:
    python main.py                              # defaults, ethanol, pellet
    python main.py --fuel HHO --ammo slug --angle 10
    python main.py --chemistry balanced
    python main.py --no-plots --verbose
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from vaporgun.atmosphere import ground_state, state_at_height, density_at_height
from vaporgun.calculator import LauncherInputs, calculate, simulate_shot, compare_fuels
from vaporgun.combustion import CHEMISTRIES, FUELS
from vaporgun.drag_model import ALL_PROFILES, DragModel
from vaporgun.sweep import sweep, normalized_sweep
from vaporgun.validation import ValidationError


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Vapor gun interior/exterior ballistics")
    parser.add_argument('--fuel', choices=FUELS, default='ethanol')
    parser.add_argument('--ammo', choices=list(ALL_PROFILES), default='pellet')
    parser.add_argument('--chemistry', choices=list(CHEMISTRIES), default='default',
                        help="combustion constants table")
    parser.add_argument('--temperature', type=str, default='25', help="ground temperature (°C)")
    parser.add_argument('--altitude', type=str, default='0', help="site altitude (m ASL)")
    parser.add_argument('--chamber-volume', type=str, default='0.3', help="chamber volume (L)")
    parser.add_argument('--barrel-diameter', type=str, default='6.35', help="barrel diameter (mm)")
    parser.add_argument('--barrel-length', type=str, default='1200', help="barrel length (mm)")
    parser.add_argument('--projectile-mass', type=str, default='1.3', help="projectile mass (g)")
    parser.add_argument('--angle', type=float, default=5.0, help="launch angle (°)")
    parser.add_argument('--height', type=float, default=1.5, help="launch height (m)")
    parser.add_argument('--no-plots', action='store_true', help="skip figure generation")
    parser.add_argument('--verbose', action='store_true', help="solver diagnostics")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(message)s")
    start_time = time.time()

    inputs = LauncherInputs(
        temperature_c=args.temperature,
        altitude_m=args.altitude,
        chamber_volume_l=args.chamber_volume,
        barrel_diameter_mm=args.barrel_diameter,
        barrel_length_mm=args.barrel_length,
        projectile_mass_g=args.projectile_mass,
    )

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Ambient conditions
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Ambient Conditions")
    try:
        ambient = ground_state(float(args.temperature), float(args.altitude))
        launches = {fuel: calculate(fuel, chemistry=args.chemistry, **inputs.as_dict())
                    for fuel in FUELS}
    except (ValidationError, ValueError) as exc:
        print(f"  ✗ Invalid input — {exc}")
        return 1

    print(f"  Pressure    : {ambient.pressure_pa:>10.1f} Pa")
    print(f"  Temperature : {ambient.temperature_k:>10.2f} K")
    print(f"  Air density : {ambient.air_density:>10.5f} kg/m³ (real gas)")
    print(f"\n  {'h (m)':>8} {'T (K)':>8} {'P (Pa)':>10} {'ρ (kg/m³)':>11}")
    altitude = float(args.altitude)
    for h in [0, 10, 50, 100, 500]:
        state = state_at_height(h, ambient.temperature_k, altitude)
        rho = density_at_height(h, ambient.temperature_k, altitude)
        print(f"  {h:>8} {state.T:>8.2f} {state.P:>10.0f} {rho:>11.5f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag Coefficient Curves
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Cd vs Mach Curves")
    for key in ALL_PROFILES:
        model = DragModel(key)
        print(f"  {model.name:<15s}  Cd @ M0.5={model.cd(0.5):.3f}  "
              f"Cd @ M1.0={model.cd(1.0):.3f}  Cd @ M2.0={model.cd(2.0):.3f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Interior ballistics for every fuel
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Interior Ballistics")
    for fuel, launch in launches.items():
        print(f"\n  [{fuel}]")
        print(launch.summary())

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Trajectory + energy markers
    # ══════════════════════════════════════════════════════════════════════
    section(f"PHASE 4: Trajectory ({args.fuel}, {args.ammo})")
    shot = simulate_shot(args.fuel, inputs, ammo=args.ammo,
                         angle_deg=args.angle, launch_height_m=args.height,
                         chemistry=args.chemistry)
    if shot.trajectory is None:
        print("  ✗ No trajectory — launch is non-physical for this configuration")
    else:
        print(shot.trajectory.summary())
        print(f"\n  {'E %':>5} {'x (m)':>9} {'y (m)':>8} {'v (m/s)':>9} {'E (J)':>9} {'t (s)':>7}")
        for m in shot.markers:
            print(f"  {m.percent:>5} {m.x:>9.2f} {m.y:>8.2f} {m.speed:>9.2f} "
                  f"{m.kinetic_energy:>9.3f} {m.t:>7.3f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Fuel comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Fuel Comparison")
    shots = compare_fuels(inputs, ammo=args.ammo, angle_deg=args.angle,
                          launch_height_m=args.height, chemistry=args.chemistry)
    for fuel, s in shots.items():
        print(f"  {s.launch.reaction.fuel_label:<20s}  "
              f"v₀: {s.launch.muzzle_velocity:>8.1f} m/s  "
              f"Range: {s.range_total:>8.1f} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Sweeps
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Parameter Sweeps")
    base_volume = float(args.chamber_volume)
    xs, ys = sweep(args.fuel, inputs, 'chamber_volume_l',
                   base_volume * 0.25, base_volume * 4, 'muzzle_velocity',
                   chemistry=args.chemistry)
    print(f"  Chamber volume {xs[0]:.3f}–{xs[-1]:.3f} L → "
          f"muzzle velocity {ys.min():.1f}–{ys.max():.1f} m/s")

    base_length = float(args.barrel_length)
    norm = normalized_sweep(args.fuel, inputs, {
        'barrel_length_mm': (base_length * 0.5, base_length * 2),
        'projectile_mass_g': (float(args.projectile_mass) * 0.5,
                              float(args.projectile_mass) * 2),
    }, chemistry=args.chemistry)
    for key, series in norm['raw'].items():
        print(f"  {key:<22s} {series.min():>10.3f} – {series.max():>10.3f}")

    if not args.no_plots:
        from vaporgun.visualization import (
            ensure_output_dir, plot_atmosphere, plot_cd_vs_mach, plot_trajectory,
            plot_fuel_comparison, plot_sweep, plot_normalized_sweep,
        )
        import matplotlib.pyplot as plt

        out = ensure_output_dir('outputs')
        figures = [
            ('01_atmosphere_profile.png',
             lambda p: plot_atmosphere(ambient.temperature_k, altitude, save_path=p)),
            ('02_cd_vs_mach.png', lambda p: plot_cd_vs_mach(save_path=p)),
            ('04_fuel_comparison.png', lambda p: plot_fuel_comparison(shots, save_path=p)),
            ('05_sweep_chamber_volume.png',
             lambda p: plot_sweep(xs, ys, 'Chamber volume (L)', 'Muzzle velocity (m/s)',
                                  save_path=p)),
            ('06_normalized_sweep.png', lambda p: plot_normalized_sweep(norm, save_path=p)),
        ]
        if shot.trajectory is not None:
            figures.insert(2, ('03_trajectory.png',
                               lambda p: plot_trajectory(shot.trajectory, shot.markers,
                                                         save_path=p)))
        section("Figures")
        for name, make in figures:
            plt.close(make(f'{out}/{name}'))
            print(f"  ✓ Saved: {out}/{name}")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"  Total runtime: {elapsed:.1f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
