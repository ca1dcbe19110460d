"""
Visualization Engine
====================
Plots for launch and flight analysis:
  1. Trajectory with energy gradient and decile markers
  2. Fuel comparison (same gun, all fuels)
  3. Cd vs Mach curves
  4. Atmospheric profile above the launch site
  5. Single-parameter sweep
  6. Normalized multi-parameter sweep
"""

import os
from typing import Dict, List, Optional

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .atmosphere import atmosphere_profile
from .calculator import ShotResult
from .drag_model import ALL_PROFILES, DragModel
from .integrator import TrajectoryResult
from .markers import EnergyMarker


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4aa', '#3b82f6', '#ffffff', '#eab308',
                      '#ef4444', '#8b5cf6'],
    'font_family': 'monospace',
}

FUEL_COLORS = {
    'ethanol': '#00d4aa',
    'diethyl_ether': '#eab308',
    'HHO': '#3b82f6',
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def _save(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory with energy markers
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(result: TrajectoryResult,
                    markers: Optional[List[EnergyMarker]] = None,
                    save_path: str = None, show: bool = False) -> plt.Figure:
    """Height vs downrange, colored red (full energy) to blue (spent)."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x, y = result.x, result.y
    e0 = result.initial_energy
    fraction = result.kinetic_energy / e0 if e0 > 0 else np.zeros(len(x))

    if len(x) > 1:
        # Color by remaining energy
        sc = ax.scatter(x, y, c=fraction, cmap='coolwarm', vmin=0, vmax=1,
                        s=4, alpha=0.9)
        cbar = fig.colorbar(sc, ax=ax, pad=0.01)
        cbar.set_label('E / E₀', color=STYLE['text_color'])
        cbar.ax.tick_params(colors=STYLE['text_color'])

    ax.plot(0, y[0], 'o', color='#00e676', markersize=10, label='Launch', zorder=5)
    ax.plot(x[-1], y[-1], 'x', color='#ff5252', markersize=12,
            markeredgewidth=3, label='Impact', zorder=5)

    for m in markers or []:
        ax.plot(m.x, m.y, 'o', color='#ffeb3b', markersize=5, zorder=6)
        ax.annotate(f'{m.percent}%', (m.x, m.y), textcoords='offset points',
                    xytext=(0, 8), ha='center', fontsize=8,
                    color=STYLE['text_color'])

    ax.set_xlabel('Downrange (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title(f'Trajectory — {result.drag_model.name} '
                 f'(v₀={result.muzzle_velocity:.1f} m/s, θ={result.angle_deg:.1f}°, '
                 f'range {result.range_total:.1f} m)',
                 fontsize=13, fontweight='bold')
    _legend(ax, loc='upper right', fontsize=10)
    ax.set_xlim(0, max(x.max() * 1.02, 1.0))
    ax.set_ylim(0, max(y.max() * 1.1, 1.0))

    _save(fig, save_path)
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Fuel comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_fuel_comparison(shots: Dict[str, ShotResult],
                         save_path: str = None) -> plt.Figure:
    """Trajectories and muzzle velocities for every fuel."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)

    ax = axes[0]
    for fuel, shot in shots.items():
        if shot.trajectory is None:
            continue
        ax.plot(shot.trajectory.x, shot.trajectory.y,
                color=FUEL_COLORS.get(fuel, '#ffffff'), linewidth=2,
                label=shot.launch.reaction.fuel_label)
    ax.set_xlabel('Downrange (m)')
    ax.set_ylabel('Height (m)')
    ax.set_title('Trajectory Comparison', fontweight='bold')
    _legend(ax, fontsize=9)
    ax.set_ylim(bottom=0)

    ax = axes[1]
    names = [shot.launch.reaction.fuel_label for shot in shots.values()]
    speeds = [shot.launch.muzzle_velocity if shot.launch.is_physical else 0.0
              for shot in shots.values()]
    colors = [FUEL_COLORS.get(f, '#888') for f in shots]
    bars = ax.barh(names, speeds, color=colors, alpha=0.85, edgecolor='#555')
    ax.set_xlabel('Muzzle velocity (m/s)')
    ax.set_title('Muzzle Velocity', fontweight='bold')
    for bar, v in zip(bars, speeds):
        ax.text(bar.get_width() + 1, bar.get_y() + bar.get_height()/2,
                f'{v:.1f} m/s', va='center', color=STYLE['text_color'], fontsize=10)

    fig.suptitle('Fuel Comparison — Same Gun and Conditions',
                 fontsize=15, fontweight='bold', color=STYLE['text_color'], y=1.02)
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Cd vs Mach Curves
# ══════════════════════════════════════════════════════════════════════════

def plot_cd_vs_mach(save_path: str = None) -> plt.Figure:
    """Plot Cd vs Mach for both ammo profiles."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    mach_range = np.linspace(0, 5.0, 500)
    for key, profile in ALL_PROFILES.items():
        model = DragModel(key)
        ax.plot(mach_range, model.cd_array(mach_range), color=profile.color,
                linestyle=profile.linestyle, linewidth=2.5, label=profile.name)
        ax.plot(profile.mach, profile.cd, 'o', color=profile.color, markersize=3)

    ax.axvspan(0.8, 1.2, alpha=0.08, color='#ff5252')
    ax.text(1.0, 0.05, 'Transonic\nRegion', ha='center',
            color='#ff5252', fontsize=10, alpha=0.7)

    ax.set_xlabel('Mach Number', fontsize=12)
    ax.set_ylabel('Drag Coefficient (Cd)', fontsize=12)
    ax.set_title('Drag Coefficient vs Mach Number — Ammo Profiles',
                 fontsize=14, fontweight='bold')
    _legend(ax, fontsize=11)
    ax.set_xlim(0, 5.0)
    ax.set_ylim(0, 0.8)

    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Atmospheric Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_atmosphere(ground_temp_k: float, ground_altitude_m: float,
                    max_height: float = 2000.0,
                    save_path: str = None) -> plt.Figure:
    """Temperature, pressure and real-gas density above the launch site."""
    heights = np.linspace(0, max_height, 200)
    profile = atmosphere_profile(heights, ground_temp_k, ground_altitude_m)

    fig, axes = plt.subplots(1, 3, figsize=(15, 6), sharey=True)
    _apply_dark_style(fig, axes)

    params = [
        ('Temperature (K)', profile['temperature'], '#ff6b35'),
        ('Pressure (Pa)', profile['pressure'], '#00d4ff'),
        ('Density (kg/m³)', profile['density'], '#00e676'),
    ]
    for ax, (title, data, color) in zip(axes, params):
        ax.plot(data, heights, color=color, linewidth=2)
        ax.set_xlabel(title, fontsize=10)

    axes[0].set_ylabel('Height above ground (m)', fontsize=12)
    fig.suptitle(f'Atmosphere above site ({ground_altitude_m:.0f} m ASL, '
                 f'{ground_temp_k - 273.15:.1f} °C)',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'])
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Parameter sweeps
# ══════════════════════════════════════════════════════════════════════════

def plot_sweep(xs: np.ndarray, ys: np.ndarray, x_label: str, y_label: str,
               save_path: str = None) -> plt.Figure:
    """One output against one varied input."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    color = STYLE['accent_colors'][0]
    ax.plot(xs, ys, color=color, linewidth=2)
    ax.plot(xs, ys, 'o', color=color, markersize=2, alpha=0.5)
    ax.set_xlabel(x_label, fontsize=12)
    ax.set_ylabel(y_label, fontsize=12)
    ax.set_title(f'{y_label} vs {x_label}', fontsize=14, fontweight='bold')

    _save(fig, save_path)
    return fig


def plot_normalized_sweep(result: dict, save_path: str = None) -> plt.Figure:
    """All outputs of a normalized sweep on a shared [0, 1] axis."""
    fig, ax = plt.subplots(figsize=(13, 6))
    _apply_dark_style(fig, ax)

    for i, (key, series) in enumerate(result['normalized'].items()):
        color = STYLE['accent_colors'][i % len(STYLE['accent_colors'])]
        ax.plot(result['t'], series, color=color, linewidth=2, label=key)

    ax.set_xlabel('Sweep position t', fontsize=12)
    ax.set_ylabel('Normalized output', fontsize=12)
    ax.set_title('Normalized Relationships', fontsize=14, fontweight='bold')
    ax.set_xlim(0, 1)
    ax.set_ylim(-0.05, 1.05)
    _legend(ax, fontsize=9, loc='center left', bbox_to_anchor=(1.01, 0.5))

    _save(fig, save_path)
    return fig
