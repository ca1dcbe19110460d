"""
Parameter Sweeps
================
Repeated independent evaluations of the calculator while inputs vary.

- sweep            — one input varied over [lo, hi], one output tracked
- normalized_sweep — several inputs varied together along t ∈ [0, 1],
                     every output min-max normalized so the trends can
                     share one axis

Points whose evaluation is non-physical report 0 for the output, the way
a chart would show them.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple, Union

import numpy as np

from .calculator import INPUT_KEYS, LauncherInputs, calculate
from .combustion import Chemistry
from .launcher import LaunchResult
from .validation import ValidationError, parse_number

logger = logging.getLogger(__name__)

DEFAULT_POINTS = 100

OUTPUT_KEYS = (
    'muzzle_velocity',
    'kinetic_energy_j',
    'chamber_pressure_mpa',
    'efficiency_percent',
    'time_in_barrel_ms',
    'fuel_volume_ml',
)


def output_value(result: LaunchResult, key: str) -> float:
    """Named output of a launch, with None/NaN reported as 0."""
    if key not in OUTPUT_KEYS:
        raise ValueError(f"Unknown output '{key}'. Available: {list(OUTPUT_KEYS)}")
    if key == 'fuel_volume_ml':
        value = result.reaction.fuel_volume_ml
    else:
        value = getattr(result, key)
    if value is None or not np.isfinite(value):
        return 0.0
    return float(value)


def _check_input_key(key: str):
    if key not in INPUT_KEYS:
        raise ValueError(f"Unknown input '{key}'. Available: {list(INPUT_KEYS)}")


def _check_range(key: str, lo, hi) -> Tuple[float, float]:
    lo = parse_number(lo, f'{key}_min')
    hi = parse_number(hi, f'{key}_max')
    if lo >= hi:
        raise ValidationError(key, (lo, hi), "range needs min < max")
    return lo, hi


def _evaluate(fuel: str, params: Dict[str, float],
              chemistry: Union[str, Chemistry]) -> Optional[LaunchResult]:
    try:
        return calculate(fuel, chemistry=chemistry, **params)
    except ValidationError as exc:
        logger.debug("sweep point %s left at 0: %s", params, exc)
        return None


def sweep(fuel: str, base: LauncherInputs, key: str, lo, hi,
          output: str = 'muzzle_velocity',
          n: int = DEFAULT_POINTS,
          chemistry: Union[str, Chemistry] = 'default'
          ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vary one input linearly and record one output.

    Returns
    -------
    (xs, ys) : np.ndarray
        n input values and their outputs. Points where the inputs
        themselves are invalid (e.g. a zero chamber volume) report 0.
    """
    _check_input_key(key)
    if output not in OUTPUT_KEYS:
        raise ValueError(f"Unknown output '{output}'. Available: {list(OUTPUT_KEYS)}")
    lo, hi = _check_range(key, lo, hi)

    params = base.as_dict()
    xs = np.linspace(lo, hi, n)
    ys = np.zeros(n)
    for i, x in enumerate(xs):
        params[key] = float(x)
        result = _evaluate(fuel, params, chemistry)
        if result is not None:
            ys[i] = output_value(result, output)
    return xs, ys


def normalize(series: np.ndarray) -> np.ndarray:
    """Min-max scale to [0, 1]; a flat series maps to 0."""
    series = np.asarray(series, dtype=float)
    span = series.max() - series.min()
    if span == 0:
        span = 1.0
    return (series - series.min()) / span


def inputs_at(base: LauncherInputs, ranges: Mapping[str, Tuple[float, float]],
              t: float) -> Dict[str, float]:
    """Calculator inputs at position t ∈ [0, 1] along the varied ranges."""
    params = base.as_dict()
    for key, (lo, hi) in ranges.items():
        params[key] = lo + t * (hi - lo)
    return params


def normalized_sweep(fuel: str, base: LauncherInputs,
                     ranges: Mapping[str, Tuple[float, float]],
                     n: int = DEFAULT_POINTS,
                     chemistry: Union[str, Chemistry] = 'default'
                     ) -> Dict[str, Dict[str, np.ndarray]]:
    """
    Vary every input in `ranges` together and track all outputs.

    Returns
    -------
    dict with keys
        't'          — sample positions in [0, 1]
        'raw'        — output key -> raw series
        'normalized' — output key -> min-max normalized series
    """
    checked = {}
    for key, (lo, hi) in ranges.items():
        _check_input_key(key)
        checked[key] = _check_range(key, lo, hi)

    t_values = np.linspace(0.0, 1.0, n)
    raw = {key: np.zeros(n) for key in OUTPUT_KEYS}
    for i, t in enumerate(t_values):
        result = _evaluate(fuel, inputs_at(base, checked, t), chemistry)
        if result is None:
            continue
        for key in OUTPUT_KEYS:
            raw[key][i] = output_value(result, key)

    return {
        't': t_values,
        'raw': raw,
        'normalized': {key: normalize(series) for key, series in raw.items()},
    }
