"""
Unit Tests for the Physics Kernel
=================================
Equation of state, atmosphere, drag tables, trajectory integration and
energy markers.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from vaporgun.eos import (
    solve_van_der_waals, solve_van_der_waals_detailed, real_gas_density,
    ideal_gas_density, GAS_CONSTANT, MOLAR_MASS_AIR, VDW_CONSTANTS,
    VDW_CONSTANTS_SI,
)
from vaporgun.atmosphere import (
    ground_state, state_at_height, density_at_height, density_profile,
    atmosphere_profile, SEA_LEVEL_PRESSURE,
)
from vaporgun.drag_model import DragModel, drag_force, ALL_PROFILES, PELLET, SLUG
from vaporgun.integrator import TrajectorySample, simulate_euler
from vaporgun.markers import energy_markers
from vaporgun.validation import ValidationError


class TestEquationOfState:
    """Van der Waals solvers."""

    def test_ideal_gas_limit_is_exact(self):
        P, V, T = 101325.0, 0.002, 298.15
        n = solve_van_der_waals(P, V, T, 0.0, 0.0)
        assert n == P * V / (GAS_CONSTANT * T)

    def test_ideal_gas_limit_independent_of_iteration_cap(self):
        P, V, T = 50000.0, 0.01, 350.0
        assert solve_van_der_waals(P, V, T, 0, 0, max_iter=1) == \
            solve_van_der_waals(P, V, T, 0, 0, max_iter=50)

    def test_real_gas_satisfies_equation(self):
        o2 = VDW_CONSTANTS['O2']
        P, V, T = 21227.0, 0.002, 298.15
        sol = solve_van_der_waals_detailed(P, V, T, o2.a, o2.b)
        n = sol.value
        residual = (P + o2.a * n**2 / V**2) * (V / n - o2.b) - GAS_CONSTANT * T
        assert sol.converged
        assert abs(residual) < 1e-6

    def test_attraction_increases_moles(self):
        """Pure attraction packs more moles than an ideal gas."""
        P, V, T = 11298.0, 0.002, 298.15
        ideal = P * V / (GAS_CONSTANT * T)
        assert solve_van_der_waals(P, V, T, 50.0, 0.0) > ideal

    def test_covolume_reduces_moles(self):
        P, V, T = 11298.0, 0.002, 298.15
        ideal = P * V / (GAS_CONSTANT * T)
        n = solve_van_der_waals(P, V, T, 0.0, 0.03)
        assert n < ideal
        assert n == pytest.approx(V / (GAS_CONSTANT * T / P + 0.03))

    @pytest.mark.parametrize("species", ['O2', 'ethanol', 'diethyl_ether'])
    def test_effective_fuel_constants_converge(self, species):
        """Covolume larger than V/n_ideal still converges to a positive root."""
        c = VDW_CONSTANTS[species]
        P, V, T = 19201.0, 0.0001, 298.15
        sol = solve_van_der_waals_detailed(P, V, T, c.a, c.b)
        n = sol.value
        assert sol.converged
        assert 0 < n < V / c.b
        residual = (P + c.a * n**2 / V**2) * (V / n - c.b) - GAS_CONSTANT * T
        assert abs(residual) < 1e-6

    def test_si_table_is_scaled_copy(self):
        for species in ['O2', 'ethanol', 'diethyl_ether']:
            eff, si = VDW_CONSTANTS[species], VDW_CONSTANTS_SI[species]
            assert si.a == pytest.approx(eff.a / 10)
            assert si.b == pytest.approx(eff.b / 1000)
        assert VDW_CONSTANTS_SI['air'] == VDW_CONSTANTS['air']

    def test_iteration_cap_returns_best_estimate(self):
        """No exception when the cap is hit; result stays positive."""
        sol = solve_van_der_waals_detailed(1e9, 1e-6, 300.0, 50.0, 0.5, max_iter=2)
        assert not sol.converged
        assert sol.iterations == 2
        assert sol.value > 0

    def test_real_gas_density_close_to_ideal_at_sea_level(self):
        rho_real = real_gas_density(101325.0, 288.15)
        rho_ideal = ideal_gas_density(101325.0, 288.15)
        assert abs(rho_real - 1.225) < 0.01
        assert abs(rho_real - rho_ideal) / rho_ideal < 0.005

    def test_real_gas_density_ideal_reduction(self):
        P, T = 90000.0, 270.0
        rho = real_gas_density(P, T, a=0.0, b=0.0)
        assert rho == P / (GAS_CONSTANT * T) * MOLAR_MASS_AIR

    def test_close_packing_falls_back_to_ideal(self):
        """Covolume large enough that 1 − bν ≤ 0 from the first guess."""
        P, T = 101325.0, 300.0
        nu0 = P / (GAS_CONSTANT * T)
        rho = real_gas_density(P, T, a=0.0, b=2.0 / nu0)
        assert rho == pytest.approx(P * MOLAR_MASS_AIR / (GAS_CONSTANT * T))


class TestAtmosphere:
    """Ground state and height-dependent state."""

    def test_sea_level_pressure_exact(self):
        assert ground_state(0, 0).pressure_pa == 101325

    def test_temperature_conversion(self):
        assert ground_state(25, 0).temperature_k == pytest.approx(298.15)

    def test_pressure_decreases_with_altitude(self):
        assert ground_state(15, 1000).pressure_pa < ground_state(15, 0).pressure_pa
        assert ground_state(15, 2000).pressure_pa < ground_state(15, 1000).pressure_pa

    @pytest.mark.parametrize("temp_c", [-273.15, -300.0])
    def test_absolute_zero_rejected(self, temp_c):
        with pytest.raises(ValidationError) as info:
            ground_state(temp_c, 100)
        assert info.value.field == 'temperature_c'

    def test_ground_density(self):
        assert abs(ground_state(15, 0).air_density - 1.225) < 0.01

    @pytest.mark.parametrize("temp_c, altitude", [(0, 0), (25, 100), (-10, 1500)])
    def test_height_zero_reduces_to_ground(self, temp_c, altitude):
        ambient = ground_state(temp_c, altitude)
        state = state_at_height(0, ambient.temperature_k, altitude)
        assert state.P == ambient.pressure_pa
        assert state.T == ambient.temperature_k

    def test_lapse_rate(self):
        state = state_at_height(1000, 288.15, 0)
        assert state.T == pytest.approx(281.65)
        assert state.P < SEA_LEVEL_PRESSURE

    def test_nonphysical_temperature_clamped(self):
        ambient_p = ground_state(0, 0).pressure_pa
        state = state_at_height(1e6, 273.15, 0)
        assert state.T == 273.15
        assert state.P == pytest.approx(ambient_p * 0.5)

    def test_density_decreases_with_height(self):
        rho = density_profile(288.15, 0)
        assert rho(0) > rho(500) > rho(2000)
        assert rho(100) == density_at_height(100, 288.15, 0)

    def test_profile_arrays(self):
        heights = np.linspace(0, 1000, 11)
        profile = atmosphere_profile(heights, 288.15, 0)
        assert profile['density'].shape == (11,)
        assert np.all(np.diff(profile['pressure']) < 0)


class TestDragModel:
    """Drag coefficient tables and interpolation."""

    def test_profiles_exist(self):
        for key in ['pellet', 'slug']:
            assert DragModel(key).name is not None

    def test_unknown_profile_rejected(self):
        with pytest.raises(ValueError):
            DragModel('sphere')

    @pytest.mark.parametrize("profile", [PELLET, SLUG])
    def test_clamp_below_table(self, profile):
        model = DragModel(profile.key)
        assert model.cd(-0.5) == profile.cd[0]
        assert model.cd(profile.mach[0]) == profile.cd[0]

    @pytest.mark.parametrize("profile", [PELLET, SLUG])
    def test_clamp_above_table(self, profile):
        model = DragModel(profile.key)
        assert model.cd(profile.mach[-1] + 10) == profile.cd[-1]
        assert model.cd(profile.mach[-1]) == profile.cd[-1]

    def test_table_points_reproduced(self):
        model = DragModel('pellet')
        for m, cd in zip(PELLET.mach, PELLET.cd):
            assert model.cd(m) == pytest.approx(cd)

    def test_linear_between_points(self):
        model = DragModel('pellet')
        # halfway between Mach 0.9 (0.488) and 1.0 (0.597)
        assert model.cd(0.95) == pytest.approx((0.488 + 0.597) / 2)

    def test_vectorized_matches_scalar(self):
        for key in ALL_PROFILES:
            model = DragModel(key)
            machs = np.array([-1.0, 0.0, 0.33, 0.95, 1.7, 4.2, 9.0])
            expected = [model.cd(m) for m in machs]
            assert np.allclose(model.cd_array(machs), expected)

    @pytest.mark.parametrize("profile", [PELLET, SLUG])
    def test_scalar_lookup_is_clamped_linear_interpolation(self, profile):
        model = DragModel(profile.key)
        for m in np.linspace(-0.5, profile.mach[-1] + 1.0, 57):
            cd = model.cd(m)
            assert isinstance(cd, float)
            assert cd == pytest.approx(np.interp(m, profile.mach, profile.cd))

    def test_transonic_drag_rise(self):
        for key in ALL_PROFILES:
            model = DragModel(key)
            assert model.cd(1.1) > model.cd(0.5)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ALL_PROFILES['sphere'] = PELLET
        with pytest.raises(Exception):
            PELLET.cd = (0.1, 0.2)

    def test_drag_force_opposes_motion(self):
        v = np.array([100.0, 50.0])
        F = drag_force(v, rho=1.225, cd=0.3, area=0.01)
        assert np.dot(F, v) < 0

    def test_drag_force_zero_at_rest(self):
        F = drag_force(np.array([0.0, 0.0]), rho=1.225, cd=0.3, area=0.01)
        assert np.allclose(F, 0.0)

    def test_drag_force_magnitude(self):
        F = drag_force(np.array([30.0, 40.0]), rho=1.2, cd=0.25, area=0.002)
        assert np.hypot(*F) == pytest.approx(0.5 * 1.2 * 0.25 * 0.002 * 50.0**2)
        assert F[0] / F[1] == pytest.approx(30.0 / 40.0)


class TestIntegrator:
    """Fixed-step trajectory integration."""

    def test_zero_velocity_single_sample(self):
        result = simulate_euler(0, 0, 0.001, 0.00635, 1.2, launch_height=1.5)
        assert len(result) == 1
        s = result[0]
        assert (s.x, s.y, s.speed, s.kinetic_energy, s.t) == (0, 1.5, 0, 0, 0)
        assert result.termination == 'stall'

    def test_first_sample_is_launch_state(self):
        result = simulate_euler(200.0, 10.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        first = result[0]
        assert first.t == 0 and first.x == 0 and first.y == 1.5
        assert first.speed == 200.0
        assert first.kinetic_energy == pytest.approx(0.5 * 0.0013 * 200.0**2)

    def test_vacuum_range_matches_analytic(self):
        v0 = 20.0
        result = simulate_euler(v0, 45.0, 0.01, 0.005, 0.0, launch_height=0.0)
        assert result.termination == 'impact'
        assert result.range_total == pytest.approx(v0**2 / 9.80665, rel=0.01)

    def test_first_step_applies_drag_and_gravity(self):
        v0, m, d, rho, dt = 100.0, 0.01, 0.01, 1.2, 0.001
        result = simulate_euler(v0, 0.0, m, d, rho, launch_height=2.0, dt=dt)
        cd = DragModel('pellet').cd(v0 / 343)
        area = np.pi * (d / 2) ** 2
        vx = v0 - 0.5 * rho * cd * area * v0**2 / m * dt
        vy = -9.80665 * dt
        step = result[1]
        assert step.x == pytest.approx(vx * dt)
        assert step.y == pytest.approx(2.0 + vy * dt)
        assert step.speed == pytest.approx(np.hypot(vx, vy))

    def test_drag_reduces_range(self):
        vac = simulate_euler(150.0, 20.0, 0.0013, 0.00635, 0.0, launch_height=1.5)
        air = simulate_euler(150.0, 20.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        assert air.range_total < vac.range_total

    def test_ends_below_ground(self):
        result = simulate_euler(100.0, 5.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        assert result[-1].y < 0
        assert all(s.y >= 0 for s in result.samples[:-1])

    def test_time_strictly_increasing(self):
        result = simulate_euler(100.0, 5.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        assert np.all(np.diff(result.time) > 0)

    def test_vertical_shot_stalls_at_apex(self):
        result = simulate_euler(5.0, 90.0, 0.01, 0.005, 0.0, launch_height=1.0)
        assert result.termination == 'stall'
        assert result[-1].speed < 0.1 + 9.80665 * result.dt

    def test_timeout(self):
        result = simulate_euler(100.0, 45.0, 0.01, 0.005, 0.0, max_time=0.5)
        assert result.termination == 'timeout'
        assert result.flight_time >= 0.5
        assert result.flight_time < 0.5 + 2 * result.dt

    def test_density_function_accepted(self):
        rho = density_profile(298.15, 0)
        a = simulate_euler(150.0, 30.0, 0.0013, 0.00635, rho, launch_height=1.5)
        b = simulate_euler(150.0, 30.0, 0.0013, 0.00635, rho(0), launch_height=1.5)
        # thinner air aloft lets the density-profile shot carry slightly further
        assert a.range_total >= b.range_total

    def test_slug_carries_further_through_transonic(self):
        pellet = simulate_euler(500.0, 0.0, 0.002, 0.00635, 1.2, 'pellet', 1.5)
        slug = simulate_euler(500.0, 0.0, 0.002, 0.00635, 1.2, 'slug', 1.5)
        assert slug.range_total > pellet.range_total

    def test_deterministic(self):
        a = simulate_euler(120.0, 15.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        b = simulate_euler(120.0, 15.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        assert a.samples == b.samples

    def test_summary(self):
        result = simulate_euler(120.0, 15.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        assert 'Range' in result.summary()


class TestEnergyMarkers:
    """Decile marker extraction."""

    @staticmethod
    def _linear_path():
        return [TrajectorySample(x=float(i), y=0.0, speed=0.0,
                                 kinetic_energy=100.0 - 10.0 * i, t=float(i))
                for i in range(11)]

    def test_literal_scenario(self):
        markers = energy_markers(self._linear_path())
        assert [m.percent for m in markers] == [90, 80, 70, 60, 50, 40, 30, 20, 10]
        by_percent = {m.percent: m for m in markers}
        assert by_percent[90].kinetic_energy == 90 and by_percent[90].x == 1
        assert by_percent[50].kinetic_energy == 50 and by_percent[50].x == 5
        for m in markers:
            assert m.x == (100 - m.percent) / 10

    def test_empty_path(self):
        assert energy_markers([]) == []

    def test_short_flight_omits_deciles(self):
        path = self._linear_path()[:4]      # energy only falls to 70 %
        assert [m.percent for m in energy_markers(path)] == [90, 80, 70]

    def test_explicit_reference_energy(self):
        markers = energy_markers(self._linear_path(), initial_energy=50.0)
        assert markers[0].percent == 90
        assert markers[0].kinetic_energy == 40.0

    def test_ordering_on_real_trajectory(self):
        result = simulate_euler(300.0, 3.0, 0.0013, 0.00635, 1.2, launch_height=1.5)
        markers = energy_markers(result)
        assert markers
        percents = [m.percent for m in markers]
        times = [m.t for m in markers]
        assert percents[0] == 90
        assert all(a > b for a, b in zip(percents, percents[1:]))
        assert all(a <= b for a, b in zip(times, times[1:]))
        e0 = result.initial_energy
        for m in markers:
            assert m.kinetic_energy <= m.percent * e0 / 100

    def test_single_sample_has_no_markers(self):
        result = simulate_euler(0, 0, 0.001, 0.00635, 1.2, launch_height=1.5)
        assert energy_markers(result) == []


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
