"""
Tests for plant/temperature.py.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant.temperature import TemperatureModel, required_pumps
from plant.types import Buffer, FlowCode, PumpStatus


def _pcs_pumps(state, count):
    for pump_id in range(4, 4 + count):
        state.pump(pump_id).status = PumpStatus.ON
    state.recount_pumps()


def _cooling_path(state):
    state.set_pipe(3, FlowCode.COOLANT_COLD)
    state.set_pipe(8, FlowCode.COOLANT_COLD)


class TestRequiredPumps:
    @pytest.mark.parametrize("temperature,expected", [(0, 1), (400, 1), (401, 2), (2000, 2)])
    def test_threshold(self, temperature, expected):
        assert required_pumps(temperature) == expected


class TestTemperatureModel:
    """Tests for TemperatureModel.apply()."""

    def test_cold_shutdown_stays_at_zero(self, plant):
        assert TemperatureModel().apply(plant) == 0
        assert plant.temperature == 0

    def test_heats_with_empty_hot_leg_and_no_pumps(self, plant):
        plant.temperature = 200
        delta = TemperatureModel().apply(plant)
        assert delta == 2
        assert plant.temperature == 202
        assert plant.old_temperature == 200

    def test_one_pump_with_flow_cools_by_one(self, plant):
        plant.temperature = 200
        _cooling_path(plant)
        _pcs_pumps(plant, 1)
        TemperatureModel().apply(plant)
        assert plant.temperature == 199

    def test_extra_pump_cools_faster(self, plant):
        plant.temperature = 200
        _cooling_path(plant)
        _pcs_pumps(plant, 2)
        assert TemperatureModel().apply(plant) == -2

    def test_low_pcs_pressure_heats(self, plant):
        plant.temperature = 200
        _cooling_path(plant)
        _pcs_pumps(plant, 1)
        plant.buffers[Buffer.PCS_PRESSURE] = 0
        assert TemperatureModel().apply(plant) == 0

    def test_full_steamer_heats(self, plant):
        plant.temperature = 200
        _cooling_path(plant)
        _pcs_pumps(plant, 1)
        plant.buffers[Buffer.STEAMER] = 14
        assert TemperatureModel().apply(plant) == 1

    def test_never_below_zero(self, plant):
        plant.temperature = 1
        _cooling_path(plant)
        _pcs_pumps(plant, 2)
        TemperatureModel().apply(plant)
        assert plant.temperature == 0

    def test_hot_core_needs_two_pumps(self, plant):
        plant.temperature = 500
        _cooling_path(plant)
        _pcs_pumps(plant, 1)
        # cnt=2: one pump short heats by 2, condenser headroom cools by 1
        assert TemperatureModel().apply(plant) == 1
        assert plant.pumps_required == 2

    def test_eccs_injection_counts_as_cooling(self, plant):
        plant.temperature = 200
        plant.set_pipe(3, FlowCode.COOLANT_COLD)
        plant.set_pipe(11, FlowCode.WATER)
        plant.pump(1).status = PumpStatus.ON
        plant.recount_pumps()
        assert TemperatureModel().apply(plant) == -1
