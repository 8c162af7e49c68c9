"""
Tests for plant/economics.py.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant.economics import EconomicsCalculator
from plant.rng import ReplayRandom
from plant.types import AlertKind, Buffer, TurbineStatus


def _online(state, count):
    for turbine in state.turbines[:count]:
        turbine.status = TurbineStatus.ONLINE
    state.recount_turbines()


# =============================================================================
# Output and profit
# =============================================================================

class TestApply:
    def test_no_output_without_steam(self, plant):
        _online(plant, 1)
        plant.buffers[Buffer.STEAMER] = 10
        EconomicsCalculator(ReplayRandom([])).apply(plant)
        econ = plant.economics
        assert econ.output == 0
        assert econ.projected_profit == -10
        assert econ.actual_profit == 0

    def test_output_capped_by_demand(self, plant):
        _online(plant, 1)
        plant.buffers[Buffer.STEAMER] = 11
        EconomicsCalculator(ReplayRandom([])).apply(plant)
        assert plant.economics.output == 100
        assert plant.economics.actual_profit == 10

    def test_output_capped_by_turbines(self, plant):
        _online(plant, 2)
        plant.buffers[Buffer.STEAMER] = 14
        plant.economics.demand = 1000
        EconomicsCalculator(ReplayRandom([])).apply(plant)
        assert plant.economics.output == 600
        assert plant.economics.projected_profit == 100 - 20

    def test_costs_amortised_per_minute(self, plant):
        plant.economics.operating_cost = 20000
        plant.economics.maintenance_cost = 160
        EconomicsCalculator(ReplayRandom([])).apply(plant)
        assert plant.economics.actual_profit == -1
        assert plant.economics.projected_profit == 10 - 2016


# =============================================================================
# Clock, day and demand
# =============================================================================

class TestAdvanceClock:
    def test_minute_advances(self, plant):
        EconomicsCalculator(ReplayRandom([])).advance_clock(plant)
        assert plant.clock.minute == 1
        assert plant.clock.demand_countdown == 49

    def test_day_rollover(self, plant):
        plant.clock.minute = 1439
        plant.economics.maintenance_cost = 12
        rng = ReplayRandom([3])
        EconomicsCalculator(rng).advance_clock(plant)
        assert plant.clock.minute == 0
        assert plant.clock.day == 2
        assert plant.economics.operating_cost == 204
        assert plant.economics.maintenance_cost == 0
        assert rng.bounds == [10]
        assert plant.alerts[0].kind == AlertKind.DAY_CHANGE

    def test_morning_demand_rises(self, plant):
        plant.clock.minute = 100
        plant.clock.demand_countdown = 1
        rng = ReplayRandom([5, 2, 10])
        EconomicsCalculator(rng).advance_clock(plant)
        assert plant.economics.demand == 185
        assert plant.clock.demand_countdown == 55
        assert rng.bounds == [15, 3, 25]
        assert plant.alerts[0].kind == AlertKind.DEMAND_CHANGE

    def test_afternoon_demand_falls_by_half(self, plant):
        plant.clock.minute = 800
        plant.clock.demand_countdown = 1
        plant.economics.demand = 500
        EconomicsCalculator(ReplayRandom([0, 1, 20])).advance_clock(plant)
        assert plant.economics.demand == 453
        assert plant.clock.demand_countdown == 50

    @pytest.mark.parametrize("minute,start,expected", [(100, 1000, 1000), (800, 100, 100)])
    def test_demand_clamped(self, plant, minute, start, expected):
        plant.clock.minute = minute
        plant.clock.demand_countdown = 1
        plant.economics.demand = start
        EconomicsCalculator(ReplayRandom([0, 1, 24])).advance_clock(plant)
        assert plant.economics.demand == expected


# =============================================================================
# Rate petition
# =============================================================================

class TestPetition:
    def test_unavailable_at_threshold(self, plant):
        plant.economics.actual_profit = -200
        rng = ReplayRandom([])
        calc = EconomicsCalculator(rng)
        assert not calc.petition_available(plant)
        assert not calc.petition(plant)
        assert rng.bounds == []

    def test_approved_wipes_losses(self, plant):
        plant.economics.actual_profit = -300
        assert EconomicsCalculator(ReplayRandom([95])).petition(plant)
        assert plant.economics.actual_profit == 0
        assert plant.alerts[0].kind == AlertKind.PETITION_APPROVED

    def test_denied_keeps_losses(self, plant):
        plant.economics.actual_profit = -300
        assert EconomicsCalculator(ReplayRandom([89])).petition(plant)
        assert plant.economics.actual_profit == -300
        assert plant.alerts[0].kind == AlertKind.PETITION_DENIED
