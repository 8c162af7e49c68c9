"""
Tests for plant/lifecycle.py: countdowns, failure, repair and the filter soot model.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant import constants as C
from plant.lifecycle import FailureRepairManager, is_failed
from plant.rng import ReplayRandom
from plant.types import (
    AlertKind,
    ComponentKind,
    FilterStatus,
    PumpStatus,
    TurbineStatus,
    ValveStatus,
)


def _manager(*draws):
    return FailureRepairManager(ReplayRandom(list(draws)))


# =============================================================================
# Countdowns
# =============================================================================

class TestDecrement:
    def test_countdowns_tick_down(self, plant):
        plant.pump(1).countdown = 500
        plant.filter(1).condition = 3
        _manager().decrement(plant)
        assert plant.pump(1).countdown == 499
        assert plant.valve(1).countdown == 249
        assert plant.turbine(1).countdown == 2759
        assert plant.filter(1).condition == 2

    def test_failed_and_zero_countdowns_hold(self, plant):
        plant.pump(1).countdown = C.FAILED_COUNTDOWN
        plant.pump(2).countdown = 0
        plant.filter(1).condition = 0
        _manager().decrement(plant)
        assert plant.pump(1).countdown == C.FAILED_COUNTDOWN
        assert plant.pump(2).countdown == 0
        assert plant.filter(1).condition == 0

    def test_flush_timer_runs_only_with_air_leak(self, plant):
        manager = _manager()
        manager.decrement(plant)
        assert plant.flush_countdown == 120
        plant.air_leak = True
        manager.decrement(plant)
        assert plant.flush_countdown == 119

    def test_gauges_count_down_to_zero(self, plant):
        plant.gauge_countdown = [1, 0] + [750] * 9
        _manager().decrement(plant)
        assert plant.gauge_countdown == [0, 0] + [749] * 9


# =============================================================================
# Failure and repair completion
# =============================================================================

class TestCheckFailures:
    def test_operating_component_fails_and_keeps_status(self, plant):
        pump = plant.pump(1)
        pump.status = PumpStatus.ON
        pump.countdown = 0
        _manager().check_failures(plant)
        assert pump.countdown == C.FAILED_COUNTDOWN
        assert pump.status == PumpStatus.ON
        assert is_failed(pump, ComponentKind.PUMP)
        assert [a.kind for a in plant.alerts] == [AlertKind.COMPONENT_FAILED]
        assert plant.alerts[0].message == "PUMP A FAILED"

    def test_repair_completes_to_idle_variant(self, plant):
        valve = plant.valve(3)
        valve.status = ValveStatus.REPAIR
        valve.countdown = 0
        _manager(40).check_failures(plant)
        assert valve.status == ValveStatus.SHUT
        assert valve.countdown == 290
        assert not is_failed(valve, ComponentKind.VALVE)
        assert plant.alerts[0].kind == AlertKind.COMPONENT_REPAIRED
        assert plant.alerts[0].message == "VALVE C REPAIRED"

    def test_turbine_repair_draws_turbine_window(self, plant):
        turbine = plant.turbine(2)
        turbine.status = TurbineStatus.REPAIR
        turbine.countdown = 0
        rng = ReplayRandom([0])
        FailureRepairManager(rng).check_failures(plant)
        assert rng.bounds == [120]
        assert turbine.countdown == 2760
        assert turbine.status == TurbineStatus.OFFLINE


class TestFilterSoot:
    def test_dirty_filter_accumulates_soot(self, plant):
        filt = plant.filter(1)
        filt.condition = 0
        rng = ReplayRandom([4, 7])
        FailureRepairManager(rng).check_failures(plant)
        assert filt.soot_level == 1
        assert filt.soot_pressure == 5
        assert filt.condition == 32
        assert rng.bounds == [11, 25]

    def test_filter_clogs_past_soot_limit(self, plant):
        filt = plant.filter(1)
        filt.soot_level = 10
        filt.condition = 0
        rng = ReplayRandom([2, 20])
        FailureRepairManager(rng).check_failures(plant)
        assert filt.soot_level == 11
        assert filt.condition == 0
        assert filt.soot_pressure == 30
        assert rng.bounds == [21, 26]
        assert plant.alerts[0].kind == AlertKind.FILTER_CLOGGED

    def test_clean_filter_is_left_alone(self, plant):
        filt = plant.filter(2)
        filt.status = FilterStatus.CLEAN
        filt.condition = 0
        rng = ReplayRandom([])
        FailureRepairManager(rng).check_failures(plant)
        assert filt.soot_level == 0
        assert rng.bounds == []


# =============================================================================
# Operator protocol
# =============================================================================

class TestToggle:
    def test_toggle_pump_on_and_recount(self, plant):
        rng = ReplayRandom([2])
        assert FailureRepairManager(rng).toggle(plant, ComponentKind.PUMP, 1)
        assert plant.pump(1).status == PumpStatus.ON
        assert plant.pump(1).countdown == 493
        assert plant.cluster(1) == 1
        assert rng.bounds == [5]

    def test_toggle_turbine_online(self, plant):
        assert _manager(0).toggle(plant, ComponentKind.TURBINE, 4)
        assert plant.turbine(4).status == TurbineStatus.ONLINE
        assert plant.turbines_online == 1
        assert plant.turbine(4).countdown == 2750

    def test_toggle_rejected_when_failed(self, plant):
        plant.pump(1).countdown = C.FAILED_COUNTDOWN
        rng = ReplayRandom([])
        assert not FailureRepairManager(rng).toggle(plant, ComponentKind.PUMP, 1)
        assert plant.pump(1).status == PumpStatus.OFF
        assert rng.bounds == []

    def test_toggle_rejected_during_repair(self, plant):
        plant.valve(2).status = ValveStatus.REPAIR
        assert not _manager().toggle(plant, ComponentKind.VALVE, 2)

    @pytest.mark.parametrize("countdown,allowed", [(600, True), (601, False)])
    def test_toggle_ceiling(self, plant, countdown, allowed):
        plant.pump(5).countdown = countdown
        assert _manager().can_toggle(plant, ComponentKind.PUMP, 5) is allowed

    def test_toggle_unknown_id(self, plant):
        with pytest.raises(IndexError):
            _manager().toggle(plant, ComponentKind.VALVE, 20)


class TestRepair:
    def test_repair_sets_countdown_and_cost(self, plant):
        plant.pump(7).status = PumpStatus.ON
        plant.recount_pumps()
        rng = ReplayRandom([10, 1])
        assert FailureRepairManager(rng).repair(plant, ComponentKind.PUMP, 7)
        pump = plant.pump(7)
        assert pump.status == PumpStatus.REPAIR
        assert pump.countdown == 60
        assert plant.economics.maintenance_cost == 3
        assert plant.cluster(3) == 0
        assert rng.bounds == [25, 2]

    def test_repair_frees_failed_component(self, plant):
        plant.valve(5).countdown = C.FAILED_COUNTDOWN
        assert _manager(0, 0).repair(plant, ComponentKind.VALVE, 5)
        assert plant.valve(5).countdown == 25
        assert not is_failed(plant.valve(5), ComponentKind.VALVE)

    def test_repair_already_in_repair_rejected(self, plant):
        plant.turbine(1).status = TurbineStatus.REPAIR
        rng = ReplayRandom([])
        assert not FailureRepairManager(rng).repair(plant, ComponentKind.TURBINE, 1)
        assert plant.economics.maintenance_cost == 0

    def test_filters_cannot_be_repaired(self, plant):
        with pytest.raises(ValueError):
            _manager().repair(plant, ComponentKind.FILTER, 1)


class TestToggleFilter:
    def test_dirty_to_clean_and_back(self, plant):
        manager = _manager()
        assert manager.toggle_filter(plant, 1)
        assert plant.filter(1).status == FilterStatus.CLEAN
        assert plant.filters_clean == 1
        assert manager.toggle(plant, ComponentKind.FILTER, 1)
        assert plant.filter(1).status == FilterStatus.DIRTY
        assert plant.filters_clean == 0

    def test_clogged_filter_stays_dirty(self, plant):
        plant.filter(3).soot_level = 11
        assert not _manager().toggle_filter(plant, 3)
        assert plant.filter(3).status == FilterStatus.DIRTY
