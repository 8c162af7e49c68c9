from __future__ import annotations

from typing import Union

from plant import constants as C
from plant.logging_utils import get_logger
from plant.rng import RandomSource
from plant.state import Filter, PlantState, Pump, Turbine, Valve
from plant.types import (
    Alert,
    AlertKind,
    ComponentKind,
    FilterStatus,
    PumpStatus,
    TurbineStatus,
    ValveStatus,
)

logger = get_logger(__name__)

Component = Union[Valve, Pump, Turbine]

# (repair, idle, active) variant per kind
_VARIANTS = {
    ComponentKind.VALVE: (ValveStatus.REPAIR, ValveStatus.SHUT, ValveStatus.OPEN),
    ComponentKind.PUMP: (PumpStatus.REPAIR, PumpStatus.OFF, PumpStatus.ON),
    ComponentKind.TURBINE: (TurbineStatus.REPAIR, TurbineStatus.OFFLINE, TurbineStatus.ONLINE),
}


def _components(state: PlantState, kind: ComponentKind):
    if kind is ComponentKind.VALVE:
        return state.valves
    if kind is ComponentKind.PUMP:
        return state.pumps
    if kind is ComponentKind.TURBINE:
        return state.turbines
    raise ValueError(f"{kind} has no failure/repair lifecycle")


def _component(state: PlantState, kind: ComponentKind, index: int) -> Component:
    if kind is ComponentKind.VALVE:
        return state.valve(index)
    if kind is ComponentKind.PUMP:
        return state.pump(index)
    if kind is ComponentKind.TURBINE:
        return state.turbine(index)
    raise ValueError(f"{kind} has no failure/repair lifecycle")


def is_failed(component: Component, kind: ComponentKind) -> bool:
    """A component whose countdown sits above its failure window has failed."""
    return component.countdown >= C.LIFECYCLES[kind].toggle_ceiling


class FailureRepairManager:
    """Countdown timers and status transitions for valves, pumps, turbines and filters.

    Valves, pumps and turbines share one state machine:
        operating --countdown hits 0--> failed (countdown pinned at FAILED_COUNTDOWN)
        any state --repair command---> REPAIR (randomised countdown)
        REPAIR ----countdown hits 0--> idle variant with a fresh failure countdown
    A failed component keeps its last status; only a repair frees it.

    Filters run a separate soot model driven by their condition countdown.
    """

    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def _draw(self, jitter: int, base: int) -> int:
        return self.rng.next(jitter) + base

    # ── Per-tick ──────────────────────────────────────────────────

    def decrement(self, state: PlantState) -> None:
        for kind in (ComponentKind.VALVE, ComponentKind.PUMP, ComponentKind.TURBINE):
            for comp in _components(state, kind):
                if 0 < comp.countdown < C.FAILED_COUNTDOWN:
                    comp.countdown -= 1
        for filt in state.filters:
            if filt.condition > 0:
                filt.condition -= 1
        state.gauge_countdown = [g - 1 if g > 0 else g for g in state.gauge_countdown]
        if state.air_leak and state.flush_countdown > 0:
            state.flush_countdown -= 1

    def check_failures(self, state: PlantState) -> None:
        for kind in (ComponentKind.VALVE, ComponentKind.PUMP, ComponentKind.TURBINE):
            self._check_kind(state, kind)
        state.recount_pumps()
        state.recount_turbines()
        for index, filt in enumerate(state.filters, start=1):
            self._check_filter(state, index, filt)

    def _check_kind(self, state: PlantState, kind: ComponentKind) -> None:
        life = C.LIFECYCLES[kind]
        repair, idle, _active = _VARIANTS[kind]
        for index, comp in enumerate(_components(state, kind), start=1):
            if comp.countdown > 0:
                continue
            label = f"{kind.value.upper()} {C.letter(index)}"
            if comp.status == repair:
                comp.countdown = self._draw(life.failure_jitter, life.failure_base)
                comp.status = idle
                self._alert(state, AlertKind.COMPONENT_REPAIRED, f"{label} REPAIRED")
                logger.info("%s back in service, next failure in %d min", label, comp.countdown)
            else:
                comp.countdown = C.FAILED_COUNTDOWN
                self._alert(state, AlertKind.COMPONENT_FAILED, f"{label} FAILED")
                logger.warning("%s failed while %s", label, comp.status.name)

    def _check_filter(self, state: PlantState, index: int, filt: Filter) -> None:
        if filt.status != FilterStatus.DIRTY or filt.condition > 0:
            return
        filt.soot_level += 1
        filt.soot_pressure = self.rng.next(10 + filt.soot_level) + filt.soot_level
        if filt.soot_level > C.SOOT_CLOG_LEVEL:
            filt.condition = 0
            filt.soot_pressure = self.rng.next(26) + 10
            self._alert(state, AlertKind.FILTER_CLOGGED, f"FILTER {C.letter(index)} CLOGGED")
            logger.warning("filter %s clogged at soot level %d", C.letter(index), filt.soot_level)
        else:
            filt.condition = self._draw(C.SOOT_REPAIR_JITTER, C.SOOT_REPAIR_BASE)

    # ── Operator protocol ─────────────────────────────────────────

    def can_toggle(self, state: PlantState, kind: ComponentKind, index: int) -> bool:
        comp = _component(state, kind, index)
        repair, _idle, _active = _VARIANTS[kind]
        return comp.status != repair and comp.countdown <= C.LIFECYCLES[kind].toggle_ceiling

    def toggle(self, state: PlantState, kind: ComponentKind, index: int) -> bool:
        """Flip between the two operating variants; False when not toggle-eligible."""
        if kind is ComponentKind.FILTER:
            return self.toggle_filter(state, index)
        comp = _component(state, kind, index)
        if not self.can_toggle(state, kind, index):
            logger.debug("toggle %s %d rejected (status %s, countdown %d)",
                         kind.value, index, comp.status.name, comp.countdown)
            return False
        life = C.LIFECYCLES[kind]
        _repair, idle, active = _VARIANTS[kind]
        comp.status = active if comp.status == idle else idle
        comp.countdown -= self._draw(life.adjust_jitter, life.adjust_base)
        self._recount(state, kind)
        return True

    def repair(self, state: PlantState, kind: ComponentKind, index: int) -> bool:
        if kind is ComponentKind.FILTER:
            raise ValueError("filters are cleaned by toggling, not repaired")
        comp = _component(state, kind, index)
        repair, _idle, _active = _VARIANTS[kind]
        if comp.status == repair:
            return False
        life = C.LIFECYCLES[kind]
        comp.status = repair
        comp.countdown = self._draw(life.repair_jitter, life.repair_base)
        cost = self._draw(life.maintenance_jitter, life.maintenance_base)
        state.economics.add_maintenance(cost)
        self._recount(state, kind)
        logger.info("%s %s sent for repair (%d min, $%d,000)",
                    kind.value, C.letter(index), comp.countdown, cost)
        return True

    def toggle_filter(self, state: PlantState, index: int) -> bool:
        filt = state.filter(index)
        if filt.soot_level > C.SOOT_CLOG_LEVEL or filt.status == FilterStatus.CLEAN:
            new_status = FilterStatus.DIRTY
        else:
            new_status = FilterStatus.CLEAN
        changed = new_status != filt.status
        filt.status = new_status
        state.recount_filters()
        return changed

    @staticmethod
    def _recount(state: PlantState, kind: ComponentKind) -> None:
        if kind is ComponentKind.PUMP:
            state.recount_pumps()
        elif kind is ComponentKind.TURBINE:
            state.recount_turbines()

    @staticmethod
    def _alert(state: PlantState, kind: AlertKind, message: str) -> None:
        state.alerts.append(Alert(kind, message, minute=state.clock.minute, day=state.clock.day))
