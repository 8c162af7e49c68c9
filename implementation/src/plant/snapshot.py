"""
Read-only projection of a PlantState for the screens.

Everything here is derived on demand and never written back; the front end
draws only from these values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from plant import constants as C
from plant.economics import EconomicsCalculator
from plant.lifecycle import is_failed
from plant.rng import RandomSource
from plant.state import PlantState
from plant.types import (
    Buffer,
    ComponentKind,
    FilterStatus,
    Outcome,
    PumpStatus,
    TurbineStatus,
    ValveStatus,
)

_STATUS_TEXT = {
    ComponentKind.VALVE: {ValveStatus.REPAIR: "REPAIR", ValveStatus.SHUT: "SHUT", ValveStatus.OPEN: "OPEN"},
    ComponentKind.PUMP: {PumpStatus.REPAIR: "REPAIR", PumpStatus.OFF: "OFF", PumpStatus.ON: "ON"},
    ComponentKind.TURBINE: {
        TurbineStatus.REPAIR: "REPAIR",
        TurbineStatus.OFFLINE: "OFF LINE",
        TurbineStatus.ONLINE: "ON LINE",
    },
}

_ACTIVE = {
    ComponentKind.VALVE: ValveStatus.OPEN,
    ComponentKind.PUMP: PumpStatus.ON,
    ComponentKind.TURBINE: TurbineStatus.ONLINE,
}


def format_time(minute: int, day: int, include_day: bool = False) -> str:
    """Clock text "HH:MM", or "d/HH:MM"; minutes past midnight roll whole days."""
    extra_days, minute = divmod(minute, C.MINUTES_PER_DAY)
    day += extra_days
    hours, mins = divmod(minute, 60)
    if include_day:
        return f"{day}/{hours:02d}:{mins:02d}"
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True)
class ScheduleLine:
    component_id: int
    letter: str
    status: str
    countdown: int
    failed: bool
    # Failure due time for an operating component, ready time for one in repair.
    due: Optional[str] = None

    @property
    def text(self) -> str:
        body = f"{self.letter}  {self.status}"
        return f"{body:<12}{self.due}" if self.due else body


def _components(state: PlantState, kind: ComponentKind):
    if kind is ComponentKind.VALVE:
        return state.valves
    if kind is ComponentKind.PUMP:
        return state.pumps
    if kind is ComponentKind.TURBINE:
        return state.turbines
    raise ValueError(f"{kind} has no maintenance schedule")


def maintenance_schedule(state: PlantState, kind: ComponentKind) -> List[ScheduleLine]:
    clock = state.clock
    lines: List[ScheduleLine] = []
    for index, comp in enumerate(_components(state, kind), start=1):
        failed = is_failed(comp, kind)
        due = None
        if failed:
            status = "FAILED"
        else:
            status = _STATUS_TEXT[kind][comp.status]
            if comp.status == _ACTIVE[kind]:
                due = format_time(clock.minute + comp.countdown // state.pumps_required, clock.day, True)
            elif status == "REPAIR":
                due = format_time(clock.minute + comp.countdown, clock.day, True)
        lines.append(ScheduleLine(index, C.letter(index), status, comp.countdown, failed, due))
    return lines


@dataclass(frozen=True)
class FilterView:
    filter_id: int
    letter: str
    clean: bool
    condition: int
    soot_level: int
    soot_pressure: int

    @property
    def clogged(self) -> bool:
        return self.soot_level > C.SOOT_CLOG_LEVEL


def _with_suffix(value: int, suffix: str) -> str:
    return f"{value}{suffix}" if value > 0 else str(value)


def gauge_readings(state: PlantState, rng: Optional[RandomSource] = None) -> List[Tuple[str, str]]:
    """Label and text for each status gauge, top to bottom.

    With a random source, a gauge whose countdown has run out reads a
    random 0..99 half of the time. Gauges still in service draw nothing.
    """
    b = state.buffers
    radiation = b[Buffer.RADIATION]
    flush = C.FLUSH_TIME - state.flush_countdown
    readings = [
        ("CORE TEMP:", f"{state.temperature} DEG"),
        ("CTRL RODS:", f"{state.rod_heat} DEG"),
        ("PCS PRES:", f"{b[Buffer.PCS_PRESSURE] * 100 + 1200} PSI"),
        ("PMPS REQ'D:", str(state.pumps_required)),
        ("CNTMT PRES:", f"{_with_suffix(b[Buffer.CONTAINMENT_PRESSURE], '00')} PSI"),
        ("CNTMT WTR:", f"{_with_suffix(b[Buffer.CONTAINMENT_WATER], ',000')} GAL"),
        ("PMP HSE WTR:", f"{_with_suffix(b[Buffer.PUMP_HOUSE_WATER], ',000')} GAL"),
        ("PMP HSE RAD:", f"{radiation // 100}.{radiation % 100:02d} MREMS/HR"),
        ("FLUSH TIME:", format_time(flush, state.clock.day) if flush >= 0 else "N/A"),
        ("PRSZER WTR:", f"{_with_suffix(b[Buffer.PRESSURIZER_WATER], ',000')} GAL"),
    ]
    if rng is None:
        return readings
    for gauge_id, (label, _) in enumerate(readings, start=1):
        if state.gauge(gauge_id) <= 0 and rng.next(2) == 0:
            readings[gauge_id - 1] = (label, str(rng.next(100)))
    return readings


def status_warnings(state: PlantState) -> List[str]:
    b = state.buffers
    econ = state.economics
    checks = [
        ("SEALED", state.containment_limit == C.CONTAINMENT_SEALED),
        ("TEMP", state.temperature > C.TEMP_HIGH),
        ("FR DAMAGE", state.fuel_rod_damage),
        ("SCRAM", state.rod_heat == 0),
        ("ECCS", state.cluster(C.CLUSTER_ECCS) > 0),
        ("ESCS", state.cluster(C.CLUSTER_ESCS) > 0),
        ("RADLEAK", b[Buffer.RADIATION] > 0),
        ("FLTR", state.filters_clean == 0),
        ("AIR", state.air_leak),
        ("CNDSER", b[Buffer.CONDENSER] > 0),
        ("STMER", b[Buffer.STEAMER] > 0),
        ("PCSLEAK", state.primary_leak),
    ]
    warnings = [name for name, active in checks if active]
    if 0 < econ.output < econ.demand:
        warnings.append("BROWNOUT")
    elif econ.output == 0:
        warnings.append("BLACKOUT")
    return warnings


@dataclass(frozen=True)
class CostReport:
    lines: Tuple[str, ...]
    demand_change: str
    petition_available: bool
    loss: bool


def _money(value: int) -> str:
    return f"$ {value},000" if value != 0 else "$ 0"


def cost_report(state: PlantState) -> CostReport:
    econ = state.economics
    clock = state.clock
    demand_change = format_time(clock.minute + clock.demand_countdown, clock.day, True)
    projected = _money(econ.projected_profit) if econ.projected_profit > 0 else f"$ {econ.projected_profit}"
    actual = _money(abs(econ.actual_profit))
    if econ.actual_profit < 0:
        actual = f"< {actual} >  <LOSS>"
    lines = (
        f"OPERATING COST:   $ {econ.operating_cost},000",
        f"MAINTENANCE COST: {_money(econ.maintenance_cost)}",
        f"ELECTRIC DEMAND: {econ.demand:<6} MEGAWATTS",
        f"ELECTRIC OUTPUT: {econ.output:<6} MEGAWATTS",
        f"(ELECTRIC DEMAND CHANGES AT {demand_change} )",
        f"PROJECTED PROFIT: {projected}",
        f"ACTUAL PROFIT:    {actual}",
    )
    return CostReport(
        lines=lines,
        demand_change=demand_change,
        petition_available=EconomicsCalculator.petition_available(state),
        loss=econ.actual_profit < 0,
    )


@dataclass(frozen=True)
class PlantSnapshot:
    minute: int
    day: int
    time: str
    temperature: int
    pumps_required: int
    valves: Tuple[ScheduleLine, ...]
    pumps: Tuple[ScheduleLine, ...]
    turbines: Tuple[ScheduleLine, ...]
    filters: Tuple[FilterView, ...]
    rod_positions: Tuple[int, ...]
    rod_colors: Tuple[int, ...]
    rod_heat: int
    pipes: Tuple[int, ...]
    buffers: Tuple[int, ...]
    cluster_active: Tuple[int, ...]
    turbines_online: int
    filters_clean: int
    operating_cost: int
    maintenance_cost: int
    demand: int
    output: int
    projected_profit: int
    actual_profit: int
    primary_leak: bool
    fuel_rod_damage: bool
    air_leak: bool
    sealed: bool
    notice_number: int
    outcome: Optional[Outcome]
    warnings: Tuple[str, ...]

    def buffer(self, buffer: int) -> int:
        return self.buffers[int(buffer) - 1]

    def pipe(self, pipe_id: int) -> int:
        return self.pipes[pipe_id - 1]


def take_snapshot(state: PlantState) -> PlantSnapshot:
    econ = state.economics
    clock = state.clock
    filters = tuple(
        FilterView(i, C.letter(i), f.status == FilterStatus.CLEAN, f.condition, f.soot_level, f.soot_pressure)
        for i, f in enumerate(state.filters, start=1)
    )
    return PlantSnapshot(
        minute=clock.minute,
        day=clock.day,
        time=format_time(clock.minute, clock.day, True),
        temperature=state.temperature,
        pumps_required=state.pumps_required,
        valves=tuple(maintenance_schedule(state, ComponentKind.VALVE)),
        pumps=tuple(maintenance_schedule(state, ComponentKind.PUMP)),
        turbines=tuple(maintenance_schedule(state, ComponentKind.TURBINE)),
        filters=filters,
        rod_positions=tuple(r.position for r in state.rods),
        rod_colors=tuple(r.color for r in state.rods),
        rod_heat=state.rod_heat,
        pipes=tuple(state.pipes[1:]),
        buffers=tuple(state.buffers.current),
        cluster_active=tuple(state.cluster_active),
        turbines_online=state.turbines_online,
        filters_clean=state.filters_clean,
        operating_cost=econ.operating_cost,
        maintenance_cost=econ.maintenance_cost,
        demand=econ.demand,
        output=econ.output,
        projected_profit=econ.projected_profit,
        actual_profit=econ.actual_profit,
        primary_leak=state.primary_leak,
        fuel_rod_damage=state.fuel_rod_damage,
        air_leak=state.air_leak,
        sealed=state.containment_limit == C.CONTAINMENT_SEALED,
        notice_number=state.notice_number,
        outcome=state.outcome,
        warnings=tuple(status_warnings(state)),
    )
