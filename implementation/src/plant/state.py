from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from plant import constants as C
from plant.rng import RandomSource
from plant.types import (
    Alert,
    Buffer,
    ComponentKind,
    FilterStatus,
    FlowCode,
    Outcome,
    PumpStatus,
    TurbineStatus,
    ValveStatus,
)


@dataclass
class Valve:
    status: ValveStatus = ValveStatus.SHUT
    countdown: int = 0


@dataclass
class Pump:
    status: PumpStatus = PumpStatus.OFF
    countdown: int = 0


@dataclass
class Turbine:
    status: TurbineStatus = TurbineStatus.OFFLINE
    countdown: int = 0


@dataclass
class Filter:
    status: FilterStatus = FilterStatus.DIRTY
    condition: int = 0
    soot_level: int = 0
    soot_pressure: int = 0


@dataclass
class ControlRod:
    position: int = 0
    color: int = C.ROD_COLOR_INSERTED


def _check_id(kind: str, index: int, count: int) -> int:
    if not 1 <= index <= count:
        raise IndexError(f"{kind} id {index} out of range 1..{count}")
    return index - 1


@dataclass
class Buffers:
    """Eleven physical quantities plus the previous tick's copy, addressed 1..11."""
    current: List[int] = field(default_factory=lambda: [0] * C.NUM_BUFFERS)
    old: List[int] = field(default_factory=lambda: [0] * C.NUM_BUFFERS)

    def __getitem__(self, buffer: int) -> int:
        return self.current[_check_id("buffer", int(buffer), C.NUM_BUFFERS)]

    def __setitem__(self, buffer: int, value: int) -> None:
        self.current[_check_id("buffer", int(buffer), C.NUM_BUFFERS)] = value

    def previous(self, buffer: int) -> int:
        return self.old[_check_id("buffer", int(buffer), C.NUM_BUFFERS)]

    def snapshot(self) -> None:
        self.old = list(self.current)


@dataclass
class Economics:
    operating_cost: int = C.START_OPERATING_COST
    maintenance_cost: int = 0
    demand: int = C.START_DEMAND
    output: int = 0
    projected_profit: int = 0
    actual_profit: int = 0

    def add_maintenance(self, amount: int) -> None:
        if amount <= 0:
            return
        self.maintenance_cost += amount


@dataclass
class Clock:
    minute: int = 0
    day: int = 1
    demand_countdown: int = 0


@dataclass
class PlantState:
    """Every entity of the plant. Behaviour lives in the pipeline stages.

    Component ids are 1-based as the operator sees them; the accessors raise
    IndexError for anything outside the fixed plant.
    """
    valves: List[Valve] = field(default_factory=lambda: [Valve() for _ in range(C.NUM_VALVES)])
    pumps: List[Pump] = field(default_factory=lambda: [Pump() for _ in range(C.NUM_PUMPS)])
    turbines: List[Turbine] = field(default_factory=lambda: [Turbine() for _ in range(C.NUM_TURBINES)])
    filters: List[Filter] = field(default_factory=lambda: [Filter() for _ in range(C.NUM_FILTERS)])
    rods: List[ControlRod] = field(default_factory=lambda: [ControlRod() for _ in range(C.NUM_RODS)])
    # Index 0 is unused so pipe numbers match the plant diagrams.
    pipes: List[int] = field(default_factory=lambda: [int(FlowCode.EMPTY)] * (C.NUM_PIPES + 1))
    buffers: Buffers = field(default_factory=Buffers)
    economics: Economics = field(default_factory=Economics)
    clock: Clock = field(default_factory=Clock)
    # Ticks until each status gauge becomes unreliable
    gauge_countdown: List[int] = field(default_factory=lambda: [0] * C.NUM_GAUGES)

    temperature: int = 0
    old_temperature: int = 0
    pumps_required: int = 1

    # Derived counts, always rebuilt by the recount_* methods
    cluster_active: List[int] = field(default_factory=lambda: [0] * C.NUM_PUMP_CLUSTERS)
    turbines_online: int = 0
    filters_clean: int = 0
    rod_cluster_weight: List[int] = field(default_factory=lambda: [0, 0])
    rod_heat: int = 0

    # Emergency state
    primary_leak: bool = False
    fuel_rod_damage: bool = False
    air_leak: bool = False
    eccs_activated: bool = False
    containment_limit: int = C.CONTAINMENT_LIMIT
    radiation_warning: int = C.RADIATION_WARNING
    flush_countdown: int = C.FLUSH_TIME
    notice_number: int = 0
    outcome: Optional[Outcome] = None

    alerts: List[Alert] = field(default_factory=list)

    # ── Accessors ─────────────────────────────────────────────────

    def valve(self, valve_id: int) -> Valve:
        return self.valves[_check_id("valve", valve_id, C.NUM_VALVES)]

    def pump(self, pump_id: int) -> Pump:
        return self.pumps[_check_id("pump", pump_id, C.NUM_PUMPS)]

    def turbine(self, turbine_id: int) -> Turbine:
        return self.turbines[_check_id("turbine", turbine_id, C.NUM_TURBINES)]

    def filter(self, filter_id: int) -> Filter:
        return self.filters[_check_id("filter", filter_id, C.NUM_FILTERS)]

    def rod(self, rod_id: int) -> ControlRod:
        return self.rods[_check_id("rod", rod_id, C.NUM_RODS)]

    def gauge(self, gauge_id: int) -> int:
        return self.gauge_countdown[_check_id("gauge", gauge_id, C.NUM_GAUGES)]

    def pipe(self, pipe_id: int) -> int:
        return self.pipes[_check_id("pipe", pipe_id, C.NUM_PIPES) + 1]

    def set_pipe(self, pipe_id: int, code: int) -> None:
        self.pipes[_check_id("pipe", pipe_id, C.NUM_PIPES) + 1] = int(code)

    def flowing(self, pipe_id: int) -> bool:
        return self.pipe(pipe_id) != FlowCode.EMPTY

    def valve_open(self, valve_id: int) -> bool:
        return self.valve(valve_id).status == ValveStatus.OPEN

    def cluster(self, cluster_id: int) -> int:
        return self.cluster_active[_check_id("pump cluster", cluster_id, C.NUM_PUMP_CLUSTERS)]

    @property
    def terminated(self) -> bool:
        return self.outcome is not None

    # ── Derived counts ────────────────────────────────────────────

    def recount_pumps(self) -> None:
        for c in range(C.NUM_PUMP_CLUSTERS):
            members = self.pumps[c * C.PUMPS_PER_CLUSTER:(c + 1) * C.PUMPS_PER_CLUSTER]
            self.cluster_active[c] = sum(1 for p in members if p.status == PumpStatus.ON)

    def recount_turbines(self) -> None:
        self.turbines_online = sum(1 for t in self.turbines if t.status == TurbineStatus.ONLINE)

    def recount_filters(self) -> None:
        self.filters_clean = sum(1 for f in self.filters if f.status == FilterStatus.CLEAN)

    def recount_rods(self) -> None:
        for c in range(2):
            members = self.rods[c * C.RODS_PER_CLUSTER:(c + 1) * C.RODS_PER_CLUSTER]
            self.rod_cluster_weight[c] = sum(r.position for r in members)
        self.rod_heat = sum(self.rod_cluster_weight)

    def recount(self) -> None:
        self.recount_pumps()
        self.recount_turbines()
        self.recount_filters()
        self.recount_rods()


def draw_demand_countdown(rng: RandomSource) -> int:
    """Minutes until the next demand shift: 50, give or take up to 14."""
    magnitude = rng.next(C.DEMAND_CHANGE_JITTER)
    return C.DEMAND_CHANGE_BASE + magnitude * (rng.next(3) - 1)


def new_plant(rng: RandomSource) -> PlantState:
    """Build a cold-shutdown plant with freshly drawn countdowns.

    Draw order: pumps, valves, filters, turbines, gauges, then the demand
    countdown.
    """
    state = PlantState()
    pump_life = C.LIFECYCLES[ComponentKind.PUMP]
    valve_life = C.LIFECYCLES[ComponentKind.VALVE]
    turbine_life = C.LIFECYCLES[ComponentKind.TURBINE]

    for pump in state.pumps:
        pump.countdown = rng.next(pump_life.failure_jitter) + pump_life.failure_base
        pump.status = PumpStatus.OFF
    for valve in state.valves:
        valve.countdown = rng.next(valve_life.failure_jitter) + valve_life.failure_base
        valve.status = ValveStatus.SHUT
    for filt in state.filters:
        filt.status = FilterStatus.DIRTY
        filt.soot_level = 0
        filt.condition = rng.next(C.SOOT_REPAIR_JITTER) + C.SOOT_REPAIR_BASE
    for turbine in state.turbines:
        turbine.countdown = rng.next(turbine_life.failure_jitter) + turbine_life.failure_base
        turbine.status = TurbineStatus.OFFLINE
    state.gauge_countdown = [
        rng.next(C.GAUGE_CHECK_JITTER) + C.GAUGE_CHECK_BASE for _ in range(C.NUM_GAUGES)
    ]

    state.buffers[Buffer.PRESSURIZER_WATER] = C.PRESSURIZER_NOMINAL
    state.buffers[Buffer.PCS_PRESSURE] = C.PCS_NOMINAL

    state.clock.demand_countdown = draw_demand_countdown(rng)

    state.recount()
    return state


def apply_muse_preset(state: PlantState) -> None:
    """Warm start: condensate and cooling-tower pumps on, steam path open, one turbine online."""
    for pump_id in C.MUSE_PUMPS:
        state.pump(pump_id).status = PumpStatus.ON
    for valve_id in C.MUSE_VALVES:
        state.valve(valve_id).status = ValveStatus.OPEN
    for turbine_id in C.MUSE_TURBINES:
        state.turbine(turbine_id).status = TurbineStatus.ONLINE
    for rod in state.rods:
        rod.position = C.MUSE_ROD_POSITION
        rod.color = C.ROD_COLOR_PARTIAL
    state.temperature = C.MUSE_TEMPERATURE
    state.recount()
