from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Tuple

from plant import constants as C
from plant.state import PlantState
from plant.types import Buffer, FlowCode

EMPTY = int(FlowCode.EMPTY)


def coolant_code(temperature: int) -> int:
    """Primary coolant colour for the current core temperature band."""
    if temperature <= C.TEMP_LOW:
        return int(FlowCode.COOLANT_COLD)
    if temperature <= C.TEMP_WARM:
        return int(FlowCode.COOLANT_WARM)
    if temperature <= C.TEMP_HIGH:
        return int(FlowCode.COOLANT_HOT)
    if temperature <= C.TEMP_SEVERE:
        return int(FlowCode.COOLANT_SEVERE)
    return int(FlowCode.COOLANT_CRITICAL)


def _source(state: PlantState, cluster: int, code: int) -> int:
    return code if state.cluster(cluster) > 0 else EMPTY


def _through(state: PlantState, upstream: int, valve: int) -> int:
    code = state.pipe(upstream)
    return code if code != EMPTY and state.valve_open(valve) else EMPTY


def _first(state: PlantState, pipes: Iterable[int]) -> int:
    for pipe_id in pipes:
        code = state.pipe(pipe_id)
        if code != EMPTY:
            return code
    return EMPTY


@dataclass(frozen=True)
class FlowStage:
    name: str
    writes: Tuple[int, ...]
    reads: str
    run: Callable[[PlantState], None]


# ── Stages ────────────────────────────────────────────────────────
# Each stage may read pipes written by earlier stages only.

def _hot_leg(state: PlantState) -> None:
    flowing = state.buffers[Buffer.PCS_PRESSURE] > 0
    state.set_pipe(3, coolant_code(state.temperature) if flowing else EMPTY)


def _pcs_source(state: PlantState) -> None:
    state.set_pipe(4, _source(state, C.CLUSTER_PCS, coolant_code(state.temperature)))


def _pcs_branches(state: PlantState) -> None:
    for pipe_id in (5, 6, 7):
        state.set_pipe(pipe_id, _through(state, 4, pipe_id))


def _pcs_header(state: PlantState) -> None:
    state.set_pipe(8, _first(state, (5, 6, 7)))


def _eccs_source(state: PlantState) -> None:
    state.set_pipe(10, _source(state, C.CLUSTER_ECCS, FlowCode.WATER))


def _eccs_injection(state: PlantState) -> None:
    state.set_pipe(11, _through(state, 10, 4))


def _cold_leg(state: PlantState) -> None:
    state.set_pipe(9, _first(state, (8, 11)))


def _condensate_source(state: PlantState) -> None:
    state.set_pipe(20, _source(state, C.CLUSTER_CONDENSATE, FlowCode.WATER))


def _condensate_branches(state: PlantState) -> None:
    state.set_pipe(14, _through(state, 20, 9))
    state.set_pipe(15, _through(state, 20, 10))


def _escs_source(state: PlantState) -> None:
    state.set_pipe(16, _source(state, C.CLUSTER_ESCS, FlowCode.WATER))


def _feed_header(state: PlantState) -> None:
    state.set_pipe(13, _first(state, (14, 15, 16)))


def _feedwater(state: PlantState) -> None:
    state.set_pipe(2, _through(state, 13, 3))


def _steam_line(state: PlantState) -> None:
    # Latches open until the steamer fills, whatever valve 2 does meanwhile.
    if state.buffers[Buffer.STEAMER] >= C.STEAMER_FULL:
        code = EMPTY
    elif state.flowing(1):
        code = state.pipe(1)
    elif state.valve_open(2):
        code = int(FlowCode.STEAM)
    else:
        code = EMPTY
    state.set_pipe(1, code)


def _cooling_tower_source(state: PlantState) -> None:
    state.set_pipe(25, _source(state, C.CLUSTER_COOLING_TOWER, FlowCode.WATER))


def _cooling_branches(state: PlantState) -> None:
    state.set_pipe(21, _through(state, 25, 11))
    state.set_pipe(22, _through(state, 25, 12))


def _condenser_cooling(state: PlantState) -> None:
    state.set_pipe(17, _first(state, (21, 22)))


def _condensate_return(state: PlantState) -> None:
    flowing = state.flowing(17) and state.buffers[Buffer.CONDENSER] > 0
    state.set_pipe(18, FlowCode.WATER if flowing else EMPTY)


def _filter_flush(state: PlantState) -> None:
    flowing = state.cluster(C.CLUSTER_FLUSH) > 0 and any(
        state.valve_open(v) for v in C.FLUSH_VALVES
    )
    if not flowing:
        state.set_pipe(19, EMPTY)
    elif state.filters_clean > 0:
        state.set_pipe(19, FlowCode.WATER)
    else:
        state.set_pipe(19, FlowCode.CONTAMINATED)


def _air_intake(state: PlantState) -> None:
    if any(state.valve_open(v) for v in C.AIR_INTAKE_VALVES):
        state.set_pipe(24, FlowCode.AIR)
        state.air_leak = True
    else:
        state.set_pipe(24, EMPTY)
        state.air_leak = False
        state.flush_countdown = C.FLUSH_TIME


def _containment_drain(state: PlantState) -> None:
    flowing = state.cluster(C.CLUSTER_SUMP) > 0 and state.valve_open(8)
    state.set_pipe(12, FlowCode.CONTAMINATED if flowing else EMPTY)


def _pump_house_transfer(state: PlantState) -> None:
    flowing = state.cluster(C.CLUSTER_PUMP_HOUSE) > 0 and state.valve_open(19)
    state.set_pipe(23, FlowCode.CONTAMINATED if flowing else EMPTY)


STAGES: Tuple[FlowStage, ...] = (
    FlowStage("hot leg", (3,), "PCS pressure, temperature", _hot_leg),
    FlowStage("PCS source", (4,), "cluster 2, temperature", _pcs_source),
    FlowStage("PCS branches", (5, 6, 7), "P4, valves 5-7", _pcs_branches),
    FlowStage("PCS header", (8,), "P5, P6, P7", _pcs_header),
    FlowStage("ECCS source", (10,), "cluster 1", _eccs_source),
    FlowStage("ECCS injection", (11,), "P10, valve 4", _eccs_injection),
    FlowStage("cold leg", (9,), "P8, P11", _cold_leg),
    FlowStage("condensate source", (20,), "cluster 4", _condensate_source),
    FlowStage("condensate branches", (14, 15), "P20, valves 9-10", _condensate_branches),
    FlowStage("ESCS source", (16,), "cluster 3", _escs_source),
    FlowStage("feed header", (13,), "P14, P15, P16", _feed_header),
    FlowStage("feedwater", (2,), "P13, valve 3", _feedwater),
    FlowStage("steam line", (1,), "steamer, P1 last tick, valve 2", _steam_line),
    FlowStage("cooling tower source", (25,), "cluster 5", _cooling_tower_source),
    FlowStage("cooling branches", (21, 22), "P25, valves 11-12", _cooling_branches),
    FlowStage("condenser cooling", (17,), "P21, P22", _condenser_cooling),
    FlowStage("condensate return", (18,), "P17, condenser", _condensate_return),
    FlowStage("filter flush", (19,), "cluster 6, valves 16-18, filters", _filter_flush),
    FlowStage("air intake", (24,), "valves 13-15", _air_intake),
    FlowStage("containment drain", (12,), "cluster 8, valve 8", _containment_drain),
    FlowStage("pump-house transfer", (23,), "cluster 7, valve 19", _pump_house_transfer),
)


class FlowNetworkResolver:
    """Recomputes all 25 pipes by running STAGES in order.

    The order is part of the behaviour: stages read pipes that earlier stages
    wrote during the same pass, and the steam line reads its own value from the
    previous tick.
    """

    def __init__(self, stages: Tuple[FlowStage, ...] = STAGES) -> None:
        self.stages = stages

    def recompute(self, state: PlantState) -> None:
        for stage in self.stages:
            stage.run(state)
