from __future__ import annotations

from typing import Callable, List, Tuple

from plant import constants as C
from plant.state import PlantState
from plant.types import Buffer

DRAIN_PIPES = {
    "condenser": 17,
    "feedwater": 2,
}


def clamp(value: int, buffer: Buffer) -> int:
    low, high = C.BUFFER_DOMAINS[buffer]
    return max(low, min(high, value))


class BufferUpdater:
    """Recomputes the eleven buffers from last tick's values.

    Every formula reads ``buffers.old`` only, so the order the buffers are
    written in cannot change the result. Pipes are read as resolved on the
    previous tick. Each result is clamped to its buffer's domain.

    ``drain_pipe`` names the pipe that must flow for the steamer and the
    condenser to drain: "condenser" (pipe 17) or "feedwater" (pipe 2).
    """

    def __init__(self, drain_pipe: str = "condenser") -> None:
        if drain_pipe not in DRAIN_PIPES:
            raise ValueError(f"unknown steamer drain pipe {drain_pipe!r}")
        self.drain_pipe = DRAIN_PIPES[drain_pipe]
        self._formulas: List[Tuple[Buffer, Callable[[PlantState], int]]] = [
            (Buffer.CONTAINMENT_PRESSURE, self._containment_pressure),
            (Buffer.CONTAINMENT_WATER, self._containment_water),
            (Buffer.PCS_PRESSURE, self._pcs_pressure),
            (Buffer.CORE_STEAM, self._core_steam),
            (Buffer.PRESSURIZER_WATER, self._pressurizer_water),
            (Buffer.STEAMER, self._steamer),
            (Buffer.CONDENSER, self._condenser),
            (Buffer.TANK_A, self._tank_a),
            (Buffer.TANK_B, self._tank_b),
            (Buffer.PUMP_HOUSE_WATER, self._pump_house_water),
            (Buffer.RADIATION, self._radiation),
        ]

    def recompute(self, state: PlantState) -> None:
        results = [(buffer, clamp(formula(state), buffer)) for buffer, formula in self._formulas]
        for buffer, value in results:
            state.buffers[buffer] = value

    # ── Containment ───────────────────────────────────────────────

    @staticmethod
    def _containment_pressure(state: PlantState) -> int:
        old = state.buffers.previous
        t = state.temperature
        value = old(Buffer.CONTAINMENT_PRESSURE)
        value += state.valve_open(1) and t > C.TEMP_LOW
        value -= 10 * (t < C.TEMP_HIGH and old(Buffer.CONTAINMENT_PRESSURE) > 9)
        value += state.primary_leak
        return value

    @staticmethod
    def _containment_water(state: PlantState) -> int:
        old = state.buffers.previous
        relief_overflow = state.valve_open(1) and old(Buffer.PRESSURIZER_WATER) > 23
        value = old(Buffer.CONTAINMENT_WATER)
        value += state.flowing(9) and (state.primary_leak or relief_overflow)
        value += old(Buffer.CONTAINMENT_PRESSURE) > 9 and state.temperature < C.TEMP_HIGH
        value -= state.flowing(12) and old(Buffer.CONTAINMENT_WATER) > 0
        return int(value)

    # ── Primary loop: exactly one branch fires ────────────────────

    @staticmethod
    def _pcs_pressure(state: PlantState) -> int:
        old = state.buffers.previous
        t = state.temperature
        pcs = old(Buffer.PCS_PRESSURE)
        przr = old(Buffer.PRESSURIZER_WATER)
        if state.valve_open(1):
            value = pcs - (przr == 0 and pcs > 1)
        elif not state.flowing(9):
            value = pcs - (t > C.TEMP_LOW and przr == 0 and pcs > 0)
        elif t >= C.TEMP_HIGH:
            value = pcs + (pcs > 11 and przr == 12) + (pcs < 12)
        else:
            value = pcs + (pcs < 12) - (pcs > 12)
        value -= state.primary_leak and not state.flowing(10) and pcs > 0
        return int(value)

    @staticmethod
    def _core_steam(state: PlantState) -> int:
        old = state.buffers.previous
        pcs = old(Buffer.PCS_PRESSURE)
        steam = old(Buffer.CORE_STEAM)
        return int(steam + (pcs == 0 and state.temperature > C.TEMP_HIGH) - (steam > 0 and pcs > 0))

    @staticmethod
    def _pressurizer_water(state: PlantState) -> int:
        old = state.buffers.previous
        t = state.temperature
        pcs = old(Buffer.PCS_PRESSURE)
        przr = old(Buffer.PRESSURIZER_WATER)
        if state.valve_open(1):
            value = przr - (pcs > 1 and przr > 0) + (state.flowing(9) and pcs < 2 and przr < 24)
        elif not state.flowing(9):
            value = przr - (t > C.TEMP_LOW and przr > 0)
        elif t >= C.TEMP_HIGH:
            value = przr + (przr < 12 and pcs == 12 and t > state.old_temperature)
        else:
            value = przr + (pcs == 12 and przr < 6) - (pcs == 12 and przr > 6)
        return int(value)

    # ── Secondary loop ────────────────────────────────────────────

    def _steamer(self, state: PlantState) -> int:
        old = state.buffers.previous
        level = old(Buffer.STEAMER)
        starved = not state.flowing(2) or not state.flowing(1)
        value = level + (starved and state.temperature > C.TEMP_LOW and level < C.STEAMER_FULL)
        value -= state.flowing(self.drain_pipe) and state.flowing(1) and level > 0
        return int(value)

    def _condenser(self, state: PlantState) -> int:
        old = state.buffers.previous
        level = old(Buffer.CONDENSER)
        uncooled = not state.flowing(17) or not state.flowing(1)
        value = level + (uncooled and state.temperature > C.TEMP_LOW and level < 10)
        value -= state.flowing(self.drain_pipe) and state.flowing(1) and level > 0
        return int(value)

    # ── Pump house ────────────────────────────────────────────────

    @staticmethod
    def _sump_pumping(state: PlantState) -> bool:
        return (
            state.cluster(C.CLUSTER_SUMP) > 0
            and state.valve_open(8)
            and state.buffers.previous(Buffer.CONTAINMENT_WATER) > 0
        )

    @staticmethod
    def _transfer_pumping(state: PlantState) -> bool:
        return (
            state.cluster(C.CLUSTER_PUMP_HOUSE) > 0
            and state.valve_open(19)
            and state.buffers.previous(Buffer.PUMP_HOUSE_WATER) > 0
            and state.buffers.previous(Buffer.TANK_B) < 75
        )

    def _tank_a(self, state: PlantState) -> int:
        tank = state.buffers.previous(Buffer.TANK_A)
        return tank + (self._sump_pumping(state) and tank < 50)

    def _tank_b(self, state: PlantState) -> int:
        return state.buffers.previous(Buffer.TANK_B) + self._transfer_pumping(state)

    def _pump_house_water(self, state: PlantState) -> int:
        old = state.buffers.previous
        overflow = self._sump_pumping(state) and old(Buffer.TANK_A) == 50
        return old(Buffer.PUMP_HOUSE_WATER) + overflow - self._transfer_pumping(state)

    @staticmethod
    def _radiation(state: PlantState) -> int:
        old = state.buffers.previous
        water = old(Buffer.PUMP_HOUSE_WATER)
        rad = old(Buffer.RADIATION)
        # Bulk term: radiation climbs by a tenth of the pump-house water on top of the unit step.
        return rad + (water > 0) + water // 10 - (water == 0 and rad > 0) - (rad > 1)
