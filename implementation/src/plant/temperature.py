from __future__ import annotations

from plant import constants as C
from plant.state import PlantState
from plant.types import Buffer


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def required_pumps(temperature: int) -> int:
    return 2 if temperature > C.TEMP_LOW else 1


class TemperatureModel:
    """Core temperature update for one tick.

    Reads the current buffers and the pipes resolved on the previous tick:
      +cnt  when PCS pressure is below cnt
      +cnt  when the hot leg is empty or the steamer is full
      sign(cnt - effective PCS/ECCS pumps) * cnt
      -1    when steamer and condenser have headroom and the hot leg flows
    where cnt is the number of pumps required at the current temperature.
    A core at exactly zero is in cold shutdown and does not change.
    """

    def apply(self, state: PlantState) -> int:
        """Update ``state.temperature`` and return the delta."""
        cnt = required_pumps(state.temperature)
        state.pumps_required = cnt
        if state.temperature == 0:
            return 0

        buffers = state.buffers
        hot_leg = state.flowing(3)
        before = state.temperature
        state.old_temperature = before

        delta = 0
        if buffers[Buffer.PCS_PRESSURE] < cnt:
            delta += cnt
        if not hot_leg or buffers[Buffer.STEAMER] == C.STEAMER_FULL:
            delta += cnt
        effective = (
            state.flowing(11) * state.cluster(C.CLUSTER_ECCS)
            + state.flowing(8) * state.cluster(C.CLUSTER_PCS)
        )
        delta += _sign(cnt - effective) * cnt
        if buffers[Buffer.STEAMER] < C.STEAMER_FULL and buffers[Buffer.CONDENSER] < C.CONDENSER_COOLING_LIMIT and hot_leg:
            delta -= 1

        state.temperature = max(0, before + delta)
        return state.temperature - before
