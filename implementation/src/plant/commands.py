from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from plant.rods import adjust_rod
from plant.types import ComponentKind

if TYPE_CHECKING:
    from plant.scheduler import TickScheduler


# Each command returns True when it changed the plant. Rejections are not errors.


@dataclass(frozen=True)
class ToggleValve:
    valve_id: int

    def apply(self, sim: "TickScheduler") -> bool:
        return sim.lifecycle.toggle(sim.state, ComponentKind.VALVE, self.valve_id)


@dataclass(frozen=True)
class TogglePump:
    pump_id: int

    def apply(self, sim: "TickScheduler") -> bool:
        return sim.lifecycle.toggle(sim.state, ComponentKind.PUMP, self.pump_id)


@dataclass(frozen=True)
class ToggleTurbine:
    turbine_id: int

    def apply(self, sim: "TickScheduler") -> bool:
        return sim.lifecycle.toggle(sim.state, ComponentKind.TURBINE, self.turbine_id)


@dataclass(frozen=True)
class ToggleFilter:
    filter_id: int

    def apply(self, sim: "TickScheduler") -> bool:
        return sim.lifecycle.toggle_filter(sim.state, self.filter_id)


@dataclass(frozen=True)
class RepairComponent:
    kind: ComponentKind
    component_id: int

    def apply(self, sim: "TickScheduler") -> bool:
        return sim.lifecycle.repair(sim.state, self.kind, self.component_id)


@dataclass(frozen=True)
class AdjustControlRod:
    rod_id: int
    direction: int

    def __post_init__(self) -> None:
        if self.direction not in (1, -1):
            raise ValueError(f"rod direction must be +1 or -1, got {self.direction!r}")

    def apply(self, sim: "TickScheduler") -> bool:
        return adjust_rod(sim.state, self.rod_id, self.direction)


@dataclass(frozen=True)
class PetitionRateIncrease:
    def apply(self, sim: "TickScheduler") -> bool:
        return sim.economics.petition(sim.state)
