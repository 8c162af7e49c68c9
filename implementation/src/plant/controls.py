"""
Keyboard routing for the plant screens, kept free of raylib so it can be tested.

Each screen shows one set of component labels at a time (pumps, valves,
turbines or filters). A letter key acts on the labelled component with that
letter, but only if the component is drawn on the current screen.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from plant import constants as C
from plant.commands import (
    AdjustControlRod,
    PetitionRateIncrease,
    RepairComponent,
    ToggleFilter,
    TogglePump,
    ToggleTurbine,
    ToggleValve,
)
from plant.types import ComponentKind

SCREEN_CONTAINMENT = 0
SCREEN_TURBINE = 1
SCREEN_REACTOR_CORE = 2
SCREEN_PUMP_HOUSE = 3
SCREEN_MAINTENANCE = 4
SCREEN_COST_ANALYSIS = 5
SCREEN_STATUS = 6

SCREEN_TITLES = {
    SCREEN_CONTAINMENT: "CONTAINMENT",
    SCREEN_TURBINE: "TURBINE, FILTER, CONDENSER",
    SCREEN_REACTOR_CORE: "REACTOR CORE",
    SCREEN_PUMP_HOUSE: "PUMP HOUSE",
    SCREEN_MAINTENANCE: "MAINTENANCE SCHEDULE",
    SCREEN_COST_ANALYSIS: "COST ANALYSIS",
    SCREEN_STATUS: "OPERATIONAL STATUS",
}

LABEL_KEYS = {
    "P": ComponentKind.PUMP,
    "V": ComponentKind.VALVE,
    "T": ComponentKind.TURBINE,
    "F": ComponentKind.FILTER,
}


def _ids(first: int, last: int) -> FrozenSet[int]:
    return frozenset(range(first, last + 1))


# Components each screen lets the operator act on, per label mode
SCREEN_COMPONENTS: Dict[int, Dict[ComponentKind, FrozenSet[int]]] = {
    SCREEN_CONTAINMENT: {
        ComponentKind.PUMP: _ids(1, 6),
        ComponentKind.VALVE: _ids(1, 8),
    },
    SCREEN_TURBINE: {
        ComponentKind.PUMP: _ids(7, 18),
        ComponentKind.VALVE: frozenset({2, 3}) | _ids(9, 18),
        ComponentKind.TURBINE: _ids(1, C.NUM_TURBINES),
        ComponentKind.FILTER: _ids(1, C.NUM_FILTERS),
    },
    SCREEN_PUMP_HOUSE: {
        ComponentKind.PUMP: _ids(19, 24),
        ComponentKind.VALVE: frozenset({8, 19}),
    },
    SCREEN_MAINTENANCE: {
        ComponentKind.PUMP: _ids(1, C.NUM_PUMPS),
        ComponentKind.VALVE: _ids(1, C.NUM_VALVES),
        ComponentKind.TURBINE: _ids(1, C.NUM_TURBINES),
    },
}

_TOGGLES = {
    ComponentKind.VALVE: ToggleValve,
    ComponentKind.PUMP: TogglePump,
    ComponentKind.TURBINE: ToggleTurbine,
    ComponentKind.FILTER: ToggleFilter,
}


def letter_index(char: str) -> Optional[int]:
    """'A' -> 1 ... 'X' -> 24; None for anything else."""
    if len(char) != 1:
        return None
    upper = char.upper()
    if upper not in C.LETTERS:
        return None
    return C.LETTERS.index(upper) + 1


@dataclass
class ControlState:
    """Operator-side selection: the label mode shown and the selected rod."""
    screen: int = SCREEN_CONTAINMENT
    label: ComponentKind = ComponentKind.PUMP
    selected_rod: int = 1

    def show_screen(self, screen: int) -> None:
        if screen not in SCREEN_TITLES:
            raise ValueError(f"no screen {screen}")
        self.screen = screen
        self.label = ComponentKind.PUMP

    def select_label(self, key: str) -> bool:
        kind = LABEL_KEYS.get(key.upper())
        if kind is None or kind not in SCREEN_COMPONENTS.get(self.screen, {}):
            return False
        self.label = kind
        return True

    def move_rod_selector(self, step: int) -> None:
        self.selected_rod = max(1, min(C.NUM_RODS, self.selected_rod + step))

    def command_for(self, char: str):
        """Translate a typed character into a command, or None when it means nothing here."""
        if self.screen == SCREEN_REACTOR_CORE:
            if char in ("+", ";"):
                return AdjustControlRod(self.selected_rod, 1)
            if char in ("-", "="):
                return AdjustControlRod(self.selected_rod, -1)
            return None
        if self.screen == SCREEN_COST_ANALYSIS:
            return PetitionRateIncrease() if char == "$" else None

        allowed = SCREEN_COMPONENTS.get(self.screen, {}).get(self.label)
        index = letter_index(char)
        if not allowed or index is None or index not in allowed:
            return None
        if self.screen == SCREEN_MAINTENANCE:
            return RepairComponent(self.label, index)
        return _TOGGLES[self.label](index)
