from __future__ import annotations

from plant import constants as C
from plant.state import PlantState


def raise_rod(state: PlantState, rod_id: int) -> bool:
    rod = state.rod(rod_id)
    if rod.position >= C.ROD_MAX:
        return False
    rod.position += 1
    if rod.color == C.ROD_COLOR_INSERTED:
        rod.color = C.ROD_COLOR_PARTIAL
    if rod.position > C.ROD_WITHDRAWN_ABOVE:
        rod.color = C.ROD_COLOR_WITHDRAWN
    state.recount_rods()
    return True


def lower_rod(state: PlantState, rod_id: int) -> bool:
    rod = state.rod(rod_id)
    if rod.position <= 0:
        return False
    rod.position -= 1
    if rod.position <= C.ROD_WITHDRAWN_ABOVE:
        rod.color = C.ROD_COLOR_PARTIAL
    if rod.position < C.ROD_INSERTED_BELOW:
        rod.color = C.ROD_COLOR_INSERTED
    state.recount_rods()
    return True


def adjust_rod(state: PlantState, rod_id: int, direction: int) -> bool:
    """Move one rod a single step; +1 withdraws, -1 inserts."""
    if direction == 1:
        return raise_rod(state, rod_id)
    if direction == -1:
        return lower_rod(state, rod_id)
    raise ValueError(f"rod direction must be +1 or -1, got {direction!r}")


def scram(state: PlantState) -> None:
    for rod in state.rods:
        rod.position = 0
        rod.color = C.ROD_COLOR_INSERTED
    state.recount_rods()


def rod_cluster(rod_id: int) -> int:
    state_index = rod_id - 1
    if not 0 <= state_index < C.NUM_RODS:
        raise IndexError(f"rod id {rod_id} out of range 1..{C.NUM_RODS}")
    return state_index // C.RODS_PER_CLUSTER + 1
