from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ValveStatus(IntEnum):
    REPAIR = 0
    SHUT = 1
    OPEN = 12


class PumpStatus(IntEnum):
    REPAIR = 0
    OFF = 1
    ON = 12


class TurbineStatus(IntEnum):
    REPAIR = 0
    OFFLINE = 10
    ONLINE = 13


class FilterStatus(IntEnum):
    CLEAN = 8
    DIRTY = 10


class FlowCode(IntEnum):
    """Pipe contents, valued as lo-res palette indices so the UI can colour them directly."""
    COOLANT_SEVERE = 1
    WATER = 2
    CONTAMINATED = 3
    COOLANT_COLD = 6
    COOLANT_WARM = 7
    FLUSH = 8
    COOLANT_HOT = 9
    EMPTY = 10
    COOLANT_CRITICAL = 11
    AIR = 13
    STEAM = 15


class Buffer(IntEnum):
    CONTAINMENT_PRESSURE = 1
    PCS_PRESSURE = 2
    PRESSURIZER_WATER = 3
    STEAMER = 4
    CORE_STEAM = 5
    CONDENSER = 6
    CONTAINMENT_WATER = 7
    TANK_A = 8
    TANK_B = 9
    PUMP_HOUSE_WATER = 10
    RADIATION = 11


class ComponentKind(Enum):
    VALVE = "valve"
    PUMP = "pump"
    TURBINE = "turbine"
    FILTER = "filter"


class Outcome(Enum):
    EXCESSIVE_LOSSES = "EXCESSIVE LOSSES"
    MELTDOWN = "MELTDOWN"


class AlertKind(Enum):
    COMPONENT_FAILED = "component_failed"
    COMPONENT_REPAIRED = "component_repaired"
    FILTER_CLOGGED = "filter_clogged"
    ECCS_ACTIVATED = "eccs_activated"
    CONTAINMENT_SEALED = "containment_sealed"
    PRIMARY_LEAK = "primary_leak"
    RADIATION_EMERGENCY = "radiation_emergency"
    MELTDOWN = "meltdown"
    EXCESSIVE_LOSSES = "excessive_losses"
    DAY_CHANGE = "day_change"
    DEMAND_CHANGE = "demand_change"
    PETITION_APPROVED = "petition_approved"
    PETITION_DENIED = "petition_denied"


@dataclass(frozen=True)
class Lifecycle:
    """Countdown windows for one component kind. Each draw is rnd(jitter) + base."""
    failure_base: int
    failure_jitter: int
    adjust_base: int
    adjust_jitter: int
    repair_base: int
    repair_jitter: int
    maintenance_base: int
    maintenance_jitter: int

    @property
    def toggle_ceiling(self) -> int:
        # Highest countdown a freshly repaired or initialised component can hold.
        return self.failure_base + self.failure_jitter


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str
    notice_number: int = 0  # non-zero for emergency notices
    minute: int = 0
    day: int = 1
