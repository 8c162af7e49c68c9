from __future__ import annotations

from typing import Dict, Optional, Tuple

from plant.types import Buffer, ComponentKind, Lifecycle

NUM_VALVES = 19
NUM_PUMPS = 24
NUM_TURBINES = 4
NUM_FILTERS = 3
NUM_PIPES = 25
NUM_RODS = 18
NUM_BUFFERS = 11

PUMPS_PER_CLUSTER = 3
NUM_PUMP_CLUSTERS = NUM_PUMPS // PUMPS_PER_CLUSTER
RODS_PER_CLUSTER = 9

# Pump cluster roles
CLUSTER_ECCS = 1
CLUSTER_PCS = 2
CLUSTER_ESCS = 3
CLUSTER_CONDENSATE = 4
CLUSTER_COOLING_TOWER = 5
CLUSTER_FLUSH = 6
CLUSTER_PUMP_HOUSE = 7
CLUSTER_SUMP = 8

# Core temperature bands
TEMP_LOW = 400       # two pumps required above this
TEMP_WARM = 500
TEMP_HIGH = 600
TEMP_SEVERE = 750
TEMP_MELTDOWN = 2500

LIFECYCLES: Dict[ComponentKind, Lifecycle] = {
    ComponentKind.VALVE: Lifecycle(
        failure_base=250, failure_jitter=100,
        adjust_base=5, adjust_jitter=5,
        repair_base=25, repair_jitter=25,
        maintenance_base=1, maintenance_jitter=1,
    ),
    ComponentKind.PUMP: Lifecycle(
        failure_base=500, failure_jitter=100,
        adjust_base=5, adjust_jitter=5,
        repair_base=50, repair_jitter=25,
        maintenance_base=2, maintenance_jitter=2,
    ),
    ComponentKind.TURBINE: Lifecycle(
        failure_base=2760, failure_jitter=120,
        adjust_base=10, adjust_jitter=10,
        repair_base=100, repair_jitter=100,
        maintenance_base=5, maintenance_jitter=5,
    ),
}

FAILED_COUNTDOWN = 32767

# Filters
SOOT_REPAIR_BASE = 25
SOOT_REPAIR_JITTER = 25
SOOT_CLOG_LEVEL = 10

# Operational-status gauges; an expired gauge may show a random reading
NUM_GAUGES = 11
GAUGE_CHECK_BASE = 750
GAUGE_CHECK_JITTER = 50

# Economics
START_OPERATING_COST = 200
START_DEMAND = 100
MIN_DEMAND = 100
MAX_DEMAND = 1000
TURBINE_MEGAWATTS = 300
STEAMER_OUTPUT_LEVEL = 10
MINUTES_PER_DAY = 1440
NOON = 720
DEMAND_CHANGE_BASE = 50
DEMAND_CHANGE_JITTER = 15
DEMAND_MOD_BASE = 75
DEMAND_MOD_JITTER = 25
PETITION_LOSS = -200
GAME_OVER_LOSS = -500
PETITION_ODDS = 100
PETITION_APPROVE_ABOVE = 89

# Emergencies
CONTAINMENT_LIMIT = 50
CONTAINMENT_SEALED = 32767
LEAK_THRESHOLD = 100
RADIATION_WARNING = 50
RADIATION_WARNING_STEP = 50
FLUSH_TIME = 120

# Control rods
ROD_MAX = 33
ROD_COLOR_INSERTED = 12
ROD_COLOR_PARTIAL = 9
ROD_COLOR_WITHDRAWN = 1
ROD_WITHDRAWN_ABOVE = 14
ROD_INSERTED_BELOW = 4

# Inclusive (low, high) domain per buffer
BUFFER_DOMAINS: Dict[Buffer, Tuple[int, int]] = {
    Buffer.CONTAINMENT_PRESSURE: (0, 100),
    Buffer.PCS_PRESSURE: (0, 100),
    Buffer.PRESSURIZER_WATER: (0, 24),
    Buffer.STEAMER: (0, 14),
    Buffer.CORE_STEAM: (0, 100),
    Buffer.CONDENSER: (0, 10),
    Buffer.CONTAINMENT_WATER: (0, 100),
    Buffer.TANK_A: (0, 50),
    Buffer.TANK_B: (0, 75),
    Buffer.PUMP_HOUSE_WATER: (0, 100),
    Buffer.RADIATION: (0, 1000),
}

STEAMER_FULL = 14
# Above the condenser domain, so the condenser never blocks core cooling.
CONDENSER_COOLING_LIMIT = 12
PCS_NOMINAL = 12
PRESSURIZER_NOMINAL = 6

# Pipe a valve sits on; valve 1 is the pressurizer relief valve and vents into containment.
VALVE_PIPE: Dict[int, Optional[int]] = {
    1: None, 2: 1, 3: 2, 4: 11, 5: 5, 6: 6, 7: 7, 8: 12, 9: 14, 10: 15,
    11: 21, 12: 22, 13: 24, 14: 24, 15: 24, 16: 19, 17: 19, 18: 19, 19: 23,
}

AIR_INTAKE_VALVES = (13, 14, 15)
FLUSH_VALVES = (16, 17, 18)

# MUSE warm start
MUSE_PUMPS = (10, 13)
MUSE_VALVES = (11, 2, 3, 9, 10)
MUSE_TURBINES = (1,)
MUSE_ROD_POSITION = 30
MUSE_TEMPERATURE = 200

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def letter(index: int) -> str:
    """Operator label for a 1-based component id."""
    return LETTERS[index - 1]
