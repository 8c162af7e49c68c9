from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from plant import constants as C
from plant.buffers import BufferUpdater
from plant.config import PlantConfig
from plant.economics import EconomicsCalculator
from plant.events import EventMonitor
from plant.flow import FlowNetworkResolver
from plant.lifecycle import FailureRepairManager
from plant.logging_utils import get_logger
from plant.rng import RandomSource, SeededRandom
from plant.state import PlantState, apply_muse_preset, new_plant
from plant.temperature import TemperatureModel
from plant.types import Alert, AlertKind, Buffer, ComponentKind, PumpStatus, ValveStatus

logger = get_logger(__name__)

MENU = "menu"
PLANT = "plant"


@dataclass
class TickScheduler:
    """Owns the plant and advances it one simulated minute per tick.

    Tick pipeline:
    1. Snapshot buffers (old <- current)
    2. TemperatureModel
    3. Automatic pressurizer relief valve (valve 1)
    4. Emergency pump auto-activation (ECCS, containment sump)
    5. BufferUpdater
    6. FlowNetworkResolver
    7. EconomicsCalculator
    8. Countdown decrements
    9. Clock advance, day and demand rollover
    10. Failure checks
    11. EventMonitor

    Later steps read what earlier steps wrote in the same tick, so the order
    is fixed. Operator commands are applied between ticks through submit().
    """
    state: PlantState
    rng: RandomSource
    temperature: TemperatureModel = field(default_factory=TemperatureModel)
    flow: FlowNetworkResolver = field(default_factory=FlowNetworkResolver)
    buffers: BufferUpdater = field(default_factory=BufferUpdater)
    lifecycle: Optional[FailureRepairManager] = None
    economics: Optional[EconomicsCalculator] = None
    events: EventMonitor = field(default_factory=EventMonitor)

    # Ticks only fire while running and a plant screen (not the menu) is shown.
    running: bool = True
    view: str = MENU

    # step() fires one tick per tick_seconds of real time.
    tick_seconds: float = 1.0
    _tick_accumulator: float = 0.0
    total_ticks: int = 0

    def __post_init__(self) -> None:
        if self.lifecycle is None:
            self.lifecycle = FailureRepairManager(self.rng)
        if self.economics is None:
            self.economics = EconomicsCalculator(self.rng)

    @classmethod
    def from_config(cls, config: PlantConfig, muse: Optional[bool] = None) -> "TickScheduler":
        rng = SeededRandom(config.seed)
        state = new_plant(rng)
        if muse if muse is not None else bool(config.muse_preset):
            apply_muse_preset(state)
        logger.info("plant initialised (seed=%s, drain=%s)", config.seed, config.steamer_drain_pipe)
        return cls(
            state=state,
            rng=rng,
            buffers=BufferUpdater(config.steamer_drain_pipe),
            tick_seconds=config.tick_seconds,
        )

    def can_tick(self) -> bool:
        return self.running and self.view != MENU and not self.state.terminated

    def step(self, dt: float) -> int:
        """Accumulate real time and fire whole ticks; returns how many fired."""
        if not self.can_tick():
            # No catch-up burst after a pause or a trip to the menu.
            self._tick_accumulator = 0.0
            return 0
        self._tick_accumulator += dt
        fired = 0
        while self._tick_accumulator >= self.tick_seconds and not self.state.terminated:
            self._tick_accumulator -= self.tick_seconds
            self.tick()
            fired += 1
        return fired

    def tick(self) -> None:
        """Run the full pipeline once. A finished plant does not advance."""
        state = self.state
        if state.terminated:
            return
        self.total_ticks += 1

        # Step 1: snapshot
        state.buffers.snapshot()

        # Step 2: temperature
        self.temperature.apply(state)

        # Step 3: pressurizer relief valve follows the pressurizer level
        self._auto_relief_valve(state)

        # Step 4: emergency pumps
        self._auto_emergency_pumps(state)

        # Step 5: buffers
        self.buffers.recompute(state)

        # Step 6: pipes
        self.flow.recompute(state)

        # Step 7: economics
        self.economics.apply(state)

        # Step 8: countdowns
        self.lifecycle.decrement(state)

        # Step 9: clock
        self.economics.advance_clock(state)

        # Step 10: failures
        self.lifecycle.check_failures(state)

        # Step 11: emergencies
        self.events.evaluate(state)
        if state.terminated:
            logger.info("simulation ended after %d ticks: %s", self.total_ticks, state.outcome.value)

    def _auto_relief_valve(self, state: PlantState) -> None:
        level = state.buffers.previous(Buffer.PRESSURIZER_WATER)
        status = state.valve(1).status
        if (level > 11 and status == ValveStatus.SHUT) or (level < 2 and status == ValveStatus.OPEN):
            self.lifecycle.toggle(state, ComponentKind.VALVE, 1)

    def _auto_emergency_pumps(self, state: PlantState) -> None:
        if (
            state.buffers[Buffer.PCS_PRESSURE] == 0
            and state.cluster(C.CLUSTER_ECCS) == 0
            and state.clock.minute % 10 == 0
        ):
            for pump_id in (1, 2, 3):
                if state.pump(pump_id).status == PumpStatus.OFF:
                    self.lifecycle.toggle(state, ComponentKind.PUMP, pump_id)
            if not state.eccs_activated:
                state.alerts.append(Alert(AlertKind.ECCS_ACTIVATED, "ECCS ACTIVATED",
                                          minute=state.clock.minute, day=state.clock.day))
                logger.warning("PCS pressure lost, ECCS pumps started")
            state.eccs_activated = True

        if state.buffers.previous(Buffer.CONTAINMENT_WATER) > 0 and state.cluster(C.CLUSTER_SUMP) == 0:
            for pump_id in (22, 23, 24):
                if state.cluster(C.CLUSTER_SUMP) > 0:
                    break
                if state.pump(pump_id).status == PumpStatus.OFF:
                    self.lifecycle.toggle(state, ComponentKind.PUMP, pump_id)

    def submit(self, command) -> bool:
        """Apply an operator command between ticks; False when it was rejected."""
        accepted = command.apply(self)
        if not accepted:
            logger.debug("command %r rejected", command)
        return accepted

    def drain_alerts(self) -> List[Alert]:
        alerts = list(self.state.alerts)
        self.state.alerts.clear()
        return alerts
