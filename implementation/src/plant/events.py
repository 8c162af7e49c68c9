from __future__ import annotations

from typing import List

from plant import constants as C
from plant.logging_utils import get_logger
from plant.rods import scram
from plant.state import PlantState
from plant.types import Alert, AlertKind, Buffer, Outcome

logger = get_logger(__name__)

SEALED_MESSAGE = (
    "THE CONTAINMENT HAS JUST SEALED ITSELF AS A RESULT OF EXCESSIVE "
    "PRESSURE DUE TO STEAM ESCAPING FROM PRESSURIZER RELIEF VALVE A."
)
LEAK_MESSAGE = "EXCESSIVE PRESSURE IN THE PRIMARY CORE COOLING SYSTEM HAS CAUSED A LEAK."
RADIATION_MESSAGE = (
    "EXTREME DANGER TO ALL PEOPLE IN {miles} MILE AREA SURROUNDING THE REACTOR. "
    "AN IMMEDIATE EVACUATION IS NOW REQUIRED TO LIMIT THE POTENTIAL INCREASE "
    "IN FUTURE LIABILITY INSURANCE PREMIUMS."
)
LICENSE_MESSAGE = (
    "PLEASE BE ADVISED THAT DUE TO YOUR DEMONSTRATED OPERATIONAL INCOMPETENCE, "
    "THE PUBLIC UTILITIES COMMISSION IS FORCED TO RELIEVE YOU OF YOUR LICENSE "
    "TO OPERATE, EFFECTIVE IMMEDIATELY."
)


class EventMonitor:
    """End-of-tick checks for emergencies and terminal outcomes.

    Order:
    1. Losses past the game-over threshold end the run; nothing else is checked.
    2. Containment pressure above the limit seals containment and scrams the core.
    3. PCS pressure above the leak threshold starts a primary leak (once).
    4. Radiation above the warning level raises an evacuation notice and the level.
    5. An empty PCS with steam in the vessel damages the fuel rods for good.
    6. Core temperature above the meltdown threshold ends the run.
    """

    def evaluate(self, state: PlantState) -> List[Alert]:
        raised: List[Alert] = []
        econ = state.economics
        buffers = state.buffers

        if econ.actual_profit < C.GAME_OVER_LOSS:
            state.outcome = Outcome.EXCESSIVE_LOSSES
            raised.append(self._alert(state, AlertKind.EXCESSIVE_LOSSES, LICENSE_MESSAGE))
            logger.critical("license revoked: actual profit %d", econ.actual_profit)
            return raised

        if buffers[Buffer.CONTAINMENT_PRESSURE] > state.containment_limit:
            scram(state)
            state.containment_limit = C.CONTAINMENT_SEALED
            raised.append(self._notice(state, AlertKind.CONTAINMENT_SEALED, SEALED_MESSAGE))
            logger.warning("containment sealed at pressure %d, reactor scrammed",
                           buffers[Buffer.CONTAINMENT_PRESSURE])

        if buffers[Buffer.PCS_PRESSURE] > C.LEAK_THRESHOLD and not state.primary_leak:
            state.primary_leak = True
            raised.append(self._notice(state, AlertKind.PRIMARY_LEAK, LEAK_MESSAGE))
            logger.warning("primary cooling leak")

        if buffers[Buffer.RADIATION] > state.radiation_warning:
            message = RADIATION_MESSAGE.format(miles=state.radiation_warning)
            raised.append(self._notice(state, AlertKind.RADIATION_EMERGENCY, message))
            logger.warning("radiation %d over warning level %d",
                           buffers[Buffer.RADIATION], state.radiation_warning)
            state.radiation_warning += C.RADIATION_WARNING_STEP

        if buffers[Buffer.PCS_PRESSURE] == 0 and buffers[Buffer.CORE_STEAM] > 0:
            if not state.fuel_rod_damage:
                logger.warning("fuel rod damage")
            state.fuel_rod_damage = True

        if state.temperature > C.TEMP_MELTDOWN:
            state.outcome = Outcome.MELTDOWN
            raised.append(self._notice(state, AlertKind.MELTDOWN, "MELT-DOWN"))
            logger.critical("meltdown at %d degrees", state.temperature)

        return raised

    @staticmethod
    def _alert(state: PlantState, kind: AlertKind, message: str, notice: int = 0) -> Alert:
        alert = Alert(kind, message, notice_number=notice,
                      minute=state.clock.minute, day=state.clock.day)
        state.alerts.append(alert)
        return alert

    def _notice(self, state: PlantState, kind: AlertKind, message: str) -> Alert:
        state.notice_number += 1
        return self._alert(state, kind, message, notice=state.notice_number)
