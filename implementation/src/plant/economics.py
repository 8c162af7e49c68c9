from __future__ import annotations

from plant import constants as C
from plant.logging_utils import get_logger
from plant.rng import RandomSource
from plant.state import PlantState, draw_demand_countdown
from plant.types import Alert, AlertKind, Buffer

logger = get_logger(__name__)


class EconomicsCalculator:
    """Electric output, profit and the plant calendar.

    All money figures are in thousands of dollars. Operating and maintenance
    costs are daily figures, amortised over the 1440 minutes of a day.
    """

    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def apply(self, state: PlantState) -> None:
        econ = state.economics
        econ.output = 0
        if state.turbines_online > 0 and state.buffers[Buffer.STEAMER] > C.STEAMER_OUTPUT_LEVEL:
            econ.output = min(econ.demand, state.turbines_online * C.TURBINE_MEGAWATTS)

        revenue = econ.output // 10
        costs = (econ.operating_cost + econ.maintenance_cost) // 10
        econ.projected_profit = econ.demand // 10 - costs
        econ.actual_profit += revenue - costs // C.MINUTES_PER_DAY

    def advance_clock(self, state: PlantState) -> None:
        clock = state.clock
        clock.minute += 1
        if clock.minute >= C.MINUTES_PER_DAY:
            self._day_change(state)

        if clock.demand_countdown > 0:
            clock.demand_countdown -= 1
            if clock.demand_countdown == 0:
                self._demand_change(state)

    def _day_change(self, state: PlantState) -> None:
        clock, econ = state.clock, state.economics
        clock.minute = 0
        clock.day += 1
        increase = self.rng.next(10) + 1
        econ.operating_cost += increase
        econ.maintenance_cost = 0
        state.alerts.append(Alert(AlertKind.DAY_CHANGE, f"DAY {clock.day}", minute=0, day=clock.day))
        logger.info("day %d begins, operating cost now $%d,000", clock.day, econ.operating_cost)

    def _demand_change(self, state: PlantState) -> None:
        clock, econ = state.clock, state.economics
        clock.demand_countdown = draw_demand_countdown(self.rng)
        change = C.DEMAND_MOD_BASE + self.rng.next(C.DEMAND_MOD_JITTER)
        if clock.minute < C.NOON:
            econ.demand += change
        else:
            econ.demand -= change // 2
        econ.demand = max(C.MIN_DEMAND, min(C.MAX_DEMAND, econ.demand))
        state.alerts.append(Alert(AlertKind.DEMAND_CHANGE, f"DEMAND {econ.demand} MW",
                                  minute=clock.minute, day=clock.day))
        logger.debug("demand now %d MW, next change in %d min", econ.demand, clock.demand_countdown)

    # ── Rate petition ─────────────────────────────────────────────

    @staticmethod
    def petition_available(state: PlantState) -> bool:
        return state.economics.actual_profit < C.PETITION_LOSS

    def petition(self, state: PlantState) -> bool:
        """Ask the utilities commission for a rate increase.

        Only accepted while losses exceed the petition threshold. Approval
        (roughly one in ten) wipes the accumulated loss. Returns True when the
        petition was heard, whatever the verdict.
        """
        if not self.petition_available(state):
            return False
        clock = state.clock
        if self.rng.next(C.PETITION_ODDS) > C.PETITION_APPROVE_ABOVE:
            state.economics.actual_profit = 0
            state.alerts.append(Alert(AlertKind.PETITION_APPROVED, "PETITION APPROVED !",
                                      minute=clock.minute, day=clock.day))
            logger.info("rate petition approved")
        else:
            state.alerts.append(Alert(AlertKind.PETITION_DENIED, "PETITION DENIED.",
                                      minute=clock.minute, day=clock.day))
            logger.info("rate petition denied")
        return True
