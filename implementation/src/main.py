from __future__ import annotations

import asyncio
from typing import List, Optional, Tuple

from raylib_compat import (
    Color,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_N,
    KEY_RIGHT,
    KEY_SPACE,
    KEY_Y,
    begin_drawing,
    clear_background,
    close_window,
    end_drawing,
    get_frame_time,
    init_window,
    is_key_pressed,
    set_exit_key,
    set_target_fps,
    typed_chars,
    window_should_close,
)

from plant.config import load_config
from plant.controls import SCREEN_REACTOR_CORE, SCREEN_STATUS, SCREEN_TITLES, ControlState
from plant.layout import load_layout
from plant.logging_utils import get_logger, set_level
from plant.scheduler import MENU, PLANT, TickScheduler
from plant.snapshot import cost_report, gauge_readings, take_snapshot
from plant.types import Alert, AlertKind
from plant.ui import Ui

logger = get_logger(__name__)

BACKGROUND = Color(0, 0, 0, 255)
_BANNER_KINDS = (
    AlertKind.EXCESSIVE_LOSSES,
    AlertKind.MELTDOWN,
    AlertKind.PETITION_APPROVED,
    AlertKind.PETITION_DENIED,
)


def _latest_notice(alerts: List[Alert], current: Optional[Alert]) -> Optional[Alert]:
    """Numbered notices, petition verdicts and outcomes stay on screen until dismissed."""
    for alert in alerts:
        if alert.notice_number or alert.kind in _BANNER_KINDS:
            current = alert
    return current


async def _ask_muse(ui: Ui) -> Optional[bool]:
    """Welcome screen; None when the window closed before an answer."""
    while not window_should_close():
        if is_key_pressed(KEY_Y):
            return True
        if is_key_pressed(KEY_N) or is_key_pressed(KEY_ESCAPE):
            return False
        typed_chars()
        begin_drawing()
        clear_background(BACKGROUND)
        ui.draw_welcome()
        end_drawing()
        await asyncio.sleep(0)
    return None


async def main() -> None:
    config = load_config()
    set_level(config.log_level)

    layout = load_layout()
    init_window(layout.window_width, layout.window_height, "Three Mile Island")
    set_exit_key(0)  # ESC pauses instead of closing
    set_target_fps(60)

    ui = Ui(layout)
    try:
        muse = config.muse_preset
        if muse is None:
            muse = await _ask_muse(ui)
            if muse is None:
                return

        sim = TickScheduler.from_config(config, muse=muse)
        controls = ControlState()
        notice: Optional[Alert] = None
        # Status gauges are read once per tick so a faulty one holds its value
        gauges: List[Tuple[str, str]] = []
        gauges_tick = -1

        while not window_should_close():
            dt = get_frame_time()

            # Ticks only run while not paused and a plant screen is showing;
            # the scheduler drops accumulated time otherwise.
            sim.step(dt)
            notice = _latest_notice(sim.drain_alerts(), notice)

            # ── Keyboard events ──────────────────────────────────────
            if is_key_pressed(KEY_ESCAPE):
                sim.running = not sim.running
                logger.info("simulation %s", "resumed" if sim.running else "paused")
            if is_key_pressed(KEY_ENTER):
                sim.view = MENU
            if is_key_pressed(KEY_SPACE):
                notice = None
            if sim.view == PLANT and controls.screen == SCREEN_REACTOR_CORE:
                if is_key_pressed(KEY_LEFT):
                    controls.move_rod_selector(-1)
                if is_key_pressed(KEY_RIGHT):
                    controls.move_rod_selector(1)

            for char in typed_chars():
                if char.isdigit() and int(char) in SCREEN_TITLES:
                    controls.show_screen(int(char))
                    sim.view = PLANT
                    continue
                if sim.view != PLANT or sim.state.terminated:
                    continue
                if controls.select_label(char):
                    continue
                command = controls.command_for(char)
                if command is not None:
                    sim.submit(command)
                    notice = _latest_notice(sim.drain_alerts(), notice)

            # ── Draw ─────────────────────────────────────────────────
            snap = take_snapshot(sim.state)
            if controls.screen == SCREEN_STATUS and gauges_tick != sim.total_ticks:
                gauges = gauge_readings(sim.state, sim.rng)
                gauges_tick = sim.total_ticks
            begin_drawing()
            clear_background(BACKGROUND)
            if sim.view == MENU:
                ui.draw_menu(snap, paused=not sim.running)
            else:
                ui.draw_screen(
                    snap,
                    controls,
                    cost_report(sim.state),
                    gauges,
                    paused=not sim.running,
                )
            ui.draw_notice(notice)
            ui.draw_outcome(snap)
            end_drawing()

            await asyncio.sleep(0)
    finally:
        close_window()


if __name__ == "__main__":
    asyncio.run(main())
