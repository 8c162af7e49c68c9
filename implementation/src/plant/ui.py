from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from raylib_compat import (
    Color,
    draw_rectangle,
    draw_rectangle_lines,
    draw_text,
    measure_text,
)

from plant import constants as C
from plant.controls import (
    SCREEN_CONTAINMENT,
    SCREEN_COST_ANALYSIS,
    SCREEN_MAINTENANCE,
    SCREEN_PUMP_HOUSE,
    SCREEN_REACTOR_CORE,
    SCREEN_STATUS,
    SCREEN_TITLES,
    SCREEN_TURBINE,
    SCREEN_COMPONENTS,
    ControlState,
)
from plant.layout import Layout
from plant.snapshot import (
    CostReport,
    PlantSnapshot,
    ScheduleLine,
)
from plant.types import Alert, Buffer, ComponentKind

# Sixteen-colour lo-res palette; pipe flow codes and rod colours index into it.
PALETTE = (
    Color(0, 0, 0, 255),
    Color(227, 30, 96, 255),
    Color(96, 78, 189, 255),
    Color(255, 68, 253, 255),
    Color(0, 163, 96, 255),
    Color(156, 156, 156, 255),
    Color(20, 207, 253, 255),
    Color(208, 195, 255, 255),
    Color(96, 114, 3, 255),
    Color(255, 106, 60, 255),
    Color(110, 110, 110, 255),
    Color(255, 160, 208, 255),
    Color(20, 245, 60, 255),
    Color(208, 221, 141, 255),
    Color(114, 255, 208, 255),
    Color(255, 255, 255, 255),
)

TEXT = Color(230, 230, 230, 255)
DIM = Color(140, 140, 140, 255)
ALERT = Color(255, 80, 80, 255)
WARN = Color(245, 200, 70, 255)
PANEL = Color(24, 20, 40, 240)

MENU_LINES = [f"{key}  {title}" for key, title in SCREEN_TITLES.items()] + ["ESC  PAUSE / RESUME"]

# Pipes drawn on each plant screen
SCREEN_PIPES = {
    SCREEN_CONTAINMENT: (3, 4, 5, 6, 7, 8, 9, 10, 11),
    SCREEN_TURBINE: (1, 2, 13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 24, 25),
    SCREEN_PUMP_HOUSE: (12, 23),
}

SCREEN_BUFFERS = {
    SCREEN_CONTAINMENT: (
        ("CNTMT PRES", Buffer.CONTAINMENT_PRESSURE),
        ("PCS PRES", Buffer.PCS_PRESSURE),
        ("PRSZER WTR", Buffer.PRESSURIZER_WATER),
        ("CORE STEAM", Buffer.CORE_STEAM),
        ("CNTMT WTR", Buffer.CONTAINMENT_WATER),
    ),
    SCREEN_TURBINE: (
        ("STEAMER", Buffer.STEAMER),
        ("CONDENSER", Buffer.CONDENSER),
    ),
    SCREEN_PUMP_HOUSE: (
        ("TANK A", Buffer.TANK_A),
        ("TANK B", Buffer.TANK_B),
        ("PMP HSE WTR", Buffer.PUMP_HOUSE_WATER),
        ("RADIATION", Buffer.RADIATION),
    ),
}


def palette(index: int):
    return PALETTE[index % len(PALETTE)]


@dataclass
class Ui:
    layout: Layout

    # ── Text grid helpers ─────────────────────────────────────────

    def _xy(self, col: int, row: int) -> tuple[int, int]:
        return (self.layout.margin_x + col * self.layout.cell_w,
                self.layout.margin_y + row * self.layout.cell_h)

    def text(self, value: str, col: int, row: int, color=TEXT) -> None:
        x, y = self._xy(col, row)
        draw_text(value, x, y, self.layout.font_size, color)

    def centered(self, value: str, row: int, color=TEXT) -> None:
        width = _measure(value, self.layout.font_size)
        _, y = self._xy(0, row)
        draw_text(value, (self.layout.window_width - width) // 2, y, self.layout.font_size, color)

    def lines(self, values: Iterable[str], col: int, row: int, step: int = 1, color=TEXT) -> int:
        for value in values:
            self.text(value, col, row, color)
            row += step
        return row

    # ── Frame pieces ──────────────────────────────────────────────

    def draw_status_line(self, snap: PlantSnapshot, paused: bool) -> None:
        lay = self.layout
        self.text(f"TEMP={snap.temperature}", 0, lay.status_row)
        self.text(f"CNT={snap.pumps_required}", 19, lay.status_row)
        if paused:
            self.text("PAUSED", 32, lay.status_row, WARN)
        self.text(snap.time, 16, lay.time_row, DIM)

    def draw_welcome(self) -> None:
        self.centered("THREE MILE ISLAND", 2)
        self.lines([
            "THE REACTOR IS IN A COLD SHUTDOWN",
            "STATE WITH ALL SYSTEMS IN-ACTIVE.",
            "",
            "THE DATE IS DECEMBER 30, 1978, AND THE",
            "REACTOR HAS BEEN CERTIFIED OPERATIONAL.",
            "",
            "INITIALIZE ACCORDING TO OFFICIAL MUSE",
            "GUIDELINES (Y OR N) ?",
        ], 1, 6)

    def draw_menu(self, snap: PlantSnapshot, paused: bool) -> None:
        self.centered("THREE MILE ISLAND", 2)
        self.centered("MAIN MENU", 4)
        self.lines(MENU_LINES, 4, 6, step=2)
        self.draw_status_line(snap, paused)

    def draw_screen(self, snap: PlantSnapshot, controls: ControlState,
                    report: CostReport, gauges: Sequence[tuple[str, str]], paused: bool) -> None:
        screen = controls.screen
        self.centered(SCREEN_TITLES[screen], self.layout.title_row)
        if screen in (SCREEN_CONTAINMENT, SCREEN_TURBINE, SCREEN_PUMP_HOUSE):
            self.draw_plant_area(snap, controls)
        elif screen == SCREEN_REACTOR_CORE:
            self.draw_reactor_core(snap, controls)
        elif screen == SCREEN_MAINTENANCE:
            self.draw_maintenance(snap, controls.label)
        elif screen == SCREEN_COST_ANALYSIS:
            self.draw_cost_analysis(report)
        elif screen == SCREEN_STATUS:
            self.draw_operational_status(snap, gauges)
        self.draw_status_line(snap, paused)

    # ── Plant areas (screens 0, 1, 3) ─────────────────────────────

    def draw_plant_area(self, snap: PlantSnapshot, controls: ControlState) -> None:
        screen = controls.screen
        kinds = SCREEN_COMPONENTS[screen]
        label = controls.label
        row = self.layout.body_row
        self.text(f"LABELS: {label.value.upper()}S  (" + "/".join(
            k.value[0].upper() for k in kinds) + ")", 0, row, DIM)
        row += 2

        row = self._component_block(snap, kinds, label, row)

        pipes = SCREEN_PIPES.get(screen, ())
        col = 0
        for pipe_id in pipes:
            self._pipe_swatch(snap, pipe_id, col, row)
            col += 6
            if col > 30:
                col = 0
                row += 1
        row += 2
        for name, buffer in SCREEN_BUFFERS.get(screen, ()):
            self.text(f"{name}: {snap.buffer(buffer)}", 0, row)
            row += 1

    def _component_block(self, snap: PlantSnapshot, kinds, label: ComponentKind, row: int) -> int:
        if label is ComponentKind.FILTER:
            for view in snap.filters:
                if view.filter_id not in kinds[ComponentKind.FILTER]:
                    continue
                state = "CLEAN" if view.clean else "DIRTY"
                color = ALERT if view.clogged else TEXT
                self.text(f"{view.letter}  {state:<6} SOOT {view.soot_level:>2}  PRES {view.soot_pressure}",
                          0, row, color)
                row += 1
            return row + 1

        lines = {
            ComponentKind.PUMP: snap.pumps,
            ComponentKind.VALVE: snap.valves,
            ComponentKind.TURBINE: snap.turbines,
        }[label]
        shown = [line for line in lines if line.component_id in kinds[label]]
        half = (len(shown) + 1) // 2
        for i, line in enumerate(shown):
            col = 0 if i < half else self.layout.column2_col // 2
            self.text(f"{line.letter} {line.status}", col, row + i % half,
                      ALERT if line.failed else TEXT)
        return row + half + 1

    def _pipe_swatch(self, snap: PlantSnapshot, pipe_id: int, col: int, row: int) -> None:
        x, y = self._xy(col, row)
        self.text(f"{pipe_id:>2}", col, row, DIM)
        size = self.layout.font_size
        draw_rectangle(x + self.layout.cell_w * 2, y + 2, self.layout.cell_w * 2, size - 4,
                       palette(snap.pipe(pipe_id)))

    # ── Reactor core (screen 2) ───────────────────────────────────

    def draw_reactor_core(self, snap: PlantSnapshot, controls: ControlState) -> None:
        lay = self.layout
        max_h = C.ROD_MAX * lay.rod_bar_scale
        for i, (position, color) in enumerate(zip(snap.rod_positions, snap.rod_colors)):
            x = lay.rod_bar_x + i * (lay.rod_bar_w + lay.rod_bar_gap)
            draw_rectangle_lines(x, lay.rod_bar_y, lay.rod_bar_w, max_h, DIM)
            # Bar length is the inserted part; withdrawing shortens it.
            inserted = (C.ROD_MAX - position) * lay.rod_bar_scale
            draw_rectangle(x, lay.rod_bar_y, lay.rod_bar_w, inserted, palette(color))
            if i + 1 == controls.selected_rod:
                draw_text("^", x + lay.rod_bar_w // 3, lay.rod_bar_y + max_h + 4, lay.font_size, WARN)
        row = (lay.rod_bar_y + max_h) // lay.cell_h + 1
        self.text(f"ROD {C.letter(controls.selected_rod)}  POSITION "
                  f"{snap.rod_positions[controls.selected_rod - 1]}", 0, row)
        self.text(f"CTRL RODS: {snap.rod_heat} DEG   CORE: {snap.temperature} DEG", 0, row + 1)
        self.text("<- -> SELECT   + RAISE   - LOWER", 0, row + 2, DIM)

    # ── Maintenance schedule (screen 4) ───────────────────────────

    def draw_maintenance(self, snap: PlantSnapshot, label: ComponentKind) -> None:
        schedules = {
            ComponentKind.PUMP: ("PUMPS", snap.pumps, 12),
            ComponentKind.VALVE: ("VALVES", snap.valves, 10),
            ComponentKind.TURBINE: ("TURBINES", snap.turbines, 4),
        }
        name, lines, per_column = schedules.get(label, schedules[ComponentKind.PUMP])
        self.text(f"MAINTENANCE SCHEDULE FOR {name}", 0, 2)
        self.text("ID/STATUS     TIME", 0, 3, DIM)
        if len(lines) > per_column:
            self.text("ID/STATUS     TIME", self.layout.column2_col - 2, 3, DIM)
        for i, line in enumerate(lines):
            col = 0 if i < per_column else self.layout.column2_col - 2
            self._schedule_line(line, col, 4 + i % per_column)
        self.text("P/V/T SELECT LIST   LETTER REPAIRS", 0, 22, DIM)

    def _schedule_line(self, line: ScheduleLine, col: int, row: int) -> None:
        color = ALERT if line.failed else (DIM if line.status == "REPAIR" else TEXT)
        self.text(line.text, col, row, color)

    # ── Cost analysis (screen 5) ──────────────────────────────────

    def draw_cost_analysis(self, report: CostReport) -> None:
        row = 3
        for line in report.lines:
            color = ALERT if report.loss and line.startswith("ACTUAL") else TEXT
            self.text(line, 0, row, color)
            row += 2
        if report.petition_available:
            self.lines([
                "THE PUBLIC UTILITIES COMMISSION WILL",
                "ACCEPT A PETITION FOR A RATE INCREASE.",
                "PRESS $ TO PETITION.",
            ], 0, 19, color=WARN)

    # ── Operational status (screen 6) ─────────────────────────────

    def draw_operational_status(self, snap: PlantSnapshot, gauges: Sequence[tuple[str, str]]) -> None:
        for i, (label, value) in enumerate(gauges, start=1):
            row = i * 2 + 1
            self.text(label, 0, row)
            self.text(value, 12, row)
        col = self.layout.warnings_col
        for i, warning in enumerate(snap.warnings):
            self.text(warning, col, 3 + i, ALERT)

    # ── Notices ───────────────────────────────────────────────────

    def draw_notice(self, alert: Optional[Alert]) -> None:
        if alert is None:
            return
        lay = self.layout
        draw_rectangle(lay.notice_x, lay.notice_y, lay.notice_w, lay.notice_h, PANEL)
        draw_rectangle_lines(lay.notice_x, lay.notice_y, lay.notice_w, lay.notice_h, ALERT)
        size = lay.font_size - 4
        y = lay.notice_y + 6
        header = f"NOTICE #{alert.notice_number}" if alert.notice_number else alert.kind.name.replace("_", " ")
        draw_text(header, lay.notice_x + 8, y, size, ALERT)
        y += size + 4
        for line in _wrap_text(alert.message, lay.notice_w - 16, size)[:3]:
            draw_text(line, lay.notice_x + 8, y, size, TEXT)
            y += size + 2

    def draw_outcome(self, snap: PlantSnapshot) -> None:
        if snap.outcome is None:
            return
        lay = self.layout
        size = lay.font_size * 2
        message = snap.outcome.value
        width = _measure(message, size)
        draw_text(message, (lay.window_width - width) // 2, lay.window_height // 3, size, ALERT)


def _measure(text: str, font_size: int) -> int:
    if measure_text is not None:
        measured = measure_text(text, font_size)
        if measured is not None:
            return measured
    return int(len(text) * font_size * 0.6)


def _wrap_text(text: str, max_width: int, font_size: int) -> list[str]:
    if not text:
        return []
    words = text.split()
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = word if not current else f"{current} {word}"
        width = _measure(candidate, font_size)
        if width <= max_width or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines
