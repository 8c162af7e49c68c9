from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path


def _repo_root() -> Path:
    here = Path(__file__).resolve()
    return here.parents[3]


def default_layout_path() -> Path:
    return _repo_root() / "implementation" / "layout.json"


@dataclass
class Layout:
    window_width: int = 960
    window_height: int = 640

    # Text grid: the screens are laid out in character cells like the original 40x24 display
    cell_w: int = 22
    cell_h: int = 24
    font_size: int = 20
    margin_x: int = 20
    margin_y: int = 16

    title_row: int = 0
    body_row: int = 2
    status_row: int = 24
    time_row: int = 25

    # Second column for two-column tables (maintenance, warnings)
    column2_col: int = 22
    warnings_col: int = 30

    # Reactor core rod bars
    rod_bar_x: int = 80
    rod_bar_y: int = 120
    rod_bar_w: int = 24
    rod_bar_gap: int = 22
    rod_bar_scale: int = 10

    # Alert/notice banner at the bottom of the window
    notice_x: int = 20
    notice_y: int = 520
    notice_w: int = 920
    notice_h: int = 96


def load_layout(path: Path | None = None) -> Layout:
    if path is None:
        path = default_layout_path()
    if not path.exists():
        return Layout()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return Layout()
    try:
        return Layout(**data)
    except TypeError:
        return Layout()
