"""raylib compatibility layer.

Imports from the raylib or pyray C bindings and re-exports them with
snake_case names and UTF-8 encoding helpers, so the rest of the code does
not care which binding is installed.
"""
from __future__ import annotations

try:
    from raylib import *  # type: ignore
except Exception:
    try:
        from pyray import *  # type: ignore
    except Exception as exc:
        raise ImportError(
            "Could not import raylib bindings. Install 'raylib' or 'pyray'."
        ) from exc

# Some bindings expose Color as a struct, others use plain tuples.
if "Color" not in globals():
    def Color(r: int, g: int, b: int, a: int):  # type: ignore
        return (r, g, b, a)

# Map common snake_case names to CamelCase raylib bindings if needed.
_CAMEL_MAP = {
    "init_window": "InitWindow",
    "set_target_fps": "SetTargetFPS",
    "window_should_close": "WindowShouldClose",
    "begin_drawing": "BeginDrawing",
    "clear_background": "ClearBackground",
    "end_drawing": "EndDrawing",
    "get_frame_time": "GetFrameTime",
    "is_key_pressed": "IsKeyPressed",
    "get_char_pressed": "GetCharPressed",
    "draw_text": "DrawText",
    "draw_rectangle": "DrawRectangle",
    "draw_rectangle_lines": "DrawRectangleLines",
    "close_window": "CloseWindow",
    "measure_text": "MeasureText",
    "set_exit_key": "SetExitKey",
}

for _snake, _camel in _CAMEL_MAP.items():
    if _snake not in globals() and _camel in globals():
        globals()[_snake] = globals()[_camel]

# Key codes the plant screens use (GLFW values)
_KEYS = {
    "KEY_ENTER": 257,
    "KEY_ESCAPE": 256,
    "KEY_SPACE": 32,
    "KEY_LEFT": 263,
    "KEY_RIGHT": 262,
    "KEY_N": 78,
    "KEY_Y": 89,
}

for _name, _code in _KEYS.items():
    if _name not in globals():
        globals()[_name] = _code


def _encode_text(value):  # type: ignore
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


# Wrap common functions that expect const char*
if "init_window" in globals():
    _init_window = globals()["init_window"]
    def init_window(width, height, title):  # type: ignore
        return _init_window(width, height, _encode_text(title))
    globals()["init_window"] = init_window

if "draw_text" in globals():
    _draw_text = globals()["draw_text"]
    def draw_text(text, x, y, size, color):  # type: ignore
        return _draw_text(_encode_text(text), x, y, size, color)
    globals()["draw_text"] = draw_text

if "measure_text" in globals():
    _measure_text = globals()["measure_text"]
    def measure_text(text, size):  # type: ignore
        return _measure_text(_encode_text(text), size)
    globals()["measure_text"] = measure_text
else:
    def measure_text(text, size):  # type: ignore
        return None
    globals()["measure_text"] = measure_text


def typed_chars() -> list[str]:
    """Drain the characters typed this frame, oldest first."""
    chars: list[str] = []
    code = get_char_pressed()  # type: ignore
    while code > 0:
        chars.append(chr(code))
        code = get_char_pressed()  # type: ignore
    return chars
