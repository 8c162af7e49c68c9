"""
PlantConfig: engine settings fixed for the life of the process.

Values come from ``implementation/plant.json`` when it exists, then from
``TMI_*`` environment variables, which win.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import json
import os
from pathlib import Path
from typing import Mapping, Optional

from plant.logging_utils import get_logger

logger = get_logger(__name__)

STEAMER_DRAIN_CHOICES = ("condenser", "feedwater")


def _repo_root() -> Path:
    here = Path(__file__).resolve()
    return here.parents[3]


def default_config_path() -> Path:
    return _repo_root() / "implementation" / "plant.json"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "y", "on"):
        return True
    if lowered in ("0", "false", "no", "n", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass(frozen=True)
class PlantConfig:
    tick_seconds: float = 1.0
    seed: Optional[int] = None
    steamer_drain_pipe: str = "condenser"
    # None asks on the welcome screen; True/False skips the question.
    muse_preset: Optional[bool] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {self.tick_seconds}")
        if self.steamer_drain_pipe not in STEAMER_DRAIN_CHOICES:
            raise ValueError(
                f"steamer_drain_pipe must be one of {STEAMER_DRAIN_CHOICES}, "
                f"got {self.steamer_drain_pipe!r}"
            )

    @classmethod
    def from_env(cls, base: Optional["PlantConfig"] = None,
                 environ: Optional[Mapping[str, str]] = None) -> "PlantConfig":
        """Overlay TMI_* environment variables on ``base`` (defaults when None)."""
        env = os.environ if environ is None else environ
        config = base or cls()
        changes = {}
        if env.get("TMI_TICK_SECONDS"):
            changes["tick_seconds"] = float(env["TMI_TICK_SECONDS"])
        if env.get("TMI_SEED"):
            changes["seed"] = int(env["TMI_SEED"])
        if env.get("TMI_STEAMER_DRAIN"):
            changes["steamer_drain_pipe"] = env["TMI_STEAMER_DRAIN"].strip().lower()
        if env.get("TMI_MUSE"):
            changes["muse_preset"] = _parse_bool(env["TMI_MUSE"])
        if env.get("TMI_LOG_LEVEL"):
            changes["log_level"] = env["TMI_LOG_LEVEL"].strip().upper()
        return replace(config, **changes) if changes else config


def load_config(path: Path | None = None, environ: Optional[Mapping[str, str]] = None) -> PlantConfig:
    """Read the JSON config, falling back to defaults, then apply the environment."""
    if path is None:
        path = default_config_path()
    config = PlantConfig()
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            config = PlantConfig(**data)
        except (OSError, json.JSONDecodeError, TypeError) as exc:
            logger.warning("ignoring unreadable config %s: %s", path, exc)
    return PlantConfig.from_env(config, environ)
