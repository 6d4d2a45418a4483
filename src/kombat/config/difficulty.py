from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from importlib.resources import files as resource_files
from typing import Any, Dict, Optional, Tuple

import yaml

from kombat.constants import ABILITY_METER_MAX, PIECE_TYPES, PLAYER_MAX_HEALTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyModifiers:
    """Tuning applied to every rung of a ladder run.

    ``non_lethal`` floors opponent attacks at 1 player health instead of 0.
    ``meter_counts_all_pieces`` charges the ability meter with every cleared
    piece rather than only the character's own kind.
    """
    name: str = "normal"
    opponent_health_multiplier: float = 1.0
    opponent_attack_multiplier: float = 1.0
    moves_per_attack_delta: int = 0
    player_max_health: int = PLAYER_MAX_HEALTH
    ability_meter_max: int = ABILITY_METER_MAX
    meter_counts_all_pieces: bool = False
    non_lethal: bool = False
    piece_pool: Tuple[str, ...] = field(default_factory=lambda: tuple(PIECE_TYPES))

    def __post_init__(self) -> None:
        if self.opponent_health_multiplier <= 0 or self.opponent_attack_multiplier < 0:
            raise ValueError(f"Invalid multipliers in difficulty '{self.name}'")
        if self.player_max_health <= 0:
            raise ValueError(f"player_max_health must be positive in difficulty '{self.name}'")
        if self.ability_meter_max <= 0:
            raise ValueError(f"ability_meter_max must be positive in difficulty '{self.name}'")
        if len(set(self.piece_pool)) < 3:
            raise ValueError(f"Difficulty '{self.name}' needs at least three piece kinds")


_FIELD_NAMES = {f.name for f in fields(DifficultyModifiers)}


def _read_document(path: Optional[str]) -> Dict[str, Any]:
    if path is None:
        data = resource_files("kombat.config").joinpath("difficulty.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded difficulty presets")
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        logger.debug("Loaded difficulty presets from path: %s", path)
    raw = yaml.safe_load(data) or {}
    if not isinstance(raw, dict):
        raise ValueError("Difficulty document must be a mapping")
    return raw


def _build(name: str, values: Dict[str, Any]) -> DifficultyModifiers:
    unknown = set(values) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown difficulty keys for '{name}': {sorted(unknown)}")
    kwargs = dict(values)
    if "piece_pool" in kwargs:
        kwargs["piece_pool"] = tuple(str(kind) for kind in kwargs["piece_pool"])
    kwargs["name"] = name
    return DifficultyModifiers(**kwargs)


def available_presets(path: Optional[str] = None) -> list[str]:
    raw = _read_document(path)
    return sorted((raw.get("presets") or {}).keys())


def load_difficulty(name: Optional[str] = None, path: Optional[str] = None, **overrides: Any) -> DifficultyModifiers:
    """Load a difficulty preset from YAML.

    If path is None, loads the embedded resource kombat/config/difficulty.yaml.
    Keyword overrides replace individual preset values.
    """
    raw = _read_document(path)
    presets = raw.get("presets") or {}
    preset_name = name or str(raw.get("default", "normal"))
    if preset_name not in presets:
        raise ValueError(f"Unknown difficulty '{preset_name}'")
    modifiers = _build(preset_name, presets[preset_name] or {})
    if overrides:
        unknown = set(overrides) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"Unknown difficulty overrides: {sorted(unknown)}")
        if "piece_pool" in overrides:
            overrides["piece_pool"] = tuple(overrides["piece_pool"])
        modifiers = replace(modifiers, **overrides)
    logger.info("Difficulty '%s' loaded", modifiers.name)
    return modifiers
