from kombat.config.difficulty import (
    DifficultyModifiers,
    available_presets,
    load_difficulty,
)

__all__ = [
    "DifficultyModifiers",
    "available_presets",
    "load_difficulty",
]
