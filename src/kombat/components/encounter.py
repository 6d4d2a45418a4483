from dataclasses import dataclass, field
from typing import List, Tuple

from kombat.components.opponent import Opponent
from kombat.config import DifficultyModifiers


@dataclass(slots=True)
class Encounter:
    """Run-level progress: the selected character, the ladder and the current rung."""
    character_slug: str
    ladder: Tuple[Opponent, ...]
    difficulty: DifficultyModifiers
    active_types: List[str] = field(default_factory=list)
    level: int = 0

    @property
    def opponent(self) -> Opponent:
        return self.ladder[self.level]

    @property
    def is_last_level(self) -> bool:
        return self.level >= len(self.ladder) - 1
