from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class AbilityPhase(Enum):
    IDLE = 'idle'
    READY = 'ready'
    AIMING = 'aiming'


@dataclass(slots=True)
class CombatState:
    """Per-level combat counters. Health lives on the combatants' Health components."""
    moves_until_attack: int = 0
    combo_counter: int = 1
    max_combo_seen: int = 1
    ability_meter: int = 0
    ability_phase: AbilityPhase = AbilityPhase.IDLE
    score: int = 0
    aim_targets: List[Tuple[int, int]] = field(default_factory=list)
