from __future__ import annotations

from typing import Iterable, List, Tuple

from esper import World

from kombat.components.health import Health
from kombat.components.opponent import Opponent
from kombat.config import DifficultyModifiers
from kombat.constants import LADDER_LENGTH

LADDER_DATA: Tuple[Opponent, ...] = (
    Opponent(name="Kano", max_health=100, attack_power=15, moves_per_attack=5, affinity="kano"),
    Opponent(name="Reptile", max_health=115, attack_power=18, moves_per_attack=5, affinity="reptile"),
    Opponent(name="Liu Kang", max_health=130, attack_power=21, moves_per_attack=4, affinity="liukang"),
    Opponent(name="Raiden", max_health=145, attack_power=24, moves_per_attack=4, affinity="raiden"),
    Opponent(name="Sub-Zero", max_health=160, attack_power=27, moves_per_attack=4, affinity="subzero"),
    Opponent(name="Scorpion", max_health=175, attack_power=30, moves_per_attack=3, affinity="scorpion"),
)


def build_ladder(character_kind: str, *, length: int = LADDER_LENGTH) -> Tuple[Opponent, ...]:
    """Default ladder: every opponent except the player's mirror, in order."""
    candidates = [opponent for opponent in LADDER_DATA if opponent.affinity != character_kind]
    return tuple(candidates[:length])


def scale_opponent(opponent: Opponent, difficulty: DifficultyModifiers) -> Opponent:
    return Opponent(
        name=opponent.name,
        max_health=max(1, round(opponent.max_health * difficulty.opponent_health_multiplier)),
        attack_power=max(0, round(opponent.attack_power * difficulty.opponent_attack_multiplier)),
        moves_per_attack=max(1, opponent.moves_per_attack + difficulty.moves_per_attack_delta),
        affinity=opponent.affinity,
    )


def prepare_ladder(ladder: Iterable[Opponent], difficulty: DifficultyModifiers) -> Tuple[Opponent, ...]:
    rungs: List[Opponent] = list(ladder)
    if not rungs:
        raise ValueError("Ladder must contain at least one opponent")
    for rung in rungs:
        if not isinstance(rung, Opponent):
            raise ValueError(f"Ladder entries must be Opponent instances, got {type(rung).__name__}")
        if rung.max_health <= 0 or rung.moves_per_attack <= 0:
            raise ValueError(f"Opponent '{rung.name}' needs positive health and cadence")
    return tuple(scale_opponent(rung, difficulty) for rung in rungs)


def create_opponent(world: World, opponent: Opponent) -> int:
    """Create the opponent combatant entity at full health."""
    return world.create_entity(
        opponent,
        Health(current=opponent.max_health, max_hp=opponent.max_health),
    )

