from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Opponent:
    """One rung of the ladder. Immutable for the duration of an encounter."""
    name: str
    max_health: int
    attack_power: int
    moves_per_attack: int
    affinity: str
