from dataclasses import dataclass


@dataclass(slots=True)
class Combatants:
    """Entity ids of the current duel."""
    player_entity: int
    opponent_entity: int
