from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from esper import World

from kombat.components.piece import PieceView
from kombat.systems.board_ops import get_board, snapshot_board
from kombat.utils.world_state import (
    current_opponent,
    get_combat_state,
    get_encounter,
    get_game_state,
    get_or_create_turn_state,
    opponent_health,
    player_character,
    player_health,
)


@dataclass(frozen=True, slots=True)
class EncounterSnapshot:
    """Read-only view of the whole duel, safe to hand to presentation code."""
    mode: str
    character: Optional[str]
    opponent: Optional[str]
    level: int
    ladder_length: int
    player_health: int
    player_max_health: int
    opponent_health: int
    opponent_max_health: int
    moves_until_attack: int
    combo_counter: int
    max_combo_seen: int
    ability_meter: int
    ability_meter_max: int
    ability_phase: str
    aim_targets: Tuple[Tuple[int, int], ...]
    score: int
    busy: bool
    board: Tuple[PieceView, ...]


def take_snapshot(world: World) -> EncounterSnapshot:
    encounter = get_encounter(world)
    combat = get_combat_state(world)
    character = player_character(world)
    opponent = current_opponent(world)
    p_health = player_health(world)
    o_health = opponent_health(world)
    return EncounterSnapshot(
        mode=get_game_state(world).mode.name.lower(),
        character=character.slug if character is not None else None,
        opponent=opponent.name if opponent is not None else None,
        level=encounter.level if encounter is not None else 0,
        ladder_length=len(encounter.ladder) if encounter is not None else 0,
        player_health=p_health.current if p_health is not None else 0,
        player_max_health=p_health.max_hp if p_health is not None else 0,
        opponent_health=o_health.current if o_health is not None else 0,
        opponent_max_health=o_health.max_hp if o_health is not None else 0,
        moves_until_attack=combat.moves_until_attack,
        combo_counter=combat.combo_counter,
        max_combo_seen=combat.max_combo_seen,
        ability_meter=combat.ability_meter,
        ability_meter_max=encounter.difficulty.ability_meter_max if encounter is not None else 0,
        ability_phase=combat.ability_phase.value,
        aim_targets=tuple(combat.aim_targets),
        score=combat.score,
        busy=get_or_create_turn_state(world).busy,
        board=snapshot_board(get_board(world)),
    )
