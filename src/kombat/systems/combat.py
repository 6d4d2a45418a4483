from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from esper import World

from kombat.components.combat_state import AbilityPhase
from kombat.components.game_state import GameMode
from kombat.components.piece import Piece
from kombat.constants import BASE_PIECE_DAMAGE, OWN_KIND_MULTIPLIER
from kombat.events.bus import (
    EventBus,
    EVENT_ABILITY_READY,
    EVENT_COUNTDOWN_CHANGED,
    EVENT_ENCOUNTER_OUTCOME,
    EVENT_HEALTH_CHANGED,
    EVENT_OPPONENT_ATTACK,
)
from kombat.utils.world_state import (
    current_opponent,
    get_combat_state,
    get_combatants,
    get_encounter,
    opponent_health,
    player_character,
    player_health,
    set_game_mode,
)

logger = logging.getLogger(__name__)

OUTCOME_WIN = "win"
OUTCOME_LOSS = "loss"
OUTCOME_LEVEL_COMPLETE = "level_complete"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def base_damage(cleared: Iterable[Piece], active_kind: Optional[str]) -> float:
    return sum(
        OWN_KIND_MULTIPLIER if active_kind is not None and piece.kind == active_kind else BASE_PIECE_DAMAGE
        for piece in cleared
    )


def compute_damage(cleared: Iterable[Piece], active_kind: Optional[str], special_damage: float, combo: int) -> int:
    """Damage of one cascade iteration: ``round((base + special) * combo)``."""
    return round_half_up((base_damage(cleared, active_kind) + special_damage) * combo)


class CombatSystem:
    """Turns cleared pieces into damage and runs the opponent's countdown."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def apply_cascade_damage(self, cleared: list[Piece], special_damage: int, combo: int) -> int:
        character = player_character(self.world)
        active_kind = character.piece_kind if character is not None else None
        total = compute_damage(cleared, active_kind, special_damage, combo)
        state = get_combat_state(self.world)
        state.score += total
        health = opponent_health(self.world)
        combatants = get_combatants(self.world)
        if health is None or combatants is None or total <= 0:
            return total
        old_hp = health.current
        health.current -= total
        health.clamp()
        self.event_bus.emit(
            EVENT_HEALTH_CHANGED,
            entity=combatants.opponent_entity,
            current=health.current,
            max_hp=health.max_hp,
            delta=health.current - old_hp,
            reason="cascade",
        )
        return total

    def charge_meter(self, cleared: list[Piece]) -> int:
        """Add cleared pieces to the ability meter; returns the amount gained."""
        encounter = get_encounter(self.world)
        character = player_character(self.world)
        if encounter is None or character is None:
            return 0
        difficulty = encounter.difficulty
        if difficulty.meter_counts_all_pieces:
            gained = len(cleared)
        else:
            gained = sum(1 for piece in cleared if piece.kind == character.piece_kind)
        state = get_combat_state(self.world)
        state.ability_meter = min(state.ability_meter + gained, difficulty.ability_meter_max)
        if state.ability_meter >= difficulty.ability_meter_max and state.ability_phase is AbilityPhase.IDLE:
            state.ability_phase = AbilityPhase.READY
            self.event_bus.emit(EVENT_ABILITY_READY, meter=state.ability_meter)
        return gained

    def opponent_defeated(self) -> bool:
        health = opponent_health(self.world)
        return health is not None and not health.is_alive()

    def resolve_end_of_action(self) -> str | None:
        """Finish a player action that produced matches.

        Returns the encounter outcome when the action ended the level.
        """
        encounter = get_encounter(self.world)
        if encounter is None:
            return None
        if self.opponent_defeated():
            outcome = OUTCOME_WIN if encounter.is_last_level else OUTCOME_LEVEL_COMPLETE
            self._finish(outcome, GameMode.WON if outcome == OUTCOME_WIN else GameMode.LEVEL_COMPLETE)
            return outcome
        state = get_combat_state(self.world)
        state.moves_until_attack -= 1
        if state.moves_until_attack > 0:
            self.event_bus.emit(EVENT_COUNTDOWN_CHANGED, moves_until_attack=state.moves_until_attack)
            return None
        return self._opponent_attack()

    def _opponent_attack(self) -> str | None:
        encounter = get_encounter(self.world)
        opponent = current_opponent(self.world)
        health = player_health(self.world)
        combatants = get_combatants(self.world)
        if encounter is None or opponent is None or health is None or combatants is None:
            return None
        state = get_combat_state(self.world)
        floor = 1 if encounter.difficulty.non_lethal else 0
        old_hp = health.current
        health.current -= opponent.attack_power
        health.clamp(floor=min(floor, old_hp))
        dealt = old_hp - health.current
        state.moves_until_attack = opponent.moves_per_attack
        logger.debug("%s attacks for %d (player %d -> %d)", opponent.name, dealt, old_hp, health.current)
        self.event_bus.emit(
            EVENT_HEALTH_CHANGED,
            entity=combatants.player_entity,
            current=health.current,
            max_hp=health.max_hp,
            delta=health.current - old_hp,
            reason="opponent_attack",
        )
        self.event_bus.emit(EVENT_OPPONENT_ATTACK, damage=dealt, new_player_health=health.current)
        self.event_bus.emit(EVENT_COUNTDOWN_CHANGED, moves_until_attack=state.moves_until_attack)
        if not health.is_alive():
            self._finish(OUTCOME_LOSS, GameMode.LOST)
            return OUTCOME_LOSS
        return None

    def _finish(self, outcome: str, mode: GameMode) -> None:
        encounter = get_encounter(self.world)
        level = encounter.level if encounter is not None else 0
        logger.info("Encounter finished: %s at level %d", outcome, level)
        set_game_mode(self.world, self.event_bus, mode)
        self.event_bus.emit(EVENT_ENCOUNTER_OUTCOME, outcome=outcome, level=level)
