from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from esper import World

from kombat.components.character import Character
from kombat.components.combat_state import CombatState
from kombat.components.combatants import Combatants
from kombat.components.encounter import Encounter
from kombat.components.game_state import GameMode
from kombat.components.opponent import Opponent
from kombat.config import DifficultyModifiers, load_difficulty
from kombat.events.bus import EventBus, EVENT_ENCOUNTER_STARTED
from kombat.factories.characters import create_player, get_character
from kombat.factories.opponents import build_ladder, create_opponent, prepare_ladder
from kombat.systems.board_generator import create_initial_board
from kombat.systems.board_ops import get_board, restore_board
from kombat.utils.world_state import (
    get_combatants,
    get_encounter,
    get_game_state,
    get_or_create_turn_state,
    player_health,
    set_game_mode,
)

logger = logging.getLogger(__name__)


def active_piece_pool(character: Character, difficulty: DifficultyModifiers) -> list[str]:
    """Piece kinds spawned during the run; the character's own kind is always present."""
    pool = list(dict.fromkeys(difficulty.piece_pool))
    if character.piece_kind not in pool:
        pool[-1] = character.piece_kind
    return pool


class EncounterSystem:
    """Sets up ladder runs and moves the player from rung to rung."""

    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        candidate_rng = rng or getattr(world, "random", None)
        self.rng: random.Random = candidate_rng or random.Random()

    def start_encounter(
        self,
        character: Character | str,
        ladder: Optional[Iterable[Opponent]] = None,
        difficulty: DifficultyModifiers | str | None = None,
    ) -> Encounter:
        if get_or_create_turn_state(self.world).busy:
            raise RuntimeError("Cannot start an encounter while an action is resolving")
        if isinstance(character, str):
            character = get_character(character)
        if difficulty is None or isinstance(difficulty, str):
            difficulty = load_difficulty(difficulty)
        rungs = prepare_ladder(ladder if ladder is not None else build_ladder(character.piece_kind), difficulty)

        self._remove_combatants()
        encounter = Encounter(
            character_slug=character.slug,
            ladder=rungs,
            difficulty=difficulty,
            active_types=active_piece_pool(character, difficulty),
        )
        self._replace_encounter(encounter)
        player = create_player(self.world, character, max_health=difficulty.player_max_health)
        opponent = create_opponent(self.world, encounter.opponent)
        self.world.create_entity(Combatants(player_entity=player, opponent_entity=opponent))
        logger.info(
            "Encounter started: %s vs ladder of %d (%s)", character.name, len(rungs), difficulty.name
        )
        self._begin_level(encounter, character)
        return encounter

    def advance_level(self) -> Optional[Encounter]:
        """Move to the next rung after a level is complete; returns None otherwise."""
        if get_game_state(self.world).mode is not GameMode.LEVEL_COMPLETE:
            return None
        encounter = get_encounter(self.world)
        combatants = get_combatants(self.world)
        if encounter is None or combatants is None or encounter.is_last_level:
            return None
        encounter.level += 1
        self.world.delete_entity(combatants.opponent_entity, immediate=True)
        combatants.opponent_entity = create_opponent(self.world, encounter.opponent)
        health = player_health(self.world)
        if health is not None:
            health.current = health.max_hp
        character = self.world.component_for_entity(combatants.player_entity, Character)
        self._begin_level(encounter, character, keep_score=True)
        return encounter

    def _begin_level(self, encounter: Encounter, character: Character, *, keep_score: bool = False) -> None:
        self._reset_combat_state(encounter, keep_score=keep_score)
        board = get_board(self.world)
        fresh = create_initial_board(
            encounter.active_types,
            rng=self.rng,
            rows=board.rows,
            cols=board.cols,
            start_id=board.next_id,
        )
        restore_board(board, fresh)
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info("Level %d: %s vs %s", encounter.level + 1, character.name, encounter.opponent.name)
        self.event_bus.emit(
            EVENT_ENCOUNTER_STARTED,
            character=character.slug,
            opponent=encounter.opponent.name,
            level=encounter.level,
        )

    def _reset_combat_state(self, encounter: Encounter, *, keep_score: bool) -> None:
        """Fresh per-level counters; the score is a run total and survives between rungs."""
        fresh = CombatState(moves_until_attack=encounter.opponent.moves_per_attack)
        for entity, previous in list(self.world.get_component(CombatState)):
            if keep_score:
                fresh.score = previous.score
            self.world.remove_component(entity, CombatState)
            self.world.add_component(entity, fresh)
            return
        self.world.create_entity(fresh)

    def _replace_encounter(self, encounter: Encounter) -> None:
        for entity, _ in list(self.world.get_component(Encounter)):
            self.world.delete_entity(entity, immediate=True)
        self.world.create_entity(encounter)

    def _remove_combatants(self) -> None:
        for entity, combatants in list(self.world.get_component(Combatants)):
            for member in (combatants.player_entity, combatants.opponent_entity):
                if self.world.entity_exists(member):
                    self.world.delete_entity(member, immediate=True)
            self.world.delete_entity(entity, immediate=True)
