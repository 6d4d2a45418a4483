from __future__ import annotations

from esper import World

from kombat.components.character import Character
from kombat.components.combat_state import CombatState
from kombat.components.combatants import Combatants
from kombat.components.encounter import Encounter
from kombat.components.game_state import GameMode, GameState
from kombat.components.health import Health
from kombat.components.opponent import Opponent
from kombat.components.turn_state import TurnState
from kombat.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def get_game_state(world: World) -> GameState:
    for _, state in world.get_component(GameState):
        return state
    raise RuntimeError("GameState resource not found")


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    state = get_game_state(world)
    previous = state.mode
    if previous == mode:
        return
    state.mode = mode
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous, new_mode=mode)


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_combat_state(world: World) -> CombatState:
    for _, state in world.get_component(CombatState):
        return state
    raise RuntimeError("CombatState resource not found")


def get_encounter(world: World) -> Encounter | None:
    for _, encounter in world.get_component(Encounter):
        return encounter
    return None


def get_combatants(world: World) -> Combatants | None:
    for _, comp in world.get_component(Combatants):
        return comp
    return None


def player_character(world: World) -> Character | None:
    combatants = get_combatants(world)
    if combatants is None:
        return None
    try:
        return world.component_for_entity(combatants.player_entity, Character)
    except KeyError:
        return None


def current_opponent(world: World) -> Opponent | None:
    combatants = get_combatants(world)
    if combatants is None:
        return None
    try:
        return world.component_for_entity(combatants.opponent_entity, Opponent)
    except KeyError:
        return None


def player_health(world: World) -> Health | None:
    combatants = get_combatants(world)
    if combatants is None:
        return None
    try:
        return world.component_for_entity(combatants.player_entity, Health)
    except KeyError:
        return None


def opponent_health(world: World) -> Health | None:
    combatants = get_combatants(world)
    if combatants is None:
        return None
    try:
        return world.component_for_entity(combatants.opponent_entity, Health)
    except KeyError:
        return None
