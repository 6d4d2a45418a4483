import random

from esper import World

from kombat.components.combat_state import CombatState
from kombat.components.game_state import GameMode, GameState
from kombat.components.turn_state import TurnState
from kombat.constants import GRID_COLS, GRID_ROWS, PIECE_TYPES
from kombat.events.bus import EventBus
from kombat.systems.board_generator import create_initial_board


def create_world(
    event_bus: EventBus,
    *,
    rng: random.Random | None = None,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Global state resources live together on one entity.
    world.create_entity(GameState(mode=GameMode.IDLE), TurnState(), CombatState())

    # The board exists before any encounter so snapshots always have cells.
    world.create_entity(create_initial_board(PIECE_TYPES, rng=world.random, rows=rows, cols=cols))
    return world
