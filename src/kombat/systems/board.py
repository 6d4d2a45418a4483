from __future__ import annotations

import logging
from typing import Optional, Tuple

from esper import World

from kombat.components.combat_state import AbilityPhase
from kombat.components.game_state import GameMode
from kombat.events.bus import EventBus, EVENT_HINT, EVENT_HINT_REQUEST, EVENT_SWAP_REQUEST
from kombat.systems.board_ops import Position, get_board, is_adjacent
from kombat.systems.cascade import CascadeSystem
from kombat.systems.move_advisor import find_a_possible_move
from kombat.utils.commands import reject_command
from kombat.utils.world_state import get_combat_state, get_game_state, get_or_create_turn_state

logger = logging.getLogger(__name__)

COMMAND_SWAP = "swap"


class BoardSystem:
    """Validates swap commands and answers hint requests."""

    def __init__(self, world: World, event_bus: EventBus, cascade: CascadeSystem):
        self.world = world
        self.event_bus = event_bus
        self.cascade = cascade
        self.event_bus.subscribe(EVENT_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if src is None or dst is None:
            reject_command(self.event_bus, COMMAND_SWAP, "missing_position")
            return
        self.submit_swap(tuple(src), tuple(dst))

    def on_hint_request(self, sender, **kwargs):
        self.request_hint()

    def submit_swap(self, src: Position, dst: Position) -> bool:
        if get_game_state(self.world).mode is not GameMode.PLAYING:
            return reject_command(self.event_bus, COMMAND_SWAP, "not_playing")
        if get_or_create_turn_state(self.world).busy:
            return reject_command(self.event_bus, COMMAND_SWAP, "busy")
        if get_combat_state(self.world).ability_phase is AbilityPhase.AIMING:
            return reject_command(self.event_bus, COMMAND_SWAP, "aiming")
        board = get_board(self.world)
        if not (board.in_bounds(*src) and board.in_bounds(*dst)):
            return reject_command(self.event_bus, COMMAND_SWAP, "out_of_bounds", src=src, dst=dst)
        if not is_adjacent(src, dst):
            return reject_command(self.event_bus, COMMAND_SWAP, "not_adjacent", src=src, dst=dst)
        if board.at(*src).is_empty or board.at(*dst).is_empty:
            return reject_command(self.event_bus, COMMAND_SWAP, "empty_cell", src=src, dst=dst)
        logger.debug("Swap %s -> %s", src, dst)
        self.cascade.start_swap(src, dst)
        return True

    def request_hint(self) -> Optional[Tuple[int, int]]:
        """Return the ids of a pair whose swap makes a match and announce it."""
        board = get_board(self.world)
        move = find_a_possible_move(board)
        if move is None:
            self.event_bus.emit(EVENT_HINT, ids=None, positions=None)
            return None
        first, second = move
        ids = (first.id, second.id)
        self.event_bus.emit(EVENT_HINT, ids=ids, positions=(first.position, second.position))
        return ids
