from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, Optional, Tuple

from kombat.components.character import Character
from kombat.components.opponent import Opponent
from kombat.config import DifficultyModifiers
from kombat.events.bus import EventBus, EVENT_TICK
from kombat.systems.abilities import AbilityResolver
from kombat.systems.ability_system import AbilitySystem
from kombat.systems.board import BoardSystem
from kombat.systems.board_ops import Position
from kombat.systems.cascade import CascadeSystem
from kombat.systems.combat import CombatSystem
from kombat.systems.encounter_system import EncounterSystem
from kombat.systems.snapshot import EncounterSnapshot, take_snapshot
from kombat.utils.world_state import get_or_create_turn_state
from kombat.world import create_world

logger = logging.getLogger(__name__)


class CombatEngine:
    """Wires the world, the event bus and every system into one object.

    Presentation code either calls the methods below or emits the command
    events on ``event_bus``; it observes the duel through bus events and
    ``snapshot()``.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        resolvers: Dict[str, AbilityResolver] | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, rng=rng or random.Random(seed))
        self.combat_system = CombatSystem(self.world, self.event_bus)
        self.cascade_system = CascadeSystem(self.world, self.event_bus, self.combat_system)
        self.board_system = BoardSystem(self.world, self.event_bus, self.cascade_system)
        self.ability_system = AbilitySystem(self.world, self.event_bus, self.cascade_system, resolvers)
        self.encounter_system = EncounterSystem(self.world, self.event_bus)

    @property
    def busy(self) -> bool:
        return get_or_create_turn_state(self.world).busy

    def start_encounter(
        self,
        character: Character | str,
        ladder: Optional[Iterable[Opponent]] = None,
        difficulty: DifficultyModifiers | str | None = None,
    ) -> EncounterSnapshot:
        self.encounter_system.start_encounter(character, ladder, difficulty)
        return self.snapshot()

    def advance_level(self) -> EncounterSnapshot | None:
        if self.encounter_system.advance_level() is None:
            return None
        return self.snapshot()

    def submit_swap(self, src: Position, dst: Position) -> bool:
        return self.board_system.submit_swap(tuple(src), tuple(dst))

    def activate_ability(self, target: Position | None = None) -> bool:
        return self.ability_system.activate(tuple(target) if target is not None else None)

    def cancel_aiming(self) -> bool:
        return self.ability_system.cancel()

    def request_hint(self) -> Optional[Tuple[int, int]]:
        return self.board_system.request_hint()

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def run_until_idle(self) -> None:
        self.cascade_system.run_until_idle()

    def snapshot(self) -> EncounterSnapshot:
        return take_snapshot(self.world)
