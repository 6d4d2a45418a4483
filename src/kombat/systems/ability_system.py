from __future__ import annotations

import logging
import random
from typing import Dict, Optional

from esper import World

from kombat.components.combat_state import AbilityPhase
from kombat.components.game_state import GameMode
from kombat.events.bus import (
    EventBus,
    EVENT_ABILITY_ACTIVATE_REQUEST,
    EVENT_ABILITY_CANCEL_REQUEST,
    EVENT_ABILITY_TARGET_CANCELLED,
    EVENT_ABILITY_TARGET_MODE,
    EVENT_ABILITY_TARGET_SELECTED,
)
from kombat.systems.abilities import (
    AbilityContext,
    AbilityResolver,
    create_resolver_registry,
    variant_key,
)
from kombat.systems.board_ops import Position, get_board
from kombat.systems.cascade import CascadeSystem
from kombat.utils.commands import reject_command
from kombat.utils.world_state import (
    get_combat_state,
    get_game_state,
    get_or_create_turn_state,
    player_character,
)

logger = logging.getLogger(__name__)

COMMAND_ACTIVATE = "ability_activate"
COMMAND_CANCEL = "ability_cancel"


class AbilitySystem:
    """Drives the ability meter phases: idle, ready, aiming.

    Zero-target abilities fire as soon as they are activated while ready.
    Targeted abilities enter aiming mode first; each supplied target is
    validated by the resolver and the ability fires once enough targets
    are collected. Execution empties the meter and hands the resolver to
    the cascade.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        cascade: CascadeSystem,
        resolvers: Dict[str, AbilityResolver] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.cascade = cascade
        self.resolvers = create_resolver_registry(resolvers)
        candidate_rng = rng or getattr(world, "random", None)
        self.rng: random.Random = candidate_rng or random.Random()
        event_bus.subscribe(EVENT_ABILITY_ACTIVATE_REQUEST, self.on_activate_request)
        event_bus.subscribe(EVENT_ABILITY_CANCEL_REQUEST, self.on_cancel_request)

    def on_activate_request(self, sender, **payload) -> None:
        target = payload.get("target")
        self.activate(tuple(target) if target is not None else None)

    def on_cancel_request(self, sender, **payload) -> None:
        self.cancel()

    def activate(self, target: Optional[Position] = None) -> bool:
        if get_game_state(self.world).mode is not GameMode.PLAYING:
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "not_playing")
        if get_or_create_turn_state(self.world).busy:
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "busy")
        state = get_combat_state(self.world)
        if state.ability_phase is AbilityPhase.IDLE:
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "not_ready")
        character = player_character(self.world)
        if character is None:
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "no_character")
        spec = character.ability
        resolver = self.resolvers.get(variant_key(spec.variant))
        if resolver is None:
            logger.warning("No resolver registered for ability variant %s", variant_key(spec.variant))
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "unknown_ability")

        if resolver.targets <= 0:
            return self._execute(character, resolver, [])

        if target is None:
            if state.ability_phase is AbilityPhase.AIMING:
                return reject_command(self.event_bus, COMMAND_ACTIVATE, "target_required")
            state.ability_phase = AbilityPhase.AIMING
            state.aim_targets = []
            self.event_bus.emit(EVENT_ABILITY_TARGET_MODE, ability=spec.name, targets_needed=resolver.targets)
            return True

        candidate = list(state.aim_targets) + [target]
        if not resolver.validate_targets(get_board(self.world), candidate):
            return reject_command(self.event_bus, COMMAND_ACTIVATE, "invalid_target", target=target)
        if state.ability_phase is AbilityPhase.READY:
            state.ability_phase = AbilityPhase.AIMING
            self.event_bus.emit(EVENT_ABILITY_TARGET_MODE, ability=spec.name, targets_needed=resolver.targets)
        state.aim_targets = candidate
        self.event_bus.emit(EVENT_ABILITY_TARGET_SELECTED, ability=spec.name, target=target)
        if len(candidate) < resolver.targets:
            return True
        return self._execute(character, resolver, candidate)

    def cancel(self) -> bool:
        state = get_combat_state(self.world)
        if state.ability_phase is not AbilityPhase.AIMING:
            return reject_command(self.event_bus, COMMAND_CANCEL, "not_aiming")
        state.ability_phase = AbilityPhase.READY
        state.aim_targets = []
        character = player_character(self.world)
        self.event_bus.emit(
            EVENT_ABILITY_TARGET_CANCELLED,
            ability=character.ability.name if character is not None else None,
            reason="cancelled",
        )
        return True

    def _execute(self, character, resolver: AbilityResolver, targets: list[Position]) -> bool:
        state = get_combat_state(self.world)
        state.ability_meter = 0
        state.ability_phase = AbilityPhase.IDLE
        state.aim_targets = []
        ctx = AbilityContext(
            world=self.world,
            board=get_board(self.world),
            rng=self.rng,
            character=character,
            spec=character.ability,
            targets=list(targets),
        )
        logger.info("%s uses %s", character.name, character.ability.name)
        self.cascade.start_ability(ctx, resolver)
        return True
