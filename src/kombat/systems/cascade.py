from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Generator, Iterator, Optional

from esper import World

from kombat.components.match import Match, MatchOrientation
from kombat.components.piece import PieceState
from kombat.constants import (
    COMBO_STREAK_THRESHOLD,
    POST_ABILITY_DELAY,
    POST_CLEAR_DELAY,
    POST_REFILL_DELAY,
    POST_SWAP_DELAY,
    REGENERATE_DELAY,
)
from kombat.events.bus import (
    EventBus,
    EVENT_ABILITY_USED,
    EVENT_BOARD_REGENERATED,
    EVENT_BOARD_SNAPSHOT,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_COMBO_STREAK,
    EVENT_SWAP_ACCEPTED,
    EVENT_SWAP_REVERTED,
    EVENT_TICK,
)
from kombat.systems.abilities.base import AbilityContext, AbilityResolver
from kombat.systems.board_generator import apply_gravity, create_initial_board, refill_board
from kombat.systems.board_ops import (
    Position,
    clear_pieces,
    copy_board,
    get_board,
    mark_pieces,
    positions_of,
    restore_board,
    snapshot_board,
    swap_pieces,
)
from kombat.systems.combat import CombatSystem
from kombat.systems.match import find_matches
from kombat.systems.move_advisor import has_possible_moves
from kombat.systems.special_resolver import resolve_specials
from kombat.utils.world_state import get_combat_state, get_encounter, get_or_create_turn_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Phase:
    """Pacing marker yielded between resolve steps."""
    name: str
    delay: float


class CascadeSystem:
    """Resolves one player action into its full chain of cascades.

    Each action runs as a generator of ``Phase`` markers. ``tick`` events
    advance it once the previous phase's delay has elapsed; ``run_until_idle``
    drains it immediately. A board snapshot is published at every marker.
    """

    def __init__(self, world: World, event_bus: EventBus, combat: CombatSystem, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self.combat = combat
        candidate_rng = rng or getattr(world, "random", None)
        self.rng: random.Random = candidate_rng or random.Random()
        self._runner: Optional[Iterator[Phase]] = None
        self._wait = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def busy(self) -> bool:
        return get_or_create_turn_state(self.world).busy

    # ------------------------------------------------------------------
    # Action entry points

    def start_swap(self, src: Position, dst: Position) -> None:
        self.event_bus.emit(EVENT_SWAP_ACCEPTED, src=src, dst=dst)
        self._begin("swap", self._resolve_swap(src, dst))

    def start_ability(self, ctx: AbilityContext, resolver: AbilityResolver) -> None:
        self._begin("ability", self._resolve_ability(ctx, resolver))

    def _begin(self, source: str, runner: Iterator[Phase]) -> None:
        if self._runner is not None:
            raise RuntimeError("An action is already being resolved")
        state = get_or_create_turn_state(self.world)
        state.busy = True
        state.action_source = source
        state.cascade_depth = 0
        self._runner = runner
        self._wait = 0.0
        # Run up to the first pacing point synchronously.
        self.step()

    # ------------------------------------------------------------------
    # Driving

    def on_tick(self, sender, **kwargs):
        if self._runner is None:
            return
        self._wait -= kwargs.get('dt', 0.0)
        while self._runner is not None and self._wait <= 0:
            self.step()

    def step(self) -> bool:
        """Advance to the next phase; returns False once the action has settled."""
        if self._runner is None:
            return False
        try:
            phase = next(self._runner)
        except StopIteration:
            self._finish()
            return False
        except Exception:
            self._finish()
            raise
        self._wait = phase.delay
        logger.debug("Phase %s (wait %.2fs)", phase.name, phase.delay)
        self.event_bus.emit(EVENT_BOARD_SNAPSHOT, phase=phase.name, board=snapshot_board(get_board(self.world)))
        return True

    def run_until_idle(self) -> None:
        while self.step():
            pass

    def _finish(self) -> None:
        self._runner = None
        self._wait = 0.0
        state = get_or_create_turn_state(self.world)
        state.busy = False
        state.action_source = None
        self.event_bus.emit(EVENT_BOARD_SNAPSHOT, phase="settled", board=snapshot_board(get_board(self.world)))

    # ------------------------------------------------------------------
    # Resolve generators

    def _resolve_swap(self, src: Position, dst: Position) -> Generator[Phase, None, None]:
        board = get_board(self.world)
        before = copy_board(board)
        swap_pieces(board, src, dst)
        yield Phase("swap", POST_SWAP_DELAY)

        any_match = yield from self._cascade(swap_location=dst)
        if not any_match:
            restore_board(board, before)
            self.event_bus.emit(EVENT_SWAP_REVERTED, src=src, dst=dst)
            yield Phase("revert", POST_SWAP_DELAY)
            return

        yield from self._settle_phase()
        self.combat.resolve_end_of_action()

    def _resolve_ability(self, ctx: AbilityContext, resolver: AbilityResolver) -> Generator[Phase, None, None]:
        outcome = resolver.resolve(ctx)
        self.event_bus.emit(
            EVENT_ABILITY_USED,
            character=ctx.character.slug,
            ability=ctx.spec.name,
            variant=resolver.name,
            targets=list(ctx.targets),
            affected=outcome.affected,
        )
        yield Phase("ability", POST_ABILITY_DELAY)

        pseudo_match = None
        if outcome.destroyed:
            pseudo_match = Match(pieces=list(outcome.destroyed), orientation=MatchOrientation.ABILITY)
        any_match = yield from self._cascade(swap_location=None, pseudo_match=pseudo_match, ability_triggered=True)

        yield from self._settle_phase()
        if any_match:
            self.combat.resolve_end_of_action()

    def _cascade(
        self,
        swap_location: Position | None,
        *,
        pseudo_match: Match | None = None,
        ability_triggered: bool = False,
    ) -> Generator[Phase, None, bool]:
        board = get_board(self.world)
        combat_state = get_combat_state(self.world)
        turn_state = get_or_create_turn_state(self.world)
        active_types = self._active_types()
        combo = 1
        any_match = False

        while True:
            first = combo == 1
            if first and pseudo_match is not None:
                matches = [pseudo_match]
            else:
                matches = find_matches(board)
            if not matches:
                break
            ability_step = first and ability_triggered
            any_match = True
            turn_state.cascade_depth = combo
            combat_state.combo_counter = combo
            combat_state.max_combo_seen = max(combat_state.max_combo_seen, combo)

            resolution = resolve_specials(
                board,
                matches,
                swap_location,
                rng=self.rng,
                allow_creation=not ability_step,
            )
            damage = self.combat.apply_cascade_damage(resolution.cleared, resolution.special_damage, combo)
            self.combat.charge_meter(resolution.cleared)
            self.event_bus.emit(
                EVENT_CASCADE_STEP,
                damage_dealt=damage,
                combo_counter=combo,
                cleared_count=len(resolution.cleared),
                specials_activated=[activation.as_payload() for activation in resolution.activated],
                special_created=resolution.created_payload(),
                positions=sorted(positions_of(resolution.cleared)),
            )
            if combo >= COMBO_STREAK_THRESHOLD:
                self.event_bus.emit(EVENT_COMBO_STREAK, combo_counter=combo)

            mark_pieces(resolution.cleared, PieceState.MATCHED)
            yield Phase("clear", POST_CLEAR_DELAY)

            keep = resolution.created_piece
            if keep is not None:
                keep.special = resolution.created_kind
                keep.state = PieceState.IDLE
            clear_pieces(board, resolution.cleared, keep=keep)
            apply_gravity(board)
            refill_board(board, active_types, rng=self.rng)
            yield Phase("refill", POST_REFILL_DELAY)

            combo += 1
            swap_location = None

        combat_state.combo_counter = 1
        self.event_bus.emit(
            EVENT_CASCADE_COMPLETE,
            depth=combo - 1,
            source=turn_state.action_source,
        )
        return any_match

    def _settle_phase(self) -> Generator[Phase, None, None]:
        if self.settle():
            yield Phase("regenerate", REGENERATE_DELAY)

    def settle(self) -> bool:
        """Regenerate the board when no move is left; returns True if it did."""
        board = get_board(self.world)
        if has_possible_moves(board):
            return False
        regenerated = create_initial_board(
            self._active_types(),
            rng=self.rng,
            rows=board.rows,
            cols=board.cols,
            start_id=board.next_id,
        )
        restore_board(board, regenerated)
        logger.info("No moves left; board regenerated")
        self.event_bus.emit(EVENT_BOARD_REGENERATED, reason="no_moves")
        return True

    def _active_types(self) -> list[str]:
        encounter = get_encounter(self.world)
        if encounter is not None and encounter.active_types:
            return list(encounter.active_types)
        board = get_board(self.world)
        return sorted({piece.kind for piece in board.pieces() if piece.kind is not None})
