from __future__ import annotations

from kombat.components.ability import AbilityVariant
from kombat.systems.abilities.base import AbilityContext, AbilityOutcome, BoardAbilityResolver


class TypeAnnihilateResolver(BoardAbilityResolver):
    """Destroys every piece sharing the aimed cell's kind."""

    name = AbilityVariant.TYPE_ANNIHILATE.value
    targets = 1

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        kind = ctx.board.at(*ctx.targets[0]).kind
        destroyed = [piece for piece in ctx.board.pieces() if piece.kind is not None and piece.kind == kind]
        return AbilityOutcome(destroyed=destroyed)


class RandomNResolver(BoardAbilityResolver):
    """Destroys ``count`` distinct pieces chosen uniformly at random."""

    name = AbilityVariant.RANDOM_N.value
    targets = 0

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        count = int(ctx.params.get("count", 6))
        candidates = [piece for piece in ctx.board.pieces() if piece.kind is not None]
        chosen = ctx.rng.sample(candidates, min(count, len(candidates)))
        chosen.sort(key=lambda piece: (piece.row, piece.col))
        return AbilityOutcome(destroyed=chosen)
