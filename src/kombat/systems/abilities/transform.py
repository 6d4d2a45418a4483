from __future__ import annotations

from kombat.components.ability import AbilityVariant
from kombat.systems.abilities.base import AbilityContext, AbilityOutcome, BoardAbilityResolver
from kombat.systems.board_ops import kinds_present


class ConversionResolver(BoardAbilityResolver):
    """Turns every piece of one random other kind into the caster's kind."""

    name = AbilityVariant.CONVERSION.value
    targets = 0

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        own_kind = ctx.character.piece_kind
        others = [kind for kind in kinds_present(ctx.board) if kind != own_kind]
        if not others:
            return AbilityOutcome()
        source_kind = ctx.rng.choice(others)
        mutated = []
        for piece in ctx.board.pieces():
            if piece.kind == source_kind:
                piece.kind = own_kind
                mutated.append((piece.row, piece.col))
        return AbilityOutcome(mutated=mutated)


class ScrambleResolver(BoardAbilityResolver):
    """Shuffles the kinds inside a 3x3 block centred on the aimed cell."""

    name = AbilityVariant.SCRAMBLE.value
    targets = 1

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        size = 3
        row, col = ctx.targets[0]
        top = self._clamp(row - 1, 0, ctx.board.rows - size)
        left = self._clamp(col - 1, 0, ctx.board.cols - size)
        block = self._block(ctx.board, top, left, size, size)
        kinds = [piece.kind for piece in block]
        ctx.rng.shuffle(kinds)
        for piece, kind in zip(block, kinds):
            piece.kind = kind
        return AbilityOutcome(mutated=[(piece.row, piece.col) for piece in block])
