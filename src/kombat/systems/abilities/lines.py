from __future__ import annotations

from kombat.components.ability import AbilityVariant
from kombat.systems.abilities.base import AbilityContext, AbilityOutcome, BoardAbilityResolver


class RowRandomResolver(BoardAbilityResolver):
    """Destroys one random row."""

    name = AbilityVariant.ROW_RANDOM.value
    targets = 0

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        row = ctx.rng.randrange(ctx.board.rows)
        return AbilityOutcome(destroyed=self._block(ctx.board, row, 0, 1, ctx.board.cols))


class ColumnRandomResolver(BoardAbilityResolver):
    """Destroys one random column."""

    name = AbilityVariant.COLUMN_RANDOM.value
    targets = 0

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        col = ctx.rng.randrange(ctx.board.cols)
        return AbilityOutcome(destroyed=self._block(ctx.board, 0, col, ctx.board.rows, 1))
