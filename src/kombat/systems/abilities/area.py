from __future__ import annotations

from kombat.components.ability import AbilityVariant
from kombat.systems.abilities.base import AbilityContext, AbilityOutcome, BoardAbilityResolver


class AreaRandomResolver(BoardAbilityResolver):
    """Destroys a 2x2 block at a random anchor."""

    name = AbilityVariant.AREA_RANDOM.value
    targets = 0

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        size = int(ctx.params.get("size", 2))
        top = ctx.rng.randint(0, ctx.board.rows - size)
        left = ctx.rng.randint(0, ctx.board.cols - size)
        return AbilityOutcome(destroyed=self._block(ctx.board, top, left, size, size))


class TargetedAreaResolver(BoardAbilityResolver):
    """Destroys a 2x2 block anchored at the aimed cell, shifted to stay on the board."""

    name = AbilityVariant.TARGETED_AREA.value
    targets = 1

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        size = int(ctx.params.get("size", 2))
        row, col = ctx.targets[0]
        top = self._clamp(row, 0, ctx.board.rows - size)
        left = self._clamp(col, 0, ctx.board.cols - size)
        return AbilityOutcome(destroyed=self._block(ctx.board, top, left, size, size))


class PlusShapeResolver(BoardAbilityResolver):
    """Destroys the aimed cell and its orthogonal neighbours."""

    name = AbilityVariant.PLUS_SHAPE.value
    targets = 1

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        row, col = ctx.targets[0]
        destroyed = []
        for dr, dc in ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)):
            r, c = row + dr, col + dc
            if not ctx.board.in_bounds(r, c):
                continue
            piece = ctx.board.at(r, c)
            if piece.kind is not None:
                destroyed.append(piece)
        return AbilityOutcome(destroyed=destroyed)
