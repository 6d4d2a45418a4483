from dataclasses import dataclass

from kombat.components.ability import AbilitySpec


@dataclass(frozen=True)
class Character:
    """A playable character; its pieces are of kind ``piece_kind``."""
    slug: str
    name: str
    piece_kind: str
    ability: AbilitySpec
    description: str = ""
